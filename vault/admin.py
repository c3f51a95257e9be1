"""
Django admin registrations for the vault models.

Hooks the models into Django's built-in admin so that staff can inspect
accounts, verify hospitals and follow share requests via ``/admin/``.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import (
    Admin,
    EmergencyAlert,
    EmergencyContact,
    Hospital,
    MedicalRecord,
    Patient,
    SharedAccess,
)


@admin.register(Admin)
class AdminAccountAdmin(UserAdmin):
    ordering = ('email',)
    list_display = ('email', 'user_type', 'account_status', 'email_verified', 'last_login')
    list_filter = ('user_type', 'account_status', 'email_verified')
    search_fields = ('email', 'phone_number')
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Account', {'fields': ('phone_number', 'user_type', 'account_status', 'email_verified')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser')}),
        ('Dates', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {'classes': ('wide',), 'fields': ('email', 'user_type', 'password1', 'password2')}),
    )


@admin.register(Hospital)
class HospitalAdmin(admin.ModelAdmin):
    list_display = ('hospital_name', 'city', 'hospital_type', 'rating', 'is_verified', 'admin')
    list_filter = ('is_verified', 'hospital_type')
    search_fields = ('hospital_name', 'city', 'email')


@admin.register(SharedAccess)
class SharedAccessAdmin(admin.ModelAdmin):
    list_display = ('provider_name', 'provider_type', 'patient', 'status', 'access_level', 'expires_on')
    list_filter = ('status', 'provider_type')


admin.site.register(Patient)
admin.site.register(MedicalRecord)
admin.site.register(EmergencyContact)
admin.site.register(EmergencyAlert)
