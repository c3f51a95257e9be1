"""
URL mappings for the MediVault API.

Paths follow the routes used by the single page front end.  Trailing
slashes are deliberately omitted (``APPEND_SLASH = False``).
"""
from django.urls import include, path

from .auth_views import (
    forgot_password_view,
    login_view,
    profile_view,
    refresh_view,
    register_view,
    reset_password_view,
    setup_emergency_pin_view,
    verify_email_view,
    verify_emergency_pin_view,
)
from .views import emergency, health, hospital_admin, hospitals, patients, records, shared_access

urlpatterns = [
    # Auth
    path('api/auth/register', register_view, name='register_view'),
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', refresh_view, name='refresh_view'),
    path('api/auth/forgot-password', forgot_password_view, name='forgot_password_view'),
    path('api/auth/reset-password', reset_password_view, name='reset_password_view'),
    path('api/auth/verify-email', verify_email_view, name='verify_email_view'),
    path('api/auth/setup-emergency-pin', setup_emergency_pin_view, name='setup_emergency_pin_view'),
    path('api/auth/verify-emergency-pin', verify_emergency_pin_view, name='verify_emergency_pin_view'),
    path('api/auth/profile', profile_view, name='profile_view'),
    # Patients
    path('api/patients', patients.patients, name='patients'),
    path('api/patients/public/emergency-info', patients.public_emergency_info, name='public_emergency_info'),
    path('api/patients/<int:patient_id>', patients.patient_detail, name='patient_detail'),
    path('api/patients/<int:patient_id>/profile-image', patients.patient_profile_image, name='patient_profile_image'),
    path('api/patients/<int:patient_id>/emergency-info', patients.patient_emergency_info, name='patient_emergency_info'),
    # Medical records
    path('api/patients/<int:patient_id>/records', records.records, name='records'),
    path('api/patients/<int:patient_id>/records/timeline', records.records_timeline, name='records_timeline'),
    path('api/patients/<int:patient_id>/records/<int:record_id>', records.record_detail, name='record_detail'),
    # Shared access (patient side)
    path('api/patients/<int:patient_id>/shared-access', shared_access.shares, name='shares'),
    path('api/patients/<int:patient_id>/shared-access/stats', shared_access.share_stats, name='share_stats'),
    path('api/patients/<int:patient_id>/shared-access/<int:share_id>', shared_access.share_detail, name='share_detail'),
    # Emergency contacts and email alerts
    path('api/emergency/contacts', emergency.contacts, name='contacts'),
    path('api/emergency/contacts/<int:contact_id>', emergency.contact_detail, name='contact_detail'),
    path('api/emergency/alerts', emergency.alerts, name='alerts'),
    path('api/emergency/alerts/<int:alert_id>/acknowledge', emergency.acknowledge_alert, name='acknowledge_alert'),
    # SMS dispatch
    path('api/emergency-alerts/public/send-alert', emergency.send_public_sms_alert, name='send_public_sms_alert'),
    path('api/emergency-alerts/<int:patient_id>/send-alert', emergency.send_sms_alert, name='send_sms_alert'),
    # Hospital directory
    path('api/hospitals', hospitals.hospitals, name='hospitals'),
    path('api/hospitals/<int:hospital_id>', hospitals.hospital_detail, name='hospital_detail'),
    # Hospital accounts
    path('api/hospital/profile', hospital_admin.profile, name='hospital_profile'),
    path('api/hospital/shared-records', hospital_admin.shared_records, name='hospital_shared_records'),
    path('api/hospital/shared-records/<int:share_id>/files', hospital_admin.shared_record_files, name='hospital_shared_record_files'),
    path('api/hospital/shared-records/<int:share_id>/status', hospital_admin.shared_record_status, name='hospital_shared_record_status'),
    path('api/hospital/shared-records/<int:share_id>/accept', hospital_admin.accept_shared_record, name='hospital_accept_share'),
    path('api/hospital/shared-records/<int:share_id>/reject', hospital_admin.reject_shared_record, name='hospital_reject_share'),
    path('api/hospital/alerts', hospital_admin.alerts, name='hospital_alerts'),
    path('api/hospital/alerts/<int:alert_id>/acknowledge', hospital_admin.acknowledge_alert, name='hospital_acknowledge_alert'),
    # Ops
    path('health', health.health, name='health'),
    path('healthz', health.healthz, name='healthz'),
    path('', include('django_prometheus.urls')),
]
