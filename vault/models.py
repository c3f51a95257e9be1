"""
Database models for the MediVault backend.

An :class:`Admin` is the login identity (one per account) and is typed
as either a patient account or a hospital account.  Patient accounts
manage one or more :class:`Patient` profiles (self and family members)
which own medical records, emergency contacts and alerts.  Hospital
accounts own a single :class:`Hospital` profile that receives
:class:`SharedAccess` grants from patients.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils import timezone

from .exceptions import AppError


class AdminManager(BaseUserManager):
    """Manager for the email-keyed :class:`Admin` model."""

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('The email must be set')
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('email_verified', True)
        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')
        return self._create_user(email, password, **extra_fields)


class Admin(AbstractUser):
    """Login identity record, keyed by email.

    ``account_status`` controls whether the account may log in or use
    its tokens; ``is_active`` is left to Django's admin site.
    """
    USER_TYPE_CHOICES = [
        ('patient', 'Patient'),
        ('hospital', 'Hospital'),
    ]
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('suspended', 'Suspended'),
        ('deleted', 'Deleted'),
    ]

    username = None
    email = models.EmailField(unique=True)
    phone_number = models.CharField(max_length=20, blank=True)
    user_type = models.CharField(max_length=10, choices=USER_TYPE_CHOICES, default='patient', db_index=True)
    account_status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')
    email_verified = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS: list[str] = []

    objects = AdminManager()

    def __str__(self) -> str:
        return f"{self.email} ({self.user_type})"

    @property
    def is_hospital(self) -> bool:
        return self.user_type == 'hospital'


class Patient(models.Model):
    """A managed health profile (the account holder or a family member)."""
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    ]

    admin = models.ForeignKey(Admin, on_delete=models.CASCADE, related_name='patients')
    full_name = models.CharField(max_length=255)
    address = models.TextField(blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    blood_type = models.CharField(max_length=5, blank=True)
    height_cm = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    weight_kg = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    allergies = models.TextField(blank=True)
    chronic_conditions = models.TextField(blank=True)
    current_medications = models.TextField(blank=True)
    relationship = models.CharField(max_length=50, default='self')
    is_primary = models.BooleanField(default=False)
    profile_image = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-is_primary', '-created_at']

    def __str__(self) -> str:
        return f"{self.full_name} ({self.relationship})"


class Hospital(models.Model):
    """Hospital profile; ``admin`` is empty only for legacy directory rows."""
    TYPE_CHOICES = [
        ('government', 'Government'),
        ('private', 'Private'),
        ('clinic', 'Clinic'),
        ('specialty', 'Specialty'),
    ]

    admin = models.OneToOneField(
        Admin, null=True, blank=True, on_delete=models.SET_NULL, related_name='hospital'
    )
    hospital_name = models.CharField(max_length=255)
    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True, db_index=True)
    state = models.CharField(max_length=100, blank=True)
    phone_number = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True, db_index=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    hospital_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='private')
    rating = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    is_verified = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.hospital_name

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class MedicalRecord(models.Model):
    """Metadata for an uploaded medical document; the file lives in storage."""
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='medical_records')
    category = models.CharField(max_length=100, db_index=True)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    record_date = models.DateField(null=True, blank=True, db_index=True)
    physician_name = models.CharField(max_length=255, blank=True)
    facility_name = models.CharField(max_length=255, blank=True)
    medical_condition = models.CharField(max_length=255, blank=True)
    file_path = models.CharField(max_length=500, blank=True)
    file_type = models.CharField(max_length=100, blank=True)
    file_size_bytes = models.PositiveBigIntegerField(null=True, blank=True)
    is_critical = models.BooleanField(default=False)
    tags = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-record_date', '-created_at']

    def __str__(self) -> str:
        return f"{self.title} [{self.category}]"


class EmergencyContact(models.Model):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='emergency_contacts')
    name = models.CharField(max_length=255)
    relationship = models.CharField(max_length=50)
    phone_number = models.CharField(max_length=20)
    email = models.EmailField(blank=True)
    priority = models.PositiveSmallIntegerField(default=1)
    # soft delete flag
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['priority', 'id']

    def __str__(self) -> str:
        return f"{self.name} ({self.relationship})"


class EmergencyAlert(models.Model):
    """Log of an emergency notification sent on behalf of a patient."""
    STATUS_CHOICES = [
        ('sent', 'Sent'),
        ('acknowledge', 'Acknowledged'),
        ('resolve', 'Resolved'),
    ]

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='emergency_alerts')
    hospital = models.ForeignKey(
        Hospital, null=True, blank=True, on_delete=models.SET_NULL, related_name='emergency_alerts'
    )
    patient_location = models.CharField(max_length=255, blank=True)
    critical_summary = models.TextField(blank=True)
    alert_message = models.TextField(blank=True)
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default='sent', db_index=True)
    sent_to_hospital = models.BooleanField(default=False)
    sent_to_contacts = models.BooleanField(default=False)
    # comma separated contact ids
    contact_ids_notified = models.CharField(max_length=500, blank=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    acknowledged_at = models.DateTimeField(null=True, blank=True)
    resolved_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"alert#{self.pk} for {self.patient_id} ({self.status})"

    def acknowledge(self) -> None:
        self.status = 'acknowledge'
        self.acknowledged_at = timezone.now()
        self.save(update_fields=['status', 'acknowledged_at'])


class SharedAccess(models.Model):
    """A time-bounded grant of a patient's records to a provider.

    Status moves along a small state machine::

        pending --accept--> active
        pending --reject--> rejected
        pending|active --revoke--> revoked
        active --time--> expired

    Any other move raises :class:`AppError` with HTTP 409.
    """
    PROVIDER_TYPES = [
        ('Hospital', 'Hospital'),
        ('Doctor', 'Doctor'),
        ('EmergencyContact', 'Emergency Contact'),
    ]
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('active', 'Active'),
        ('rejected', 'Rejected'),
        ('expired', 'Expired'),
        ('revoked', 'Revoked'),
    ]
    TRANSITIONS = {
        'pending': {'active', 'rejected', 'revoked'},
        'active': {'revoked', 'expired'},
    }

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='shared_accesses')
    hospital = models.ForeignKey(
        Hospital, null=True, blank=True, on_delete=models.SET_NULL, related_name='shared_accesses'
    )
    contact = models.ForeignKey(
        EmergencyContact, null=True, blank=True, on_delete=models.SET_NULL, related_name='shared_accesses'
    )
    provider_name = models.CharField(max_length=255)
    provider_type = models.CharField(max_length=20, choices=PROVIDER_TYPES)
    access_level = models.CharField(max_length=100, default='Full Access')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending', db_index=True)
    shared_on = models.DateTimeField(default=timezone.now)
    expires_on = models.DateTimeField(null=True, blank=True)
    records_accessed_count = models.PositiveIntegerField(default=0)
    shared_record_ids = models.JSONField(null=True, blank=True)
    hospital_notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"{self.provider_name} <- patient {self.patient_id} ({self.status})"

    @property
    def is_past_expiry(self) -> bool:
        return self.expires_on is not None and self.expires_on <= timezone.now()

    @property
    def is_live(self) -> bool:
        return self.status == 'active' and not self.is_past_expiry

    def can_transition(self, target: str) -> bool:
        return target in self.TRANSITIONS.get(self.status, set())

    def transition(self, target: str, *, save: bool = True) -> None:
        if target == self.status:
            return
        if not self.can_transition(target):
            raise AppError(409, f"Cannot change share status from '{self.status}' to '{target}'")
        self.status = target
        if save:
            self.save(update_fields=['status', 'updated_at'])
