"""
Patient profiles owned by an admin account.

Every lookup goes through :func:`get_owned_patient`, which filters by
the requesting admin so that another account's patients are reported
as missing (404) rather than forbidden.
"""
from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count

from ..exceptions import AppError
from ..models import Patient
from . import storage

logger = logging.getLogger(__name__)

Admin = get_user_model()

PATIENT_FIELDS = (
    'full_name', 'address', 'date_of_birth', 'gender', 'blood_type', 'height_cm', 'weight_kg',
    'allergies', 'chronic_conditions', 'current_medications', 'relationship', 'is_primary',
)


def get_owned_patient(admin, patient_id: int) -> Patient:
    patient = Patient.objects.filter(pk=patient_id, admin=admin).first()
    if patient is None:
        raise AppError(404, 'Patient not found')
    return patient


def _clear_primary(admin, exclude_id=None) -> None:
    # serialise concurrent primary switches for the same account
    Admin.objects.select_for_update().filter(pk=admin.pk).first()
    qs = Patient.objects.filter(admin=admin, is_primary=True)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    qs.update(is_primary=False)


def create_patient(admin, data: dict) -> Patient:
    fields = {k: v for k, v in data.items() if k in PATIENT_FIELDS}
    with transaction.atomic():
        if fields.get('is_primary'):
            _clear_primary(admin)
        patient = Patient.objects.create(admin=admin, **fields)
    logger.info("admin %s created patient %s", admin.pk, patient.pk)
    return patient


def list_patients(admin):
    return Patient.objects.filter(admin=admin).order_by('-is_primary', '-created_at')


def get_patient(admin, patient_id: int) -> Patient:
    patient = (
        Patient.objects.filter(pk=patient_id, admin=admin)
        .annotate(medical_records_count=Count('medical_records'))
        .first()
    )
    if patient is None:
        raise AppError(404, 'Patient not found')
    return patient


def update_patient(admin, patient_id: int, data: dict) -> Patient:
    with transaction.atomic():
        patient = get_owned_patient(admin, patient_id)
        fields = {k: v for k, v in data.items() if k in PATIENT_FIELDS}
        if fields.get('is_primary'):
            _clear_primary(admin, exclude_id=patient.pk)
        for key, value in fields.items():
            setattr(patient, key, value)
        patient.save()
    return patient


def update_profile_image(admin, patient_id: int, upload) -> Patient:
    patient = get_owned_patient(admin, patient_id)
    url, _, _ = storage.save_upload(upload, storage.PROFILES_FOLDER, images_only=True, prefix=str(patient.pk))
    old = patient.profile_image
    patient.profile_image = url
    patient.save(update_fields=['profile_image', 'updated_at'])
    if old:
        storage.delete_remote_file(old)
    return patient


def delete_patient(admin, patient_id: int) -> None:
    patient = get_owned_patient(admin, patient_id)
    patient.delete()
    logger.info("admin %s deleted patient %s", admin.pk, patient_id)


def get_emergency_info(admin, patient_id: int) -> Patient:
    return get_owned_patient(admin, patient_id)


def get_public_emergency_info(email: str) -> Patient:
    """Primary (or first) patient of the account registered under ``email``."""
    admin = Admin.objects.filter(email__iexact=email).first()
    if admin is None:
        raise AppError(404, 'No account found for this email')
    patient = Patient.objects.filter(admin=admin).order_by('-is_primary', 'created_at').first()
    if patient is None:
        raise AppError(404, 'No patient profile found for this account')
    return patient
