from __future__ import annotations

import logging

from django.db.models import Q

from ..exceptions import AppError
from ..models import MedicalRecord
from . import storage
from .patients import get_owned_patient

logger = logging.getLogger(__name__)

RECORD_FIELDS = (
    'category', 'title', 'description', 'record_date', 'physician_name', 'facility_name',
    'medical_condition', 'is_critical', 'tags',
)


def _get_owned_record(admin, patient_id: int, record_id: int) -> MedicalRecord:
    patient = get_owned_patient(admin, patient_id)
    record = MedicalRecord.objects.filter(pk=record_id, patient=patient).first()
    if record is None:
        raise AppError(404, 'Record not found')
    return record


def upload_record(admin, patient_id: int, upload, data: dict) -> MedicalRecord:
    patient = get_owned_patient(admin, patient_id)
    if upload is None:
        raise AppError(400, 'File is required')
    url, content_type, size = storage.save_upload(upload, storage.RECORDS_FOLDER)
    fields = {k: v for k, v in data.items() if k in RECORD_FIELDS}
    record = MedicalRecord.objects.create(
        patient=patient,
        file_path=url,
        file_type=content_type,
        file_size_bytes=size,
        **fields,
    )
    logger.info("record %s uploaded for patient %s", record.pk, patient.pk)
    return record


def list_records(admin, patient_id: int, filters: dict):
    patient = get_owned_patient(admin, patient_id)
    qs = MedicalRecord.objects.filter(patient=patient)
    if filters.get('recordType'):
        qs = qs.filter(category=filters['recordType'])
    if filters.get('startDate'):
        qs = qs.filter(record_date__gte=filters['startDate'])
    if filters.get('endDate'):
        qs = qs.filter(record_date__lte=filters['endDate'])
    if filters.get('doctorName'):
        qs = qs.filter(physician_name__icontains=filters['doctorName'])
    if filters.get('hospitalName'):
        qs = qs.filter(facility_name__icontains=filters['hospitalName'])
    if filters.get('medicalCondition'):
        qs = qs.filter(medical_condition__icontains=filters['medicalCondition'])
    if filters.get('isCritical') is not None:
        qs = qs.filter(is_critical=filters['isCritical'])
    term = filters.get('search')
    if term:
        qs = qs.filter(
            Q(title__icontains=term)
            | Q(description__icontains=term)
            | Q(physician_name__icontains=term)
            | Q(facility_name__icontains=term)
        )
    return qs.order_by('-record_date', '-created_at')


def timeline(admin, patient_id: int):
    patient = get_owned_patient(admin, patient_id)
    return MedicalRecord.objects.filter(patient=patient).order_by('-record_date', '-created_at')


def get_record(admin, patient_id: int, record_id: int) -> MedicalRecord:
    return _get_owned_record(admin, patient_id, record_id)


def update_record(admin, patient_id: int, record_id: int, data: dict) -> MedicalRecord:
    record = _get_owned_record(admin, patient_id, record_id)
    for key, value in data.items():
        if key in RECORD_FIELDS:
            setattr(record, key, value)
    record.save()
    return record


def delete_record(admin, patient_id: int, record_id: int) -> None:
    """Delete the row; the stored file is removed on a best-effort basis."""
    record = _get_owned_record(admin, patient_id, record_id)
    if record.file_path:
        storage.delete_remote_file(record.file_path)
    record.delete()
    logger.info("record %s deleted for patient %s", record_id, patient_id)
