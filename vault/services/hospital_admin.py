"""
Hospital-side operations: profile, inbound shares and dispatched alerts.

A hospital account owns at most one :class:`Hospital` row.  Rows that
predate account linking (``admin`` empty) are claimed the first time an
account with the same email looks for its profile.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.db.models import F, Q

from ..exceptions import AppError
from ..models import EmergencyAlert, Hospital, MedicalRecord, SharedAccess

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    'hospital_name', 'address', 'city', 'state', 'phone_number', 'email', 'latitude', 'longitude',
)

ACCESS_LEVEL_CATEGORIES = {
    'Lab Reports Only': ('lab',),
    'Prescriptions Only': ('prescription',),
    'Imaging Records Only': ('radiology', 'imaging', 'scan', 'xray'),
}


def get_hospital_for_admin(admin) -> Optional[Hospital]:
    hospital = Hospital.objects.filter(admin=admin).first()
    if hospital is not None:
        return hospital
    if not admin.email:
        return None
    legacy = Hospital.objects.filter(admin__isnull=True, email__iexact=admin.email).first()
    if legacy is None:
        return None
    legacy.admin = admin
    legacy.save(update_fields=['admin', 'updated_at'])
    logger.info("linked legacy hospital %s to admin %s", legacy.pk, admin.pk)
    return legacy


def ensure_hospital_for_admin(admin) -> Hospital:
    """Return the admin's hospital, creating a placeholder profile if needed."""
    hospital = get_hospital_for_admin(admin)
    if hospital is not None:
        return hospital
    hospital, _ = Hospital.objects.get_or_create(
        admin=admin,
        defaults={
            'hospital_name': 'My Hospital',
            'email': admin.email,
            'phone_number': admin.phone_number or '',
            'hospital_type': 'private',
        },
    )
    return hospital


def _require_hospital(admin) -> Hospital:
    hospital = get_hospital_for_admin(admin)
    if hospital is None:
        raise AppError(404, 'Hospital profile not found')
    return hospital


def get_profile(admin) -> Optional[Hospital]:
    return get_hospital_for_admin(admin)


def update_profile(admin, data: dict) -> Hospital:
    fields = {k: v for k, v in data.items() if k in PROFILE_FIELDS}
    hospital = get_hospital_for_admin(admin)
    if hospital is None:
        fields.setdefault('hospital_name', 'My Hospital')
        hospital = Hospital.objects.create(admin=admin, hospital_type='private', **fields)
        logger.info("created hospital profile %s for admin %s", hospital.pk, admin.pk)
        return hospital
    for key, value in fields.items():
        setattr(hospital, key, value)
    hospital.save()
    return hospital


def list_shared_records(admin):
    hospital = get_hospital_for_admin(admin)
    if hospital is None:
        return SharedAccess.objects.none()
    return SharedAccess.objects.filter(hospital=hospital).select_related('patient').order_by('-shared_on', '-id')


def _get_inbound_share(admin, share_id: int) -> SharedAccess:
    hospital = _require_hospital(admin)
    share = SharedAccess.objects.select_related('patient').filter(pk=share_id, hospital=hospital).first()
    if share is None:
        raise AppError(404, 'Shared access not found')
    return share


def _set_share_status(admin, share_id: int, target: str, notes: Optional[str]) -> SharedAccess:
    with transaction.atomic():
        share = _get_inbound_share(admin, share_id)
        share = SharedAccess.objects.select_for_update().select_related('patient').get(pk=share.pk)
        share.transition(target, save=False)
        if notes is not None:
            share.hospital_notes = notes
        share.save(update_fields=['status', 'hospital_notes', 'updated_at'])
    logger.info("share %s -> %s by hospital admin %s", share.pk, target, admin.pk)
    return share


def accept_share(admin, share_id: int, notes: Optional[str] = None) -> SharedAccess:
    return _set_share_status(admin, share_id, 'active', notes)


def reject_share(admin, share_id: int, notes: Optional[str] = None) -> SharedAccess:
    return _set_share_status(admin, share_id, 'rejected', notes)


def update_share_status(admin, share_id: int, status: str, notes: Optional[str] = None) -> SharedAccess:
    """``acknowledged`` is the front end's word for accepting a share."""
    target = 'active' if status in ('acknowledged', 'active') else status
    return _set_share_status(admin, share_id, target, notes)


def _shared_record_ids(raw) -> list[int]:
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = raw.split(',')
    ids = []
    for value in raw:
        try:
            ids.append(int(str(value).strip()))
        except ValueError:
            continue
    return ids


def visible_records(share: SharedAccess):
    qs = MedicalRecord.objects.filter(patient_id=share.patient_id)
    categories = ACCESS_LEVEL_CATEGORIES.get(share.access_level)
    if categories:
        cond = Q()
        for term in categories:
            cond |= Q(category__icontains=term)
        qs = qs.filter(cond)
    ids = _shared_record_ids(share.shared_record_ids)
    if ids:
        qs = qs.filter(pk__in=ids)
    return qs.order_by('-record_date', '-created_at')


def get_shared_record_files(admin, share_id: int) -> list[MedicalRecord]:
    """Records visible under an inbound grant.

    Only live grants return records; an active grant found past its
    expiry is moved to ``expired`` on the spot.
    """
    share = _get_inbound_share(admin, share_id)
    if share.status != 'active':
        return []
    if share.is_past_expiry:
        share.transition('expired')
        logger.info("share %s expired on read", share.pk)
        return []
    records = list(visible_records(share))
    SharedAccess.objects.filter(pk=share.pk).update(records_accessed_count=F('records_accessed_count') + 1)
    return records


def list_alerts(admin):
    hospital = get_hospital_for_admin(admin)
    if hospital is None:
        return EmergencyAlert.objects.none()
    return (
        EmergencyAlert.objects.filter(hospital=hospital, sent_to_hospital=True)
        .select_related('patient')
        .order_by('-sent_at', '-created_at')
    )


def acknowledge_alert(admin, alert_id: int) -> EmergencyAlert:
    hospital = _require_hospital(admin)
    alert = EmergencyAlert.objects.filter(pk=alert_id, hospital=hospital).first()
    if alert is None:
        raise AppError(404, 'Alert not found')
    alert.acknowledge()
    return alert
