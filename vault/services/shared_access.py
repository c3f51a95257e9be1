"""
Patient-side management of :class:`SharedAccess` grants.

Hospital and doctor grants are addressed by the email of a registered
hospital account; grants to emergency contacts reference one of the
patient's own active contacts.  New grants start ``pending`` until the
hospital accepts or rejects them.
"""
from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q, Sum
from django.utils import timezone

from ..exceptions import AppError
from ..models import EmergencyContact, SharedAccess
from . import notifications
from .hospital_admin import ensure_hospital_for_admin
from .patients import get_owned_patient

logger = logging.getLogger(__name__)

Admin = get_user_model()

HOSPITAL_PROVIDER_TYPES = ('Hospital', 'Doctor')
PATIENT_STATUS_TARGETS = ('revoked', 'expired')


def _get_owned_share(admin, patient_id: int, share_id: int) -> SharedAccess:
    patient = get_owned_patient(admin, patient_id)
    share = SharedAccess.objects.filter(pk=share_id, patient=patient).first()
    if share is None:
        raise AppError(404, 'Shared access not found')
    return share


def list_shares(admin, patient_id: int):
    patient = get_owned_patient(admin, patient_id)
    return (
        SharedAccess.objects.filter(patient=patient)
        .select_related('hospital', 'contact')
        .order_by('-shared_on', '-id')
    )


def create_share(admin, patient_id: int, *, provider_name: str, provider_type: str,
                 access_level: str, expires_on=None, contact_id=None, record_ids=None) -> SharedAccess:
    patient = get_owned_patient(admin, patient_id)
    notify_email = ''

    with transaction.atomic():
        hospital, contact = None, None
        if provider_type in HOSPITAL_PROVIDER_TYPES:
            provider = Admin.objects.filter(
                email__iexact=provider_name.strip(), user_type='hospital', account_status='active'
            ).first()
            if provider is None:
                logger.info("share refused: %s is not a registered hospital account", provider_name)
                raise AppError(403, 'Provider must be a registered hospital account email')
            hospital = ensure_hospital_for_admin(provider)
            notify_email = provider.email
        else:
            contact = EmergencyContact.objects.filter(pk=contact_id, patient=patient, is_active=True).first()
            if contact is None:
                raise AppError(404, 'Emergency contact not found')
            notify_email = contact.email

        share = SharedAccess.objects.create(
            patient=patient,
            hospital=hospital,
            contact=contact,
            provider_name=provider_name,
            provider_type=provider_type,
            access_level=access_level,
            status='pending',
            expires_on=expires_on,
            shared_record_ids=list(record_ids) if record_ids else None,
        )

    logger.info("share %s created for patient %s (%s)", share.pk, patient.pk, provider_type)
    if notify_email:
        notifications.send_share_notification_email(notify_email, patient.full_name, access_level, expires_on)
    return share


def update_share(admin, patient_id: int, share_id: int, data: dict) -> SharedAccess:
    with transaction.atomic():
        share = _get_owned_share(admin, patient_id, share_id)
        share = SharedAccess.objects.select_for_update().get(pk=share.pk)
        if 'access_level' in data:
            share.access_level = data['access_level']
        if 'expires_on' in data:
            share.expires_on = data['expires_on']
        target = data.get('status')
        if target and target != share.status:
            # accepting a grant is the hospital's move
            if target not in PATIENT_STATUS_TARGETS:
                raise AppError(409, f"Cannot change share status from '{share.status}' to '{target}'")
            share.transition(target, save=False)
        share.save()
    return share


def revoke_share(admin, patient_id: int, share_id: int) -> SharedAccess:
    share = _get_owned_share(admin, patient_id, share_id)
    share.transition('revoked')
    logger.info("share %s revoked by admin %s", share.pk, admin.pk)
    return share


def get_stats(admin, patient_id: int) -> dict:
    patient = get_owned_patient(admin, patient_id)
    qs = SharedAccess.objects.filter(patient=patient)
    now = timezone.now()
    active = qs.filter(status='active').filter(Q(expires_on__isnull=True) | Q(expires_on__gt=now)).count()
    return {
        'activeShares': active,
        'totalShares': qs.count(),
        'totalRecordsAccessed': qs.aggregate(total=Sum('records_accessed_count'))['total'] or 0,
        'pendingRequests': qs.filter(status='pending').count(),
    }


def expire_overdue_shares(now=None) -> int:
    """Move every active grant past its expiry to ``expired``; returns the count."""
    now = now or timezone.now()
    count = SharedAccess.objects.filter(status='active', expires_on__isnull=False, expires_on__lte=now).update(
        status='expired', updated_at=now
    )
    if count:
        logger.info("expired %d overdue share(s)", count)
    return count
