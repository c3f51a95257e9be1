"""
Emergency contacts and email alerts.

Contacts are soft-deleted (``is_active=False``) so that alert history
and shares that reference them stay intact.
"""
from __future__ import annotations

import logging

from django.utils import timezone

from ..exceptions import AppError
from ..models import EmergencyAlert, EmergencyContact, Hospital
from . import notifications
from .patients import get_owned_patient

logger = logging.getLogger(__name__)

CONTACT_FIELDS = ('name', 'relationship', 'phone_number', 'email', 'priority')


def _get_owned_contact(admin, contact_id: int) -> EmergencyContact:
    contact = EmergencyContact.objects.filter(pk=contact_id, patient__admin=admin, is_active=True).first()
    if contact is None:
        raise AppError(404, 'Contact not found')
    return contact


def active_contacts(patient):
    return EmergencyContact.objects.filter(patient=patient, is_active=True).order_by('priority', 'id')


def create_contact(admin, patient_id: int, data: dict) -> EmergencyContact:
    patient = get_owned_patient(admin, patient_id)
    fields = {k: v for k, v in data.items() if k in CONTACT_FIELDS}
    contact = EmergencyContact.objects.create(patient=patient, **fields)
    logger.info("contact %s added for patient %s", contact.pk, patient.pk)
    return contact


def list_contacts(admin):
    return EmergencyContact.objects.filter(patient__admin=admin, is_active=True).order_by('priority', 'id')


def update_contact(admin, contact_id: int, data: dict) -> EmergencyContact:
    contact = _get_owned_contact(admin, contact_id)
    for key, value in data.items():
        if key in CONTACT_FIELDS:
            setattr(contact, key, value)
    contact.save()
    return contact


def delete_contact(admin, contact_id: int) -> None:
    contact = _get_owned_contact(admin, contact_id)
    contact.is_active = False
    contact.save(update_fields=['is_active', 'updated_at'])


def create_alert(admin, patient_id: int, *, alert_message: str, patient_location: str = '',
                 critical_summary: str = '', hospital_id=None) -> tuple[EmergencyAlert, int]:
    """Log an alert and email every active contact; returns ``(alert, contacts_notified)``."""
    patient = get_owned_patient(admin, patient_id)
    contacts = list(active_contacts(patient))
    hospital = Hospital.objects.filter(pk=hospital_id).first() if hospital_id else None

    alert = EmergencyAlert.objects.create(
        patient=patient,
        hospital=hospital,
        patient_location=patient_location or '',
        critical_summary=critical_summary or '',
        alert_message=alert_message,
        status='sent',
        sent_to_hospital=hospital is not None,
        sent_to_contacts=bool(contacts),
        contact_ids_notified=','.join(str(c.pk) for c in contacts),
        sent_at=timezone.now(),
    )
    for contact in contacts:
        if contact.email:
            notifications.send_emergency_alert_email(
                contact.email, patient.full_name, alert_message, patient_location or None
            )
    logger.info("alert %s sent for patient %s to %d contact(s)", alert.pk, patient.pk, len(contacts))
    return alert, len(contacts)


def list_alerts(admin):
    return EmergencyAlert.objects.filter(patient__admin=admin).select_related('patient').order_by('-sent_at', '-created_at')


def acknowledge_alert(admin, alert_id: int) -> EmergencyAlert:
    alert = EmergencyAlert.objects.filter(pk=alert_id, patient__admin=admin).first()
    if alert is None:
        raise AppError(404, 'Alert not found')
    alert.acknowledge()
    return alert
