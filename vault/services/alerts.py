"""
SMS emergency dispatch.

Unlike the email alerts in :mod:`vault.services.emergency`, SMS delivery
is not best-effort: if the provider rejects any message the whole
dispatch fails and the alert row is rolled back.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from ..exceptions import AppError
from ..models import EmergencyAlert, Hospital, Patient
from . import sms
from .emergency import active_contacts
from .geo import nearest_hospital
from .patients import get_owned_patient

logger = logging.getLogger(__name__)

Admin = get_user_model()

ALERT_MESSAGE = '🚨 EMERGENCY ALERT FROM MEDIVAULT'
SMS_BODY = '🚨 Emergency Alert! Patient needs help. Open Medivault.'


def _dispatch(patient: Patient, latitude: Optional[float], longitude: Optional[float]) -> dict:
    contacts = list(active_contacts(patient))
    if not contacts:
        raise AppError(404, 'No active emergency contacts found')
    if not sms.is_configured():
        raise AppError(500, 'Twilio configuration is missing')

    hospital, distance = None, None
    location = ''
    body = SMS_BODY
    if latitude is not None and longitude is not None:
        location = f"{latitude},{longitude}"
        body = f"{SMS_BODY} Location: https://maps.google.com/?q={location}"
        candidates = Hospital.objects.filter(
            is_verified=True, latitude__isnull=False, longitude__isnull=False
        )
        hospital, distance = nearest_hospital(candidates, latitude, longitude)

    with transaction.atomic():
        alert = EmergencyAlert.objects.create(
            patient=patient,
            hospital=hospital,
            patient_location=location,
            alert_message=ALERT_MESSAGE,
            status='sent',
            sent_to_hospital=hospital is not None,
            sent_to_contacts=True,
            contact_ids_notified=','.join(str(c.pk) for c in contacts),
            sent_at=timezone.now(),
        )
        try:
            for contact in contacts:
                sms.send_sms(contact.phone_number, body)
        except sms.SmsError:
            logger.warning("sms dispatch failed for patient %s", patient.pk, exc_info=True)
            raise AppError(500, 'Failed to send emergency SMS')

    logger.info("sms alert %s dispatched for patient %s to %d contact(s)", alert.pk, patient.pk, len(contacts))
    return {
        'alert': alert,
        'contacts_notified': len(contacts),
        'nearest_hospital': hospital,
        'distance_km': round(distance, 2) if distance is not None else None,
    }


def send_alert(admin, patient_id: int, latitude=None, longitude=None) -> dict:
    patient = get_owned_patient(admin, patient_id)
    return _dispatch(patient, latitude, longitude)


def send_alert_by_email(email: str, latitude=None, longitude=None) -> dict:
    admin = Admin.objects.filter(email__iexact=email).first()
    if admin is None:
        raise AppError(404, 'No account found for this email')
    patient = Patient.objects.filter(admin=admin).order_by('-is_primary', 'created_at').first()
    if patient is None:
        raise AppError(404, 'No patient profile found for this account')
    return _dispatch(patient, latitude, longitude)
