"""
Thin client for the Twilio Messages REST API.
"""
from __future__ import annotations

import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class SmsError(RuntimeError):
    pass


def is_configured() -> bool:
    return bool(settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN and settings.TWILIO_PHONE_NUMBER)


def send_sms(to: str, body: str) -> str:
    """Send one SMS and return the provider's message sid."""
    if not is_configured():
        raise SmsError('SMS provider is not configured')
    sid = settings.TWILIO_ACCOUNT_SID
    url = f"{settings.TWILIO_API_BASE}/Accounts/{sid}/Messages.json"
    try:
        r = requests.post(
            url,
            data={'To': to, 'From': settings.TWILIO_PHONE_NUMBER, 'Body': body},
            auth=(sid, settings.TWILIO_AUTH_TOKEN),
            timeout=settings.SMS_TIMEOUT,
        )
        r.raise_for_status()
    except requests.RequestException as e:
        raise SmsError(f"SMS to {to} failed: {e}") from e
    data = r.json()
    logger.info("sms sent to %s (sid=%s)", to, data.get('sid'))
    return data.get('sid', '')
