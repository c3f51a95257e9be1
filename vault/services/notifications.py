"""
Outbound email.

Every message is rendered from a pair of templates under
``vault/emails/`` (``<name>.txt`` and ``<name>.html``) and sent with
Django's mail framework.  Delivery is best-effort: failures are logged
and reported as ``False`` so callers never fail a request because an
SMTP server is down.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


def _deliver(to: str, subject: str, template: str, context: dict) -> bool:
    if not to:
        return False
    text_body = render_to_string(f'vault/emails/{template}.txt', context)
    html_body = render_to_string(f'vault/emails/{template}.html', context)
    try:
        send_mail(
            subject,
            text_body,
            settings.DEFAULT_FROM_EMAIL,
            [to],
            html_message=html_body,
        )
    except Exception:
        logger.warning("email '%s' to %s failed", template, to, exc_info=True)
        return False
    logger.info("email '%s' sent to %s", template, to)
    return True


def send_verification_email(email: str, token: str) -> bool:
    url = f"{settings.FRONTEND_URL}/verify-email?token={token}"
    return _deliver(email, 'Verify Your MediVault Account', 'verification', {'verification_url': url})


def send_password_reset_email(email: str, token: str) -> bool:
    url = f"{settings.FRONTEND_URL}/reset-password?token={token}"
    hours = max(1, settings.PASSWORD_RESET_TIMEOUT // 3600)
    return _deliver(email, 'Reset Your MediVault Password', 'password_reset', {'reset_url': url, 'hours': hours})


def send_emergency_alert_email(email: str, patient_name: str, alert_message: str,
                               location: Optional[str] = None) -> bool:
    return _deliver(
        email,
        f'🚨 EMERGENCY ALERT - {patient_name}',
        'emergency_alert',
        {'patient_name': patient_name, 'alert_message': alert_message, 'location': location},
    )


def send_share_notification_email(email: str, patient_name: str, access_level: str,
                                  expires_on=None) -> bool:
    return _deliver(
        email,
        f'{patient_name} shared medical records with you on MediVault',
        'share_notification',
        {
            'patient_name': patient_name,
            'access_level': access_level,
            'expires_on': expires_on,
            'dashboard_url': f"{settings.FRONTEND_URL}/hospital/dashboard",
        },
    )
