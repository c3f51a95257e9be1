"""
Account lifecycle: registration, login, token refresh, password reset
and email verification.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from rest_framework_simplejwt.exceptions import TokenError

from ..authentication import AdminRefreshToken, issue_token_pair
from ..exceptions import AppError
from ..models import Patient
from . import notifications
from .tokens import email_verification_token, make_token, password_reset_token, resolve_token

logger = logging.getLogger(__name__)

Admin = get_user_model()

FORGOT_PASSWORD_MESSAGE = 'If the email exists, a password reset link has been sent'


def register(*, email: str, password: str, user_type: str, phone_number: str = '',
             full_name: Optional[str] = None):
    email = email.lower()
    if Admin.objects.filter(email__iexact=email).exists():
        raise AppError(409, 'Email already registered')

    with transaction.atomic():
        admin = Admin.objects.create_user(
            email=email,
            password=password,
            phone_number=phone_number or '',
            user_type=user_type,
            account_status='active',
            email_verified=False,
        )
        if user_type == 'patient' and full_name:
            Patient.objects.create(admin=admin, full_name=full_name, relationship='self', is_primary=True)

    logger.info("registered %s account %s", user_type, admin.pk)
    notifications.send_verification_email(admin.email, make_token(admin, email_verification_token))
    return admin


def login(*, email: str, password: str):
    """Check credentials and return ``(admin, tokens)``.

    The account status is checked before the password so a suspended
    account is reported as such even when the password is right.
    """
    admin = Admin.objects.filter(email__iexact=email).first()
    if admin is None:
        logger.info("login failed: unknown email")
        raise AppError(401, 'Invalid email or password')
    if admin.account_status != 'active':
        logger.info("login refused for %s account %s", admin.account_status, admin.pk)
        raise AppError(403, 'Account is suspended or deleted')
    if not admin.check_password(password):
        logger.info("login failed: bad password for admin %s", admin.pk)
        raise AppError(401, 'Invalid email or password')

    admin.last_login = timezone.now()
    admin.save(update_fields=['last_login'])
    logger.info("admin %s logged in", admin.pk)
    return admin, issue_token_pair(admin)


def refresh(raw_refresh: str) -> dict[str, str]:
    try:
        token = AdminRefreshToken(raw_refresh)
        admin_id = token['adminId']
    except (TokenError, KeyError):
        raise AppError(401, 'Invalid or expired refresh token')
    admin = Admin.objects.filter(pk=admin_id).first()
    if admin is None or admin.account_status != 'active':
        raise AppError(401, 'Invalid or expired refresh token')
    return issue_token_pair(admin)


def forgot_password(email: str) -> str:
    admin = Admin.objects.filter(email__iexact=email).first()
    if admin is not None and admin.account_status == 'active':
        notifications.send_password_reset_email(admin.email, make_token(admin, password_reset_token))
    return FORGOT_PASSWORD_MESSAGE


def reset_password(token: str, new_password: str) -> None:
    admin = resolve_token(token, password_reset_token)
    if admin is None:
        raise AppError(400, 'Invalid or expired reset token')
    admin.set_password(new_password)
    admin.save(update_fields=['password', 'updated_at'])
    logger.info("password reset for admin %s", admin.pk)


def verify_email(token: str):
    admin = resolve_token(token, email_verification_token)
    if admin is None:
        raise AppError(400, 'Invalid or expired verification token')
    admin.email_verified = True
    admin.save(update_fields=['email_verified', 'updated_at'])
    logger.info("email verified for admin %s", admin.pk)
    return admin


def setup_emergency_pin(admin, pin: str):
    raise AppError(501, 'Emergency PIN setup not yet implemented for this user type')


def verify_emergency_pin(email: str, pin: str):
    raise AppError(501, 'Emergency PIN verification not yet implemented')
