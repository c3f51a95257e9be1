"""
Stateless single-purpose tokens for password reset and email verification.

Both are built on Django's :class:`PasswordResetTokenGenerator`, so they
are HMAC-signed with ``SECRET_KEY``, expire after
``PASSWORD_RESET_TIMEOUT`` seconds and stop validating once the state
they were derived from changes (the password hash for reset tokens,
``email_verified`` for verification tokens).  The string handed out is
``<uidb64>.<token>``.
"""
from __future__ import annotations

from typing import Optional

from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import PasswordResetTokenGenerator, default_token_generator
from django.utils.encoding import force_bytes, force_str
from django.utils.http import urlsafe_base64_decode, urlsafe_base64_encode

Admin = get_user_model()


class EmailVerificationTokenGenerator(PasswordResetTokenGenerator):
    key_salt = 'vault.services.tokens.EmailVerificationTokenGenerator'

    def _make_hash_value(self, user, timestamp):
        return f"{user.pk}{user.email}{user.email_verified}{timestamp}"


email_verification_token = EmailVerificationTokenGenerator()
password_reset_token = default_token_generator


def make_token(admin, generator=password_reset_token) -> str:
    uid = urlsafe_base64_encode(force_bytes(admin.pk))
    return f"{uid}.{generator.make_token(admin)}"


def resolve_token(raw: str, generator=password_reset_token) -> Optional[object]:
    """Return the admin a token was issued for, or ``None`` if it does not check out."""
    uid, sep, token = (raw or '').partition('.')
    if not sep or not uid or not token:
        return None
    try:
        pk = force_str(urlsafe_base64_decode(uid))
        admin = Admin.objects.get(pk=pk)
    except (TypeError, ValueError, OverflowError, Admin.DoesNotExist):
        return None
    if not generator.check_token(admin, token):
        return None
    return admin
