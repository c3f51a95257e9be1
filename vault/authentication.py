"""
JWT authentication and token helpers.

Tokens are issued by ``djangorestframework-simplejwt`` and carry the
claims ``adminId`` (via ``USER_ID_CLAIM``), ``email`` and ``userType``.
Keeping these classes out of the view modules avoids circular imports
when DRF loads ``DEFAULT_AUTHENTICATION_CLASSES`` during start-up.
"""
from __future__ import annotations

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError
from rest_framework_simplejwt.tokens import RefreshToken


class AdminRefreshToken(RefreshToken):
    """Refresh token whose claims (and derived access token) include email and userType."""

    @classmethod
    def for_user(cls, user):
        token = super().for_user(user)
        token['email'] = user.email
        token['userType'] = user.user_type
        return token


def issue_token_pair(admin) -> dict[str, str]:
    refresh = AdminRefreshToken.for_user(admin)
    return {
        'accessToken': str(refresh.access_token),
        'refreshToken': str(refresh),
    }


class AdminJWTAuthentication(JWTAuthentication):
    """Bearer JWT auth that also rejects accounts that are no longer active."""

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if getattr(user, 'account_status', 'active') != 'active':
            raise AuthenticationFailed('Account is not active', code='user_inactive')
        return user


class OptionalAdminJWTAuthentication(AdminJWTAuthentication):
    """Like :class:`AdminJWTAuthentication` but a bad token just means anonymous."""

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except (InvalidToken, TokenError, AuthenticationFailed):
            return None
