"""
Authentication views.

Registration, login, token refresh, password reset and email
verification.  The token classes live in ``vault.authentication`` so
that DRF can import them from settings without pulling in any views.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated

from vault.responses import ok
from vault.serializers.auth import (
    AdminSerializer,
    ForgotPasswordSerializer,
    LoginSerializer,
    RefreshSerializer,
    RegisterSerializer,
    ResetPasswordSerializer,
    SetupEmergencyPinSerializer,
    VerifyEmailSerializer,
    VerifyEmergencyPinSerializer,
)
from vault.services import auth as auth_service
from vault.throttles import AuthRateThrottle, EmergencyPinRateThrottle


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    admin = auth_service.register(
        email=vd['email'],
        password=vd['password'],
        user_type=vd['userType'],
        phone_number=vd.get('phoneNumber', ''),
        full_name=vd.get('fullName') or None,
    )
    return ok(
        AdminSerializer(admin).data,
        'Registration successful. Please check your email to verify your account.',
        status=201,
    )


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def login_view(request):
    """
    Email/password login.  Returns the admin plus an access/refresh JWT
    pair whose claims are ``adminId``, ``email`` and ``userType``.
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    admin, tokens = auth_service.login(email=s.validated_data['email'], password=s.validated_data['password'])
    return ok({'admin': AdminSerializer(admin).data, **tokens}, 'Login successful')


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def refresh_view(request):
    s = RefreshSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    tokens = auth_service.refresh(s.validated_data['refreshToken'])
    return ok(tokens, 'Token refreshed successfully')


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def forgot_password_view(request):
    s = ForgotPasswordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    message = auth_service.forgot_password(s.validated_data['email'])
    return ok(None, message)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def reset_password_view(request):
    s = ResetPasswordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    auth_service.reset_password(s.validated_data['token'], s.validated_data['newPassword'])
    return ok(None, 'Password reset successful')


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def verify_email_view(request):
    s = VerifyEmailSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    admin = auth_service.verify_email(s.validated_data['token'])
    return ok(AdminSerializer(admin).data, 'Email verified successfully')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def setup_emergency_pin_view(request):
    s = SetupEmergencyPinSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    auth_service.setup_emergency_pin(request.user, s.validated_data['pin'])
    return ok(None, 'Emergency PIN set successfully')


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([EmergencyPinRateThrottle])
def verify_emergency_pin_view(request):
    s = VerifyEmergencyPinSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    auth_service.verify_emergency_pin(s.validated_data['email'], s.validated_data['pin'])
    return ok(None, 'Emergency PIN verified')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def profile_view(request):
    return ok(AdminSerializer(request.user).data)
