import re

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .fields import CleanCharField

Admin = get_user_model()


def validate_strong_password(v):
    if len(v) < 8:
        raise serializers.ValidationError('Password must be at least 8 characters')
    if not re.search(r'[A-Z]', v):
        raise serializers.ValidationError('Password must contain at least one uppercase letter')
    if not re.search(r'[a-z]', v):
        raise serializers.ValidationError('Password must contain at least one lowercase letter')
    if not re.search(r'[0-9]', v):
        raise serializers.ValidationError('Password must contain at least one number')
    return v


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, validators=[validate_strong_password])
    phoneNumber = serializers.CharField(max_length=20, required=False, allow_blank=True)
    userType = serializers.ChoiceField(
        choices=['patient', 'hospital'],
        error_messages={'invalid_choice': 'User type must be either patient or hospital'},
    )
    fullName = CleanCharField(max_length=255, required=False, allow_blank=True)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    userType = serializers.ChoiceField(choices=['patient', 'hospital'], required=False)

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


class RefreshSerializer(serializers.Serializer):
    refreshToken = serializers.CharField()


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetPasswordSerializer(serializers.Serializer):
    token = serializers.CharField()
    newPassword = serializers.CharField(write_only=True, validators=[validate_strong_password])


class VerifyEmailSerializer(serializers.Serializer):
    token = serializers.CharField()


class SetupEmergencyPinSerializer(serializers.Serializer):
    pin = serializers.RegexField(r'^\d{6}$', error_messages={'invalid': 'PIN must be exactly 6 digits'})


class VerifyEmergencyPinSerializer(serializers.Serializer):
    email = serializers.EmailField()
    pin = serializers.RegexField(r'^\d{6}$', error_messages={'invalid': 'PIN must be exactly 6 digits'})


class AdminSerializer(serializers.ModelSerializer):
    admin_id = serializers.IntegerField(source='id', read_only=True)

    class Meta:
        model = Admin
        fields = [
            'admin_id', 'email', 'phone_number', 'user_type', 'email_verified',
            'account_status', 'created_at', 'last_login',
        ]
        read_only_fields = fields
