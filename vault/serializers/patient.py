from decimal import Decimal

from rest_framework import serializers

from ..models import Patient
from .fields import CleanCharField


class PatientInputSerializer(serializers.Serializer):
    fullName = CleanCharField(source='full_name', max_length=255)
    address = CleanCharField(required=False, allow_blank=True)
    dateOfBirth = serializers.DateField(source='date_of_birth', required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=['male', 'female', 'other'], required=False)
    bloodType = serializers.CharField(source='blood_type', max_length=5, required=False, allow_blank=True)
    height = serializers.DecimalField(source='height_cm', max_digits=5, decimal_places=2,
                                      min_value=Decimal('0.01'), required=False, allow_null=True)
    weight = serializers.DecimalField(source='weight_kg', max_digits=5, decimal_places=2,
                                      min_value=Decimal('0.01'), required=False, allow_null=True)
    allergies = CleanCharField(required=False, allow_blank=True)
    chronicConditions = CleanCharField(source='chronic_conditions', required=False, allow_blank=True)
    currentMedications = CleanCharField(source='current_medications', required=False, allow_blank=True)
    relationship = CleanCharField(max_length=50)
    isPrimary = serializers.BooleanField(source='is_primary', required=False)


class PatientSerializer(serializers.ModelSerializer):
    patient_id = serializers.IntegerField(source='id', read_only=True)
    admin_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Patient
        fields = [
            'patient_id', 'admin_id', 'full_name', 'address', 'date_of_birth', 'gender', 'blood_type',
            'height_cm', 'weight_kg', 'allergies', 'chronic_conditions', 'current_medications',
            'relationship', 'is_primary', 'profile_image', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PatientDetailSerializer(PatientSerializer):
    medical_records_count = serializers.IntegerField(read_only=True)

    class Meta(PatientSerializer.Meta):
        fields = PatientSerializer.Meta.fields + ['medical_records_count']
        read_only_fields = fields


class EmergencyInfoSerializer(serializers.ModelSerializer):
    patient_id = serializers.IntegerField(source='id', read_only=True)

    class Meta:
        model = Patient
        fields = ['patient_id', 'full_name', 'date_of_birth', 'blood_type']
        read_only_fields = fields


class PublicEmergencyInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = Patient
        fields = [
            'full_name', 'date_of_birth', 'gender', 'blood_type', 'allergies',
            'chronic_conditions', 'current_medications',
        ]
        read_only_fields = fields


class PublicEmergencyQuerySerializer(serializers.Serializer):
    email = serializers.EmailField()
