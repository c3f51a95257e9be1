from rest_framework import serializers

from ..models import EmergencyAlert, EmergencyContact
from .fields import CleanCharField


class ContactCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    name = CleanCharField(max_length=255)
    relationship = CleanCharField(max_length=50)
    phoneNumber = serializers.CharField(source='phone_number', min_length=10, max_length=20,
                                        error_messages={'min_length': 'Valid phone number is required'})
    email = serializers.EmailField(required=False, allow_blank=True)
    priority = serializers.IntegerField(min_value=1, required=False)


class ContactUpdateSerializer(serializers.Serializer):
    name = CleanCharField(max_length=255, required=False)
    relationship = CleanCharField(max_length=50, required=False)
    phoneNumber = serializers.CharField(source='phone_number', max_length=20, required=False)
    email = serializers.EmailField(required=False, allow_blank=True)
    priority = serializers.IntegerField(min_value=1, required=False)


class AlertCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    hospitalId = serializers.IntegerField(min_value=1, required=False)
    patientLocation = CleanCharField(max_length=255, required=False, allow_blank=True)
    criticalSummary = CleanCharField(required=False, allow_blank=True)
    alertMessage = CleanCharField(min_length=1, error_messages={'blank': 'Alert message is required'})


class SendAlertSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False, allow_null=True)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False, allow_null=True)


class PublicSendAlertSerializer(SendAlertSerializer):
    email = serializers.EmailField()


class EmergencyContactSerializer(serializers.ModelSerializer):
    contact_id = serializers.IntegerField(source='id', read_only=True)
    patient_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = EmergencyContact
        fields = [
            'contact_id', 'patient_id', 'name', 'relationship', 'phone_number', 'email',
            'priority', 'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class EmergencyAlertSerializer(serializers.ModelSerializer):
    alert_id = serializers.IntegerField(source='id', read_only=True)
    patient_id = serializers.IntegerField(read_only=True)
    hospital_id = serializers.IntegerField(read_only=True, allow_null=True)
    patient_name = serializers.CharField(source='patient.full_name', read_only=True)

    class Meta:
        model = EmergencyAlert
        fields = [
            'alert_id', 'patient_id', 'patient_name', 'hospital_id', 'patient_location',
            'critical_summary', 'alert_message', 'status', 'sent_to_hospital', 'sent_to_contacts',
            'contact_ids_notified', 'sent_at', 'acknowledged_at', 'resolved_at', 'created_at',
        ]
        read_only_fields = fields
