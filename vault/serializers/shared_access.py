from rest_framework import serializers

from ..models import SharedAccess
from .fields import CleanCharField


class ShareCreateSerializer(serializers.Serializer):
    contactId = serializers.IntegerField(required=False)
    providerName = CleanCharField(max_length=200)
    providerType = serializers.ChoiceField(choices=['Hospital', 'Doctor', 'EmergencyContact'])
    accessLevel = CleanCharField(max_length=100)
    expiresOn = serializers.DateTimeField(required=False, allow_null=True)
    recordIds = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)

    def validate(self, attrs):
        if attrs['providerType'] == 'EmergencyContact' and not attrs.get('contactId'):
            raise serializers.ValidationError({'contactId': 'Contact is required for emergency contact shares'})
        return attrs


class ShareUpdateSerializer(serializers.Serializer):
    accessLevel = CleanCharField(source='access_level', max_length=100, required=False)
    expiresOn = serializers.DateTimeField(source='expires_on', required=False, allow_null=True)
    status = serializers.ChoiceField(choices=['active', 'expired', 'revoked'], required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('At least one field must be provided')
        return attrs


class ShareStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['acknowledged', 'rejected'])
    notes = CleanCharField(required=False, allow_blank=True)


class ShareDecisionSerializer(serializers.Serializer):
    notes = CleanCharField(required=False, allow_blank=True)


class SharedAccessSerializer(serializers.ModelSerializer):
    share_id = serializers.IntegerField(source='id', read_only=True)
    patient_id = serializers.IntegerField(read_only=True)
    hospital = serializers.SerializerMethodField()
    emergency_contact = serializers.SerializerMethodField()

    class Meta:
        model = SharedAccess
        fields = [
            'share_id', 'patient_id', 'hospital_id', 'contact_id', 'provider_name', 'provider_type',
            'access_level', 'status', 'shared_on', 'expires_on', 'records_accessed_count',
            'shared_record_ids', 'hospital_notes', 'hospital', 'emergency_contact',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_hospital(self, obj):
        h = obj.hospital
        if h is None:
            return None
        return {'hospital_id': h.id, 'hospital_name': h.hospital_name, 'hospital_type': h.hospital_type}

    def get_emergency_contact(self, obj):
        c = obj.contact
        if c is None:
            return None
        return {
            'contact_id': c.id,
            'name': c.name,
            'relationship': c.relationship,
            'phone_number': c.phone_number,
        }


class InboundShareSerializer(serializers.ModelSerializer):
    """Share as seen by the receiving hospital, with a patient summary."""
    share_id = serializers.IntegerField(source='id', read_only=True)
    patient = serializers.SerializerMethodField()

    class Meta:
        model = SharedAccess
        fields = [
            'share_id', 'patient_id', 'provider_name', 'provider_type', 'access_level', 'status',
            'shared_on', 'expires_on', 'records_accessed_count', 'hospital_notes', 'patient',
        ]
        read_only_fields = fields

    def get_patient(self, obj):
        p = obj.patient
        return {
            'patient_id': p.id,
            'full_name': p.full_name,
            'date_of_birth': p.date_of_birth,
            'gender': p.gender,
        }
