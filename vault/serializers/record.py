from rest_framework import serializers

from ..models import MedicalRecord
from .fields import CleanCharField, TagsField


class RecordInputSerializer(serializers.Serializer):
    recordType = CleanCharField(source='category', max_length=100)
    title = CleanCharField(max_length=255)
    description = CleanCharField(required=False, allow_blank=True)
    recordDate = serializers.DateField(source='record_date')
    doctorName = CleanCharField(source='physician_name', max_length=255, required=False, allow_blank=True)
    hospitalName = CleanCharField(source='facility_name', max_length=255, required=False, allow_blank=True)
    medicalCondition = CleanCharField(source='medical_condition', max_length=255, required=False, allow_blank=True)
    isCritical = serializers.BooleanField(source='is_critical', required=False)
    tags = TagsField(required=False)


class RecordListQuerySerializer(serializers.Serializer):
    recordType = serializers.CharField(max_length=100, required=False)
    startDate = serializers.DateField(required=False)
    endDate = serializers.DateField(required=False)
    doctorName = serializers.CharField(max_length=255, required=False)
    hospitalName = serializers.CharField(max_length=255, required=False)
    medicalCondition = serializers.CharField(max_length=255, required=False)
    # a BooleanField would read a missing query param as False
    isCritical = serializers.ChoiceField(choices=['true', 'false'], required=False)
    search = serializers.CharField(max_length=255, required=False)

    def validate_isCritical(self, v):
        return v == 'true'


class MedicalRecordSerializer(serializers.ModelSerializer):
    record_id = serializers.IntegerField(source='id', read_only=True)
    patient_id = serializers.IntegerField(read_only=True)
    tags = TagsField(read_only=True)

    class Meta:
        model = MedicalRecord
        fields = [
            'record_id', 'patient_id', 'category', 'title', 'description', 'record_date',
            'physician_name', 'facility_name', 'medical_condition', 'file_path', 'file_type',
            'file_size_bytes', 'is_critical', 'tags', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class TimelineEntrySerializer(serializers.ModelSerializer):
    record_id = serializers.IntegerField(source='id', read_only=True)

    class Meta:
        model = MedicalRecord
        fields = [
            'record_id', 'category', 'title', 'record_date', 'physician_name',
            'facility_name', 'medical_condition', 'is_critical',
        ]
        read_only_fields = fields


class SharedFileSerializer(serializers.ModelSerializer):
    """What a hospital sees for each record under a grant."""
    record_id = serializers.IntegerField(source='id', read_only=True)

    class Meta:
        model = MedicalRecord
        fields = ['record_id', 'title', 'category', 'record_date', 'file_path', 'file_type', 'description']
        read_only_fields = fields
