from rest_framework import serializers

from ..models import Hospital
from .fields import CleanCharField


class HospitalListQuerySerializer(serializers.Serializer):
    city = serializers.CharField(max_length=100, required=False)
    hospitalType = serializers.CharField(max_length=20, required=False)
    search = serializers.CharField(max_length=255, required=False)
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False)
    radius = serializers.FloatField(min_value=0, required=False)


class HospitalProfileSerializer(serializers.Serializer):
    hospitalName = CleanCharField(source='hospital_name', max_length=255, required=False)
    address = CleanCharField(required=False, allow_blank=True)
    city = CleanCharField(max_length=100, required=False, allow_blank=True)
    state = CleanCharField(max_length=100, required=False, allow_blank=True)
    phoneNumber = serializers.CharField(source='phone_number', max_length=20, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False, allow_null=True)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False, allow_null=True)


class HospitalSerializer(serializers.ModelSerializer):
    hospital_id = serializers.IntegerField(source='id', read_only=True)
    admin_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Hospital
        fields = [
            'hospital_id', 'admin_id', 'hospital_name', 'address', 'city', 'state', 'phone_number',
            'email', 'latitude', 'longitude', 'hospital_type', 'rating', 'is_verified',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class HospitalDirectorySerializer(HospitalSerializer):
    """Directory entry; ``distance`` (km) is present only for location searches."""
    distance = serializers.SerializerMethodField()

    class Meta(HospitalSerializer.Meta):
        fields = HospitalSerializer.Meta.fields + ['distance']
        read_only_fields = fields

    def get_distance(self, obj):
        distance = getattr(obj, 'distance', None)
        return round(distance, 2) if distance is not None else None
