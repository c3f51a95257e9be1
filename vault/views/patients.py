"""
Patient profile views.

All endpoints except the public emergency lookup act on patients owned
by the authenticated account; anything else is reported as 404.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, parser_classes, permission_classes, throttle_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated

from vault.exceptions import AppError
from vault.responses import ok
from vault.serializers.patient import (
    EmergencyInfoSerializer,
    PatientDetailSerializer,
    PatientInputSerializer,
    PatientSerializer,
    PublicEmergencyInfoSerializer,
    PublicEmergencyQuerySerializer,
)
from vault.services import patients as patient_service
from vault.throttles import EmergencyRateThrottle


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def patients(request):
    if request.method == 'POST':
        s = PatientInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        patient = patient_service.create_patient(request.user, s.validated_data)
        return ok(PatientSerializer(patient).data, 'Patient created successfully', status=201)
    qs = patient_service.list_patients(request.user)
    return ok(PatientSerializer(qs, many=True).data)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def patient_detail(request, patient_id: int):
    if request.method == 'PUT':
        s = PatientInputSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        patient = patient_service.update_patient(request.user, patient_id, s.validated_data)
        return ok(PatientSerializer(patient).data, 'Patient updated successfully')
    if request.method == 'DELETE':
        patient_service.delete_patient(request.user, patient_id)
        return ok(None, 'Patient deleted successfully')
    patient = patient_service.get_patient(request.user, patient_id)
    return ok(PatientDetailSerializer(patient).data)


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def patient_profile_image(request, patient_id: int):
    upload = request.FILES.get('profileImage')
    if upload is None:
        raise AppError(400, 'Profile image is required')
    patient = patient_service.update_profile_image(request.user, patient_id, upload)
    return ok(PatientSerializer(patient).data, 'Profile image updated successfully')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_emergency_info(request, patient_id: int):
    patient = patient_service.get_emergency_info(request.user, patient_id)
    return ok(EmergencyInfoSerializer(patient).data)


@api_view(['GET'])
@permission_classes([AllowAny])
@throttle_classes([EmergencyRateThrottle])
def public_emergency_info(request):
    """Critical medical summary for first responders, looked up by account email."""
    q = PublicEmergencyQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    patient = patient_service.get_public_emergency_info(q.validated_data['email'])
    return ok(PublicEmergencyInfoSerializer(patient).data)
