"""
Endpoints for hospital accounts: their profile, the record shares they
receive from patients and the emergency alerts dispatched to them.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from vault.permissions import IsHospitalAccount
from vault.responses import ok
from vault.serializers.emergency import EmergencyAlertSerializer
from vault.serializers.hospital import HospitalProfileSerializer, HospitalSerializer
from vault.serializers.record import SharedFileSerializer
from vault.serializers.shared_access import InboundShareSerializer, ShareDecisionSerializer, ShareStatusSerializer
from vault.services import hospital_admin as hospital_admin_service


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, IsHospitalAccount])
def profile(request):
    if request.method == 'PUT':
        s = HospitalProfileSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        hospital = hospital_admin_service.update_profile(request.user, s.validated_data)
        return ok(HospitalSerializer(hospital).data, 'Hospital profile updated successfully')
    hospital = hospital_admin_service.get_profile(request.user)
    return ok(HospitalSerializer(hospital).data if hospital else None)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsHospitalAccount])
def shared_records(request):
    qs = hospital_admin_service.list_shared_records(request.user)
    return ok(InboundShareSerializer(qs, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsHospitalAccount])
def shared_record_files(request, share_id: int):
    files = hospital_admin_service.get_shared_record_files(request.user, share_id)
    return ok(SharedFileSerializer(files, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalAccount])
def shared_record_status(request, share_id: int):
    s = ShareStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    share = hospital_admin_service.update_share_status(
        request.user, share_id, s.validated_data['status'], s.validated_data.get('notes')
    )
    return ok(InboundShareSerializer(share).data, 'Share status updated')


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalAccount])
def accept_shared_record(request, share_id: int):
    s = ShareDecisionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    share = hospital_admin_service.accept_share(request.user, share_id, s.validated_data.get('notes'))
    return ok(InboundShareSerializer(share).data, 'Share accepted')


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalAccount])
def reject_shared_record(request, share_id: int):
    s = ShareDecisionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    share = hospital_admin_service.reject_share(request.user, share_id, s.validated_data.get('notes'))
    return ok(InboundShareSerializer(share).data, 'Share rejected')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsHospitalAccount])
def alerts(request):
    qs = hospital_admin_service.list_alerts(request.user)
    return ok(EmergencyAlertSerializer(qs, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalAccount])
def acknowledge_alert(request, alert_id: int):
    alert = hospital_admin_service.acknowledge_alert(request.user, alert_id)
    return ok(EmergencyAlertSerializer(alert).data, 'Alert acknowledged')
