from __future__ import annotations

from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny

from vault.authentication import OptionalAdminJWTAuthentication
from vault.responses import ok
from vault.serializers.hospital import HospitalDirectorySerializer, HospitalListQuerySerializer, HospitalSerializer
from vault.services import hospitals as hospital_service


@api_view(['GET'])
@authentication_classes([OptionalAdminJWTAuthentication])
@permission_classes([AllowAny])
def hospitals(request):
    """
    Verified hospital directory.

    Pass ``latitude`` and ``longitude`` (and optionally ``radius`` in km,
    default 50) to get a ``distance`` per hospital, nearest first.
    """
    q = HospitalListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    result = hospital_service.list_hospitals(
        city=vd.get('city'),
        hospital_type=vd.get('hospitalType'),
        search=vd.get('search'),
        latitude=vd.get('latitude'),
        longitude=vd.get('longitude'),
        radius=vd.get('radius'),
    )
    return ok(HospitalDirectorySerializer(result, many=True).data)


@api_view(['GET'])
@authentication_classes([OptionalAdminJWTAuthentication])
@permission_classes([AllowAny])
def hospital_detail(request, hospital_id: int):
    hospital = hospital_service.get_hospital(hospital_id)
    return ok(HospitalSerializer(hospital).data)
