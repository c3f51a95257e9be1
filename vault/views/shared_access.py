from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from vault.responses import ok
from vault.serializers.shared_access import SharedAccessSerializer, ShareCreateSerializer, ShareUpdateSerializer
from vault.services import shared_access as share_service


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def shares(request, patient_id: int):
    if request.method == 'POST':
        s = ShareCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        share = share_service.create_share(
            request.user,
            patient_id,
            provider_name=vd['providerName'],
            provider_type=vd['providerType'],
            access_level=vd['accessLevel'],
            expires_on=vd.get('expiresOn'),
            contact_id=vd.get('contactId'),
            record_ids=vd.get('recordIds'),
        )
        return ok(SharedAccessSerializer(share).data, 'Share request sent', status=201)
    qs = share_service.list_shares(request.user, patient_id)
    return ok(SharedAccessSerializer(qs, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def share_stats(request, patient_id: int):
    return ok(share_service.get_stats(request.user, patient_id))


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def share_detail(request, patient_id: int, share_id: int):
    if request.method == 'DELETE':
        share_service.revoke_share(request.user, patient_id, share_id)
        return ok(None, 'Access revoked successfully')
    s = ShareUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    share = share_service.update_share(request.user, patient_id, share_id, s.validated_data)
    return ok(SharedAccessSerializer(share).data, 'Shared access updated successfully')
