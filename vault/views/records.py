from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from vault.responses import ok
from vault.serializers.record import (
    MedicalRecordSerializer,
    RecordInputSerializer,
    RecordListQuerySerializer,
    TimelineEntrySerializer,
)
from vault.services import records as record_service


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def records(request, patient_id: int):
    """List a patient's records (with filters) or upload a new one (multipart ``file``)."""
    if request.method == 'POST':
        s = RecordInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        record = record_service.upload_record(
            request.user, patient_id, request.FILES.get('file'), s.validated_data
        )
        return ok(MedicalRecordSerializer(record).data, 'Record uploaded successfully', status=201)
    q = RecordListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = record_service.list_records(request.user, patient_id, q.validated_data)
    return ok(MedicalRecordSerializer(qs, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def records_timeline(request, patient_id: int):
    qs = record_service.timeline(request.user, patient_id)
    return ok(TimelineEntrySerializer(qs, many=True).data)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def record_detail(request, patient_id: int, record_id: int):
    if request.method == 'PUT':
        s = RecordInputSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        record = record_service.update_record(request.user, patient_id, record_id, s.validated_data)
        return ok(MedicalRecordSerializer(record).data, 'Record updated successfully')
    if request.method == 'DELETE':
        record_service.delete_record(request.user, patient_id, record_id)
        return ok(None, 'Record deleted successfully')
    record = record_service.get_record(request.user, patient_id, record_id)
    return ok(MedicalRecordSerializer(record).data)
