"""
Emergency contacts and alerts.

``/api/emergency/*`` manages contacts and logs email alerts;
``/api/emergency-alerts/*`` dispatches SMS alerts, including the public
variant used from the emergency lookup page.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated

from vault.responses import ok
from vault.serializers.emergency import (
    AlertCreateSerializer,
    ContactCreateSerializer,
    ContactUpdateSerializer,
    EmergencyAlertSerializer,
    EmergencyContactSerializer,
    PublicSendAlertSerializer,
    SendAlertSerializer,
)
from vault.serializers.hospital import HospitalSerializer
from vault.services import alerts as alert_service
from vault.services import emergency as emergency_service
from vault.throttles import EmergencyRateThrottle


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def contacts(request):
    if request.method == 'POST':
        s = ContactCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)
        patient_id = data.pop('patientId')
        contact = emergency_service.create_contact(request.user, patient_id, data)
        return ok(EmergencyContactSerializer(contact).data, 'Emergency contact created successfully', status=201)
    qs = emergency_service.list_contacts(request.user)
    return ok(EmergencyContactSerializer(qs, many=True).data)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def contact_detail(request, contact_id: int):
    if request.method == 'DELETE':
        emergency_service.delete_contact(request.user, contact_id)
        return ok(None, 'Contact deleted successfully')
    s = ContactUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    contact = emergency_service.update_contact(request.user, contact_id, s.validated_data)
    return ok(EmergencyContactSerializer(contact).data, 'Contact updated successfully')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def alerts(request):
    if request.method == 'POST':
        s = AlertCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        alert, notified = emergency_service.create_alert(
            request.user,
            vd['patientId'],
            alert_message=vd['alertMessage'],
            patient_location=vd.get('patientLocation', ''),
            critical_summary=vd.get('criticalSummary', ''),
            hospital_id=vd.get('hospitalId'),
        )
        return ok(
            {'alert': EmergencyAlertSerializer(alert).data, 'contactsNotified': notified},
            f'Emergency alert sent to {notified} contact(s)',
            status=201,
        )
    qs = emergency_service.list_alerts(request.user)
    return ok(EmergencyAlertSerializer(qs, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def acknowledge_alert(request, alert_id: int):
    alert = emergency_service.acknowledge_alert(request.user, alert_id)
    return ok(EmergencyAlertSerializer(alert).data, 'Alert acknowledged')


def _dispatch_payload(result: dict) -> dict:
    hospital = result['nearest_hospital']
    return {
        'alert': EmergencyAlertSerializer(result['alert']).data,
        'contactsNotified': result['contacts_notified'],
        'nearestHospital': HospitalSerializer(hospital).data if hospital else None,
        'distanceKm': result['distance_km'],
    }


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@throttle_classes([EmergencyRateThrottle])
def send_sms_alert(request, patient_id: int):
    s = SendAlertSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    result = alert_service.send_alert(
        request.user, patient_id, s.validated_data.get('latitude'), s.validated_data.get('longitude')
    )
    return ok(_dispatch_payload(result), 'Emergency SMS sent')


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([EmergencyRateThrottle])
def send_public_sms_alert(request):
    s = PublicSendAlertSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    result = alert_service.send_alert_by_email(vd['email'], vd.get('latitude'), vd.get('longitude'))
    return ok(_dispatch_payload(result), 'Emergency SMS sent')
