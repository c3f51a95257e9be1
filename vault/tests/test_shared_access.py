import datetime

import pytest
from django.core.management import call_command
from django.urls import reverse
from django.utils import timezone

from vault.models import Admin, Hospital, MedicalRecord, SharedAccess
from vault.services.hospital_admin import visible_records

from .conftest import PASSWORD

pytestmark = pytest.mark.django_db


def _share(patient, hospital, **kw):
    defaults = {
        'provider_name': hospital.email,
        'provider_type': 'Hospital',
        'access_level': 'Full Access',
        'status': 'pending',
    }
    defaults.update(kw)
    return SharedAccess.objects.create(patient=patient, hospital=hospital, **defaults)


def _records(patient):
    return [
        MedicalRecord.objects.create(patient=patient, category='Lab Report', title='CBC',
                                     record_date=datetime.date(2024, 1, 1), file_path='/media/a.pdf'),
        MedicalRecord.objects.create(patient=patient, category='Prescription', title='Statins',
                                     record_date=datetime.date(2024, 2, 1)),
        MedicalRecord.objects.create(patient=patient, category='Radiology', title='MRI',
                                     record_date=datetime.date(2024, 3, 1)),
    ]


def test_share_with_unregistered_provider_is_403(client_for, patient_admin, patient):
    r = client_for(patient_admin).post(reverse('shares', args=[patient.id]), {
        'providerName': 'random@clinic.example', 'providerType': 'Hospital', 'accessLevel': 'Full Access',
    }, format='json')
    assert r.status_code == 403
    assert SharedAccess.objects.count() == 0


def test_share_with_patient_account_email_is_403(client_for, patient_admin, patient, other_admin):
    r = client_for(patient_admin).post(reverse('shares', args=[patient.id]), {
        'providerName': other_admin.email, 'providerType': 'Doctor', 'accessLevel': 'Full Access',
    }, format='json')
    assert r.status_code == 403


def test_share_creates_pending_grant_and_hospital_profile(client_for, patient_admin, patient, hospital_admin,
                                                          mailoutbox):
    assert not Hospital.objects.filter(admin=hospital_admin).exists()
    r = client_for(patient_admin).post(reverse('shares', args=[patient.id]), {
        'providerName': 'ER@CityHospital.example', 'providerType': 'Hospital', 'accessLevel': 'Lab Reports Only',
    }, format='json')
    assert r.status_code == 201
    data = r.data['data']
    assert data['status'] == 'pending'
    hospital = Hospital.objects.get(admin=hospital_admin)
    assert hospital.hospital_name == 'My Hospital'
    assert data['hospital']['hospital_id'] == hospital.id
    assert len(mailoutbox) == 1
    assert mailoutbox[0].to == [hospital_admin.email]


def test_share_to_emergency_contact(client_for, patient_admin, patient, contact):
    client = client_for(patient_admin)
    r = client.post(reverse('shares', args=[patient.id]), {
        'providerName': contact.name, 'providerType': 'EmergencyContact', 'accessLevel': 'Full Access',
        'contactId': contact.id,
    }, format='json')
    assert r.status_code == 201
    assert r.data['data']['emergency_contact']['contact_id'] == contact.id

    r = client.post(reverse('shares', args=[patient.id]), {
        'providerName': 'x', 'providerType': 'EmergencyContact', 'accessLevel': 'Full Access', 'contactId': 99999,
    }, format='json')
    assert r.status_code == 404


def test_revoke_and_stats(client_for, patient_admin, patient, hospital):
    active = _share(patient, hospital, status='active', records_accessed_count=3)
    _share(patient, hospital, status='pending')
    _share(patient, hospital, status='active', expires_on=timezone.now() - datetime.timedelta(days=1))
    client = client_for(patient_admin)

    stats = client.get(reverse('share_stats', args=[patient.id])).data['data']
    assert stats == {'activeShares': 1, 'totalShares': 3, 'totalRecordsAccessed': 3, 'pendingRequests': 1}

    assert client.delete(reverse('share_detail', args=[patient.id, active.id])).status_code == 200
    active.refresh_from_db()
    assert active.status == 'revoked'
    assert client.get(reverse('share_stats', args=[patient.id])).data['data']['activeShares'] == 0


def test_revoked_share_cannot_be_reactivated(client_for, patient_admin, patient, hospital):
    share = _share(patient, hospital, status='revoked')
    r = client_for(patient_admin).put(reverse('share_detail', args=[patient.id, share.id]),
                                      {'status': 'active'}, format='json')
    assert r.status_code == 409
    share.refresh_from_db()
    assert share.status == 'revoked'


def test_empty_share_update_is_400(client_for, patient_admin, patient, hospital):
    share = _share(patient, hospital)
    r = client_for(patient_admin).put(reverse('share_detail', args=[patient.id, share.id]), {}, format='json')
    assert r.status_code == 400


def test_share_update_changes_access_level(client_for, patient_admin, patient, hospital):
    share = _share(patient, hospital)
    r = client_for(patient_admin).put(reverse('share_detail', args=[patient.id, share.id]),
                                      {'accessLevel': 'Prescriptions Only'}, format='json')
    assert r.status_code == 200
    share.refresh_from_db()
    assert share.access_level == 'Prescriptions Only'
    assert share.status == 'pending'


def test_foreign_share_is_404(client_for, other_admin, other_patient, patient, hospital):
    share = _share(patient, hospital)
    r = client_for(other_admin).delete(reverse('share_detail', args=[other_patient.id, share.id]))
    assert r.status_code == 404


def test_end_to_end_share_accept_and_read_files(client_for, patient_admin, patient, hospital_admin):
    _records(patient)
    r = client_for(patient_admin).post(reverse('shares', args=[patient.id]), {
        'providerName': hospital_admin.email, 'providerType': 'Hospital', 'accessLevel': 'Full Access',
    }, format='json')
    share_id = r.data['data']['share_id']

    hospital_client = client_for(hospital_admin)
    inbox = hospital_client.get(reverse('hospital_shared_records')).data['data']
    assert [s['share_id'] for s in inbox] == [share_id]
    assert inbox[0]['patient']['full_name'] == 'Alice Doe'

    # pending grants expose nothing
    r = hospital_client.get(reverse('hospital_shared_record_files', args=[share_id]))
    assert r.status_code == 200
    assert r.data['data'] == []

    r = hospital_client.post(reverse('hospital_accept_share', args=[share_id]), {'notes': 'Reviewed'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['status'] == 'active'

    r = hospital_client.get(reverse('hospital_shared_record_files', args=[share_id]))
    assert [f['title'] for f in r.data['data']] == ['MRI', 'Statins', 'CBC']
    share = SharedAccess.objects.get(pk=share_id)
    assert share.records_accessed_count == 1
    assert share.hospital_notes == 'Reviewed'

    assert hospital_client.post(reverse('hospital_reject_share', args=[share_id])).status_code == 409


def test_access_level_and_record_ids_limit_files(patient, hospital):
    cbc, statins, mri = _records(patient)
    labs = _share(patient, hospital, status='active', access_level='Lab Reports Only')
    assert list(visible_records(labs)) == [cbc]
    imaging = _share(patient, hospital, status='active', access_level='Imaging Records Only')
    assert list(visible_records(imaging)) == [mri]
    picked = _share(patient, hospital, status='active', shared_record_ids=[statins.id, mri.id])
    assert list(visible_records(picked)) == [mri, statins]


def test_expired_share_is_marked_on_read(client_for, hospital_admin, patient, hospital):
    _records(patient)
    share = _share(patient, hospital, status='active', expires_on=timezone.now() - datetime.timedelta(hours=1))
    r = client_for(hospital_admin).get(reverse('hospital_shared_record_files', args=[share.id]))
    assert r.status_code == 200
    assert r.data['data'] == []
    share.refresh_from_db()
    assert share.status == 'expired'
    assert share.records_accessed_count == 0


def test_hospital_status_endpoint_accepts_acknowledged(client_for, hospital_admin, patient, hospital):
    share = _share(patient, hospital)
    r = client_for(hospital_admin).post(reverse('hospital_shared_record_status', args=[share.id]),
                                        {'status': 'acknowledged'}, format='json')
    assert r.status_code == 200
    share.refresh_from_db()
    assert share.status == 'active'


def test_hospital_reject(client_for, hospital_admin, patient, hospital):
    share = _share(patient, hospital)
    r = client_for(hospital_admin).post(reverse('hospital_reject_share', args=[share.id]))
    assert r.status_code == 200
    share.refresh_from_db()
    assert share.status == 'rejected'


def test_other_hospital_cannot_touch_share(client_for, patient, hospital):
    rival = Admin.objects.create_user(email='desk@rival.example', password=PASSWORD, user_type='hospital')
    Hospital.objects.create(admin=rival, hospital_name='Rival', email=rival.email)
    share = _share(patient, hospital)
    assert client_for(rival).post(reverse('hospital_accept_share', args=[share.id])).status_code == 404


def test_patient_account_cannot_use_hospital_endpoints(client_for, patient_admin):
    assert client_for(patient_admin).get(reverse('hospital_shared_records')).status_code == 403
    assert client_for(patient_admin).get(reverse('hospital_profile')).status_code == 403


def test_legacy_hospital_row_is_linked_by_email(client_for, hospital_admin):
    legacy = Hospital.objects.create(hospital_name='Legacy Hospital', email='ER@cityhospital.example')
    r = client_for(hospital_admin).get(reverse('hospital_profile'))
    assert r.status_code == 200
    assert r.data['data']['hospital_id'] == legacy.id
    legacy.refresh_from_db()
    assert legacy.admin_id == hospital_admin.id


def test_profile_put_creates_then_updates(client_for, hospital_admin):
    client = client_for(hospital_admin)
    assert client.get(reverse('hospital_profile')).data['data'] is None
    r = client.put(reverse('hospital_profile'), {'hospitalName': 'St. Mary', 'city': 'Pune'}, format='json')
    assert r.status_code == 200
    r = client.put(reverse('hospital_profile'), {'latitude': 18.52, 'longitude': 73.85}, format='json')
    hospital = Hospital.objects.get(admin=hospital_admin)
    assert hospital.hospital_name == 'St. Mary'
    assert hospital.latitude == 18.52


def test_hospital_alerts_and_acknowledge(client_for, hospital_admin, patient, hospital):
    from vault.models import EmergencyAlert

    alert = EmergencyAlert.objects.create(patient=patient, hospital=hospital, sent_to_hospital=True,
                                          alert_message='help', sent_at=timezone.now())
    client = client_for(hospital_admin)
    r = client.get(reverse('hospital_alerts'))
    assert [a['alert_id'] for a in r.data['data']] == [alert.id]
    r = client.post(reverse('hospital_acknowledge_alert', args=[alert.id]))
    assert r.status_code == 200
    assert r.data['data']['status'] == 'acknowledge'


def test_expire_shares_command(patient, hospital):
    overdue = _share(patient, hospital, status='active', expires_on=timezone.now() - datetime.timedelta(days=2))
    current = _share(patient, hospital, status='active', expires_on=timezone.now() + datetime.timedelta(days=2))
    call_command('expire_shares')
    overdue.refresh_from_db()
    current.refresh_from_db()
    assert overdue.status == 'expired'
    assert current.status == 'active'


def test_state_machine_rules(patient, hospital):
    share = _share(patient, hospital)
    assert share.can_transition('active')
    assert not share.can_transition('expired')
    share.transition('pending')
    assert share.status == 'pending'
    share.transition('rejected')
    assert not share.can_transition('active')


def test_test_accounts_and_simulated_flow_commands(mailoutbox):
    call_command('create_test_accounts')
    call_command('create_test_accounts')
    assert Admin.objects.filter(email__in=['test_hospital@example.com', 'test_patient@example.com']).count() == 2
    assert MedicalRecord.objects.filter(title='Annual Blood Test').count() == 1

    call_command('simulate_flow')
    assert SharedAccess.objects.count() == 0
    assert len(mailoutbox) == 1


def test_patient_cannot_accept_own_pending_share(client_for, patient_admin, patient, hospital):
    share = _share(patient, hospital)
    r = client_for(patient_admin).put(reverse('share_detail', args=[patient.id, share.id]),
                                      {'status': 'active'}, format='json')
    assert r.status_code == 409
    share.refresh_from_db()
    assert share.status == 'pending'


def test_patient_can_expire_active_share(client_for, patient_admin, patient, hospital):
    share = _share(patient, hospital, status='active')
    r = client_for(patient_admin).put(reverse('share_detail', args=[patient.id, share.id]),
                                      {'status': 'expired'}, format='json')
    assert r.status_code == 200
    share.refresh_from_db()
    assert share.status == 'expired'


def test_access_level_length_limit(client_for, patient_admin, patient, hospital_admin):
    client = client_for(patient_admin)
    url = reverse('shares', args=[patient.id])
    body = {'providerName': hospital_admin.email, 'providerType': 'Hospital'}

    r = client.post(url, {**body, 'accessLevel': 'A' * 101}, format='json')
    assert r.status_code == 400
    assert any(e['field'] == 'accessLevel' for e in r.data['errors'])

    r = client.post(url, {**body, 'accessLevel': 'A' * 100}, format='json')
    assert r.status_code == 201
    assert SharedAccess.objects.get(pk=r.data['data']['share_id']).access_level == 'A' * 100
    assert SharedAccess._meta.get_field('access_level').max_length == 100


def test_share_requires_provider_name(client_for, patient_admin, patient, hospital):
    r = client_for(patient_admin).post(reverse('shares', args=[patient.id]), {
        'hospitalId': hospital.id, 'providerType': 'Hospital', 'accessLevel': 'Full Access',
    }, format='json')
    assert r.status_code == 400
    assert [e['field'] for e in r.data['errors']] == ['providerName']
