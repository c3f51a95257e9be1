import datetime

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse

from vault.models import MedicalRecord
from vault.services import storage

pytestmark = pytest.mark.django_db


def _pdf(name='report.pdf'):
    return SimpleUploadedFile(name, b'%PDF-1.4 test', content_type='application/pdf')


def _record(patient, **kw):
    defaults = {'category': 'Lab Report', 'title': 'CBC', 'record_date': datetime.date(2024, 1, 10)}
    defaults.update(kw)
    return MedicalRecord.objects.create(patient=patient, **defaults)


def test_upload_pdf_stores_file_metadata(client_for, patient_admin, patient):
    r = client_for(patient_admin).post(reverse('records', args=[patient.id]), {
        'file': _pdf(),
        'recordType': 'Lab Report',
        'title': 'Blood panel',
        'recordDate': '2024-03-01',
        'doctorName': 'Dr. Rao',
        'isCritical': 'true',
    }, format='multipart')
    assert r.status_code == 201
    data = r.data['data']
    assert data['file_type'] == 'application/pdf'
    assert data['file_size_bytes'] == len(b'%PDF-1.4 test')
    assert data['file_path'].startswith('/media/medivault/medical-records/')
    assert data['is_critical'] is True
    assert data['physician_name'] == 'Dr. Rao'


def test_upload_without_file_is_400_and_creates_nothing(client_for, patient_admin, patient):
    r = client_for(patient_admin).post(reverse('records', args=[patient.id]), {
        'recordType': 'Lab Report', 'title': 'No file', 'recordDate': '2024-03-01',
    }, format='multipart')
    assert r.status_code == 400
    assert MedicalRecord.objects.count() == 0


def test_upload_rejects_disallowed_type(client_for, patient_admin, patient):
    bad = SimpleUploadedFile('run.exe', b'MZ', content_type='application/x-msdownload')
    r = client_for(patient_admin).post(reverse('records', args=[patient.id]), {
        'file': bad, 'recordType': 'Lab Report', 'title': 'Bad', 'recordDate': '2024-03-01',
    }, format='multipart')
    assert r.status_code == 400
    assert 'Invalid file type' in r.data['message']
    assert MedicalRecord.objects.count() == 0


def test_upload_for_foreign_patient_is_404(client_for, patient_admin, other_patient):
    r = client_for(patient_admin).post(reverse('records', args=[other_patient.id]), {
        'file': _pdf(), 'recordType': 'Lab Report', 'title': 'Sneaky', 'recordDate': '2024-03-01',
    }, format='multipart')
    assert r.status_code == 404


def test_list_filters(client_for, patient_admin, patient):
    _record(patient, title='CBC', physician_name='Dr. Rao', is_critical=True)
    _record(patient, category='Prescription', title='Statins', record_date=datetime.date(2023, 5, 1),
            facility_name='City Hospital')
    _record(patient, category='Imaging', title='Chest X-ray', record_date=datetime.date(2024, 6, 1),
            description='no abnormal findings')
    client = client_for(patient_admin)
    url = reverse('records', args=[patient.id])

    def titles(**params):
        r = client.get(url, params)
        assert r.status_code == 200
        return [row['title'] for row in r.data['data']]

    assert titles() == ['Chest X-ray', 'CBC', 'Statins']
    assert titles(recordType='Prescription') == ['Statins']
    assert titles(startDate='2024-01-01') == ['Chest X-ray', 'CBC']
    assert titles(endDate='2023-12-31') == ['Statins']
    assert titles(doctorName='rao') == ['CBC']
    assert titles(hospitalName='city') == ['Statins']
    assert titles(isCritical='true') == ['CBC']
    assert titles(isCritical='false') == ['Chest X-ray', 'Statins']
    assert titles(search='abnormal') == ['Chest X-ray']


def test_timeline_is_newest_first(client_for, patient_admin, patient):
    _record(patient, title='old', record_date=datetime.date(2020, 1, 1))
    _record(patient, title='new', record_date=datetime.date(2024, 1, 1))
    r = client_for(patient_admin).get(reverse('records_timeline', args=[patient.id]))
    assert r.status_code == 200
    assert [e['title'] for e in r.data['data']] == ['new', 'old']
    assert 'file_path' not in r.data['data'][0]


def test_update_record(client_for, patient_admin, patient):
    record = _record(patient)
    r = client_for(patient_admin).put(reverse('record_detail', args=[patient.id, record.id]),
                                      {'title': 'CBC (repeat)', 'tags': ['blood', 'routine']}, format='json')
    assert r.status_code == 200
    record.refresh_from_db()
    assert record.title == 'CBC (repeat)'
    assert record.tags == ['blood', 'routine']


def test_record_under_wrong_patient_is_404(client_for, patient_admin, patient, other_patient):
    foreign = _record(other_patient)
    client = client_for(patient_admin)
    assert client.get(reverse('record_detail', args=[patient.id, foreign.id])).status_code == 404
    assert client.delete(reverse('record_detail', args=[other_patient.id, foreign.id])).status_code == 404
    assert MedicalRecord.objects.filter(pk=foreign.id).exists()


class _BrokenStorage:
    def delete(self, name):
        raise OSError('storage unavailable')


def test_delete_succeeds_even_if_file_removal_fails(client_for, patient_admin, patient, monkeypatch):
    record = _record(patient, file_path='/media/medivault/medical-records/abc.pdf')
    monkeypatch.setattr(storage, 'default_storage', _BrokenStorage())
    r = client_for(patient_admin).delete(reverse('record_detail', args=[patient.id, record.id]))
    assert r.status_code == 200
    assert not MedicalRecord.objects.filter(pk=record.id).exists()


def test_storage_key_from_url():
    assert storage.storage_key_from_url('/media/medivault/medical-records/a.pdf') == 'medivault/medical-records/a.pdf'
    assert storage.storage_key_from_url(
        'https://cdn.example.com/media/medivault/profiles/b%20c.png') == 'medivault/profiles/b c.png'
    assert storage.storage_key_from_url('') is None
