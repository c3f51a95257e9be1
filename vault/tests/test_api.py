"""
Integration tests for the MediVault API.

These tests walk through the main user journey: a patient registers,
logs in, builds a profile with a record and an emergency contact, then
shares the record with a hospital which accepts and reads it.  They use
Django REST Framework's APIClient within the APITestCase base class.

To run the tests:

```
pytest -q vault/tests
```
"""
import datetime

from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from ..models import Admin, SharedAccess


class MediVaultAPITests(APITestCase):
    def setUp(self) -> None:
        self.hospital_user = Admin.objects.create_user(
            email='desk@stmary.example', password='Hosp1talPass', user_type='hospital',
        )

    def _login(self, client: APIClient, email: str, password: str) -> None:
        r = client.post(reverse('login_view'), {'email': email, 'password': password}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['data']['accessToken']}")

    def test_patient_to_hospital_flow(self):
        patient_client = APIClient()
        r = patient_client.post(reverse('register_view'), {
            'email': 'jane@example.com', 'password': 'Jan3Secret', 'userType': 'patient', 'fullName': 'Jane Roe',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self._login(patient_client, 'jane@example.com', 'Jan3Secret')

        r = patient_client.get(reverse('patients'))
        self.assertEqual(len(r.data['data']), 1)
        patient_id = r.data['data'][0]['patient_id']

        upload = SimpleUploadedFile('cbc.pdf', b'%PDF-1.4 cbc', content_type='application/pdf')
        r = patient_client.post(reverse('records', args=[patient_id]), {
            'file': upload, 'recordType': 'Lab Report', 'title': 'CBC',
            'recordDate': datetime.date.today().isoformat(),
        }, format='multipart')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        record_id = r.data['data']['record_id']

        r = patient_client.post(reverse('contacts'), {
            'patientId': patient_id, 'name': 'John Roe', 'relationship': 'spouse', 'phoneNumber': '+15550101010',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)

        r = patient_client.post(reverse('shares', args=[patient_id]), {
            'providerName': self.hospital_user.email, 'providerType': 'Hospital',
            'accessLevel': 'Lab Reports Only', 'recordIds': [record_id],
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        share_id = r.data['data']['share_id']

        hospital_client = APIClient()
        self._login(hospital_client, self.hospital_user.email, 'Hosp1talPass')
        r = hospital_client.post(reverse('hospital_accept_share', args=[share_id]), {}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        r = hospital_client.get(reverse('hospital_shared_record_files', args=[share_id]))
        self.assertEqual([f['record_id'] for f in r.data['data']], [record_id])

        r = patient_client.get(reverse('share_stats', args=[patient_id]))
        self.assertEqual(r.data['data']['activeShares'], 1)
        self.assertEqual(r.data['data']['totalRecordsAccessed'], 1)

        r = patient_client.delete(reverse('share_detail', args=[patient_id, share_id]))
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        r = hospital_client.get(reverse('hospital_shared_record_files', args=[share_id]))
        self.assertEqual(r.data['data'], [])
        self.assertEqual(SharedAccess.objects.get(pk=share_id).status, 'revoked')

    def test_protected_routes_require_token(self):
        for name in ('patients', 'contacts', 'alerts', 'hospital_shared_records'):
            r = self.client.get(reverse(name))
            self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED, name)
            self.assertFalse(r.data['success'])

    def test_unknown_api_route_returns_json_404(self):
        r = self.client.get('/api/does-not-exist')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        body = r.json()
        self.assertFalse(body['success'])
        self.assertEqual(body['message'], 'Route /api/does-not-exist not found')

    def test_health_endpoints(self):
        r = self.client.get(reverse('health'))
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.json()['status'], 'ok')
        r = self.client.get(reverse('healthz'))
        self.assertEqual(r.json(), {'ok': True, 'db': True})
