import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from vault.authentication import issue_token_pair
from vault.models import Admin, EmergencyContact, Hospital, Patient

PASSWORD = 'Passw0rdX'


@pytest.fixture(autouse=True)
def _isolated_cache_and_media(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / 'media')
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    def make(admin):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token_pair(admin)['accessToken']}")
        return client
    return make


@pytest.fixture
def patient_admin(db):
    return Admin.objects.create_user(email='alice@example.com', password=PASSWORD, user_type='patient')


@pytest.fixture
def other_admin(db):
    return Admin.objects.create_user(email='mallory@example.com', password=PASSWORD, user_type='patient')


@pytest.fixture
def hospital_admin(db):
    return Admin.objects.create_user(email='er@cityhospital.example', password=PASSWORD, user_type='hospital')


@pytest.fixture
def hospital(hospital_admin):
    return Hospital.objects.create(
        admin=hospital_admin,
        hospital_name='City Hospital',
        city='Bengaluru',
        email=hospital_admin.email,
        latitude=12.9716,
        longitude=77.5946,
        rating=4.5,
        is_verified=True,
    )


@pytest.fixture
def patient(patient_admin):
    return Patient.objects.create(admin=patient_admin, full_name='Alice Doe', relationship='self', is_primary=True,
                                  blood_type='O+', allergies='Penicillin')


@pytest.fixture
def other_patient(other_admin):
    return Patient.objects.create(admin=other_admin, full_name='Mallory Roe', relationship='self', is_primary=True)


@pytest.fixture
def contact(patient):
    return EmergencyContact.objects.create(
        patient=patient, name='Bob Doe', relationship='spouse', phone_number='+15550001111',
        email='bob@example.com', priority=1,
    )
