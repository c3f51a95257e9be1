import pytest
from django.urls import reverse

from vault.models import Hospital
from vault.services.geo import haversine_km, nearest_hospital, with_distances

pytestmark = pytest.mark.django_db


@pytest.fixture
def directory(hospital):
    near = Hospital.objects.create(hospital_name='Near Clinic', city='Bengaluru', latitude=12.98, longitude=77.60,
                                   rating=3.0, is_verified=True, hospital_type='clinic')
    far = Hospital.objects.create(hospital_name='Mumbai General', city='Mumbai', latitude=19.076, longitude=72.8777,
                                  rating=5.0, is_verified=True)
    unknown = Hospital.objects.create(hospital_name='Nowhere Care', city='Bengaluru', rating=1.0, is_verified=True)
    hidden = Hospital.objects.create(hospital_name='Unverified', city='Bengaluru', latitude=12.9716,
                                     longitude=77.5946, rating=5.0, is_verified=False)
    return {'main': hospital, 'near': near, 'far': far, 'unknown': unknown, 'hidden': hidden}


def _names(r):
    assert r.status_code == 200
    return [h['hospital_name'] for h in r.data['data']]


def test_directory_lists_verified_only_by_rating(api_client, directory):
    names = _names(api_client.get(reverse('hospitals')))
    assert names == ['Mumbai General', 'City Hospital', 'Near Clinic', 'Nowhere Care']


def test_directory_filters(api_client, directory):
    assert _names(api_client.get(reverse('hospitals'), {'city': 'mumbai'})) == ['Mumbai General']
    assert _names(api_client.get(reverse('hospitals'), {'hospitalType': 'clinic'})) == ['Near Clinic']
    assert _names(api_client.get(reverse('hospitals'), {'search': 'nowhere'})) == ['Nowhere Care']


def test_directory_location_search_sorts_by_distance(api_client, directory):
    r = api_client.get(reverse('hospitals'), {'latitude': 12.9716, 'longitude': 77.5946})
    names = _names(r)
    assert names == ['City Hospital', 'Near Clinic', 'Nowhere Care']
    distances = [h['distance'] for h in r.data['data']]
    assert distances[0] == 0.0
    assert 0 < distances[1] < 5
    assert distances[2] is None


def test_directory_radius_widens_results(api_client, directory):
    r = api_client.get(reverse('hospitals'), {'latitude': 12.9716, 'longitude': 77.5946, 'radius': 2000})
    assert 'Mumbai General' in _names(r)


def test_directory_ignores_invalid_token(api_client, directory):
    api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-real-token')
    assert len(_names(api_client.get(reverse('hospitals')))) == 4


def test_hospital_detail_and_404(api_client, hospital):
    r = api_client.get(reverse('hospital_detail', args=[hospital.id]))
    assert r.status_code == 200
    assert r.data['data']['hospital_name'] == 'City Hospital'
    assert api_client.get(reverse('hospital_detail', args=[999999])).status_code == 404


def test_haversine_london_paris():
    assert haversine_km(51.5074, -0.1278, 48.8566, 2.3522) == pytest.approx(343.5, abs=1.0)
    assert haversine_km(10.0, 10.0, 10.0, 10.0) == 0.0


def test_nearest_hospital_skips_unlocated(directory):
    hospitals = [directory['unknown'], directory['far'], directory['near']]
    best, distance = nearest_hospital(hospitals, 12.9716, 77.5946)
    assert best == directory['near']
    assert distance < 5
    assert nearest_hospital([directory['unknown']], 0.0, 0.0) == (None, None)


def test_with_distances_drops_out_of_radius(directory):
    kept = with_distances([directory['far'], directory['unknown'], directory['main']], 12.9716, 77.5946, 50)
    assert kept == [directory['main'], directory['unknown']]
