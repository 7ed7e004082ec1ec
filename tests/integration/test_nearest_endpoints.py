from urllib.parse import parse_qs

import pytest
from fastapi.testclient import TestClient

from spotfinder.config.settings import Settings
from spotfinder.core.dependencies import get_pipeline
from spotfinder.main import app
from spotfinder.services.pipeline import NearestSpotPipeline
from tests.fakes import FakeLocationServices, node

client = TestClient(app)

CHICKEN_NODE = node(
    55, 38.9920, -76.9378,
    name="Hot Chicken Spot", amenity="fast_food", addr__street="Knox Rd",
)


@pytest.fixture
def services():
    fake = FakeLocationServices()
    fake.geocode_payload = [{"lat": "38.9897", "lon": "-76.9378"}]
    fake.overpass_payload = {"elements": [CHICKEN_NODE]}
    pipeline = NearestSpotPipeline.from_settings(Settings(), http_client=fake.client())
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    yield fake
    app.dependency_overrides.clear()


def test_nearest_by_text_query(services):
    r = client.post('/api/v1/nearest', json={'query': 'McKeldin Library, College Park MD'})
    assert r.status_code == 200
    body = r.json()
    assert body['status'] == 'ok'
    assert body['error'] is None
    data = body['data']
    assert data['place']['name'] == 'Hot Chicken Spot'
    assert data['place']['address'] == 'Knox Rd'
    assert data['origin'] == {'latitude': 38.9897, 'longitude': -76.9378}
    assert data['radius_m'] == 2000
    assert data['category'] == 'chicken'
    assert data['directions_url'] == (
        'https://www.google.com/maps/dir/?api=1'
        '&origin=McKeldin%20Library%2C%20College%20Park%20MD'
        '&destination=Hot%20Chicken%20Spot%20Knox%20Rd'
    )


def test_nearest_by_coordinates_skips_geocoder(services):
    r = client.post('/api/v1/nearest', json={'latitude': 38.98, 'longitude': -76.94})
    assert r.status_code == 200
    data = r.json()['data']
    assert data['origin'] == {'latitude': 38.98, 'longitude': -76.94}
    assert data['directions_url'].startswith(
        'https://www.google.com/maps/dir/?api=1&origin=38.98,-76.94&destination='
    )
    assert services.geocode_calls == []


def test_nearest_get_variant(services):
    r = client.get('/api/v1/nearest', params={'q': 'College Park', 'radius_m': 800})
    assert r.status_code == 200
    assert r.json()['data']['radius_m'] == 800
    query = parse_qs(services.search_calls[0].content.decode())['data'][0]
    assert 'around:800,38.9897,-76.9378' in query


def test_location_not_found(services):
    services.geocode_payload = []
    r = client.post('/api/v1/nearest', json={'query': 'Atlantis'})
    assert r.status_code == 404
    body = r.json()
    assert body['status'] == 'error'
    assert body['data'] is None
    assert body['error'] == 'Location not found'
    assert body['error_code'] == 'LOCATION_NOT_FOUND'
    assert body['reason'] == 'not_found'
    assert body['stage'] == 'resolve'
    assert services.search_calls == []


def test_geocoder_outage(services):
    services.geocode_status = 500
    r = client.post('/api/v1/nearest', json={'query': 'College Park'})
    assert r.status_code == 502
    assert r.json()['error'] == 'Geocoding failed'
    assert r.json()['reason'] == 'lookup_failed'


def test_menu_lookup_failed(services):
    services.overpass_status = 503
    r = client.post('/api/v1/nearest', json={'query': 'College Park'})
    assert r.status_code == 502
    body = r.json()
    assert body['error'] == 'Menu lookup failed'
    assert body['reason'] == 'service_unavailable'
    assert body['stage'] == 'search'


def test_malformed_overpass_payload(services):
    services.overpass_payload = {'remark': 'oops'}
    r = client.post('/api/v1/nearest', json={'query': 'College Park'})
    assert r.status_code == 502
    assert r.json()['reason'] == 'malformed_response'


def test_no_chicken_spots(services):
    services.overpass_payload = {'elements': []}
    r = client.post('/api/v1/nearest', json={'query': 'College Park'})
    assert r.status_code == 404
    body = r.json()
    assert body['error'] == 'No chicken spots found within 2km'
    assert body['reason'] == 'no_match'
    assert body['stage'] == 'rank'


@pytest.mark.parametrize('payload', [
    {},
    {'query': '   '},
    {'query': 'College Park', 'latitude': 1.0, 'longitude': 2.0},
    {'latitude': 1.0},
    {'latitude': 91.0, 'longitude': 0.0},
    {'query': 'College Park', 'radius_m': -5},
])
def test_invalid_request_is_rejected(services, payload):
    r = client.post('/api/v1/nearest', json=payload)
    assert r.status_code == 422
    body = r.json()
    assert body['status'] == 'error'
    assert body['error_code'] == 'VALIDATION_ERROR'
    assert services.requests == []


def test_get_without_origin_is_rejected(services):
    r = client.get('/api/v1/nearest')
    assert r.status_code == 422
    assert r.json()['error_code'] == 'VALIDATION_ERROR'


def test_request_id_header_is_echoed(services):
    r = client.post(
        '/api/v1/nearest',
        json={'query': 'College Park'},
        headers={'X-Request-ID': 'abc-123'},
    )
    assert r.headers['X-Request-ID'] == 'abc-123'


def test_error_envelope_carries_request_id(services):
    services.geocode_payload = []
    r = client.post('/api/v1/nearest', json={'query': 'Atlantis'}, headers={'X-Request-ID': 'req-9'})
    assert r.json()['request_id'] == 'req-9'


def test_metrics_report_pipeline_outcomes(services):
    client.post('/api/v1/nearest', json={'query': 'College Park'})
    services.overpass_status = 503
    client.post('/api/v1/nearest', json={'query': 'College Park'})

    r = client.get('/metrics')
    assert r.status_code == 200
    data = r.json()['data']
    assert data['pipeline']['count'] >= 2
    assert data['outcomes']['done'] >= 1
    assert data['outcomes']['service_unavailable'] >= 1
    assert data['failures_by_stage']['search'] >= 1
    assert data['stages']['resolve']['count'] >= 2
    route = data['routes']['POST /api/v1/nearest']
    assert route['count'] >= 2
    assert route['errors'] >= 1
    assert 'GET /metrics' not in data['routes']


def test_unknown_paths_share_one_metrics_key():
    for path in ('/no-such-page', '/wp-admin/setup.php', '/api/v1/nearest/extra'):
        assert client.get(path).status_code == 404

    routes = client.get('/metrics').json()['data']['routes']
    assert routes['unmatched']['count'] >= 3
    assert not any('no-such-page' in key or 'wp-admin' in key for key in routes)


def test_health_reports_category():
    r = client.get('/health')
    assert r.status_code == 200
    body = r.json()
    assert body['category'] == 'chicken'
    assert body['status'] in ('healthy', 'starting')
