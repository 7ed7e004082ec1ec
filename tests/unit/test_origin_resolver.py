import httpx
import pytest

from spotfinder.config.settings import GeocoderSettings
from spotfinder.core.exceptions import ResolutionError, ResolutionReason, Stage
from spotfinder.models.places import Coordinate, PointOrigin, TextOrigin
from spotfinder.services.geocoder import OriginResolver
from tests.fakes import NOMINATIM_HOST


@pytest.mark.asyncio
async def test_point_origin_passes_through_without_network(fake_services):
    async with fake_services.client() as client:
        resolver = OriginResolver(http_client=client)
        coord = await resolver.resolve(PointOrigin(Coordinate(38.98, -76.94)))

    assert coord == Coordinate(38.98, -76.94)
    assert fake_services.requests == []


@pytest.mark.asyncio
async def test_text_origin_geocodes_first_match(fake_services):
    fake_services.geocode_payload = [
        {"lat": "38.9897", "lon": "-76.9378", "display_name": "McKeldin Library"},
    ]
    async with fake_services.client() as client:
        resolver = OriginResolver(http_client=client)
        coord = await resolver.resolve(TextOrigin("  McKeldin Library, College Park MD "))

    assert coord == Coordinate(38.9897, -76.9378)
    assert len(fake_services.geocode_calls) == 1
    params = fake_services.geocode_calls[0].url.params
    assert params["q"] == "McKeldin Library, College Park MD"
    assert params["limit"] == "1"
    assert params["format"] == "json"
    assert fake_services.geocode_calls[0].url.path == "/search"
    assert "User-Agent" in fake_services.geocode_calls[0].headers


@pytest.mark.asyncio
async def test_configured_limit_is_sent(fake_services):
    fake_services.geocode_payload = [{"lat": "1", "lon": "2"}, {"lat": "3", "lon": "4"}]
    async with fake_services.client() as client:
        resolver = OriginResolver(GeocoderSettings(result_limit=3), http_client=client)
        coord = await resolver.resolve(TextOrigin("somewhere"))

    assert coord == Coordinate(1.0, 2.0)
    assert fake_services.geocode_calls[0].url.params["limit"] == "3"


@pytest.mark.asyncio
async def test_empty_result_is_not_found(fake_services):
    fake_services.geocode_payload = []
    async with fake_services.client() as client:
        resolver = OriginResolver(http_client=client)
        with pytest.raises(ResolutionError) as exc_info:
            await resolver.resolve(TextOrigin("Nowhere Special"))

    assert exc_info.value.reason == ResolutionReason.NOT_FOUND
    assert exc_info.value.stage == Stage.RESOLVE
    assert exc_info.value.message == "Location not found"


@pytest.mark.asyncio
async def test_blank_query_is_not_found_without_network(fake_services):
    async with fake_services.client() as client:
        resolver = OriginResolver(http_client=client)
        with pytest.raises(ResolutionError) as exc_info:
            await resolver.resolve(TextOrigin("   "))

    assert exc_info.value.reason == ResolutionReason.NOT_FOUND
    assert fake_services.requests == []


@pytest.mark.asyncio
async def test_non_success_status_is_lookup_failed(fake_services):
    fake_services.geocode_status = 503
    async with fake_services.client() as client:
        resolver = OriginResolver(http_client=client)
        with pytest.raises(ResolutionError) as exc_info:
            await resolver.resolve(TextOrigin("College Park"))

    assert exc_info.value.reason == ResolutionReason.LOOKUP_FAILED
    assert exc_info.value.details["status_code"] == 503
    assert exc_info.value.message == "Geocoding failed"


@pytest.mark.asyncio
async def test_transport_error_is_lookup_failed(fake_services):
    fake_services.raise_for_host[NOMINATIM_HOST] = httpx.ConnectError("connection refused")
    async with fake_services.client() as client:
        resolver = OriginResolver(http_client=client)
        with pytest.raises(ResolutionError) as exc_info:
            await resolver.resolve(TextOrigin("College Park"))

    assert exc_info.value.reason == ResolutionReason.LOOKUP_FAILED


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    [{"lat": "not-a-number", "lon": "-76.9"}],
    [{"lon": "-76.9"}],
    [{"lat": "95.0", "lon": "-76.9"}],
    [{"lat": "nan", "lon": "-76.9"}],
    {"error": "Unable to geocode"},
    ["just a string"],
])
async def test_malformed_payload_is_lookup_failed(fake_services, payload):
    fake_services.geocode_payload = payload
    async with fake_services.client() as client:
        resolver = OriginResolver(http_client=client)
        with pytest.raises(ResolutionError) as exc_info:
            await resolver.resolve(TextOrigin("College Park"))

    assert exc_info.value.reason == ResolutionReason.LOOKUP_FAILED
