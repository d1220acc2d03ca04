"""
Unit tests for the places gateway against a mocked HTTP transport
"""
import httpx
import pytest

from vetmap.core.exceptions import (
    EmptyQueryError,
    MalformedResponseError,
    NetworkError,
    ProviderError,
)
from vetmap.schemas.place import Coordinate
from vetmap.services.places_gateway import PlacesGateway

BASE_URL = "https://maps.example.test/maps/api"
CENTER = Coordinate(latitude=37.5665, longitude=126.978)


def nearby_result(place_id="vet-1", name="Seoul Animal Hospital", lat=37.567, lng=126.979, **extra):
    result = {
        "place_id": place_id,
        "name": name,
        "geometry": {"location": {"lat": lat, "lng": lng}},
        "vicinity": "12 Sejong-daero",
    }
    result.update(extra)
    return result


class Recorder:
    """Collects requests and answers each with the next queued response."""

    def __init__(self, *responses):
        self.requests = []
        self.responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_gateway(handler, **kwargs) -> PlacesGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PlacesGateway(api_key="test-key", base_url=BASE_URL, client=client, **kwargs)


@pytest.mark.asyncio
async def test_nearby_search_parses_results():
    recorder = Recorder(httpx.Response(200, json={
        "status": "OK",
        "results": [
            nearby_result(rating=4.6, types=["veterinary_care"]),
            nearby_result(place_id="vet-2", name="Jung-gu Pet Clinic"),
        ],
    }))
    gateway = make_gateway(recorder)

    places = await gateway.nearby_search(CENTER, 5000, "veterinary_care")

    assert [p.id for p in places] == ["vet-1", "vet-2"]
    assert places[0].rating == 4.6
    assert places[0].address == "12 Sejong-daero"
    assert places[0].coordinate == Coordinate(latitude=37.567, longitude=126.979)
    assert places[1].rating is None

    request = recorder.requests[0]
    assert request.url.path == "/maps/api/place/nearbysearch/json"
    assert request.url.params["location"] == "37.5665,126.978"
    assert request.url.params["radius"] == "5000"
    assert request.url.params["type"] == "veterinary_care"
    assert request.url.params["key"] == "test-key"


@pytest.mark.asyncio
async def test_nearby_search_zero_results_is_empty():
    gateway = make_gateway(Recorder(httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})))

    assert await gateway.nearby_search(CENTER, 5000, "veterinary_care") == []


@pytest.mark.asyncio
async def test_nearby_search_provider_status_is_reported():
    gateway = make_gateway(Recorder(httpx.Response(200, json={
        "status": "OVER_QUERY_LIMIT",
        "error_message": "You have exceeded your daily request quota",
        "results": [],
    })))

    with pytest.raises(ProviderError) as exc_info:
        await gateway.nearby_search(CENTER, 5000, "veterinary_care")

    assert exc_info.value.status == "OVER_QUERY_LIMIT"
    assert exc_info.value.details["provider_message"].startswith("You have exceeded")


@pytest.mark.asyncio
async def test_nearby_search_rejects_missing_fields():
    broken = nearby_result()
    del broken["geometry"]
    gateway = make_gateway(Recorder(httpx.Response(200, json={"status": "OK", "results": [broken]})))

    with pytest.raises(MalformedResponseError) as exc_info:
        await gateway.nearby_search(CENTER, 5000, "veterinary_care")

    assert exc_info.value.status == "INVALID_RESPONSE"


@pytest.mark.asyncio
async def test_nearby_search_rejects_out_of_range_location():
    gateway = make_gateway(Recorder(httpx.Response(200, json={
        "status": "OK",
        "results": [nearby_result(lat=123.0)],
    })))

    with pytest.raises(MalformedResponseError):
        await gateway.nearby_search(CENTER, 5000, "veterinary_care")


@pytest.mark.asyncio
async def test_non_json_body_is_malformed():
    gateway = make_gateway(Recorder(httpx.Response(200, text="<html>oops</html>")))

    with pytest.raises(MalformedResponseError):
        await gateway.nearby_search(CENTER, 5000, "veterinary_care")


@pytest.mark.asyncio
async def test_http_error_status_is_network_error():
    gateway = make_gateway(Recorder(httpx.Response(503, text="unavailable")))

    with pytest.raises(NetworkError) as exc_info:
        await gateway.nearby_search(CENTER, 5000, "veterinary_care")

    assert exc_info.value.http_status == 503


@pytest.mark.asyncio
async def test_timeout_is_network_error():
    gateway = make_gateway(Recorder(httpx.ReadTimeout("timed out")))

    with pytest.raises(NetworkError, match="in time"):
        await gateway.autocomplete("Seoul")


@pytest.mark.asyncio
async def test_connection_failure_is_network_error():
    gateway = make_gateway(Recorder(httpx.ConnectError("connection refused")))

    with pytest.raises(NetworkError):
        await gateway.resolve_details("abc")


@pytest.mark.asyncio
async def test_autocomplete_returns_suggestions():
    recorder = Recorder(httpx.Response(200, json={
        "status": "OK",
        "predictions": [
            {"place_id": "a", "description": "Seoul Station, Seoul", "types": ["transit_station"]},
            {"place_id": "b", "description": "Seoul Forest, Seoul"},
        ],
    }))
    gateway = make_gateway(recorder, language="ko")

    suggestions = await gateway.autocomplete("  Seoul ")

    assert [(s.id, s.description) for s in suggestions] == [
        ("a", "Seoul Station, Seoul"),
        ("b", "Seoul Forest, Seoul"),
    ]
    params = recorder.requests[0].url.params
    assert params["input"] == "Seoul"
    assert params["language"] == "ko"


@pytest.mark.asyncio
async def test_autocomplete_blank_input_skips_network():
    recorder = Recorder()
    gateway = make_gateway(recorder)

    assert await gateway.autocomplete("   ") == []
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_autocomplete_zero_results():
    gateway = make_gateway(Recorder(httpx.Response(200, json={"status": "ZERO_RESULTS"})))

    assert await gateway.autocomplete("zzzzqqq") == []


@pytest.mark.asyncio
async def test_resolve_details_returns_place():
    recorder = Recorder(httpx.Response(200, json={
        "status": "OK",
        "result": {
            "place_id": "gangnam",
            "name": "Gangnam Station",
            "formatted_address": "396 Gangnam-daero, Seoul",
            "geometry": {"location": {"lat": 37.4979, "lng": 127.0276}},
        },
    }))
    gateway = make_gateway(recorder)

    place = await gateway.resolve_details("gangnam")

    assert place.id == "gangnam"
    assert place.name == "Gangnam Station"
    assert place.address == "396 Gangnam-daero, Seoul"
    assert place.coordinate == Coordinate(latitude=37.4979, longitude=127.0276)
    params = recorder.requests[0].url.params
    assert params["place_id"] == "gangnam"
    assert "geometry" in params["fields"]


@pytest.mark.asyncio
async def test_resolve_details_not_found():
    gateway = make_gateway(Recorder(httpx.Response(200, json={"status": "NOT_FOUND"})))

    with pytest.raises(ProviderError) as exc_info:
        await gateway.resolve_details("gone")

    assert exc_info.value.status == "NOT_FOUND"
    assert exc_info.value.message == "No matching places found"


@pytest.mark.asyncio
async def test_resolve_details_ok_without_result_is_malformed():
    gateway = make_gateway(Recorder(httpx.Response(200, json={"status": "OK"})))

    with pytest.raises(MalformedResponseError):
        await gateway.resolve_details("abc")


@pytest.mark.asyncio
async def test_geocode_uses_first_result():
    recorder = Recorder(httpx.Response(200, json={
        "status": "OK",
        "results": [
            {
                "place_id": "city-hall",
                "formatted_address": "110 Sejong-daero, Jung-gu, Seoul",
                "geometry": {"location": {"lat": 37.5663, "lng": 126.9779}},
            },
            {
                "place_id": "other",
                "formatted_address": "Somewhere else",
                "geometry": {"location": {"lat": 1.0, "lng": 1.0}},
            },
        ],
    }))
    gateway = make_gateway(recorder)

    place = await gateway.geocode("Seoul City Hall")

    assert place.id == "city-hall"
    assert place.name == "110 Sejong-daero, Jung-gu, Seoul"
    assert recorder.requests[0].url.path == "/maps/api/geocode/json"
    assert recorder.requests[0].url.params["address"] == "Seoul City Hall"


@pytest.mark.asyncio
async def test_geocode_zero_results_is_provider_error():
    gateway = make_gateway(Recorder(httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})))

    with pytest.raises(ProviderError) as exc_info:
        await gateway.geocode("nowhere at all")

    assert exc_info.value.status == "ZERO_RESULTS"


@pytest.mark.asyncio
async def test_geocode_blank_address_is_guarded():
    recorder = Recorder()
    gateway = make_gateway(recorder)

    with pytest.raises(EmptyQueryError):
        await gateway.geocode("  ")
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_close_leaves_injected_client_open():
    client = httpx.AsyncClient(transport=httpx.MockTransport(Recorder()))
    gateway = PlacesGateway(api_key="k", base_url=BASE_URL, client=client)

    await gateway.close()

    assert not client.is_closed
    await client.aclose()


@pytest.mark.asyncio
async def test_owned_client_is_closed():
    async with PlacesGateway(api_key="k", base_url=BASE_URL) as gateway:
        client = gateway._client
    assert client.is_closed


@pytest.mark.asyncio
async def test_configured_timeout_applies_to_injected_client():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["timeout"] = request.extensions["timeout"]
        return httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=None)
    gateway = PlacesGateway(api_key="k", base_url=BASE_URL, timeout_seconds=0.25, client=client)

    await gateway.nearby_search(CENTER, 5000, "veterinary_care")

    assert seen["timeout"]["read"] == 0.25
    assert seen["timeout"]["connect"] == 0.25
    await client.aclose()
