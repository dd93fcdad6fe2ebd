"""Tests for the Nominatim reverse lookup client (HTTP mocked)."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest
import requests

from expedition.errors import PlaceLookupError
from expedition.geometry import Point
from expedition.lookup import NominatimClient, RateLimiter, parse_reverse_payload
from expedition.models import Address, Classification

WAY_PAYLOAD: Dict[str, Any] = {
    "place_id": 1,
    "osm_type": "way",
    "osm_id": 4242,
    "category": "highway",
    "type": "residential",
    "name": "Main Street",
    "display_name": "Main Street, Testville",
    "address": {
        "road": "Main Street",
        "city": "Testville",
        "state": "Wessex",
        "ISO3166-2-lvl4": "GB-WSX",
        "postcode": "TV1 1AA",
        "country": "United Kingdom",
        "country_code": "gb",
    },
    "extratags": {"surface": "asphalt"},
}


class _FakeResponse:
    def __init__(
        self,
        payload: Any = None,
        status_code: int = 200,
        headers: Dict[str, str] | None = None,
        text: str = "",
    ) -> None:
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {}
        self.text = text

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _FakeSession:
    def __init__(self, responses: List[Any]) -> None:
        self._responses = list(responses)
        self.requests: List[Dict[str, Any]] = []

    def get(self, url: str, params: Dict[str, Any], timeout: float) -> _FakeResponse:
        self.requests.append({"url": url, "params": params, "timeout": timeout})
        result = self._responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def _client(session: _FakeSession, limiter: RateLimiter | None = None, **kwargs: Any) -> NominatimClient:
    return NominatimClient(
        "https://nominatim.test/",
        session=session,  # type: ignore[arg-type]
        rate_limiter=limiter or RateLimiter(max_concurrent=2, jitter_range=(0.0, 0.0)),
        timeout=3.0,
        **kwargs,
    )


def test_lookup_classifies_road_and_sends_reverse_params() -> None:
    session = _FakeSession([_FakeResponse(WAY_PAYLOAD)])
    result = _client(session).lookup(Point(-1.5, 52.25))

    assert result.entity_kind == "way"
    assert result.group_key == "way/4242"
    assert result.name == "Main Street"
    assert result.surface == "asphalt"
    assert result.address is not None
    assert result.address.road == "Main Street"
    assert result.address.extra == {"ISO3166-2-lvl4": "GB-WSX"}

    sent = session.requests[0]
    assert sent["url"] == "https://nominatim.test/reverse"
    assert sent["params"]["lat"] == 52.25
    assert sent["params"]["lon"] == -1.5
    assert sent["params"]["format"] == "jsonv2"
    assert sent["timeout"] == 3.0


def test_unable_to_geocode_is_unmatched_not_error() -> None:
    session = _FakeSession([_FakeResponse({"error": "Unable to geocode"})])
    result = _client(session).lookup(Point(-30.0, 0.0))
    assert result == Classification.unmatched()
    assert result.address is None


def test_lookup_results_are_cached_per_coordinate() -> None:
    session = _FakeSession([_FakeResponse(WAY_PAYLOAD), _FakeResponse(WAY_PAYLOAD)])
    client = _client(session)
    first = client.lookup(Point(1.0, 2.0))
    second = client.lookup(Point(1.0, 2.0))
    assert second is first
    assert len(session.requests) == 1


def test_cache_can_be_disabled() -> None:
    session = _FakeSession([_FakeResponse(WAY_PAYLOAD), _FakeResponse(WAY_PAYLOAD)])
    client = _client(session, cache_enabled=False)
    client.lookup(Point(1.0, 2.0))
    client.lookup(Point(1.0, 2.0))
    assert len(session.requests) == 2


def test_http_error_status_raises_with_detail() -> None:
    session = _FakeSession([_FakeResponse(None, status_code=503, text="overloaded")])
    with pytest.raises(PlaceLookupError, match="status 503.*overloaded"):
        _client(session).lookup(Point(0.0, 0.0))


def test_connection_error_raises_and_releases_slot() -> None:
    limiter = RateLimiter(max_concurrent=1, jitter_range=(0.0, 0.0))
    session = _FakeSession([requests.ConnectionError("refused"), _FakeResponse(WAY_PAYLOAD)])
    client = _client(session, limiter)

    with pytest.raises(PlaceLookupError) as excinfo:
        client.lookup(Point(0.0, 0.0))
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)
    assert limiter.snapshot()["in_flight"] == 0
    # slot was freed so the next lookup does not block
    assert client.lookup(Point(0.0, 0.0)).entity_kind == "way"


def test_invalid_json_raises() -> None:
    session = _FakeSession([_FakeResponse(ValueError("not json"))])
    with pytest.raises(PlaceLookupError, match="invalid JSON"):
        _client(session).lookup(Point(0.0, 0.0))


def test_non_object_payload_raises() -> None:
    session = _FakeSession([_FakeResponse([1, 2, 3])])
    with pytest.raises(PlaceLookupError):
        _client(session).lookup(Point(0.0, 0.0))


def test_lookup_carries_structured_address() -> None:
    session = _FakeSession([_FakeResponse(WAY_PAYLOAD)])
    address = _client(session).lookup(Point(0.0, 0.0)).address
    assert isinstance(address, Address)
    assert address.to_dict()["country_code"] == "gb"


def test_parse_payload_requires_osm_identity() -> None:
    with pytest.raises(PlaceLookupError):
        parse_reverse_payload({"display_name": "somewhere"})


def test_parse_payload_falls_back_to_road_name() -> None:
    payload = dict(WAY_PAYLOAD, name="")
    payload["extratags"] = None
    result = parse_reverse_payload(payload)
    assert result.name == "Main Street"
    assert result.surface is None
