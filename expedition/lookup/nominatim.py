"""Nominatim reverse geocoding client used as the place lookup collaborator."""

from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Dict, Mapping, Optional, Tuple

import requests
from cachetools import TTLCache

from ..config import (
    LOOKUP_CACHE_ENABLED,
    LOOKUP_CACHE_SIZE,
    LOOKUP_CACHE_TTL_SECONDS,
    NOMINATIM_URL,
    NOMINATIM_ZOOM,
    REQUEST_TIMEOUT,
)
from ..errors import PlaceLookupError
from ..geometry import Point
from ..models import Address, Classification
from .rate_limiter import RateLimiter
from .session import create_default_session

LOGGER = logging.getLogger(__name__)

_CacheKey = Tuple[float, float]

_ADDRESS_FIELDS = (
    "road",
    "suburb",
    "town",
    "city",
    "state",
    "postcode",
    "country",
    "country_code",
)


class NominatimClient:
    """Thread-safe reverse lookup client with caching and rate limiting."""

    def __init__(
        self,
        base_url: str = NOMINATIM_URL,
        *,
        session: requests.Session | None = None,
        rate_limiter: RateLimiter | None = None,
        timeout: float = REQUEST_TIMEOUT,
        zoom: int = NOMINATIM_ZOOM,
        cache_enabled: bool = LOOKUP_CACHE_ENABLED,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._session = session or create_default_session()
        self._limiter = rate_limiter or RateLimiter()
        self._timeout = timeout
        self._zoom = zoom
        self._cache: Optional[TTLCache[_CacheKey, Classification]] = (
            TTLCache(maxsize=max(1, LOOKUP_CACHE_SIZE), ttl=LOOKUP_CACHE_TTL_SECONDS)
            if cache_enabled
            else None
        )
        self._cache_lock = RLock()

    def lookup(self, point: Point) -> Classification:
        """Classify ``point``; raises ``PlaceLookupError`` on any failure."""

        key: _CacheKey = (point.x, point.y)
        if self._cache is not None:
            with self._cache_lock:
                cached = self._cache.get(key)
            if cached is not None:
                return cached

        payload = self._reverse(point)
        classification = parse_reverse_payload(payload)
        if self._cache is not None:
            with self._cache_lock:
                self._cache[key] = classification
        return classification

    def _reverse(self, point: Point) -> Dict[str, Any]:
        url = f"{self.base_url}/reverse"
        params = {
            "format": "jsonv2",
            "lat": point.lat,
            "lon": point.lon,
            "zoom": self._zoom,
            "addressdetails": 1,
            "extratags": 1,
        }
        LOGGER.debug("GET %s params=%s", url, params)
        self._limiter.before_request()
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as exc:
            self._limiter.release()
            raise PlaceLookupError(
                f"Reverse lookup request failed for {point}: {exc}"
            ) from exc
        self._limiter.after_response(response.headers, response.status_code)

        if response.status_code >= 400:
            detail = _extract_error_text(response)
            message = f"Reverse lookup failed (status {response.status_code}) for {point}"
            if detail:
                message = f"{message} | {detail}"
            LOGGER.error(message)
            raise PlaceLookupError(message)
        try:
            data = response.json()
        except ValueError as exc:
            raise PlaceLookupError(
                f"Reverse lookup returned invalid JSON for {point}"
            ) from exc
        if not isinstance(data, dict):
            raise PlaceLookupError(
                f"Reverse lookup returned {type(data).__name__}, expected object"
            )
        return data


def parse_reverse_payload(data: Mapping[str, Any]) -> Classification:
    """Convert a ``format=jsonv2`` reverse response into a Classification."""

    if "error" in data:
        # Nominatim answers 200 {"error": "Unable to geocode"} for open sea etc.
        LOGGER.debug("Reverse lookup found no place: %s", data.get("error"))
        return Classification.unmatched()
    osm_type = data.get("osm_type")
    osm_id = data.get("osm_id")
    if not osm_type or osm_id is None:
        raise PlaceLookupError("Reverse lookup payload is missing osm_type/osm_id")
    address = parse_address(data.get("address"))
    extratags = data.get("extratags") or {}
    surface = extratags.get("surface") if isinstance(extratags, Mapping) else None
    name = data.get("name") or (address.road if address is not None else None)
    return Classification(
        entity_kind=str(osm_type),
        group_key=f"{osm_type}/{osm_id}",
        surface=surface,
        address=address,
        name=name or None,
    )


def parse_address(raw: Any) -> Optional[Address]:
    if not isinstance(raw, Mapping) or not raw:
        return None
    known = {key: str(raw[key]) for key in _ADDRESS_FIELDS if raw.get(key) is not None}
    extra = {
        str(key): str(value)
        for key, value in raw.items()
        if key not in _ADDRESS_FIELDS and value is not None
    }
    return Address(extra=extra, **known)


def _extract_error_text(resp: requests.Response) -> Optional[str]:
    """Best-effort plain-text extraction of an error body."""

    text = getattr(resp, "text", "")
    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    return (trimmed[:297] + "...") if len(trimmed) > 300 else trimmed


__all__ = ["NominatimClient", "parse_address", "parse_reverse_payload"]
