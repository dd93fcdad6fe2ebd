"""Central configuration for the Expedition ride enrichment engine.

All values are constants imported by the rest of the package. Adjust as needed
for your environment. Endpoints and tuning knobs are read from environment
variables (optionally via a local `.env`).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Place lookup (Nominatim)
# ---------------------------------------------------------------------------
# Base URL of the Nominatim instance used for reverse lookups. Public
# nominatim.openstreetmap.org only tolerates ~1 req/s; point this at a
# self-hosted instance for real rides.
NOMINATIM_URL = os.getenv(
    "EXPEDITION_NOMINATIM_URL", "https://nominatim.openstreetmap.org"
).rstrip("/")

# Nominatim's usage policy requires an identifying User-Agent.
NOMINATIM_USER_AGENT = os.getenv("EXPEDITION_USER_AGENT", "expedition-rides/0.1")

# Zoom 17 resolves to major and minor streets.
NOMINATIM_ZOOM = _env_int("EXPEDITION_NOMINATIM_ZOOM", 17)

# OSM element types treated as road/line features by the way segmenter.
LINE_ENTITY_KINDS = frozenset({"way"})


# ---------------------------------------------------------------------------
# Performance tuning
# ---------------------------------------------------------------------------
# Maximum simultaneous outstanding lookups while segmenting a ride.
LOOKUP_MAX_CONCURRENT = _env_int("EXPEDITION_LOOKUP_MAX_CONCURRENT", 50)

# HTTP session pool sizes; keep at least LOOKUP_MAX_CONCURRENT so workers do
# not queue on the connection pool.
HTTP_POOL_CONNECTIONS = _env_int("EXPEDITION_HTTP_POOL_CONNECTIONS", 10)
HTTP_POOL_MAXSIZE = _env_int("EXPEDITION_HTTP_POOL_MAXSIZE", LOOKUP_MAX_CONCURRENT)

# Request timeout in seconds.
REQUEST_TIMEOUT = _env_float("EXPEDITION_REQUEST_TIMEOUT", 15.0)

# Transport level retries (connection errors and 5xx) with exponential backoff.
HTTP_MAX_RETRIES = _env_int("EXPEDITION_HTTP_MAX_RETRIES", 3)
HTTP_BACKOFF_FACTOR = _env_float("EXPEDITION_HTTP_BACKOFF_FACTOR", 0.5)

# Rate limiter settings.
# RATE_LIMIT_MAX_CONCURRENT caps in-flight requests per client.
RATE_LIMIT_MAX_CONCURRENT = _env_int(
    "EXPEDITION_RATE_LIMIT_MAX_CONCURRENT", LOOKUP_MAX_CONCURRENT
)
# RATE_LIMIT_JITTER_RANGE adds random delay (seconds) to smooth bursts.
RATE_LIMIT_JITTER_RANGE = (0.0, _env_float("EXPEDITION_RATE_LIMIT_JITTER_MAX", 0.05))
# RATE_LIMIT_THROTTLE_SECONDS is the pause applied after a 429.
RATE_LIMIT_THROTTLE_SECONDS = _env_float("EXPEDITION_RATE_LIMIT_THROTTLE_SECONDS", 5.0)

# Reverse lookups are cached per coordinate.
LOOKUP_CACHE_ENABLED = _env_bool("EXPEDITION_LOOKUP_CACHE_ENABLED", True)
LOOKUP_CACHE_SIZE = _env_int("EXPEDITION_LOOKUP_CACHE_SIZE", 10_000)
LOOKUP_CACHE_TTL_SECONDS = _env_int("EXPEDITION_LOOKUP_CACHE_TTL_SECONDS", 24 * 3600)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
# Written next to the input track when --output is not given.
OUTPUT_SUFFIX = ".ride.json"
