"""Place lookup components (Nominatim client, rate limiter, session)."""

from .base import PlaceLookup  # noqa: F401
from .nominatim import NominatimClient, parse_address, parse_reverse_payload  # noqa: F401
from .rate_limiter import RateLimiter  # noqa: F401
from .session import create_default_session  # noqa: F401
