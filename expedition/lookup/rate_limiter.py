"""Rate limiting for place lookup requests."""

from __future__ import annotations

import logging
import random
import threading
import time
from typing import Mapping

from ..config import (
    RATE_LIMIT_JITTER_RANGE,
    RATE_LIMIT_MAX_CONCURRENT,
    RATE_LIMIT_THROTTLE_SECONDS,
)

__all__ = ["RateLimiter"]

LOGGER = logging.getLogger(__name__)


class RateLimiter:
    """Concurrency cap with a shared throttle window and jitter to smooth bursts."""

    def __init__(
        self,
        max_concurrent: int = RATE_LIMIT_MAX_CONCURRENT,
        jitter_range: tuple[float, float] = RATE_LIMIT_JITTER_RANGE,
        throttle_seconds: float = RATE_LIMIT_THROTTLE_SECONDS,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1")
        self._lock = threading.Lock()
        self._cond = threading.Condition(self._lock)
        self._max_allowed = max_concurrent
        self._in_flight = 0
        self._throttle_until: float = 0.0
        self._jitter_range = jitter_range
        self._throttle_seconds = throttle_seconds

    def before_request(self) -> None:
        with self._cond:
            while self._in_flight >= self._max_allowed:
                self._cond.wait()
            self._in_flight += 1
            wait_for = max(0.0, self._throttle_until - time.time())
        if wait_for > 0:
            time.sleep(wait_for)
        lo, hi = self._jitter_range
        if hi > 0:
            # Random jitter smooths bursts; not used for security-sensitive logic.
            time.sleep(random.uniform(lo, hi))  # nosec B311

    def after_response(
        self, headers: Mapping[str, object] | None, status_code: int | None
    ) -> None:
        if status_code == 429:
            pause = _retry_after(headers, self._throttle_seconds)
            LOGGER.warning("Place lookup rate limited (429). Throttling %ss.", pause)
            with self._cond:
                self._throttle_until = max(self._throttle_until, time.time() + pause)
        self.release()

    def release(self) -> None:
        """Free an in-flight slot without inspecting a response."""

        with self._cond:
            self._in_flight = max(0, self._in_flight - 1)
            if self._in_flight < self._max_allowed:
                self._cond.notify()

    def snapshot(self) -> dict[str, float | int]:  # pragma: no cover - debug helper
        """Return current limiter stats (used by tests and diagnostics)."""

        with self._lock:
            return {
                "max_allowed": self._max_allowed,
                "in_flight": self._in_flight,
                "throttle_until": self._throttle_until,
            }


def _retry_after(headers: Mapping[str, object] | None, default: float) -> float:
    if not headers:
        return default
    raw = headers.get("Retry-After")
    if raw is None:
        return default
    try:
        return max(0.0, float(str(raw)))
    except ValueError:
        LOGGER.debug("Ignoring non-numeric Retry-After header %r", raw)
        return default
