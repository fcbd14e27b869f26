"""
Per-IP rate limiting.

Fixed-window counters held in process memory. Each budget is exposed as
a FastAPI dependency that raises RateLimitError (429) once a client has
used up its requests for the current window.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Request

from shared.config import get_settings
from shared.exceptions import RateLimitError

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    started_at: float
    expires_at: float
    count: int


class FixedWindowRateLimiter:
    """
    Counts hits per key within fixed windows.

    State is per process; several workers each keep their own counts.
    Expired windows are swept at most once per sweep_interval seconds, so
    keys that never come back don't accumulate.
    """

    def __init__(self, sweep_interval: float = 60.0) -> None:
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()
        self._sweep_interval = sweep_interval
        self._last_sweep: Optional[float] = None

    def __len__(self) -> int:
        return len(self._windows)

    def hit(
        self,
        key: str,
        limit: int,
        window_seconds: int,
        now: Optional[float] = None,
    ) -> Optional[int]:
        """
        Record one request for key.

        Returns:
            None if the request is allowed, otherwise seconds until the
            window resets.
        """
        now = time.monotonic() if now is None else now
        with self._lock:
            if self._last_sweep is None:
                self._last_sweep = now
            elif now - self._last_sweep >= self._sweep_interval:
                self._sweep_locked(now)

            window = self._windows.get(key)
            if window is None or now >= window.expires_at:
                self._windows[key] = _Window(
                    started_at=now, expires_at=now + window_seconds, count=1
                )
                return None

            if window.count >= limit:
                return max(1, int(window.expires_at - now))

            window.count += 1
            return None

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop expired windows. Returns how many were removed."""
        now = time.monotonic() if now is None else now
        with self._lock:
            return self._sweep_locked(now)

    def _sweep_locked(self, now: float) -> int:
        expired = [key for key, window in self._windows.items() if now >= window.expires_at]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now
        if expired:
            logger.debug("Swept %d expired rate limit window(s)", len(expired))
        return len(expired)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._last_sweep = None


_limiter = FixedWindowRateLimiter()


def get_rate_limiter() -> FixedWindowRateLimiter:
    return _limiter


def client_ip(request: Request, trusted_proxy_hops: int = 0) -> str:
    """
    Address a request is rate limited under.

    The socket peer, unless the app sits behind trusted_proxy_hops proxies
    that each append to X-Forwarded-For. Then the entry added by the
    outermost trusted proxy is used; anything left of it is client-supplied.
    """
    if trusted_proxy_hops > 0:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
            if hops:
                return hops[-min(trusted_proxy_hops, len(hops))]
    if request.client is not None:
        return request.client.host
    return "unknown"


def _make_dependency(
    name: str,
    budget: Callable[[], tuple[int, int]],
    message: str,
) -> Callable[[Request], None]:
    def dependency(request: Request) -> None:
        settings = get_settings()
        if not settings.rate_limit_enabled:
            return
        limit, window = budget()
        ip = client_ip(request, settings.trusted_proxy_hops)
        retry_after = _limiter.hit(f"{name}:{ip}", limit, window)
        if retry_after is not None:
            logger.warning("Rate limit '%s' exceeded for %s", name, ip)
            raise RateLimitError(message, retry_after=retry_after)

    dependency.__name__ = f"{name}_rate_limit"
    return dependency


general_rate_limit = _make_dependency(
    "general",
    lambda: (get_settings().rate_limit_requests, get_settings().rate_limit_window),
    "You have exceeded the rate limit. Please try again later.",
)

auth_rate_limit = _make_dependency(
    "auth",
    lambda: (get_settings().auth_rate_limit_requests, get_settings().auth_rate_limit_window),
    "Too many authentication attempts. Please try again after 15 minutes.",
)

password_reset_rate_limit = _make_dependency(
    "password_reset",
    lambda: (
        get_settings().password_reset_rate_limit_requests,
        get_settings().password_reset_rate_limit_window,
    ),
    "You have exceeded the limit for password reset requests. Please try again after 1 hour.",
)
