"""In-memory fixed window rate limiter and its FastAPI dependency."""

import logging
import math
import time
from threading import Lock
from typing import Dict, Optional, Tuple

from fastapi import Request
from jose import JWTError, jwt

from app.config import settings
from app.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    """Thread-safe fixed window counter per client key."""

    def __init__(self, max_requests: int, window_seconds: int) -> None:
        self._max_requests = max_requests
        self._window = window_seconds
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._last_sweep: Optional[float] = None
        self._lock = Lock()

    def hit(self, key: str, now: Optional[float] = None) -> Optional[int]:
        """
        Count one request for ``key``.

        Returns ``None`` when the request is allowed, otherwise the number of
        seconds until the current window closes.
        """
        now = time.monotonic() if now is None else now
        with self._lock:
            self._sweep(now)
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self._window:
                started, count = now, 0
            if count >= self._max_requests:
                return max(1, math.ceil(started + self._window - now))
            self._windows[key] = (started, count + 1)
            return None

    def _sweep(self, now: float) -> None:
        """Drop keys whose window has closed, at most once per window length."""
        if self._last_sweep is not None and now - self._last_sweep < self._window:
            return
        self._last_sweep = now
        expired = [k for k, (started, _) in self._windows.items() if now - started >= self._window]
        for k in expired:
            del self._windows[k]

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._last_sweep = None

    def __len__(self) -> int:
        return len(self._windows)


rate_limiter = FixedWindowRateLimiter(
    settings.RATE_LIMIT_REQUESTS, settings.RATE_LIMIT_WINDOW_SECONDS
)


def client_key(request: Request) -> str:
    """
    Identify the caller for rate limiting.

    The token subject is read without verification; a forged subject only
    moves the caller into another bucket, and verification still happens in
    the authentication dependency.
    """
    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer "):
        try:
            subject = jwt.get_unverified_claims(authorization[7:]).get("sub")
        except JWTError:
            subject = None
        if subject:
            return f"sub:{subject}"
    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"


async def enforce_rate_limit(request: Request) -> None:
    """Router-level dependency raising ``RateLimitExceededError`` (429)."""
    if not settings.RATE_LIMIT_ENABLED:
        return
    key = client_key(request)
    retry_after = rate_limiter.hit(key)
    if retry_after is not None:
        logger.warning(f"Rate limit exceeded for {key}")
        raise RateLimitExceededError(retry_after)
