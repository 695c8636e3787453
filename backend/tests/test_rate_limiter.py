"""Tests for the fixed window rate limiter."""

from app.services import rate_limiter as rate_limiter_module
from app.services.rate_limiter import FixedWindowRateLimiter


def test_allows_up_to_limit_then_blocks():
    limiter = FixedWindowRateLimiter(max_requests=2, window_seconds=60)

    assert limiter.hit("k", now=0) is None
    assert limiter.hit("k", now=1) is None
    assert limiter.hit("k", now=2) == 58


def test_window_resets():
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=10)
    limiter.hit("k", now=0)

    assert limiter.hit("k", now=5) is not None
    assert limiter.hit("k", now=10) is None


def test_keys_are_independent():
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60)
    limiter.hit("a", now=0)

    assert limiter.hit("b", now=0) is None


def test_expired_windows_are_dropped():
    limiter = FixedWindowRateLimiter(max_requests=5, window_seconds=10)
    limiter.hit("a", now=0)
    limiter.hit("b", now=3)

    limiter.hit("c", now=12)

    assert len(limiter) == 2

    limiter.hit("d", now=25)

    assert len(limiter) == 1


def test_api_returns_429_with_retry_after(client, alice_headers, monkeypatch):
    monkeypatch.setattr(
        rate_limiter_module, "rate_limiter", FixedWindowRateLimiter(max_requests=2, window_seconds=60)
    )

    statuses = [
        client.get("/api/v1/users/me", headers=alice_headers).status_code for _ in range(3)
    ]

    assert statuses == [200, 200, 429]
    blocked = client.get("/api/v1/users/me", headers=alice_headers)
    assert blocked.json()["status"] == 429
    assert int(blocked.headers["Retry-After"]) >= 1


def test_limit_is_per_subject(client, alice_headers, bob_headers, monkeypatch):
    monkeypatch.setattr(
        rate_limiter_module, "rate_limiter", FixedWindowRateLimiter(max_requests=1, window_seconds=60)
    )

    assert client.get("/api/v1/users/me", headers=alice_headers).status_code == 200
    assert client.get("/api/v1/users/me", headers=bob_headers).status_code == 200
    assert client.get("/api/v1/users/me", headers=alice_headers).status_code == 429
