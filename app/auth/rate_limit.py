# =============================================================================
# app/auth/rate_limit.py - Login Rate Limiting
# =============================================================================
# Moving-window limiter for the login form, keyed by client IP.
# Backed by the `limits` package with in-memory storage, so each worker
# process keeps its own window.
# =============================================================================

import time

from fastapi import Request
from limits import parse
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

from app.config import settings

NAMESPACE = "login"


class LoginRateLimiter:
    """
    Allows at most `max_attempts` login attempts per key in `window_seconds`.

    Example:
        limiter = LoginRateLimiter(max_attempts=5, window_seconds=900)
        limited, retry_after = limiter.is_limited("203.0.113.7")
        if not limited:
            limiter.register_attempt("203.0.113.7")
    """

    def __init__(self, max_attempts: int = 5, window_seconds: int = 900):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.limit = parse(f"{max_attempts} per {window_seconds} seconds")
        self._storage = MemoryStorage()
        self._limiter = MovingWindowRateLimiter(self._storage)

    def is_limited(self, key: str) -> tuple[bool, int]:
        """
        Check whether a key has used up its attempts.

        Returns:
            (limited, retry_after_seconds)
        """
        if self._limiter.test(self.limit, NAMESPACE, key):
            return False, 0
        stats = self._limiter.get_window_stats(self.limit, NAMESPACE, key)
        retry_after = int(stats.reset_time - time.time()) + 1
        return True, max(retry_after, 1)

    def register_attempt(self, key: str) -> None:
        self._limiter.hit(self.limit, NAMESPACE, key)

    def reset(self, key: str) -> None:
        """Forget a key's attempts (after a successful login)."""
        self._limiter.clear(self.limit, NAMESPACE, key)

    def clear(self) -> None:
        self._storage.reset()


def client_ip(request: Request) -> str:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


login_rate_limiter = LoginRateLimiter(
    max_attempts=settings.LOGIN_RATE_LIMIT_ATTEMPTS,
    window_seconds=settings.LOGIN_RATE_LIMIT_WINDOW_SECONDS,
)


def get_login_rate_limiter() -> LoginRateLimiter:
    return login_rate_limiter
