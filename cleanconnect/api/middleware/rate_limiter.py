"""Rate limiting for credential endpoints."""

import time
from collections import defaultdict

import structlog
from fastapi import HTTPException, Request, status

logger = structlog.get_logger(__name__)


class RateLimiter:
    """Simple in-memory rate limiter.

    Implements token bucket algorithm keyed by an arbitrary client key
    (the caller's IP address for the auth endpoints).
    """

    def __init__(
        self,
        requests_per_minute: int = 10,
        burst_size: int = 5,
        cleanup_interval: int = 60,
    ):
        """Initialize rate limiter.

        Args:
            requests_per_minute: Sustained requests per minute per key
            burst_size: Maximum burst requests allowed
            cleanup_interval: Interval (seconds) to cleanup old entries
        """
        self.requests_per_minute = requests_per_minute
        self.burst_size = burst_size
        self.cleanup_interval = cleanup_interval

        # Store: key -> (tokens, last_update)
        self.buckets: dict[str, tuple[float, float]] = defaultdict(
            lambda: (float(self.burst_size), time.monotonic())
        )
        self.last_cleanup = time.monotonic()

    def _refill_tokens(self, key: str) -> float:
        tokens, last_update = self.buckets[key]
        now = time.monotonic()

        # Add tokens for the time elapsed but don't exceed burst size
        refill = (now - last_update) * (self.requests_per_minute / 60.0)
        tokens = min(tokens + refill, float(self.burst_size))

        self.buckets[key] = (tokens, now)
        return tokens

    def retry_after(self) -> int:
        return max(1, int(60 / self.requests_per_minute))

    async def check_rate_limit(self, key: str) -> None:
        """Consume one token for ``key``.

        Raises:
            HTTPException: 429 if the bucket is empty
        """
        now = time.monotonic()
        if now - self.last_cleanup > self.cleanup_interval:
            self._cleanup_old_entries()
            self.last_cleanup = now

        tokens = self._refill_tokens(key)
        if tokens < 1.0:
            logger.warning("rate_limit_exceeded", key=key)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests, please try again later.",
                headers={"Retry-After": str(self.retry_after())},
            )

        _, last_update = self.buckets[key]
        self.buckets[key] = (tokens - 1.0, last_update)

    def _cleanup_old_entries(self) -> None:
        """Clean up old entries to prevent memory growth."""
        cutoff = time.monotonic() - (self.cleanup_interval * 2)
        stale = [key for key, (_, last_update) in self.buckets.items() if last_update < cutoff]
        for key in stale:
            del self.buckets[key]

    def reset(self) -> None:
        self.buckets.clear()


# Global limiter for login, registration and password reset requests
auth_rate_limiter = RateLimiter(requests_per_minute=10, burst_size=10)


async def limit_auth_requests(request: Request) -> None:
    """FastAPI dependency rate limiting credential endpoints per client IP.

    Example:
        @router.post("/login", dependencies=[Depends(limit_auth_requests)])
        async def login(...):
            ...
    """
    client_ip = request.client.host if request.client else "unknown"
    await auth_rate_limiter.check_rate_limit(client_ip)
