"""Fixed-window request quota for the whole deployment.

Every caller draws from the same budget; the window restarts when it
expires, not on a rolling basis.
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request, status
from fastapi.responses import JSONResponse

from tracker.errors import error_body


@dataclass
class RateLimitResult:
    """Outcome of counting one request against the quota."""

    allowed: bool
    limit: int
    remaining: int
    reset_after: float  # seconds until the window restarts

    def headers(self) -> dict[str, str]:
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(math.ceil(self.reset_after)),
        }


class FixedWindowRateLimiter:
    """Allows ``max_requests`` per ``window_seconds``."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._window_start = clock()
        self._count = 0

    def hit(self) -> RateLimitResult:
        """Count a request and report whether it fits in the current window."""
        now = self._clock()
        if now - self._window_start >= self.window_seconds:
            self._window_start = now
            self._count = 0

        self._count += 1
        reset_after = self.window_seconds - (now - self._window_start)
        return RateLimitResult(
            allowed=self._count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(self.max_requests - self._count, 0),
            reset_after=reset_after,
        )


def rate_limit_middleware(limiter: FixedWindowRateLimiter):
    """Build an HTTP middleware enforcing ``limiter``."""

    async def enforce_rate_limit(request: Request, call_next):
        result = limiter.hit()
        if not result.allowed:
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content=error_body(
                    "Too Many Requests", "Rate limit exceeded, please try again later"
                ),
                headers=result.headers(),
            )

        response = await call_next(request)
        response.headers.update(result.headers())
        return response

    return enforce_rate_limit
