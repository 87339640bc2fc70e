"""Rate limiting middleware for FastAPI.

Guards the completion and extraction endpoints, which cost provider tokens
and CPU. Each client gets three sliding windows (burst, minute, hour) kept
in memory, so limits reset when the process restarts.
"""

import logging
import time
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import NamedTuple

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from responses import ResponseCode, error_dict, get_http_status

logger = logging.getLogger(__name__)

BURST_WINDOW = 10
MINUTE_WINDOW = 60
HOUR_WINDOW = 3600


@dataclass
class RateLimitConfig:
    """Configuration for rate limiting."""

    requests_per_minute: int = 20
    requests_per_hour: int = 200
    burst_limit: int = 5  # per BURST_WINDOW seconds


class RateLimitDecision(NamedTuple):
    allowed: bool
    message: str | None
    headers: dict[str, str]


class RateLimiter:
    """In-memory sliding-window limiter keyed by client address."""

    def __init__(self, config: RateLimitConfig | None = None) -> None:
        self.config = config or RateLimitConfig()
        self._requests: dict[str, deque[float]] = defaultdict(deque)
        self._windows = [
            (
                BURST_WINDOW,
                self.config.burst_limit,
                "Too many requests. Please slow down.",
            ),
            (
                MINUTE_WINDOW,
                self.config.requests_per_minute,
                "Rate limit exceeded. Please wait a moment.",
            ),
            (HOUR_WINDOW, self.config.requests_per_hour, "Hourly rate limit exceeded."),
        ]

    def get_client_id(self, request: Request) -> str:
        """First X-Forwarded-For hop, else the socket peer."""
        forwarded = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
        if forwarded:
            return f"ip:{forwarded}"
        return f"ip:{request.client.host}" if request.client else "unknown"

    def check_rate_limit(
        self, request: Request, now: float | None = None
    ) -> RateLimitDecision:
        """Record the request if every window has room.

        Returns:
            RateLimitDecision; denied requests are not recorded.
        """
        now = time.time() if now is None else now
        history = self._requests[self.get_client_id(request)]
        while history and history[0] <= now - HOUR_WINDOW:
            history.popleft()

        minute_count = 0
        for seconds, limit, message in self._windows:
            in_window = [ts for ts in history if ts > now - seconds]
            if seconds == MINUTE_WINDOW:
                minute_count = len(in_window)
            if len(in_window) >= limit:
                return RateLimitDecision(
                    False,
                    message,
                    {
                        "X-RateLimit-Limit": str(limit),
                        "X-RateLimit-Remaining": "0",
                        "X-RateLimit-Reset": str(int(in_window[0] + seconds)),
                        "Retry-After": str(seconds),
                    },
                )

        history.append(now)
        return RateLimitDecision(
            True,
            None,
            {
                "X-RateLimit-Limit": str(self.config.requests_per_minute),
                "X-RateLimit-Remaining": str(
                    max(self.config.requests_per_minute - minute_count - 1, 0)
                ),
            },
        )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply a RateLimiter to the provider and parsing routes."""

    RATE_LIMITED_PATHS = frozenset({"/api/chat", "/api/parse-file"})

    def __init__(self, app, config: RateLimitConfig | None = None) -> None:
        super().__init__(app)
        self.limiter = RateLimiter(config)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path not in self.RATE_LIMITED_PATHS:
            return await call_next(request)

        decision = self.limiter.check_rate_limit(request)

        if decision.allowed:
            response = await call_next(request)
        else:
            logger.warning(
                "Rate limit exceeded for %s on %s",
                self.limiter.get_client_id(request),
                request.url.path,
            )
            response = JSONResponse(
                status_code=get_http_status(ResponseCode.CLIENT_RATE_LIMIT),
                content=error_dict(
                    ResponseCode.CLIENT_RATE_LIMIT,
                    custom_message=decision.message,
                    request_id=getattr(request.state, "request_id", None),
                ),
            )

        response.headers.update(decision.headers)
        return response
