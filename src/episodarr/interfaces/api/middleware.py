"""FastAPI middleware for API rate limiting."""

from __future__ import annotations

import time
from collections import deque

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

log = structlog.get_logger(__name__)

# Dispatch cycles between sweeps of idle client entries.
_GC_INTERVAL = 256


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window rate limiter per client IP.

    Args:
        app: ASGI application.
        requests_per_minute: Max requests per IP per window. 0 = unlimited.
        window_seconds: Window length.
    """

    def __init__(
        self,
        app: object,
        requests_per_minute: int = 100,
        window_seconds: float = 60.0,
    ) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._limit = requests_per_minute
        self._window_seconds = window_seconds
        self._hits: dict[str, deque[float]] = {}
        self._dispatch_count = 0

    def _evict_idle(self) -> None:
        self._dispatch_count += 1
        if self._dispatch_count < _GC_INTERVAL:
            return
        self._dispatch_count = 0
        for ip in [ip for ip, hits in self._hits.items() if not hits]:
            del self._hits[ip]

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if self._limit <= 0:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        hits = self._hits.setdefault(client_ip, deque())
        while hits and hits[0] <= now - self._window_seconds:
            hits.popleft()

        if len(hits) >= self._limit:
            retry_after = max(1, int(hits[0] + self._window_seconds - now) + 1)
            log.warning(
                "rate_limit_exceeded",
                client_ip=client_ip,
                limit=self._limit,
                window_seconds=self._window_seconds,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Too many requests, please try again later.",
                    "retry_after_seconds": retry_after,
                },
                headers={"Retry-After": str(retry_after)},
            )

        hits.append(now)
        self._evict_idle()

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self._limit)
        remaining = max(0, self._limit - len(hits))
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
