"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.responses import Response

from episodarr.infrastructure.config import AppConfig
from episodarr.interfaces.api.middleware import RateLimitMiddleware
from episodarr.interfaces.api.sources.router import router as sources_router
from episodarr.interfaces.app_state import AppState
from episodarr.interfaces.composition import lifespan

log = structlog.get_logger(__name__)

ROBOTS_TXT = "User-agent: *\nDisallow: /\n"


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app: configuration only, no resource initialization.

    Resources (HTTP client, cache, backends) are created in lifespan().
    """
    app = FastAPI(
        title="Episodarr",
        description="Episode video source resolver",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    # API rate limiting (per-IP sliding window)
    if config.api_rate_limit_rpm > 0:
        app.add_middleware(
            RateLimitMiddleware, requests_per_minute=config.api_rate_limit_rpm
        )

    app.include_router(sources_router, prefix="/api/v1")

    @app.get("/api/v1/healthz")
    async def healthz() -> dict[str, str | list[str]]:
        """Liveness probe: 200 as long as the process is running."""
        registry = getattr(app.state, "backends", None)
        return {
            "status": "ok",
            "backends": registry.names if registry is not None else [],
        }

    @app.get("/robots.txt", include_in_schema=False)
    async def robots() -> PlainTextResponse:
        return PlainTextResponse(ROBOTS_TXT)

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers.setdefault("Access-Control-Allow-Origin", "*")
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
