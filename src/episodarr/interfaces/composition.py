"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from episodarr.application.use_cases import (
    ResolveAllSourcesUseCase,
    ResolveSourceUseCase,
)
from episodarr.infrastructure.cache.cache_factory import create_cache
from episodarr.infrastructure.extractors.fallback import HttpxFallbackResolver
from episodarr.infrastructure.extractors.registry import create_registry
from episodarr.infrastructure.persistence.source_cache import CacheSourceRepository
from episodarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan hook: initialize and clean up all resources.

    Order matters:
        1. Cache (required by the repository)
        2. HTTP client (shared by every backend and the fallback)
        3. Backend registry
        4. Fallback resolver (optional)
        5. Source repository
        6. Use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Cache
    cache = create_cache(
        backend=config.cache.backend,
        directory=str(config.cache.directory),
        redis_url=config.cache.redis_url,
        ttl_seconds=config.cache.ttl_seconds,
        max_concurrent=config.cache.max_concurrent,
    )
    await cache.__aenter__()
    state.cache = cache
    log.info("cache_initialized", backend=config.cache.backend)

    # 2) HTTP client; the timeout bounds every upstream fetch
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 3) Backends
    state.backends = create_registry(config.backends, state.http_client)

    # 4) Fallback
    state.fallback = None
    if config.fallback.enabled:
        state.fallback = HttpxFallbackResolver(
            state.http_client, config.fallback.url_template
        )
    log.info("fallback_configured", enabled=config.fallback.enabled)

    # 5) Repository
    state.source_repo = CacheSourceRepository(
        cache=state.cache,
        entry_ttl_seconds=config.cache.ttl_seconds,
        sources_ttl_seconds=config.resolution.sources_ttl_seconds,
    )

    # 6) Use cases
    state.resolve_source_uc = ResolveSourceUseCase(
        registry=state.backends,
        repository=state.source_repo,
        fallback=state.fallback,
    )
    state.resolve_all_sources_uc = ResolveAllSourcesUseCase(
        registry=state.backends,
        repository=state.source_repo,
        max_concurrent=config.resolution.max_concurrent_backends,
    )

    log.info("app_startup_complete", backends=state.backends.names)

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        await state.cache.aclose()
        log.info("cache_closed")

        log.info("app_shutdown_complete")
