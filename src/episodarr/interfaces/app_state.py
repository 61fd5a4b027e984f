"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from episodarr.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from episodarr.application.use_cases import (
        ResolveAllSourcesUseCase,
        ResolveSourceUseCase,
    )
    from episodarr.domain.ports import (
        BackendRegistryPort,
        CachePort,
        FallbackResolverPort,
        SourceCacheRepository,
    )


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: CachePort
    http_client: httpx.AsyncClient

    # Domain ports
    backends: BackendRegistryPort
    fallback: FallbackResolverPort | None
    source_repo: SourceCacheRepository

    # Use cases
    resolve_source_uc: ResolveSourceUseCase
    resolve_all_sources_uc: ResolveAllSourcesUseCase
