"""Cache factory: builds the configured CachePort adapter."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import structlog

from episodarr.domain.ports.cache import CachePort
from episodarr.infrastructure.cache.diskcache_adapter import DiskcacheAdapter
from episodarr.infrastructure.cache.redis_adapter import RedisAdapter

log = structlog.get_logger(__name__)

CacheBackend = Literal["diskcache", "redis"]

# Redis tolerates far more parallel ops than a single SQLite file.
REDIS_MAX_CONCURRENT = 50


def create_cache(
    backend: CacheBackend = "diskcache",
    *,
    directory: str | Path = "./.cache/episodarr",
    redis_url: str = "redis://localhost:6379/0",
    ttl_seconds: int = 3600,
    max_concurrent: int = 10,
) -> CachePort:
    """Create the cache adapter for *backend*.

    Args:
        backend: "diskcache" (SQLite) or "redis".
        directory: Diskcache path.
        redis_url: Redis connection string.
        ttl_seconds: Default TTL for entries written without one.
        max_concurrent: Semaphore limit for diskcache; Redis uses
            REDIS_MAX_CONCURRENT.

    Raises:
        ValueError: Unknown backend.
    """
    if backend == "diskcache":
        log.info(
            "cache_factory_create",
            backend=backend,
            directory=str(directory),
            ttl=ttl_seconds,
            max_concurrent=max_concurrent,
        )
        return DiskcacheAdapter(
            directory=directory,
            ttl_seconds=ttl_seconds,
            max_concurrent=max_concurrent,
        )
    if backend == "redis":
        log.info(
            "cache_factory_create",
            backend=backend,
            url=redis_url,
            ttl=ttl_seconds,
            max_concurrent=REDIS_MAX_CONCURRENT,
        )
        return RedisAdapter(
            url=redis_url,
            ttl_seconds=ttl_seconds,
            max_concurrent=REDIS_MAX_CONCURRENT,
        )
    raise ValueError(
        f"Unknown cache backend: {backend!r}. Must be 'diskcache' or 'redis'."
    )
