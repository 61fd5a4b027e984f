"""Port for resolved-source persistence."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from episodarr.domain.entities.sources import AllSourcesResult, CacheEntry


@runtime_checkable
class SourceCacheRepository(Protocol):
    """Async interface for caching resolution results."""

    async def get_entry(self, key: str) -> CacheEntry | None: ...

    async def save_entry(self, key: str, entry: CacheEntry) -> None: ...

    async def invalidate(self, key: str) -> None: ...

    async def get_all_sources(self, key: str) -> AllSourcesResult | None: ...

    async def save_all_sources(self, key: str, result: AllSourcesResult) -> None: ...
