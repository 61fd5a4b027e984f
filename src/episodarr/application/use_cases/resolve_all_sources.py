"""Concurrent fan-out over every registered backend."""

from __future__ import annotations

import asyncio
from urllib.parse import quote

import structlog

from episodarr.domain.entities import (
    AllSourcesResult,
    BackendError,
    EpisodeRef,
    ExtractionResult,
    NoLinksFound,
)
from episodarr.domain.entities.quality import remove_placeholders
from episodarr.domain.ports import (
    BackendRegistryPort,
    ExtractorBackendPort,
    SourceCacheRepository,
)

log = structlog.get_logger(__name__)

FAILED_TO_GET_SOURCES = "Failed to get sources"
NO_SOURCES_FOUND = "No sources found"


def all_sources_cache_key(episode_ref: EpisodeRef, *, raw: bool = False) -> str:
    prefix = "sources-raw" if raw else "sources"
    return f"{prefix}:{quote(episode_ref, safe='')}"


class ResolveAllSourcesUseCase:
    """Runs every backend concurrently; each slot holds sources or an error.

    A failing backend never fails the whole call. The combined map is only
    cached when every backend produced sources.
    """

    def __init__(
        self,
        registry: BackendRegistryPort,
        repository: SourceCacheRepository,
        max_concurrent: int = 5,
    ) -> None:
        self.registry = registry
        self.repository = repository
        self.max_concurrent = max_concurrent

    async def execute(
        self, episode_ref: EpisodeRef, *, raw: bool = False
    ) -> AllSourcesResult:
        cache_key = all_sources_cache_key(episode_ref, raw=raw)
        cached = await self.repository.get_all_sources(cache_key)
        if cached is not None:
            log.info("all_sources_cache_hit", cache_key=cache_key)
            return cached

        backends = list(self.registry)
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def _bounded(
            backend: ExtractorBackendPort,
        ) -> ExtractionResult | BackendError:
            async with semaphore:
                return await self._resolve_one(backend, episode_ref, raw=raw)

        slots = await asyncio.gather(*(_bounded(b) for b in backends))
        result: AllSourcesResult = {
            backend.name: slot for backend, slot in zip(backends, slots)
        }

        failed = [
            name for name, slot in result.items() if isinstance(slot, BackendError)
        ]
        if failed:
            log.info(
                "all_sources_partial",
                episode_ref=episode_ref,
                failed_backends=failed,
            )
        else:
            await self.repository.save_all_sources(cache_key, result)

        log.info(
            "all_sources_resolved",
            episode_ref=episode_ref,
            backends=len(result),
            failed=len(failed),
            raw=raw,
        )
        return result

    async def _resolve_one(
        self,
        backend: ExtractorBackendPort,
        episode_ref: EpisodeRef,
        *,
        raw: bool,
    ) -> ExtractionResult | BackendError:
        try:
            sources = await backend.resolve(episode_ref)
        except NoLinksFound:
            return BackendError(NO_SOURCES_FOUND)
        except Exception as exc:  # noqa: BLE001
            log.warning(
                "backend_failed",
                backend=backend.name,
                episode_ref=episode_ref,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return BackendError(FAILED_TO_GET_SOURCES)

        if not sources:
            return BackendError(NO_SOURCES_FOUND)
        return sources if raw else remove_placeholders(sources)
