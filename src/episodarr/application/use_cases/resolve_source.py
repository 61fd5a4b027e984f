"""Single-backend source resolution with cache and fallback."""

from __future__ import annotations

from urllib.parse import quote

import structlog

from episodarr.domain.entities import (
    CacheEntry,
    FallbackExhausted,
    NoLinksFound,
    QualityNotAvailable,
    SourceRequest,
    VideoSource,
)
from episodarr.domain.entities.quality import (
    remove_placeholders,
    select,
)
from episodarr.domain.ports import (
    BackendRegistryPort,
    FallbackResolverPort,
    SourceCacheRepository,
)

log = structlog.get_logger(__name__)


def source_cache_key(request: SourceRequest) -> str:
    """Deterministic cache key for one (backend, episode, quality) triple.

    Each part is percent-encoded so a ``:`` inside an episode ref or quality
    cannot shift the field boundaries.
    """
    parts = (request.backend, request.episode_ref, request.quality or "best")
    return "source:" + ":".join(quote(part, safe="") for part in parts)


def _entry(selected: VideoSource, sources: list[VideoSource]) -> CacheEntry:
    return CacheEntry(video_url=selected.url, qualities=tuple(sources))


class ResolveSourceUseCase:
    """Resolves one episode through one named backend.

    Flow:
        1. Look up the backend (unknown name -> BackendNotFound)
        2. Return the cached entry on hit
        3. Run the backend; a page without links counts as zero sources
        4. Strip placeholders, pick the requested (or best) quality
        5. Cache and return
    On an upstream/unexpected backend failure the fallback resolver is
    consulted exactly once; if it cannot satisfy the request the cache key is
    cleared and FallbackExhausted is raised.
    """

    def __init__(
        self,
        registry: BackendRegistryPort,
        repository: SourceCacheRepository,
        fallback: FallbackResolverPort | None = None,
    ) -> None:
        self.registry = registry
        self.repository = repository
        self.fallback = fallback

    async def execute(self, request: SourceRequest) -> CacheEntry:
        backend = self.registry.get(request.backend)
        cache_key = source_cache_key(request)

        cached = await self.repository.get_entry(cache_key)
        if cached is not None:
            log.info("source_cache_hit", cache_key=cache_key)
            return cached

        try:
            sources = await backend.resolve(request.episode_ref)
        except NoLinksFound:
            log.info(
                "source_no_links",
                backend=request.backend,
                episode_ref=request.episode_ref,
            )
            sources = []
        except Exception as exc:  # noqa: BLE001
            log.warning(
                "primary_backend_failed",
                backend=request.backend,
                episode_ref=request.episode_ref,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return await self._resolve_fallback(request, cache_key)

        candidates = remove_placeholders(sources)
        # QualityNotAvailable propagates; nothing is cached.
        selected = select(candidates, request.quality)

        entry = _entry(selected, candidates)
        await self.repository.save_entry(cache_key, entry)
        log.info(
            "source_resolved",
            backend=request.backend,
            episode_ref=request.episode_ref,
            quality=selected.quality,
            qualities=len(candidates),
        )
        return entry

    async def _resolve_fallback(
        self, request: SourceRequest, cache_key: str
    ) -> CacheEntry:
        if self.fallback is None:
            return await self._exhausted(request, cache_key, reason="disabled")

        try:
            sources = remove_placeholders(
                await self.fallback.resolve(request.episode_ref)
            )
            selected = select(sources, request.quality)
        except QualityNotAvailable:
            return await self._exhausted(request, cache_key, reason="no_match")
        except Exception as exc:  # noqa: BLE001
            log.warning(
                "fallback_failed",
                episode_ref=request.episode_ref,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return await self._exhausted(request, cache_key, reason="error")

        entry = _entry(selected, sources)
        await self.repository.save_entry(cache_key, entry)
        log.info(
            "source_resolved_via_fallback",
            backend=request.backend,
            episode_ref=request.episode_ref,
            quality=selected.quality,
        )
        return entry

    async def _exhausted(
        self, request: SourceRequest, cache_key: str, *, reason: str
    ) -> CacheEntry:
        await self.repository.invalidate(cache_key)
        log.warning(
            "fallback_exhausted",
            backend=request.backend,
            episode_ref=request.episode_ref,
            quality=request.quality,
            reason=reason,
        )
        raise FallbackExhausted(request.episode_ref, request.quality)
