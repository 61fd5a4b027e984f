"""Resolved-source repository backed by CachePort (diskcache/redis)."""

from __future__ import annotations

import json
from typing import Any

import structlog

from episodarr.domain.entities.sources import (
    AllSourcesResult,
    BackendError,
    CacheEntry,
    VideoSource,
)
from episodarr.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)


def _serialize_entry(entry: CacheEntry) -> bytes:
    return json.dumps(
        {
            "videoUrl": entry.video_url,
            "qualities": [q.to_dict() for q in entry.qualities],
        }
    ).encode("utf-8")


def _deserialize_entry(data: bytes) -> CacheEntry:
    d = json.loads(data.decode("utf-8"))
    return CacheEntry(
        video_url=d["videoUrl"],
        qualities=tuple(VideoSource.from_dict(q) for q in d.get("qualities", [])),
    )


def _serialize_all_sources(result: AllSourcesResult) -> bytes:
    payload: dict[str, Any] = {}
    for backend, value in result.items():
        if isinstance(value, BackendError):
            payload[backend] = value.to_dict()
        else:
            payload[backend] = [s.to_dict() for s in value]
    return json.dumps(payload).encode("utf-8")


def _deserialize_all_sources(data: bytes) -> AllSourcesResult:
    d = json.loads(data.decode("utf-8"))
    if not isinstance(d, dict):
        raise ValueError("all-sources payload must be an object")
    result: AllSourcesResult = {}
    for backend, value in d.items():
        if isinstance(value, dict):
            result[backend] = BackendError(error=str(value["error"]))
        else:
            result[backend] = [VideoSource.from_dict(s) for s in value]
    return result


class CacheSourceRepository:
    """Stores resolution results as JSON via CachePort.

    Corrupt entries are logged and reported as a miss.
    """

    def __init__(
        self,
        cache: CachePort,
        entry_ttl_seconds: int = 3600,
        sources_ttl_seconds: int = 3600,
    ) -> None:
        self.cache = cache
        self.entry_ttl = entry_ttl_seconds
        self.sources_ttl = sources_ttl_seconds

    async def get_entry(self, key: str) -> CacheEntry | None:
        data = await self.cache.get(key)
        if data is None:
            return None
        try:
            return _deserialize_entry(data)
        except (json.JSONDecodeError, UnicodeDecodeError, KeyError, TypeError) as e:
            log.error("source_entry_deserialize_error", key=key, error=str(e))
            return None

    async def save_entry(self, key: str, entry: CacheEntry) -> None:
        await self.cache.set(key, _serialize_entry(entry), ttl=self.entry_ttl)
        log.debug(
            "source_entry_saved",
            key=key,
            qualities=len(entry.qualities),
            ttl=self.entry_ttl,
        )

    async def invalidate(self, key: str) -> None:
        deleted = await self.cache.delete(key)
        log.debug("source_entry_invalidated", key=key, deleted=deleted)

    async def get_all_sources(self, key: str) -> AllSourcesResult | None:
        data = await self.cache.get(key)
        if data is None:
            return None
        try:
            return _deserialize_all_sources(data)
        except (
            json.JSONDecodeError,
            UnicodeDecodeError,
            KeyError,
            TypeError,
            ValueError,
        ) as e:
            log.error("all_sources_deserialize_error", key=key, error=str(e))
            return None

    async def save_all_sources(self, key: str, result: AllSourcesResult) -> None:
        await self.cache.set(key, _serialize_all_sources(result), ttl=self.sources_ttl)
        log.debug(
            "all_sources_saved", key=key, backends=len(result), ttl=self.sources_ttl
        )
