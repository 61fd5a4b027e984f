"""Shared test fixtures for the Episodarr test suite."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from unittest.mock import AsyncMock

import pytest

from episodarr.domain.entities import VideoSource

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


def _make_source(
    quality: str,
    url: str | None = None,
    *,
    manifest: bool = False,
) -> VideoSource:
    """VideoSource with a URL derived from its quality unless given."""
    return VideoSource(
        url=url or f"https://cdn.example.com/{quality}.mp4",
        quality=quality,
        is_streaming_manifest=manifest,
    )


@pytest.fixture()
def sources_with_variants() -> list[VideoSource]:
    """Embedded-player output after manifest expansion."""
    return [
        _make_source(
            "default", "https://cdn.example.com/hls/master.m3u8", manifest=True
        ),
        _make_source("backup", "https://mirror.example.com/v.mp4"),
        _make_source("1080", "https://cdn.example.com/hls/1080.m3u8", manifest=True),
        _make_source("720", "https://cdn.example.com/hls/720.m3u8", manifest=True),
    ]


@pytest.fixture()
def make_source() -> Callable[..., VideoSource]:
    """Factory for VideoSource test values."""
    return _make_source


# ---------------------------------------------------------------------------
# Port fakes
# ---------------------------------------------------------------------------


class FakeBackend:
    """ExtractorBackendPort double returning canned sources or raising."""

    def __init__(
        self,
        name: str,
        sources: Sequence[VideoSource] = (),
        *,
        error: Exception | None = None,
    ) -> None:
        self._name = name
        self._sources = list(sources)
        self._error = error
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def resolve(self, episode_ref: str) -> list[VideoSource]:
        self.calls.append(episode_ref)
        if self._error is not None:
            raise self._error
        return list(self._sources)


@pytest.fixture()
def fake_backend() -> Callable[..., FakeBackend]:
    return FakeBackend


@pytest.fixture()
def mock_cache() -> AsyncMock:
    """Mock CachePort."""
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock()
    cache.delete = AsyncMock(return_value=True)
    cache.aclose = AsyncMock()
    return cache


@pytest.fixture()
def mock_repository() -> AsyncMock:
    """Mock SourceCacheRepository (always a miss)."""
    repo = AsyncMock()
    repo.get_entry = AsyncMock(return_value=None)
    repo.save_entry = AsyncMock()
    repo.invalidate = AsyncMock()
    repo.get_all_sources = AsyncMock(return_value=None)
    repo.save_all_sources = AsyncMock()
    return repo
