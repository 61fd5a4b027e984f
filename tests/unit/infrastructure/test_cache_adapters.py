"""Tests for cache adapters and the cache factory."""

from __future__ import annotations

from pathlib import Path

import pytest

from episodarr.infrastructure.cache import (
    DiskcacheAdapter,
    RedisAdapter,
    create_cache,
)


class TestCreateCache:
    def test_diskcache(self, tmp_path: Path) -> None:
        cache = create_cache("diskcache", directory=tmp_path, ttl_seconds=60)
        assert isinstance(cache, DiskcacheAdapter)
        assert cache.default_ttl == 60

    def test_redis(self) -> None:
        cache = create_cache("redis", redis_url="redis://cache:6379/1")
        assert isinstance(cache, RedisAdapter)
        assert cache.url == "redis://cache:6379/1"

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="Unknown cache backend"):
            create_cache("memcached")  # type: ignore[arg-type]


class TestDiskcacheAdapter:
    @pytest.mark.asyncio()
    async def test_bytes_round_trip(self, tmp_path: Path) -> None:
        async with DiskcacheAdapter(directory=tmp_path) as cache:
            await cache.set("k", b'{"videoUrl": "x"}', ttl=30)
            assert await cache.get("k") == b'{"videoUrl": "x"}'

    @pytest.mark.asyncio()
    async def test_delete(self, tmp_path: Path) -> None:
        async with DiskcacheAdapter(directory=tmp_path) as cache:
            await cache.set("k", b"v")
            assert await cache.delete("k") is True
            assert await cache.delete("k") is False
            assert await cache.get("k") is None

    @pytest.mark.asyncio()
    async def test_get_before_open_raises(self, tmp_path: Path) -> None:
        with pytest.raises(RuntimeError, match="not initialized"):
            await DiskcacheAdapter(directory=tmp_path).get("k")

    @pytest.mark.asyncio()
    async def test_delete_before_open_is_noop(self, tmp_path: Path) -> None:
        assert await DiskcacheAdapter(directory=tmp_path).delete("k") is False
