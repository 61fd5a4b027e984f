"""Cache Port - Interface for backend-agnostic byte caching."""

from __future__ import annotations

from typing import Protocol


class CachePort(Protocol):
    """Port for async key-value cache with TTL support.

    Values are opaque bytes; callers own serialization.

    Implementations:
      - DiskcacheAdapter (SQLite-based, no daemon)
      - RedisAdapter (Redis async client)

    Adapters are opened via async context manager:
        async with cache:
            await cache.set("key", b"value")
    """

    async def get(self, key: str) -> bytes | None:
        """Retrieve value. None = not found / expired."""
        ...

    async def set(self, key: str, value: bytes, *, ttl: int | None = None) -> None:
        """Set value with optional TTL (seconds). TTL expiry is store-managed."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete key. True = deleted, False = did not exist."""
        ...

    async def aclose(self) -> None:
        """Cleanup hook (e.g. close Redis connection)."""
        ...

    async def __aenter__(self) -> CachePort: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...
