"""Port for the independent fallback source API."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from episodarr.domain.entities.sources import EpisodeRef, VideoSource


@runtime_checkable
class FallbackResolverPort(Protocol):
    """Secondary resolver consulted only after the primary backend failed."""

    async def resolve(self, episode_ref: EpisodeRef) -> list[VideoSource]: ...
