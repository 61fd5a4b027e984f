"""Port for site-specific episode source extraction."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from episodarr.domain.entities.sources import EpisodeRef, VideoSource


@runtime_checkable
class ExtractorBackendPort(Protocol):
    """Resolves an episode reference to candidate video sources on one site.

    Implementations must not keep per-call state on the instance: a single
    backend object serves concurrent requests.
    """

    @property
    def name(self) -> str:
        """Backend name used for registry lookup and cache keys."""
        ...

    async def resolve(self, episode_ref: EpisodeRef) -> list[VideoSource]:
        """Return sources in discovery order (first = primary pick).

        Raises:
            NoLinksFound: Page contained no parsable source reference.
            UpstreamFetchError: Page or embed could not be retrieved.
        """
        ...
