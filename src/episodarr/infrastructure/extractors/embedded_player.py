"""Embedded-player backend: resolves one episode through a single embed page.

The embed page is either built from a URL template
(``https://player.example/e/{episode_ref}``) or located on the episode's
listing page via CSS selector, e.g. the Streamwish server anchor on a
Gogoanime episode page::

    <ul><li><a rel="13" data-video="https://awish.pro/e/abc123">...</a></li></ul>
"""

from __future__ import annotations

from collections.abc import Sequence

import httpx
import structlog

from episodarr.domain.entities.errors import NoLinksFound
from episodarr.domain.entities.sources import EpisodeRef, VideoSource
from episodarr.infrastructure.common.html_selectors import first_attr_value, parse_html
from episodarr.infrastructure.common.http import fetch_text
from episodarr.infrastructure.extractors._embed import extract_embed

log = structlog.get_logger(__name__)


class EmbeddedPlayerBackend:
    """Extracts ``file:`` sources from a single embedded player page."""

    def __init__(
        self,
        name: str,
        http_client: httpx.AsyncClient,
        *,
        listing_url: str = "",
        embed_url: str = "",
        embed_selectors: Sequence[tuple[str, str]] = (),
    ) -> None:
        if not embed_url and not (listing_url and embed_selectors):
            raise ValueError(
                f"Backend {name!r} needs embed_url or listing_url + embed_selectors"
            )
        self._name = name
        self._http = http_client
        self._listing_url = listing_url
        self._embed_url = embed_url
        self._embed_selectors = tuple(embed_selectors)

    @property
    def name(self) -> str:
        return self._name

    async def resolve(self, episode_ref: EpisodeRef) -> list[VideoSource]:
        embed_url = await self._locate_embed(episode_ref)
        sources = await self.extract(embed_url)
        log.info(
            "embedded_player_resolved",
            backend=self._name,
            episode_ref=episode_ref,
            sources=len(sources),
        )
        return sources

    async def extract(self, embed_url: str) -> list[VideoSource]:
        """Extract sources from an already known embed URL."""
        return await extract_embed(self._http, embed_url, backend=self._name)

    async def _locate_embed(self, episode_ref: EpisodeRef) -> str:
        if self._embed_url:
            return self._embed_url.format(episode_ref=episode_ref)

        listing_url = self._listing_url.format(episode_ref=episode_ref)
        html = await fetch_text(self._http, listing_url)
        embed_url = first_attr_value(
            parse_html(html), self._embed_selectors, base_url=listing_url
        )
        if embed_url is None:
            log.info(
                "embedded_player_no_embed",
                backend=self._name,
                listing_url=listing_url,
            )
            raise NoLinksFound(self._name, listing_url)
        return embed_url
