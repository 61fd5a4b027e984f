"""Direct-link backend: resolves every embed listed on an episode page.

Episode listing pages (Gogoanime style) carry one anchor per mirror server
with the embed URL in a data attribute, plus the active player's iframe::

    <div class="play-video"><iframe src="//embtaku.pro/streaming.php?id=..."></iframe></div>
    <ul><li><a rel="1" data-video="//embtaku.pro/streaming.php?id=...">...</a></li></ul>

Each embed is resolved concurrently and the results are concatenated in
page order.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import httpx
import structlog

from episodarr.domain.entities.errors import NoLinksFound, UpstreamFetchError
from episodarr.domain.entities.sources import EpisodeRef, VideoSource
from episodarr.infrastructure.common.html_selectors import (
    extract_attr_values,
    parse_html,
)
from episodarr.infrastructure.common.http import fetch_text
from episodarr.infrastructure.extractors._embed import extract_embed

log = structlog.get_logger(__name__)


class DirectLinkBackend:
    """Scrapes a listing page for embed URLs and extracts each of them."""

    def __init__(
        self,
        name: str,
        http_client: httpx.AsyncClient,
        *,
        listing_url: str,
        embed_selectors: Sequence[tuple[str, str]],
    ) -> None:
        if not embed_selectors:
            raise ValueError(f"Backend {name!r} needs at least one embed selector")
        self._name = name
        self._http = http_client
        self._listing_url = listing_url
        self._embed_selectors = tuple(embed_selectors)

    @property
    def name(self) -> str:
        return self._name

    async def resolve(self, episode_ref: EpisodeRef) -> list[VideoSource]:
        listing_url = self._listing_url.format(episode_ref=episode_ref)
        html = await fetch_text(self._http, listing_url)

        embed_urls = extract_attr_values(
            parse_html(html), self._embed_selectors, base_url=listing_url
        )
        if not embed_urls:
            log.info("direct_link_no_embeds", backend=self._name, url=listing_url)
            raise NoLinksFound(self._name, listing_url)

        results = await asyncio.gather(
            *(
                extract_embed(self._http, url, backend=self._name)
                for url in embed_urls
            ),
            return_exceptions=True,
        )

        sources: list[VideoSource] = []
        first_fetch_error: UpstreamFetchError | None = None
        for embed_url, result in zip(embed_urls, results):
            if isinstance(result, UpstreamFetchError):
                first_fetch_error = first_fetch_error or result
                continue
            if isinstance(result, NoLinksFound):
                continue
            if isinstance(result, BaseException):
                log.error(
                    "direct_link_embed_error",
                    backend=self._name,
                    embed_url=embed_url,
                    exc_info=result,
                )
                continue
            sources.extend(result)

        if sources:
            log.info(
                "direct_link_resolved",
                backend=self._name,
                episode_ref=episode_ref,
                embeds=len(embed_urls),
                sources=len(sources),
            )
            return sources

        if first_fetch_error is not None:
            raise first_fetch_error
        raise NoLinksFound(self._name, listing_url)
