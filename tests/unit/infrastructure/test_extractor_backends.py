"""Tests for the embedded-player and direct-link extractor backends."""

from __future__ import annotations

import httpx
import pytest
import respx

from episodarr.domain.entities import NoLinksFound, UpstreamFetchError
from episodarr.domain.ports import ExtractorBackendPort
from episodarr.infrastructure.extractors.direct_link import DirectLinkBackend
from episodarr.infrastructure.extractors.embedded_player import EmbeddedPlayerBackend

LISTING_TEMPLATE = "https://anime.example/{episode_ref}"
LISTING_URL = "https://anime.example/naruto-episode-1"

LISTING_HTML = """
<html><body>
<div class="play-video"><iframe src="//embtaku.example/streaming.php?id=MTIz"></iframe></div>
<div class="anime_muti_link"><ul>
  <li class="anime"><a rel="1" data-video="//embtaku.example/streaming.php?id=MTIz">Gogo</a></li>
  <li class="streamwish"><a rel="13" data-video="https://awish.example/e/abc123">Streamwish</a></li>
  <li class="doodstream"><a rel="4" data-video="https://dood.example/e/xyz">Dood</a></li>
</ul></div>
</body></html>
"""

GOGO_EMBED = "https://embtaku.example/streaming.php?id=MTIz"
WISH_EMBED = "https://awish.example/e/abc123"
DOOD_EMBED = "https://dood.example/e/xyz"


def _player_page(*urls: str) -> str:
    files = ", ".join(f'{{file: "{u}"}}' for u in urls)
    return f"<script>jwplayer('p').setup({{sources: [{files}]}});</script>"


class TestEmbeddedPlayerBackend:
    def test_satisfies_port(self) -> None:
        backend = EmbeddedPlayerBackend(
            "streamwish", httpx.AsyncClient(), embed_url="https://p.example/e/{episode_ref}"
        )
        assert isinstance(backend, ExtractorBackendPort)
        assert backend.name == "streamwish"

    def test_requires_embed_location(self) -> None:
        with pytest.raises(ValueError):
            EmbeddedPlayerBackend("broken", httpx.AsyncClient())

    @respx.mock
    @pytest.mark.asyncio()
    async def test_locates_embed_on_listing_page(self) -> None:
        respx.get(LISTING_URL).respond(200, text=LISTING_HTML)
        respx.get(WISH_EMBED).respond(
            200,
            text=_player_page(
                "https://cdn.example.com/v.mp4", "https://mirror.example.com/v.mp4"
            ),
        )

        async with httpx.AsyncClient() as client:
            backend = EmbeddedPlayerBackend(
                "streamwish",
                client,
                listing_url=LISTING_TEMPLATE,
                embed_selectors=[('ul li a[rel="13"]', "data-video")],
            )
            sources = await backend.resolve("naruto-episode-1")

        assert [(s.url, s.quality) for s in sources] == [
            ("https://cdn.example.com/v.mp4", "default"),
            ("https://mirror.example.com/v.mp4", "backup"),
        ]

    @respx.mock
    @pytest.mark.asyncio()
    async def test_embed_url_template_skips_listing(self) -> None:
        embed = "https://p.example/e/ep-7"
        respx.get(embed).respond(200, text=_player_page("https://cdn.example.com/7.mp4"))

        async with httpx.AsyncClient() as client:
            backend = EmbeddedPlayerBackend(
                "player", client, embed_url="https://p.example/e/{episode_ref}"
            )
            sources = await backend.resolve("ep-7")

        assert sources[0].url == "https://cdn.example.com/7.mp4"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_missing_anchor_raises_no_links(self) -> None:
        respx.get(LISTING_URL).respond(200, text="<html><ul></ul></html>")

        async with httpx.AsyncClient() as client:
            backend = EmbeddedPlayerBackend(
                "streamwish",
                client,
                listing_url=LISTING_TEMPLATE,
                embed_selectors=[('ul li a[rel="13"]', "data-video")],
            )
            with pytest.raises(NoLinksFound):
                await backend.resolve("naruto-episode-1")

    @respx.mock
    @pytest.mark.asyncio()
    async def test_listing_404_raises_fetch_error(self) -> None:
        respx.get(LISTING_URL).respond(404)

        async with httpx.AsyncClient() as client:
            backend = EmbeddedPlayerBackend(
                "streamwish",
                client,
                listing_url=LISTING_TEMPLATE,
                embed_selectors=[('ul li a[rel="13"]', "data-video")],
            )
            with pytest.raises(UpstreamFetchError) as exc_info:
                await backend.resolve("naruto-episode-1")

        assert exc_info.value.status_code == 404


class TestDirectLinkBackend:
    def _backend(self, client: httpx.AsyncClient) -> DirectLinkBackend:
        return DirectLinkBackend(
            "gogocdn",
            client,
            listing_url=LISTING_TEMPLATE,
            embed_selectors=[
                ("div.play-video iframe[src]", "src"),
                ("ul li a[data-video]", "data-video"),
            ],
        )

    def test_requires_selectors(self) -> None:
        with pytest.raises(ValueError):
            DirectLinkBackend(
                "gogocdn",
                httpx.AsyncClient(),
                listing_url=LISTING_TEMPLATE,
                embed_selectors=[],
            )

    @respx.mock
    @pytest.mark.asyncio()
    async def test_concatenates_embeds_in_page_order(self) -> None:
        respx.get(LISTING_URL).respond(200, text=LISTING_HTML)
        respx.get(GOGO_EMBED).respond(
            200, text=_player_page("https://gogo.example/v.mp4")
        )
        respx.get(WISH_EMBED).respond(
            200, text=_player_page("https://wish.example/v.mp4")
        )
        respx.get(DOOD_EMBED).respond(200, text="<html>no player</html>")

        async with httpx.AsyncClient() as client:
            sources = await self._backend(client).resolve("naruto-episode-1")

        assert [s.url for s in sources] == [
            "https://gogo.example/v.mp4",
            "https://wish.example/v.mp4",
        ]

    @respx.mock
    @pytest.mark.asyncio()
    async def test_failed_embed_is_skipped(self) -> None:
        respx.get(LISTING_URL).respond(200, text=LISTING_HTML)
        respx.get(GOGO_EMBED).respond(500)
        respx.get(WISH_EMBED).respond(
            200, text=_player_page("https://wish.example/v.mp4")
        )
        respx.get(DOOD_EMBED).mock(side_effect=httpx.ConnectError("refused"))

        async with httpx.AsyncClient() as client:
            sources = await self._backend(client).resolve("naruto-episode-1")

        assert [s.url for s in sources] == ["https://wish.example/v.mp4"]

    @respx.mock
    @pytest.mark.asyncio()
    async def test_all_embeds_unreachable_raises_fetch_error(self) -> None:
        respx.get(LISTING_URL).respond(200, text=LISTING_HTML)
        respx.get(GOGO_EMBED).respond(503)
        respx.get(WISH_EMBED).respond(503)
        respx.get(DOOD_EMBED).respond(503)

        async with httpx.AsyncClient() as client:
            with pytest.raises(UpstreamFetchError):
                await self._backend(client).resolve("naruto-episode-1")

    @respx.mock
    @pytest.mark.asyncio()
    async def test_listing_without_embeds_raises_no_links(self) -> None:
        respx.get(LISTING_URL).respond(200, text="<html><body></body></html>")

        async with httpx.AsyncClient() as client:
            with pytest.raises(NoLinksFound):
                await self._backend(client).resolve("naruto-episode-1")

    @respx.mock
    @pytest.mark.asyncio()
    async def test_embeds_without_links_raise_no_links(self) -> None:
        respx.get(LISTING_URL).respond(200, text=LISTING_HTML)
        for url in (GOGO_EMBED, WISH_EMBED, DOOD_EMBED):
            respx.get(url).respond(200, text="<html>removed</html>")

        async with httpx.AsyncClient() as client:
            with pytest.raises(NoLinksFound):
                await self._backend(client).resolve("naruto-episode-1")
