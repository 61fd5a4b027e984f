"""Shared embed-page extraction for JWPlayer-style embedded players.

Players such as Streamwish expose their sources as inline
``file: "https://..."`` entries, either directly in the page or inside a
Dean Edwards packed ``eval(function(p,a,c,k,e,d){...})`` block.  The first
usable link is the player's ``default`` source, later ones are ``backup``
mirrors.  When one of them is an HLS master playlist it is fetched (with the
embed page as ``Referer``) and expanded into per-resolution variants.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from urllib.parse import urlparse

import httpx
import structlog

from episodarr.domain.entities.errors import NoLinksFound, UpstreamFetchError
from episodarr.domain.entities.sources import (
    QUALITY_BACKUP,
    QUALITY_DEFAULT,
    VideoSource,
)
from episodarr.infrastructure.common.http import fetch_text
from episodarr.infrastructure.hls.manifest_parser import (
    is_streaming_manifest_url,
    parse_master_playlist,
)

log = structlog.get_logger(__name__)

_FILE_LINK_RE = re.compile(r'file:\s*"([^"]+)"')

_PACKED_START_RE = re.compile(
    r"eval\s*\(\s*function\s*\(\s*p\s*,\s*a\s*,\s*c\s*,\s*k\s*,\s*e\s*,\s*d\s*\)"
)
_PACKED_ARGS_RE = re.compile(
    r"}\('(.*?)',\s*(\d+),\s*\d+,\s*'([^']*)'\s*\.split\('\|'\)",
    re.DOTALL,
)

# Poster/thumbnail entries share the file: syntax with real sources.
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")

# Upper bound on how much script text one packed block may span.
_PACKED_CHUNK = 65536

# Packer token digits: 0-9, then a-z, then A-Z (base 62 at most).
_TOKEN_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


def is_image_url(url: str) -> bool:
    return urlparse(url).path.lower().endswith(IMAGE_EXTENSIONS)


def _decode_token(token: str, base: int) -> int | None:
    value = 0
    for char in token:
        digit = _TOKEN_DIGITS.find(char)
        if digit < 0 or digit >= base:
            return None
        value = value * base + digit
    return value


def unpack_packed_js(packed: str) -> str | None:
    """Unpack one ``eval(function(p,a,c,k,e,d){...})`` block.

    Every word token in the payload is a base-*a* index into the ``|``
    separated word list.  Tokens that do not decode, or point at an empty
    slot, are kept verbatim.  Quotes the packer escaped are restored so the
    ``file:"..."`` scan sees plain script.
    """
    match = _PACKED_ARGS_RE.search(packed)
    if not match:
        return None

    payload = match.group(1)
    base = int(match.group(2))
    words = match.group(3).split("|")

    def _substitute(m: re.Match[str]) -> str:
        index = _decode_token(m.group(0), base)
        if index is not None and index < len(words) and words[index]:
            return words[index]
        return m.group(0)

    return re.sub(r"\b\w+\b", _substitute, payload).replace("\\'", "'")


def _find_file_links(text: str) -> list[str]:
    normalized = text.replace('\\"', '"')
    return [m.group(1) for m in _FILE_LINK_RE.finditer(normalized)]


def extract_file_links(html: str) -> list[str]:
    """Return ``file: "<url>"`` references from an embed page, images removed.

    Inline references win; packed script blocks are only unpacked when the
    page has none.
    """
    links = _find_file_links(html)
    if not links:
        for pm in _PACKED_START_RE.finditer(html):
            unpacked = unpack_packed_js(html[pm.start() : pm.start() + _PACKED_CHUNK])
            if unpacked:
                links.extend(_find_file_links(unpacked))
    return [link for link in links if not is_image_url(link)]


def tag_links(links: Sequence[str]) -> list[VideoSource]:
    """First link is ``default``, every later one ``backup``."""
    return [
        VideoSource(
            url=link,
            quality=QUALITY_DEFAULT if idx == 0 else QUALITY_BACKUP,
            is_streaming_manifest=is_streaming_manifest_url(link),
        )
        for idx, link in enumerate(links)
    ]


async def expand_manifest(
    http_client: httpx.AsyncClient,
    sources: Sequence[VideoSource],
    *,
    referer: str,
) -> list[VideoSource]:
    """Append the variants of the first HLS source to *sources*.

    The base list is always kept; an unreachable or non-master playlist
    just adds nothing.
    """
    result = list(sources)
    manifest = next((s for s in sources if s.is_streaming_manifest), None)
    if manifest is None:
        return result

    try:
        body = await fetch_text(http_client, manifest.url, headers={"Referer": referer})
    except UpstreamFetchError as exc:
        log.warning(
            "manifest_fetch_failed",
            manifest_url=manifest.url,
            referer=referer,
            error=exc.reason,
        )
        return result

    variants = list(parse_master_playlist(body, manifest.url))
    log.debug(
        "manifest_expanded",
        manifest_url=manifest.url,
        variants=len(variants),
    )
    result.extend(variants)
    return result


async def extract_embed(
    http_client: httpx.AsyncClient,
    embed_url: str,
    *,
    backend: str,
) -> list[VideoSource]:
    """Fetch one embed page and return its tagged (and expanded) sources.

    Raises:
        UpstreamFetchError: Embed page could not be fetched.
        NoLinksFound: Page had no usable ``file:`` reference.
    """
    html = await fetch_text(http_client, embed_url)

    links = extract_file_links(html)
    if not links:
        log.info("embed_no_links", backend=backend, embed_url=embed_url)
        raise NoLinksFound(backend, embed_url)

    sources = tag_links(links)
    return await expand_manifest(http_client, sources, referer=embed_url)
