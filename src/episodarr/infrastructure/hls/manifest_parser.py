"""HLS master playlist parsing: variant listing to quality-tagged sources.

A master playlist looks like::

    #EXTM3U
    #EXT-X-STREAM-INF:BANDWIDTH=1280000,RESOLUTION=1280x720
    index-v1-a1.m3u8?t=abc
    #EXT-X-STREAM-INF:BANDWIDTH=2560000,RESOLUTION=1920x1080
    index-v2-a1.m3u8?t=abc

Variant paths are resolved against the directory of the master playlist
URL, so ``https://cdn.example.com/hls/abc/master.m3u8?t=x`` turns
``index-v1-a1.m3u8`` into ``https://cdn.example.com/hls/abc/index-v1-a1.m3u8``.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from urllib.parse import urljoin, urlparse

from episodarr.domain.entities.sources import QUALITY_UNKNOWN, VideoSource

MANIFEST_HEADER = "#EXTM3U"
STREAM_INF_MARKER = "#EXT-X-STREAM-INF:"
MANIFEST_EXTENSION = ".m3u8"

_RESOLUTION_RE = re.compile(r"RESOLUTION=\d+x(\d+)")


def is_streaming_manifest_url(url: str) -> bool:
    """True when the URL path ends in the HLS playlist extension."""
    return urlparse(url).path.lower().endswith(MANIFEST_EXTENSION)


def manifest_base_url(manifest_url: str) -> str:
    """Directory of a manifest URL (everything up to the last ``/``).

    >>> manifest_base_url("https://cdn.example.com/hls2/01/master.m3u8?t=abc")
    'https://cdn.example.com/hls2/01/'
    """
    parsed = urlparse(manifest_url)
    path = parsed.path
    last_slash = path.rfind("/")
    base_path = path[: last_slash + 1] if last_slash >= 0 else "/"
    return f"{parsed.scheme}://{parsed.netloc}{base_path}"


def is_master_playlist(text: str) -> bool:
    """True when *text* starts with the HLS header marker."""
    return text.lstrip("\ufeff \t\r\n").startswith(MANIFEST_HEADER)


def parse_master_playlist(text: str, manifest_url: str) -> Iterator[VideoSource]:
    """Yield one ``VideoSource`` per variant stream in a master playlist.

    Not a master playlist (missing ``#EXTM3U``) yields nothing.  Variant
    segments without a URI line are skipped.
    """
    if not is_master_playlist(text):
        return

    base_url = manifest_base_url(manifest_url)

    # The first chunk is the playlist header, never a variant.
    for segment in text.split(STREAM_INF_MARKER)[1:]:
        if MANIFEST_EXTENSION not in segment:
            continue

        lines = segment.replace("\r\n", "\n").split("\n")
        if len(lines) < 2 or not lines[1].strip():
            continue

        match = _RESOLUTION_RE.search(lines[0])
        yield VideoSource(
            url=urljoin(base_url, lines[1].strip()),
            quality=match.group(1) if match else QUALITY_UNKNOWN,
            is_streaming_manifest=True,
        )
