"""Fallback resolver backed by an independent streaming-links JSON API.

Expected response shape (consumet-style ``watch`` endpoint)::

    {"sources": [{"url": "https://.../master.m3u8", "quality": "1080p", "isM3U8": true}]}
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog

from episodarr.domain.entities.errors import NoLinksFound, UpstreamFetchError
from episodarr.domain.entities.sources import QUALITY_UNKNOWN, EpisodeRef, VideoSource
from episodarr.infrastructure.common.http import fetch_text
from episodarr.infrastructure.hls.manifest_parser import is_streaming_manifest_url

log = structlog.get_logger(__name__)

FALLBACK_NAME = "fallback"


def _parse_source(item: Any) -> VideoSource | None:
    if not isinstance(item, dict):
        return None
    url = item.get("url")
    if not isinstance(url, str) or not url.startswith("http"):
        return None
    is_manifest = item.get("isM3U8")
    return VideoSource(
        url=url,
        quality=str(item.get("quality") or QUALITY_UNKNOWN),
        is_streaming_manifest=(
            bool(is_manifest)
            if is_manifest is not None
            else is_streaming_manifest_url(url)
        ),
    )


def parse_fallback_payload(payload: Any) -> list[VideoSource]:
    """Convert the API's ``sources`` array, skipping malformed entries."""
    if not isinstance(payload, dict):
        return []
    items = payload.get("sources")
    if not isinstance(items, list):
        return []
    return [s for s in (_parse_source(item) for item in items) if s is not None]


class HttpxFallbackResolver:
    """Calls ``url_template.format(episode_ref=...)`` and parses its sources."""

    def __init__(self, http_client: httpx.AsyncClient, url_template: str) -> None:
        self._http = http_client
        self._url_template = url_template

    async def resolve(self, episode_ref: EpisodeRef) -> list[VideoSource]:
        url = self._url_template.format(episode_ref=episode_ref)
        body = await fetch_text(
            self._http, url, headers={"Accept": "application/json"}
        )

        try:
            payload = json.loads(body)
        except json.JSONDecodeError as exc:
            log.warning("fallback_invalid_json", url=url)
            raise UpstreamFetchError(url, "invalid JSON response") from exc

        sources = parse_fallback_payload(payload)
        if not sources:
            raise NoLinksFound(FALLBACK_NAME, url)

        log.info("fallback_resolved", episode_ref=episode_ref, sources=len(sources))
        return sources
