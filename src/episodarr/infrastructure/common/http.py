"""Thin wrapper around the shared httpx client for upstream page fetches."""

from __future__ import annotations

import httpx
import structlog

from episodarr.domain.entities.errors import UpstreamFetchError

log = structlog.get_logger(__name__)


async def fetch_text(
    http_client: httpx.AsyncClient,
    url: str,
    *,
    headers: dict[str, str] | None = None,
) -> str:
    """GET *url* and return the response body as text.

    Timeouts come from the client configuration; there is no retry here,
    a failed fetch is final for the current attempt.

    Raises:
        UpstreamFetchError: Transport error, timeout or non-2xx status.
    """
    try:
        resp = await http_client.get(url, headers=headers)
    except httpx.TimeoutException as exc:
        log.warning("upstream_fetch_timeout", url=url)
        raise UpstreamFetchError(url, "timeout") from exc
    except httpx.HTTPError as exc:
        log.warning("upstream_fetch_failed", url=url, error=str(exc))
        raise UpstreamFetchError(url, str(exc) or type(exc).__name__) from exc

    if not 200 <= resp.status_code < 300:
        log.warning("upstream_http_error", url=url, status=resp.status_code)
        raise UpstreamFetchError(
            url, f"HTTP {resp.status_code}", status_code=resp.status_code
        )

    return resp.text
