"""Source resolution API endpoints."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from episodarr.domain.entities import (
    AllSourcesResult,
    BackendError,
    BackendNotFound,
    CacheEntry,
    FallbackExhausted,
    QualityNotAvailable,
    SourceRequest,
)
from episodarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["sources"])

_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
}


def _json(content: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=_HEADERS)


def _error(message: str, status_code: int, **extra: Any) -> JSONResponse:
    return _json({"error": message, **extra}, status_code=status_code)


def _entry_payload(entry: CacheEntry) -> dict[str, Any]:
    selected = entry.selected
    return {
        "url": entry.video_url,
        "quality": selected.quality,
        "isStreamingManifest": selected.is_streaming_manifest,
        "qualities": [q.to_dict() for q in entry.qualities],
    }


def _all_sources_payload(result: AllSourcesResult) -> dict[str, Any]:
    return {
        name: (
            slot.to_dict()
            if isinstance(slot, BackendError)
            else [s.to_dict() for s in slot]
        )
        for name, slot in result.items()
    }


@router.get("/source")
async def resolve_source(
    request: Request,
    episode_ref: str | None = None,
    backend: str | None = None,
    quality: str | None = None,
) -> JSONResponse:
    """Resolve one playable URL through one backend (with fallback)."""
    state = cast(AppState, request.app.state)

    if not episode_ref or not episode_ref.strip():
        return _error("episode_ref is required", 400)

    source_request = SourceRequest(
        episode_ref=episode_ref.strip(),
        backend=backend or state.config.resolution.default_backend,
        quality=quality or None,
    )

    try:
        entry = await state.resolve_source_uc.execute(source_request)
    except BackendNotFound as exc:
        return _error(str(exc), 400, availableBackends=exc.available)
    except QualityNotAvailable as exc:
        return _error(str(exc), 404, availableQualities=exc.available_qualities)
    except FallbackExhausted as exc:
        return _error(str(exc), 404)
    except Exception:  # noqa: BLE001
        log.exception(
            "resolve_source_error",
            episode_ref=source_request.episode_ref,
            backend=source_request.backend,
        )
        return _error("Internal server error", 500)

    return _json(_entry_payload(entry))


@router.get("/sources")
async def resolve_all_sources(
    request: Request,
    episode_ref: str | None = None,
    raw: bool = False,
) -> JSONResponse:
    """Resolve every backend concurrently; failed backends carry an error."""
    state = cast(AppState, request.app.state)

    if not episode_ref or not episode_ref.strip():
        return _error("episode_ref is required", 400)

    try:
        result = await state.resolve_all_sources_uc.execute(
            episode_ref.strip(), raw=raw
        )
    except Exception:  # noqa: BLE001
        log.exception("resolve_all_sources_error", episode_ref=episode_ref)
        return _error("Internal server error", 500)

    return _json(_all_sources_payload(result))


@router.get("/backends")
async def list_backends(request: Request) -> JSONResponse:
    """List registered backend names and the default one."""
    state = cast(AppState, request.app.state)
    return _json(
        {
            "backends": state.backends.names,
            "default": state.config.resolution.default_backend,
        }
    )
