"""Error taxonomy of the source-resolution engine."""

from __future__ import annotations


class ResolutionError(Exception):
    """Base error for source resolution."""


class NoLinksFound(ResolutionError):
    """Backend page was fetched but contained no parsable source reference."""

    def __init__(self, backend: str, url: str = "") -> None:
        self.backend = backend
        self.url = url
        super().__init__(f"No video links found ({backend})")


class UpstreamFetchError(ResolutionError):
    """Network failure, timeout or non-2xx status from an upstream page."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


class QualityNotAvailable(ResolutionError):
    """Requested quality is not among the resolved sources."""

    def __init__(self, requested: str | None, available_qualities: list[str]) -> None:
        self.requested = requested
        self.available_qualities = available_qualities
        super().__init__("Requested quality not available")


class FallbackExhausted(ResolutionError):
    """Primary backend and fallback resolver both failed."""

    def __init__(self, episode_ref: str, quality: str | None) -> None:
        self.episode_ref = episode_ref
        self.quality = quality
        super().__init__(
            "Failed to get video URL from both primary and fallback servers"
        )


class BackendNotFound(ResolutionError):
    """Requested backend name is not registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(f"Invalid server: {name!r}")
