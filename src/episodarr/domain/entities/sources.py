"""Domain entities for episode source resolution.

Pure value objects, no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Opaque episode identifier, owned by the caller (e.g. "one-piece-episode-1000").
EpisodeRef = str

# Human labels used by embedded players for "same stream, alternate pointer".
QUALITY_DEFAULT = "default"
QUALITY_BACKUP = "backup"
QUALITY_UNKNOWN = "unknown"


@dataclass(frozen=True)
class VideoSource:
    """A single playable URL with its quality tag."""

    url: str
    quality: str  # "default", "backup", "unknown" or a height like "1080"
    is_streaming_manifest: bool = False  # True for .m3u8 playlists

    @property
    def is_numeric_quality(self) -> bool:
        return self.quality.isdigit()

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "quality": self.quality,
            "isStreamingManifest": self.is_streaming_manifest,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VideoSource:
        return cls(
            url=data["url"],
            quality=str(data.get("quality", QUALITY_UNKNOWN)),
            is_streaming_manifest=bool(data.get("isStreamingManifest", False)),
        )


# Ordered sources from one backend invocation; first entry is the primary pick.
ExtractionResult = list[VideoSource]


@dataclass(frozen=True)
class CacheEntry:
    """Resolved video URL plus every quality that was available.

    Stored by the source cache repository and returned to callers of the
    single-source resolution.
    """

    video_url: str
    qualities: tuple[VideoSource, ...] = field(default_factory=tuple)

    @property
    def selected(self) -> VideoSource:
        """The VideoSource matching ``video_url`` (synthesized if absent)."""
        for source in self.qualities:
            if source.url == self.video_url:
                return source
        return VideoSource(
            url=self.video_url,
            quality=QUALITY_UNKNOWN,
            is_streaming_manifest=".m3u8" in self.video_url,
        )


@dataclass(frozen=True)
class BackendError:
    """Error marker occupying one backend's slot in an all-sources result."""

    error: str

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error}


# Result of the all-sources fan-out: backend name -> sources or error marker.
AllSourcesResult = dict[str, "ExtractionResult | BackendError"]


@dataclass(frozen=True)
class SourceRequest:
    """Parsed single-source resolution request."""

    episode_ref: EpisodeRef
    backend: str
    quality: str | None = None  # None = best default
