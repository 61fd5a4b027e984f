from .errors import (
    BackendNotFound,
    FallbackExhausted,
    NoLinksFound,
    QualityNotAvailable,
    ResolutionError,
    UpstreamFetchError,
)
from .sources import (
    QUALITY_BACKUP,
    QUALITY_DEFAULT,
    QUALITY_UNKNOWN,
    AllSourcesResult,
    BackendError,
    CacheEntry,
    EpisodeRef,
    ExtractionResult,
    SourceRequest,
    VideoSource,
)

__all__ = [
    "QUALITY_BACKUP",
    "QUALITY_DEFAULT",
    "QUALITY_UNKNOWN",
    "AllSourcesResult",
    "BackendError",
    "BackendNotFound",
    "CacheEntry",
    "EpisodeRef",
    "ExtractionResult",
    "FallbackExhausted",
    "NoLinksFound",
    "QualityNotAvailable",
    "ResolutionError",
    "SourceRequest",
    "UpstreamFetchError",
    "VideoSource",
]
