"""Quality selection over extracted video sources.

Embedded players tag their links ``"default"`` (first) and ``"backup"``
(subsequent).  Once the ``default`` pointer has been expanded into
resolution variants (``"1080"``, ``"720"``...) it only duplicates them,
so it is dropped.  The rule is fixed: the first ``default`` entry is removed
as soon as at least one numeric-quality entry exists; ``backup`` entries
are always kept.
"""

from __future__ import annotations

from collections.abc import Sequence

from .errors import QualityNotAvailable
from .sources import QUALITY_DEFAULT, VideoSource

PREFERRED_QUALITY = "1080"


def available_qualities(sources: Sequence[VideoSource]) -> list[str]:
    """Quality strings in discovery order (duplicates kept)."""
    return [s.quality for s in sources]


def remove_placeholders(sources: Sequence[VideoSource]) -> list[VideoSource]:
    """Drop the first ``default`` entry when numeric variants exist."""
    result = list(sources)
    if not any(s.is_numeric_quality for s in result):
        return result

    for idx, source in enumerate(result):
        if source.quality == QUALITY_DEFAULT:
            del result[idx]
            break
    return result


def select_quality(sources: Sequence[VideoSource], quality: str) -> VideoSource:
    """Return the first source whose quality equals *quality*.

    Raises:
        QualityNotAvailable: With the qualities that were available.
    """
    for source in sources:
        if source.quality == quality:
            return source
    raise QualityNotAvailable(quality, available_qualities(sources))


def select_best(sources: Sequence[VideoSource]) -> VideoSource:
    """Prefer 1080p, otherwise the earliest-discovered source."""
    if not sources:
        raise QualityNotAvailable(None, [])
    for source in sources:
        if source.quality == PREFERRED_QUALITY:
            return source
    return sources[0]


def select(sources: Sequence[VideoSource], quality: str | None) -> VideoSource:
    """Exact pick when *quality* is given, best default otherwise."""
    if quality:
        return select_quality(sources, quality)
    return select_best(sources)
