"""Port for looking up extractor backends by name."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from episodarr.domain.ports.extractor_backend import ExtractorBackendPort


@runtime_checkable
class BackendRegistryPort(Protocol):
    @property
    def names(self) -> list[str]: ...

    def get(self, name: str) -> ExtractorBackendPort:
        """Raises BackendNotFound for unknown names."""
        ...

    def __iter__(self) -> Iterator[ExtractorBackendPort]: ...
