"""Registry of named extractor backends, fixed at startup."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from types import MappingProxyType

import httpx
import structlog

from episodarr.domain.entities.errors import BackendNotFound
from episodarr.domain.ports.extractor_backend import ExtractorBackendPort
from episodarr.infrastructure.config.schema import BackendConfig
from episodarr.infrastructure.extractors.direct_link import DirectLinkBackend
from episodarr.infrastructure.extractors.embedded_player import EmbeddedPlayerBackend

log = structlog.get_logger(__name__)


class BackendRegistry:
    """Immutable name -> backend mapping, iterated in registration order."""

    def __init__(self, backends: Iterable[ExtractorBackendPort]) -> None:
        table: dict[str, ExtractorBackendPort] = {}
        for backend in backends:
            if backend.name in table:
                raise ValueError(f"Duplicate backend name: {backend.name!r}")
            table[backend.name] = backend
        self._backends = MappingProxyType(table)

    @property
    def names(self) -> list[str]:
        return list(self._backends)

    def get(self, name: str) -> ExtractorBackendPort:
        """Return the backend registered as *name*.

        Raises:
            BackendNotFound: *name* is not registered.
        """
        try:
            return self._backends[name]
        except KeyError:
            raise BackendNotFound(name, self.names) from None

    def __iter__(self) -> Iterator[ExtractorBackendPort]:
        return iter(self._backends.values())


def create_backend(
    definition: BackendConfig, http_client: httpx.AsyncClient
) -> ExtractorBackendPort:
    if definition.strategy == "direct_link":
        return DirectLinkBackend(
            definition.name,
            http_client,
            listing_url=definition.listing_url,
            embed_selectors=definition.selector_pairs,
        )
    return EmbeddedPlayerBackend(
        definition.name,
        http_client,
        listing_url=definition.listing_url,
        embed_url=definition.embed_url,
        embed_selectors=definition.selector_pairs,
    )


def create_registry(
    definitions: Iterable[BackendConfig], http_client: httpx.AsyncClient
) -> BackendRegistry:
    """Build a registry from configured backend definitions."""
    registry = BackendRegistry(create_backend(d, http_client) for d in definitions)
    log.info("backend_registry_created", backends=registry.names)
    return registry
