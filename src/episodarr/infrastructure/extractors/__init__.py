"""Site-specific extractor backends and the fallback resolver."""

from .direct_link import DirectLinkBackend
from .embedded_player import EmbeddedPlayerBackend
from .fallback import HttpxFallbackResolver
from .registry import BackendRegistry, create_backend, create_registry

__all__ = [
    "BackendRegistry",
    "DirectLinkBackend",
    "EmbeddedPlayerBackend",
    "HttpxFallbackResolver",
    "create_backend",
    "create_registry",
]
