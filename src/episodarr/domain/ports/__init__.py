from .backend_registry import BackendRegistryPort
from .cache import CachePort
from .extractor_backend import ExtractorBackendPort
from .fallback_resolver import FallbackResolverPort
from .source_cache_repository import SourceCacheRepository

__all__ = [
    "BackendRegistryPort",
    "CachePort",
    "ExtractorBackendPort",
    "FallbackResolverPort",
    "SourceCacheRepository",
]
