from .resolve_all_sources import ResolveAllSourcesUseCase, all_sources_cache_key
from .resolve_source import ResolveSourceUseCase, source_cache_key

__all__ = [
    "ResolveAllSourcesUseCase",
    "ResolveSourceUseCase",
    "all_sources_cache_key",
    "source_cache_key",
]
