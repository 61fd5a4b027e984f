"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from .defaults import BROWSER_USER_AGENT, DEFAULT_CONFIG

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
CacheBackendName = Literal["diskcache", "redis"]
BackendStrategy = Literal["direct_link", "embedded_player"]


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class CacheConfig(BaseModel):
    """Cache configuration (backend-agnostic)."""

    backend: CacheBackendName = Field(
        default="diskcache",
        description="Cache backend: 'diskcache' (SQLite) or 'redis'",
    )
    directory: Path = Field(
        default=Path("./.cache/episodarr"),
        validation_alias=AliasChoices("dir", "directory"),
        description="Diskcache SQLite DB path",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (only when backend=redis)",
    )
    ttl_seconds: int = Field(
        default=3600,
        description="TTL for resolved single-source entries (seconds)",
    )
    max_concurrent: int = Field(
        default=10,
        description="Max parallel cache ops (semaphore limit)",
    )

    @field_validator("directory", mode="before")
    @classmethod
    def _validate_directory(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("ttl_seconds")
    @classmethod
    def _validate_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache.ttl_seconds must be > 0")
        return v


class ResolutionConfig(BaseModel):
    """Source-resolution behaviour."""

    default_backend: str = Field(
        default="gogocdn",
        description="Backend used when a request names none.",
    )
    max_concurrent_backends: int = Field(
        default=5,
        description="Max parallel backends during an all-sources fan-out.",
    )
    sources_ttl_seconds: int = Field(
        default=3600,
        description="TTL for cached all-sources results (seconds).",
    )

    @field_validator("max_concurrent_backends")
    @classmethod
    def _validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("resolution.max_concurrent_backends must be >= 1")
        return v


class FallbackConfig(BaseModel):
    """Independent API consulted after a primary backend failure."""

    enabled: bool = True
    url_template: str = Field(
        default=DEFAULT_CONFIG["fallback"]["url_template"],
        description="Fallback endpoint; '{episode_ref}' is substituted.",
    )

    @field_validator("url_template")
    @classmethod
    def _validate_template(cls, v: str) -> str:
        if "{episode_ref}" not in v:
            raise ValueError("fallback.url_template must contain '{episode_ref}'")
        return v


class EmbedSelector(BaseModel):
    """CSS selector plus the attribute holding the embed URL."""

    selector: str
    attr: str


class BackendConfig(BaseModel):
    """One site-specific extractor backend definition."""

    name: str
    strategy: BackendStrategy
    listing_url: str = Field(
        default="",
        description="Episode listing page; '{episode_ref}' is substituted.",
    )
    embed_url: str = Field(
        default="",
        description="Direct embed page template (embedded_player only).",
    )
    embed_selectors: list[EmbedSelector] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_strategy_fields(self) -> "BackendConfig":
        has_listing = bool(self.listing_url and self.embed_selectors)
        if self.strategy == "direct_link" and not has_listing:
            raise ValueError(
                f"backend {self.name!r}: direct_link needs listing_url "
                "and embed_selectors"
            )
        if self.strategy == "embedded_player" and not (self.embed_url or has_listing):
            raise ValueError(
                f"backend {self.name!r}: embedded_player needs embed_url "
                "or listing_url + embed_selectors"
            )
        return self

    @property
    def selector_pairs(self) -> list[tuple[str, str]]:
        return [(s.selector, s.attr) for s in self.embed_selectors]


def _default_backends() -> list[BackendConfig]:
    return [BackendConfig.model_validate(b) for b in DEFAULT_CONFIG["backends"]]


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/cache/resolution/...).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="episodarr", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP client (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Timeout in seconds for every upstream fetch.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default=BROWSER_USER_AGENT,
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="Browser-like User-Agent for upstream pages.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # API (YAML section: api.*)
    api_rate_limit_rpm: int = Field(
        default=100,
        validation_alias=AliasChoices(
            "api_rate_limit_rpm",
            AliasPath("api", "rate_limit_rpm"),
        ),
        description="Max requests per client IP per minute. 0 = unlimited.",
    )

    cache: CacheConfig = Field(default_factory=CacheConfig)
    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
    fallback: FallbackConfig = Field(default_factory=FallbackConfig)
    backends: list[BackendConfig] = Field(default_factory=_default_backends)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("api_rate_limit_rpm")
    @classmethod
    def _validate_rate_limit(cls, v: int) -> int:
        if v < 0:
            raise ValueError("api_rate_limit_rpm must be >= 0")
        return v

    @model_validator(mode="after")
    def _check_backends(self) -> "AppConfig":
        names = [b.name for b in self.backends]
        if not names:
            raise ValueError("at least one backend must be configured")
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise ValueError(f"duplicate backend names: {sorted(duplicates)}")
        if self.resolution.default_backend not in names:
            raise ValueError(
                f"resolution.default_backend {self.resolution.default_backend!r} "
                f"is not one of {names}"
            )
        return self

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "cache": {
                "backend": self.cache.backend,
                "dir": str(self.cache.directory),
                "redis_url": self.cache.redis_url,
                "ttl_seconds": self.cache.ttl_seconds,
                "max_concurrent": self.cache.max_concurrent,
            },
            "resolution": self.resolution.model_dump(),
            "fallback": self.fallback.model_dump(),
            "api": {"rate_limit_rpm": self.api_rate_limit_rpm},
            "backends": [b.model_dump() for b in self.backends],
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read EPISODARR_* variables, converts
    them to a dict of set values, merges into YAML/defaults, then validates
    AppConfig.

    Supported env var examples (flat, explicit):
    - EPISODARR_HTTP_TIMEOUT_SECONDS
    - EPISODARR_LOG_LEVEL
    - EPISODARR_CACHE_BACKEND / EPISODARR_CACHE_MAX_CONCURRENT
    - EPISODARR_SOURCES_TTL_SECONDS
    - EPISODARR_FALLBACK_ENABLED
    """

    model_config = SettingsConfigDict(
        env_prefix="EPISODARR_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_backend: Optional[CacheBackendName] = None
    cache_dir: Optional[Path] = None
    cache_redis_url: Optional[str] = None
    cache_ttl_seconds: Optional[int] = None
    cache_max_concurrent: Optional[int] = None

    default_backend: Optional[str] = None
    max_concurrent_backends: Optional[int] = None
    sources_ttl_seconds: Optional[int] = None

    fallback_enabled: Optional[bool] = None
    fallback_url_template: Optional[str] = None

    api_rate_limit_rpm: Optional[int] = None

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
