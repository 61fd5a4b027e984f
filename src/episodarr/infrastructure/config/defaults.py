"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

GOGOANIME_EPISODE_URL = "https://gogoanime3.co/{episode_ref}"

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "episodarr",
    "environment": "dev",
    "http": {
        "timeout_seconds": 15.0,
        "follow_redirects": True,
        "user_agent": BROWSER_USER_AGENT,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "backend": "diskcache",
        "dir": "./.cache/episodarr",
        "redis_url": "redis://localhost:6379/0",
        "ttl_seconds": 3600,
        "max_concurrent": 10,
    },
    "resolution": {
        "default_backend": "gogocdn",
        "max_concurrent_backends": 5,
        "sources_ttl_seconds": 3600,
    },
    "fallback": {
        "enabled": True,
        "url_template": (
            "https://api-anime.sziwyz.easypanel.host/anime/gogoanime/watch/"
            "{episode_ref}"
        ),
    },
    "api": {
        "rate_limit_rpm": 100,
    },
    "backends": [
        {
            "name": "gogocdn",
            "strategy": "direct_link",
            "listing_url": GOGOANIME_EPISODE_URL,
            "embed_selectors": [
                {"selector": "div.play-video iframe[src]", "attr": "src"},
                {"selector": 'ul li a[rel="1"][data-video]', "attr": "data-video"},
            ],
        },
        {
            "name": "streamwish",
            "strategy": "embedded_player",
            "listing_url": GOGOANIME_EPISODE_URL,
            "embed_selectors": [
                {"selector": 'ul li a[rel="13"][data-video]', "attr": "data-video"},
            ],
        },
    ],
}
