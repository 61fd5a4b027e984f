"""Tests for structlog/stdlib logging configuration."""

from __future__ import annotations

import structlog

from episodarr.infrastructure.config import AppConfig
from episodarr.infrastructure.logging.setup import build_logging_config


class TestBuildLoggingConfig:
    def test_json_renderer_in_prod(self) -> None:
        cfg = build_logging_config(AppConfig(environment="prod", log_level="WARNING"))
        formatter = cfg["formatters"]["structlog"]
        assert formatter["()"] is structlog.stdlib.ProcessorFormatter
        assert isinstance(
            formatter["processors"][-1], structlog.processors.JSONRenderer
        )
        assert cfg["root"] == {"handlers": ["default"], "level": "WARNING"}

    def test_console_renderer_in_dev(self) -> None:
        cfg = build_logging_config(AppConfig(environment="dev"))
        renderer = cfg["formatters"]["structlog"]["processors"][-1]
        assert isinstance(renderer, structlog.dev.ConsoleRenderer)

    def test_uvicorn_loggers_follow_level_httpx_stays_quiet(self) -> None:
        cfg = build_logging_config(AppConfig(log_level="DEBUG"))
        assert cfg["loggers"]["uvicorn.access"]["level"] == "DEBUG"
        assert cfg["loggers"]["httpx"]["level"] == "WARNING"

    def test_base_config_not_mutated(self) -> None:
        build_logging_config(AppConfig(log_level="DEBUG"))
        cfg = build_logging_config(AppConfig(log_level="ERROR"))
        assert cfg["loggers"]["uvicorn"]["level"] == "ERROR"
