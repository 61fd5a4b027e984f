from __future__ import annotations

from .setup import configure_logging

__all__ = ["configure_logging"]
