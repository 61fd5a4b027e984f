"""Common infrastructure utilities."""

from __future__ import annotations

from .html_selectors import extract_attr_values, first_attr_value, parse_html
from .http import fetch_text

__all__ = [
    "extract_attr_values",
    "first_attr_value",
    "fetch_text",
    "parse_html",
]
