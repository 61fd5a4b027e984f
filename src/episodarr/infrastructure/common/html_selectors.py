"""CSS-selector-based embed URL extraction from listing pages.

Backends describe where their embed links live as ``(selector, attr)``
pairs (e.g. ``("ul li a[data-video]", "data-video")`` or
``("iframe[src]", "src")``).  The helpers here apply those rules to a
BeautifulSoup tree so the scraping logic stays testable without network
access.
"""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (lxml parser)."""
    return BeautifulSoup(html, "lxml")


def _absolute(value: str, base_url: str) -> str:
    value = value.strip()
    if not base_url:
        return value
    # Handles protocol-relative embeds ("//host/e/abc") and relative paths.
    return urljoin(base_url, value)


def extract_attr_values(
    root: BeautifulSoup | Tag,
    rules: Iterable[tuple[str, str]],
    *,
    base_url: str = "",
) -> list[str]:
    """Collect attribute values from **all** rules, in rule then document order.

    Empty values are skipped, duplicates are dropped (first occurrence wins),
    and values are made absolute against *base_url* when given.
    """
    seen: set[str] = set()
    values: list[str] = []
    for selector, attr in rules:
        for tag in root.select(selector):
            raw = tag.get(attr)
            if not raw:
                continue
            url = _absolute(str(raw), base_url)
            if url in seen:
                continue
            seen.add(url)
            values.append(url)
    return values


def first_attr_value(
    root: BeautifulSoup | Tag,
    rules: Iterable[tuple[str, str]],
    *,
    base_url: str = "",
) -> str | None:
    """Return the first non-empty attribute value matched by *rules*.

    Rules act as a fallback chain: the first rule that yields a value wins.
    """
    for selector, attr in rules:
        for tag in root.select(selector):
            raw = tag.get(attr)
            if raw:
                return _absolute(str(raw), base_url)
    return None
