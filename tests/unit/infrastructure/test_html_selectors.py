"""Tests for CSS-selector embed URL extraction."""

from __future__ import annotations

from episodarr.infrastructure.common.html_selectors import (
    extract_attr_values,
    first_attr_value,
    parse_html,
)

_HTML = """
<div class="play-video"><iframe src="//embed.example/play?id=1"></iframe></div>
<ul>
  <li><a rel="1" data-video="//embed.example/play?id=1">A</a></li>
  <li><a rel="13" data-video="https://wish.example/e/x">B</a></li>
  <li><a rel="5" data-video="">C</a></li>
  <li><a rel="6" data-video="/relative/embed">D</a></li>
</ul>
"""

_BASE = "https://anime.example/naruto-episode-1"


class TestExtractAttrValues:
    def test_rule_then_document_order_deduplicated(self) -> None:
        values = extract_attr_values(
            parse_html(_HTML),
            [("iframe[src]", "src"), ("ul li a[data-video]", "data-video")],
            base_url=_BASE,
        )
        assert values == [
            "https://embed.example/play?id=1",
            "https://wish.example/e/x",
            "https://anime.example/relative/embed",
        ]

    def test_without_base_url_keeps_raw_values(self) -> None:
        values = extract_attr_values(parse_html(_HTML), [("iframe", "src")])
        assert values == ["//embed.example/play?id=1"]

    def test_no_match(self) -> None:
        assert extract_attr_values(parse_html(_HTML), [("video", "src")]) == []


class TestFirstAttrValue:
    def test_first_rule_with_value_wins(self) -> None:
        value = first_attr_value(
            parse_html(_HTML),
            [("video[src]", "src"), ('a[rel="13"]', "data-video")],
            base_url=_BASE,
        )
        assert value == "https://wish.example/e/x"

    def test_empty_attribute_is_skipped(self) -> None:
        assert first_attr_value(parse_html(_HTML), [('a[rel="5"]', "data-video")]) is None
