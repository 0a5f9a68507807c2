# === FILE: sitemap_checker/parser/html_parser.py ===
"""Title metadata extraction for SitemapChecker.

Only two values matter for comparing a migrated page with its original:

* title: document ``<title>`` text, stripped, or ``""`` if absent.
* og:title: ``content`` of ``<meta property="og:title">`` or ``""``.

The parser is lenient: broken or empty markup yields empty strings and never
raises.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Union

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Tag

from sitemap_checker.models import PageMetadata

__all__: Sequence[str] = ("extract_metadata",)


def _og_title(soup: BeautifulSoup) -> str:
    tag = soup.find("meta", attrs={"property": "og:title"})
    if not isinstance(tag, Tag):
        return ""
    content = tag.get("content")
    if not isinstance(content, str):
        return ""
    return content


def extract_metadata(markup: Union[str, bytes, None]) -> PageMetadata:
    """Return the title and og:title found in *markup*."""
    if not markup:
        return PageMetadata()

    try:
        soup = BeautifulSoup(markup, "html.parser")
    except ParserRejectedMarkup:
        return PageMetadata()

    title_tag = soup.find("title")
    title = title_tag.get_text().strip() if isinstance(title_tag, Tag) else ""

    return PageMetadata(title=title, og_title=_og_title(soup))
