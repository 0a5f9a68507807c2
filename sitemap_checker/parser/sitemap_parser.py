# File: sitemap_checker/parser/sitemap_parser.py
"""sitemap_checker.parser.sitemap_parser: parsing of sitemap index and urlset XML."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from lxml import etree

from sitemap_checker.models import CandidatePage

SITEMAP_INDEX = "sitemapindex"
URLSET = "urlset"


@dataclass(slots=True)
class SitemapDocument:
    """Parsed sitemap: its root kind, child sitemap locations and listed pages."""

    kind: str
    sitemaps: List[str] = field(default_factory=list)
    pages: List[CandidatePage] = field(default_factory=list)

    @property
    def is_index(self) -> bool:
        return self.kind == SITEMAP_INDEX


def parse_lastmod(value: Optional[str]) -> Optional[datetime]:
    """Parse a W3C datetime from ``<lastmod>``; unparseable values give None."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def _child_text(element: etree._Element, name: str) -> Optional[str]:
    child = element.find(f"{{*}}{name}")
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


def parse_sitemap(xml_content: str | bytes) -> SitemapDocument:
    """Parse sitemap XML and return its child sitemaps or pages.

    Args:
        xml_content: content of a sitemap index or a urlset.

    Raises:
        ValueError: the content is not XML with a recognisable root.

    Example:
    ```python
    doc = parse_sitemap(open("sitemap_index.xml", encoding="utf-8").read())
    for loc in doc.sitemaps:
        print(loc)
    ```
    """
    data = xml_content.encode("utf-8") if isinstance(xml_content, str) else xml_content
    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False)
    try:
        root = etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise ValueError(f"Invalid sitemap XML: {exc}") from exc
    if root is None:
        raise ValueError("Invalid sitemap XML: empty document")

    kind = _local_name(root)
    doc = SitemapDocument(kind=kind)
    if kind == SITEMAP_INDEX:
        for entry in root.iterfind("{*}sitemap"):
            loc = _child_text(entry, "loc")
            if loc:
                doc.sitemaps.append(loc)
    elif kind == URLSET:
        for entry in root.iterfind("{*}url"):
            loc = _child_text(entry, "loc")
            if loc:
                doc.pages.append(CandidatePage(loc, parse_lastmod(_child_text(entry, "lastmod"))))
    else:
        raise ValueError(f"Unexpected sitemap root element: {kind}")
    return doc


__all__ = ["SitemapDocument", "parse_sitemap", "parse_lastmod", "SITEMAP_INDEX", "URLSET"]
