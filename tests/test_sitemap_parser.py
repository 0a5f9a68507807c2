# File: tests/test_sitemap_parser.py
from datetime import date, datetime, timedelta, timezone

import pytest

from sitemap_checker.parser.sitemap_parser import parse_lastmod, parse_sitemap

INDEX_XML = """<?xml version="1.0" encoding="UTF-8"?>
<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
    <sitemap><loc>https://www.example.com/page-sitemap.xml</loc><lastmod>2025-12-10</lastmod></sitemap>
    <sitemap><loc> https://www.example.com/post-sitemap.xml </loc></sitemap>
    <sitemap><loc></loc></sitemap>
</sitemapindex>"""

URLSET_XML = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
    <url><loc>https://www.example.com/about</loc><lastmod>2025-12-01</lastmod></url>
    <url><loc>https://www.example.com/contact</loc></url>
    <url><loc>https://www.example.com/blog</loc><lastmod>2025-11-30T08:15:00Z</lastmod></url>
    <url><loc>https://www.example.com/odd</loc><lastmod>yesterday</lastmod></url>
</urlset>"""


def test_parse_index():
    doc = parse_sitemap(INDEX_XML)
    assert doc.is_index
    assert doc.sitemaps == [
        "https://www.example.com/page-sitemap.xml",
        "https://www.example.com/post-sitemap.xml",
    ]
    assert doc.pages == []


def test_parse_urlset_keeps_order_and_lastmod():
    doc = parse_sitemap(URLSET_XML.encode("utf-8"))
    assert not doc.is_index
    assert [p.url for p in doc.pages] == [
        "https://www.example.com/about",
        "https://www.example.com/contact",
        "https://www.example.com/blog",
        "https://www.example.com/odd",
    ]
    assert doc.pages[0].last_modified.date() == date(2025, 12, 1)
    assert doc.pages[1].last_modified is None
    assert doc.pages[2].last_modified == datetime(2025, 11, 30, 8, 15, tzinfo=timezone.utc)
    assert doc.pages[3].last_modified is None


def test_parse_without_namespace():
    doc = parse_sitemap("<urlset><url><loc>https://a.example/x</loc></url></urlset>")
    assert [p.url for p in doc.pages] == ["https://a.example/x"]


@pytest.mark.parametrize("content", ["", "not xml at all", "<html><body>oops</body></html>"])
def test_invalid_sitemap_raises_value_error(content):
    with pytest.raises(ValueError):
        parse_sitemap(content)


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, None),
        ("", None),
        ("garbage", None),
        ("2024-05-01", datetime(2024, 5, 1)),
        ("2024-05-01T10:00:00+02:00", datetime(2024, 5, 1, 10, tzinfo=timezone(timedelta(hours=2)))),
    ],
)
def test_parse_lastmod(value, expected):
    assert parse_lastmod(value) == expected
