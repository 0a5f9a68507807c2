"""sitemap_checker.parser: HTML metadata and sitemap XML parsing."""

from sitemap_checker.parser.html_parser import extract_metadata
from sitemap_checker.parser.sitemap_parser import SitemapDocument, parse_lastmod, parse_sitemap

__all__ = ["extract_metadata", "SitemapDocument", "parse_lastmod", "parse_sitemap"]
