"""sitemap_checker.checker: redirect resolution, page comparison and batch streaming."""

from sitemap_checker.checker.comparator import PageComparator, classify, relative_path
from sitemap_checker.checker.fetcher import Fetcher
from sitemap_checker.checker.resolver import RedirectResolver, Resolution
from sitemap_checker.checker.sitemaps import SitemapSource
from sitemap_checker.checker.stream import resolve_all, resolve_all_reverse

__all__ = [
    "Fetcher",
    "PageComparator",
    "RedirectResolver",
    "Resolution",
    "SitemapSource",
    "classify",
    "relative_path",
    "resolve_all",
    "resolve_all_reverse",
]
