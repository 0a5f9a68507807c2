# sitemap_checker/checker/sitemaps.py
"""
Sitemap source: enumerates the pages both sites declare in their sitemaps.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence

from sitemap_checker.checker.fetcher import Fetcher
from sitemap_checker.errors import SitemapError
from sitemap_checker.logger import logger
from sitemap_checker.models import CandidatePage
from sitemap_checker.parser.sitemap_parser import SitemapDocument, parse_sitemap


class SitemapSource:
    """Reads the sitemap index of the source site and the sitemap of the target site."""

    def __init__(
        self,
        fetcher: Fetcher,
        index_url: str,
        target_index_url: str,
        excluded: Sequence[str] = ("local-sitemap.xml",),
    ) -> None:
        self.fetcher = fetcher
        self.index_url = index_url
        self.target_index_url = target_index_url
        self.excluded = tuple(excluded)

    async def _load_index(self, url: str) -> SitemapDocument:
        body = await self.fetcher.fetch(url)
        if body is None:
            raise SitemapError(url, "fetch failed")
        try:
            return parse_sitemap(body)
        except ValueError as exc:
            raise SitemapError(url, str(exc)) from exc

    async def list_sitemap_files(self) -> List[str]:
        """Child sitemaps of the source index, without excluded ones."""
        doc = await self._load_index(self.index_url)
        files = [loc for loc in doc.sitemaps if not any(m in loc for m in self.excluded)]
        logger.info("Sitemap index %s lists %d sitemap(s)", self.index_url, len(files))
        return files

    async def list_target_sitemap_files(self) -> List[str]:
        """Child sitemaps of the target site, or the target sitemap itself when it is a urlset."""
        doc = await self._load_index(self.target_index_url)
        if doc.is_index:
            return list(doc.sitemaps)
        return [self.target_index_url]

    async def list_pages(self, sitemap_url: str) -> List[CandidatePage]:
        """Pages of one sitemap; an unavailable sitemap gives an empty list."""
        body = await self.fetcher.fetch(sitemap_url)
        if body is None:
            logger.warning("Sitemap %s unavailable, skipped", sitemap_url)
            return []
        try:
            doc = parse_sitemap(body)
        except ValueError as exc:
            logger.warning("Sitemap %s unparseable, skipped: %s", sitemap_url, exc)
            return []
        return doc.pages

    async def collect_pages(self, sitemap_urls: Iterable[str]) -> List[CandidatePage]:
        """Pages of all given sitemaps in sitemap order."""
        pages: List[CandidatePage] = []
        for url in sitemap_urls:
            pages.extend(await self.list_pages(url))
        return pages


__all__ = ["SitemapSource"]
