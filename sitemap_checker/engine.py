# File: sitemap_checker/engine.py
"""sitemap_checker.engine: orchestration of check runs for the CLI and the web app.

A run enumerates candidate pages, skips those already cached, compares the
rest one at a time and, after every record, persists the whole list before
reporting progress. Unexpected failures end the run with a single
:class:`ErrorEvent`; everything saved up to that point stays in the cache.
"""

from __future__ import annotations

from datetime import datetime
from typing import AsyncIterator, Iterable, List, Optional, Set

from aiohttp import ClientSession, ClientTimeout

from sitemap_checker.cache.result_cache import CachePair, ResultCache, build_caches
from sitemap_checker.checker.comparator import PageComparator
from sitemap_checker.checker.fetcher import Fetcher
from sitemap_checker.checker.resolver import RedirectResolver
from sitemap_checker.checker.sitemaps import SitemapSource
from sitemap_checker.checker.stream import resolve_all, resolve_all_reverse
from sitemap_checker.config import CheckerConfig
from sitemap_checker.logger import logger
from sitemap_checker.models import (
    CandidatePage,
    ComparisonRecord,
    ErrorEvent,
    ProgressEvent,
    ResultSet,
    RunEvent,
)

__all__ = ["CheckerEngine", "pending_pages", "splice_record"]


def pending_pages(pages: Iterable[CandidatePage], done: Set[str]) -> List[CandidatePage]:
    """Pages whose URL is neither in *done* nor repeated earlier in *pages*."""
    seen = set(done)
    pending: List[CandidatePage] = []
    for page in pages:
        if page.url in seen:
            continue
        seen.add(page.url)
        pending.append(page)
    return pending


def splice_record(
    results: Iterable[ComparisonRecord], record: ComparisonRecord
) -> List[ComparisonRecord]:
    """Replace the entry with the same ``source_url`` by *record*, or append it."""
    spliced = list(results)
    for index, existing in enumerate(spliced):
        if existing.source_url == record.source_url:
            spliced[index] = record
            return spliced
    spliced.append(record)
    return spliced


class CheckerEngine:
    """Facade over the checker components; use as ``async with CheckerEngine(cfg) as engine``."""

    def __init__(self, config: CheckerConfig, caches: Optional[CachePair] = None) -> None:
        self.config = config
        self.caches = caches or build_caches(config)
        self.session: Optional[ClientSession] = None
        self._comparator: Optional[PageComparator] = None
        self._sitemaps: Optional[SitemapSource] = None

    async def __aenter__(self) -> CheckerEngine:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        fetcher = Fetcher(self.session)
        self._comparator = PageComparator(
            RedirectResolver(self.session, self.config.max_redirects),
            fetcher,
            self.config.source_origin,
            self.config.target_origin,
            self.config.detect_content_changes,
        )
        self._sitemaps = SitemapSource(
            fetcher,
            self.config.index_url,
            self.config.target_index_url,
            self.config.excluded_sitemaps,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    @property
    def comparator(self) -> PageComparator:
        if self._comparator is None:
            raise RuntimeError("Engine not started, use 'async with'")
        return self._comparator

    @property
    def sitemaps(self) -> SitemapSource:
        if self._sitemaps is None:
            raise RuntimeError("Engine not started, use 'async with'")
        return self._sitemaps

    # ------------------------------------------------------------------ #
    # Cache operations                                                    #
    # ------------------------------------------------------------------ #

    async def get_cached(self) -> Optional[ResultSet]:
        return await self.caches.main.load()

    async def get_cached_new(self) -> Optional[ResultSet]:
        return await self.caches.new_pages.load()

    async def clear_cache(self) -> None:
        await self.caches.clear()
        logger.info("Cache cleared")

    async def check_single(
        self, url: str, last_modified: Optional[datetime] = None
    ) -> ComparisonRecord:
        """Compare one page again and splice the new record into the main cache."""
        record = await self.comparator.compare(CandidatePage(url, last_modified))
        cached = await self.caches.main.load()
        results = cached.results if cached is not None else []
        await self.caches.main.save(splice_record(results, record))
        logger.info("Rechecked %s: %s", url, record.outcome.value)
        return record

    # ------------------------------------------------------------------ #
    # Runs                                                                #
    # ------------------------------------------------------------------ #

    async def _stream_into(
        self,
        cache: ResultCache,
        results: List[ComparisonRecord],
        records: AsyncIterator[ComparisonRecord],
        total: int,
    ) -> AsyncIterator[ProgressEvent]:
        async for record in records:
            results.append(record)
            await cache.save(results)
            yield ProgressEvent(total, len(results), record)

    async def _replay(self, cached: ResultSet) -> AsyncIterator[ProgressEvent]:
        total = len(cached.results)
        yield ProgressEvent(total, 0)
        for processed, record in enumerate(cached.results, start=1):
            yield ProgressEvent(total, processed, record)
        yield ProgressEvent(total, total, is_complete=True)

    async def run_check(self, use_cache: bool = True) -> AsyncIterator[RunEvent]:
        """Full run; replays the cached set instead when *use_cache* and one exists."""
        try:
            if use_cache:
                cached = await self.caches.main.load()
                if cached is not None:
                    logger.info("Replaying %d cached result(s)", len(cached.results))
                    async for event in self._replay(cached):
                        yield event
                    return

            logger.info(
                "Starting full check: %s -> %s",
                self.config.source_origin, self.config.target_origin,
            )
            cache = self.caches.main
            results: List[ComparisonRecord] = []
            yield ProgressEvent(-1, 0)

            root = [CandidatePage(self.config.root_page_url)]
            async for event in self._stream_into(
                cache, results, resolve_all(self.comparator, root), -1
            ):
                yield event

            files = await self.sitemaps.list_sitemap_files()
            pages = await self.sitemaps.collect_pages(files)
            pending = pending_pages(pages, {r.source_url for r in results})
            total = len(results) + len(pending)
            yield ProgressEvent(total, len(results))

            async for event in self._stream_into(
                cache, results, resolve_all(self.comparator, pending), total
            ):
                yield event

            await cache.save(results)
            logger.info("Full check finished: %d page(s)", len(results))
            yield ProgressEvent(total, len(results), is_complete=True)
        except Exception as exc:
            logger.error("Check failed: %s", exc)
            yield ErrorEvent(str(exc))

    async def run_incremental(self) -> AsyncIterator[RunEvent]:
        """Check only sitemap pages that the main cache does not hold yet."""
        try:
            cache = self.caches.main
            cached = await cache.load()
            results = list(cached.results) if cached is not None else []
            yield ProgressEvent(-1, 0)

            files = await self.sitemaps.list_sitemap_files()
            pages = await self.sitemaps.collect_pages(files)
            pending = pending_pages(pages, {r.source_url for r in results})
            total = len(results) + len(pending)
            logger.info("Incremental check: %d cached, %d new page(s)", len(results), len(pending))
            yield ProgressEvent(total, len(results))

            async for event in self._stream_into(
                cache, results, resolve_all(self.comparator, pending), total
            ):
                yield event

            yield ProgressEvent(total, len(results), is_complete=True)
        except Exception as exc:
            logger.error("Incremental check failed: %s", exc)
            yield ErrorEvent(str(exc))

    async def run_reverse_check(self) -> AsyncIterator[RunEvent]:
        """Check pages of the target sitemap against the source site to find new pages."""
        try:
            cache = self.caches.new_pages
            cached = await cache.load()
            results = list(cached.results) if cached is not None else []
            yield ProgressEvent(-1, 0)

            files = await self.sitemaps.list_target_sitemap_files()
            pages = await self.sitemaps.collect_pages(files)
            pending = pending_pages(pages, {r.target_url for r in results})
            total = len(results) + len(pending)
            logger.info("Reverse check: %d cached, %d page(s) to check", len(results), len(pending))
            yield ProgressEvent(total, len(results))

            async for event in self._stream_into(
                cache, results, resolve_all_reverse(self.comparator, pending), total
            ):
                yield event

            yield ProgressEvent(total, len(results), is_complete=True)
        except Exception as exc:
            logger.error("Reverse check failed: %s", exc)
            yield ErrorEvent(str(exc))
