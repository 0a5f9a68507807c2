# sitemap_checker/checker/comparator.py
"""
Page comparator: resolves one sitemap page on the other site and classifies
how the two pages relate.

``compare`` never raises. Every failure while fetching or resolving degrades
into empty fields or a ``Missing`` outcome so that a batch always completes.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from sitemap_checker.checker.fetcher import Fetcher
from sitemap_checker.checker.resolver import RedirectResolver, Resolution
from sitemap_checker.logger import logger
from sitemap_checker.models import (
    DIFFERENT,
    ERROR_PATH,
    IDENTICAL,
    MISSING_PATH,
    NEW_PATH,
    CandidatePage,
    ComparisonRecord,
    Outcome,
)

__all__ = ["PageComparator", "classify", "compare_text", "relative_path"]


def relative_path(url: str) -> str:
    """Path and query of *url* with scheme and host removed; ``"/"`` when empty."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url or "/"
    rel = urlunsplit(("", "", parts.path, parts.query, ""))
    return rel or "/"


def _path_on(origin: str, url: str) -> str:
    # Off-site redirect targets keep their full URL
    if urlsplit(url).netloc.lower() != urlsplit(origin).netloc.lower():
        return url
    return relative_path(url)


def compare_text(left: str, right: str) -> str:
    """Case-insensitive equality rendered as ``Identical`` / ``Different``."""
    return IDENTICAL if left.casefold() == right.casefold() else DIFFERENT


def classify(
    status: int,
    hops: int,
    title_comparison: Optional[str] = None,
    og_title_comparison: Optional[str] = None,
    detect_content_changes: bool = True,
) -> Outcome:
    """Outcome for a target that answered *status* after *hops* redirects."""
    if status != 200:
        return Outcome.MISSING
    if hops == 1:
        return Outcome.REDIRECTED_ONCE
    if hops >= 2:
        return Outcome.REDIRECTED_CHAIN
    if detect_content_changes and DIFFERENT in (title_comparison, og_title_comparison):
        return Outcome.PRESENT_DIFFERENT_CONTENT
    return Outcome.PRESENT


class PageComparator:
    """Compares pages of the source site with the target site."""

    def __init__(
        self,
        resolver: RedirectResolver,
        fetcher: Fetcher,
        source_origin: str,
        target_origin: str,
        detect_content_changes: bool = True,
    ) -> None:
        self.resolver = resolver
        self.fetcher = fetcher
        self.source_origin = source_origin.rstrip("/")
        self.target_origin = target_origin.rstrip("/")
        self.detect_content_changes = detect_content_changes

    async def compare(self, page: CandidatePage) -> ComparisonRecord:
        """Check whether *page* of the source site survived on the target site."""
        rel = relative_path(page.url)
        source_meta = await self.fetcher.fetch_metadata(page.url)

        target_url = self.target_origin + rel
        resolution = await self.resolver.resolve(target_url)
        logger.debug(
            "%s -> HTTP %s after %d hop(s) at %s",
            target_url, resolution.status, resolution.hops, resolution.final_url,
        )

        if resolution.status != 200:
            return ComparisonRecord(
                source_relative_path=rel,
                source_url=page.url,
                target_relative_path=self._absent_path(resolution),
                target_url="",
                outcome=Outcome.MISSING,
                source_title=source_meta.title,
                source_og_title=source_meta.og_title,
                last_modified=page.last_modified,
            )

        if resolution.hops == 0:
            target_rel, final_url = rel, target_url
        else:
            final_url = resolution.final_url
            target_rel = _path_on(self.target_origin, final_url)

        target_meta = await self.fetcher.fetch_metadata(final_url)
        title_cmp = compare_text(source_meta.title, target_meta.title)
        og_cmp = compare_text(source_meta.og_title, target_meta.og_title)

        return ComparisonRecord(
            source_relative_path=rel,
            source_url=page.url,
            target_relative_path=target_rel,
            target_url=final_url,
            outcome=classify(
                resolution.status, resolution.hops, title_cmp, og_cmp, self.detect_content_changes
            ),
            source_title=source_meta.title,
            target_title=target_meta.title,
            source_og_title=source_meta.og_title,
            target_og_title=target_meta.og_title,
            title_comparison=title_cmp,
            og_title_comparison=og_cmp,
            last_modified=page.last_modified,
        )

    async def compare_reverse(self, page: CandidatePage) -> ComparisonRecord:
        """Check whether *page* of the target site already existed on the source site."""
        rel = relative_path(page.url)
        target_meta = await self.fetcher.fetch_metadata(page.url)

        source_url = self.source_origin + rel
        resolution = await self.resolver.resolve(source_url)

        if resolution.status != 200:
            return ComparisonRecord(
                source_relative_path=NEW_PATH,
                source_url="",
                target_relative_path=rel,
                target_url=page.url,
                outcome=Outcome.MISSING,
                target_title=target_meta.title,
                target_og_title=target_meta.og_title,
                last_modified=page.last_modified,
            )

        source_meta = await self.fetcher.fetch_metadata(resolution.final_url)
        return ComparisonRecord(
            source_relative_path=rel,
            source_url=source_url,
            target_relative_path=rel,
            target_url=page.url,
            outcome=Outcome.PRESENT,
            source_title=source_meta.title,
            target_title=target_meta.title,
            source_og_title=source_meta.og_title,
            target_og_title=target_meta.og_title,
            title_comparison=compare_text(source_meta.title, target_meta.title),
            og_title_comparison=compare_text(source_meta.og_title, target_meta.og_title),
            last_modified=page.last_modified,
        )

    @staticmethod
    def _absent_path(resolution: Resolution) -> str:
        if resolution.status in (0, 404):
            return MISSING_PATH
        return ERROR_PATH
