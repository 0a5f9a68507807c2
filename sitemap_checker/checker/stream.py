# sitemap_checker/checker/stream.py
"""
Batch resolution stream: compares pages one after another and yields every
record as soon as it is known.
"""
from __future__ import annotations

from typing import AsyncIterator, Iterable

from sitemap_checker.checker.comparator import PageComparator
from sitemap_checker.models import CandidatePage, ComparisonRecord


async def resolve_all(
    comparator: PageComparator, pages: Iterable[CandidatePage]
) -> AsyncIterator[ComparisonRecord]:
    """
    Yield ``compare(page)`` for each page, in input order.

    One comparison is in flight at a time. A consumer that stops iterating
    leaves the remaining pages uncompared.
    """
    for page in pages:
        yield await comparator.compare(page)


async def resolve_all_reverse(
    comparator: PageComparator, pages: Iterable[CandidatePage]
) -> AsyncIterator[ComparisonRecord]:
    """Same as :func:`resolve_all` for pages listed by the target site."""
    for page in pages:
        yield await comparator.compare_reverse(page)


__all__ = ["resolve_all", "resolve_all_reverse"]
