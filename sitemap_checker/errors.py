# File: sitemap_checker/errors.py
"""sitemap_checker.errors: exceptions that end a whole check run.

Per-page failures and cache I/O failures never surface as exceptions; they
degrade into record fields or cache misses. Only failures outside the
per-page model are raised.
"""

from __future__ import annotations

__all__ = ["SitemapCheckerError", "SitemapError", "StorageError"]


class SitemapCheckerError(Exception):
    """Base class for run-level failures."""


class SitemapError(SitemapCheckerError):
    """The sitemap index could not be fetched or parsed."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Sitemap {url} unavailable: {reason}")
        self.url = url
        self.reason = reason


class StorageError(SitemapCheckerError):
    """The cache storage medium cannot be constructed."""
