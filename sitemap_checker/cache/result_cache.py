# File: sitemap_checker/cache/result_cache.py
"""sitemap_checker.cache.result_cache: best-effort persistence of the whole result set.

The cache doubles as a checkpoint: the driver saves the full list after every
compared page, so a restarted run only checks what is not stored yet.
Nothing here raises on I/O problems; a failed read is a cache miss and a
failed write is logged and dropped.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Iterable, Optional

from sitemap_checker.cache.storage import StorageMedium, build_storage
from sitemap_checker.config import CheckerConfig
from sitemap_checker.logger import logger
from sitemap_checker.models import ComparisonRecord, ResultSet, utcnow

MAIN_KEY = "sitemap-results.json"
NEW_PAGES_KEY = "new-pages-results.json"


class ResultCache:
    """Stores one :class:`ResultSet` under one key of a storage medium.

    All operations hold ``lock``, readers included, because neither a file
    nor a remote blob isolates a read from a concurrent write.
    """

    def __init__(
        self,
        storage: StorageMedium,
        key: str = MAIN_KEY,
        lock: Optional[asyncio.Lock] = None,
    ) -> None:
        self.storage = storage
        self.key = key
        self.lock = lock or asyncio.Lock()

    async def load(self) -> Optional[ResultSet]:
        """Return a fresh copy of the stored set, or None if absent or unreadable."""
        async with self.lock:
            try:
                raw = await self.storage.get(self.key)
                if raw is None:
                    return None
                return ResultSet.from_dict(json.loads(raw))
            except Exception as exc:
                logger.warning("Error reading cache %s: %s", self.key, exc)
                return None

    async def save(self, results: Iterable[ComparisonRecord]) -> None:
        """Replace the stored set with *results*, stamped with the current time."""
        async with self.lock:
            try:
                result_set = ResultSet(cached_at=utcnow(), results=list(results))
                data = json.dumps(result_set.to_dict(), ensure_ascii=False, indent=2)
                await self.storage.put(self.key, data.encode("utf-8"))
            except Exception as exc:
                logger.error("Error saving cache %s: %s", self.key, exc)

    async def clear(self) -> None:
        """Delete the stored set; nothing stored is fine."""
        async with self.lock:
            try:
                await self.storage.delete(self.key)
            except Exception as exc:
                logger.error("Error clearing cache %s: %s", self.key, exc)


@dataclass(slots=True)
class CachePair:
    """The two caches of one deployment, sharing a medium and a lock."""

    main: ResultCache
    new_pages: ResultCache

    async def clear(self) -> None:
        await self.main.clear()
        await self.new_pages.clear()


def build_caches(config: CheckerConfig, storage: Optional[StorageMedium] = None) -> CachePair:
    """Create the main and new-pages caches for *config*."""
    medium = storage or build_storage(config.cache_dir, config.storage_url)
    lock = asyncio.Lock()
    return CachePair(
        main=ResultCache(medium, MAIN_KEY, lock),
        new_pages=ResultCache(medium, NEW_PAGES_KEY, lock),
    )


__all__ = ["ResultCache", "CachePair", "build_caches", "MAIN_KEY", "NEW_PAGES_KEY"]
