"""sitemap_checker.cache: persisted result sets and their storage media."""

from sitemap_checker.cache.result_cache import (
    MAIN_KEY,
    NEW_PAGES_KEY,
    CachePair,
    ResultCache,
    build_caches,
)
from sitemap_checker.cache.storage import FileStorage, FsspecStorage, StorageMedium, build_storage

__all__ = [
    "MAIN_KEY",
    "NEW_PAGES_KEY",
    "CachePair",
    "ResultCache",
    "build_caches",
    "FileStorage",
    "FsspecStorage",
    "StorageMedium",
    "build_storage",
]
