"""Storage media for the result cache: a flat key -> bytes store."""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import Optional, Protocol, Union

import fsspec

from sitemap_checker.errors import StorageError

__all__ = ["StorageMedium", "FileStorage", "FsspecStorage", "build_storage"]


class StorageMedium(Protocol):
    """Protocol describing the operations the result cache needs."""

    async def get(self, key: str) -> Optional[bytes]:
        """Return the stored bytes for *key* or ``None`` when absent."""

    async def put(self, key: str, data: bytes) -> None:
        """Store *data* under *key*, replacing previous content."""

    async def delete(self, key: str) -> None:
        """Remove *key*; a missing key is not an error."""

    async def exists(self, key: str) -> bool:
        """Return ``True`` when *key* holds data."""


def _check_key(key: str) -> str:
    if not key or "/" in key or "\\" in key or key in (".", ".."):
        raise ValueError(f"invalid storage key: {key!r}")
    return key


class FileStorage:
    """Keys are files inside one local directory."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root).expanduser()
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.root / _check_key(key)

    @staticmethod
    def _read(path: Path) -> Optional[bytes]:
        if not path.is_file():
            return None
        return path.read_bytes()

    def _write(self, path: Path, data: bytes) -> None:
        # write-then-rename so readers never observe a half-written file
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def get(self, key: str) -> Optional[bytes]:
        return await asyncio.to_thread(self._read, self._path(key))

    async def put(self, key: str, data: bytes) -> None:
        await asyncio.to_thread(self._write, self._path(key), data)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._path(key).unlink, missing_ok=True)

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(self._path(key).is_file)


class FsspecStorage:
    """Keys are objects below an fsspec URL (``memory://``, ``s3://``, ``az://``...)."""

    def __init__(self, url: str) -> None:
        fs, path = fsspec.core.url_to_fs(url)
        self.fs = fs
        self.base_path = PurePosixPath(path)
        self.fs.makedirs(str(self.base_path), exist_ok=True)

    def _path(self, key: str) -> str:
        return str(self.base_path / _check_key(key))

    async def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        try:
            return await asyncio.to_thread(self.fs.cat_file, path)
        except FileNotFoundError:
            return None

    async def put(self, key: str, data: bytes) -> None:
        await asyncio.to_thread(self.fs.pipe_file, self._path(key), data)

    async def delete(self, key: str) -> None:
        path = self._path(key)
        if await asyncio.to_thread(self.fs.exists, path):
            await asyncio.to_thread(self.fs.rm, path)

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(self.fs.exists, self._path(key))


def build_storage(cache_dir: Union[str, Path], storage_url: Optional[str] = None) -> StorageMedium:
    """Pick the storage medium: the fsspec URL when given, else the local directory."""
    if storage_url:
        try:
            return FsspecStorage(storage_url)
        except (ValueError, ImportError, OSError) as exc:
            raise StorageError(f"cannot open cache storage {storage_url}: {exc}") from exc
    try:
        return FileStorage(cache_dir)
    except OSError as exc:
        raise StorageError(f"cannot create cache directory {cache_dir}: {exc}") from exc
