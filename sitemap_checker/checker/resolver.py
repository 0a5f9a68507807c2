# sitemap_checker/checker/resolver.py
"""
Redirect resolver: follows HTTP redirects with HEAD requests up to a hop limit.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urljoin

from aiohttp import ClientError, ClientSession

from sitemap_checker.logger import logger

MAX_REDIRECTS = 10


@dataclass(frozen=True, slots=True)
class Resolution:
    """Terminal answer of a redirect resolution.

    ``status == 0`` means the URL was unreachable; ``final_url`` is then the
    original URL and ``hops`` is 0.
    """

    status: int
    final_url: str
    hops: int

    @property
    def reachable(self) -> bool:
        return self.status != 0


def is_redirect(status: int) -> bool:
    return 300 <= status < 400


class RedirectResolver:
    """Resolves a URL to its final status by following ``Location`` headers."""

    def __init__(self, session: ClientSession, max_redirects: int = MAX_REDIRECTS) -> None:
        self.session = session
        self.max_redirects = max_redirects

    async def _head(self, url: str) -> Tuple[int, Optional[str]]:
        async with self.session.head(url, allow_redirects=False) as resp:
            return resp.status, resp.headers.get("Location")

    async def resolve(self, url: str) -> Resolution:
        """
        Follow redirects starting at *url*.

        Stops on the first non-redirect status, at the hop limit, or when a
        redirect carries no ``Location`` (that redirect status is returned as
        the terminal answer). Transport failures at any hop give
        ``Resolution(0, url, 0)``.
        """
        current = url
        hops = 0
        try:
            status, location = await self._head(current)
            while is_redirect(status) and hops < self.max_redirects:
                if not location:
                    logger.debug("Redirect without Location at %s (HTTP %s)", current, status)
                    break
                hops += 1
                current = urljoin(current, location)
                status, location = await self._head(current)
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.debug("Unreachable %s: %s", url, exc)
            return Resolution(0, url, 0)

        if is_redirect(status) and hops >= self.max_redirects:
            logger.debug("Redirect limit %d reached for %s", self.max_redirects, url)
        return Resolution(status, current, hops)


__all__ = ["Resolution", "RedirectResolver", "MAX_REDIRECTS", "is_redirect"]
