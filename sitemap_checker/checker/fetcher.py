# sitemap_checker/checker/fetcher.py
"""
Fetcher module: downloads a page or a sitemap over the shared session.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession

from sitemap_checker.logger import logger
from sitemap_checker.models import PageMetadata
from sitemap_checker.parser.html_parser import extract_metadata


class Fetcher:
    """GET requests with soft failure: problems are logged and reported as None."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str) -> Optional[bytes]:
        """
        Fetch *url*, following redirects.

        Returns the body of a 2xx response, or None on any other status or
        transport failure.
        """
        try:
            async with self.session.get(url) as resp:
                if not 200 <= resp.status < 300:
                    logger.debug("GET %s -> HTTP %s", url, resp.status)
                    return None
                return await resp.read()
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.debug("GET %s failed: %s", url, exc)
            return None

    async def fetch_metadata(self, url: str) -> PageMetadata:
        """Title and og:title of the page at *url*; empty values when unavailable."""
        body = await self.fetch(url)
        if body is None:
            return PageMetadata()
        return extract_metadata(body)


__all__ = ["Fetcher"]
