# File: tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

import pytest
import pytest_asyncio
from aiohttp import ClientSession, ClientTimeout, web

from sitemap_checker.cache.result_cache import CachePair, build_caches
from sitemap_checker.cache.storage import FileStorage
from sitemap_checker.config import CheckerConfig
from sitemap_checker.models import ComparisonRecord, Outcome

HOST = "127.0.0.1"

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]
SiteBuilder = Callable[[str], Dict[str, Handler]]


# --------------------------------------------------------------------------- #
#                            Handler helpers                                  #
# --------------------------------------------------------------------------- #


def html_page(title: Optional[str] = None, og_title: Optional[str] = None, status: int = 200) -> Handler:
    """Handler serving a page with the given title metadata."""
    head = ""
    if title is not None:
        head += f"<title>{title}</title>"
    if og_title is not None:
        head += f'<meta property="og:title" content="{og_title}">'

    async def handler(_):
        return web.Response(
            text=f"<html><head>{head}</head><body><h1>page</h1></body></html>",
            content_type="text/html",
            status=status,
        )

    return handler


def redirect_to(location: str, status: int = 301) -> Handler:
    async def handler(_):
        return web.Response(status=status, headers={"Location": location})

    return handler


def status_only(status: int) -> Handler:
    async def handler(_):
        return web.Response(status=status)

    return handler


def sitemap_index(*locs: str) -> Handler:
    entries = "".join(f"<sitemap><loc>{loc}</loc></sitemap>" for loc in locs)
    body = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{entries}</sitemapindex>'
    )

    async def handler(_):
        return web.Response(text=body, content_type="application/xml")

    return handler


def urlset(*entries: Tuple[str, Optional[str]]) -> Handler:
    parts = []
    for loc, lastmod in entries:
        mod = f"<lastmod>{lastmod}</lastmod>" if lastmod else ""
        parts.append(f"<url><loc>{loc}</loc>{mod}</url>")
    body = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{"".join(parts)}</urlset>'
    )

    async def handler(_):
        return web.Response(text=body, content_type="application/xml")

    return handler


# --------------------------------------------------------------------------- #
#                                  Fixtures                                   #
# --------------------------------------------------------------------------- #


@pytest_asyncio.fixture
async def make_site(unused_tcp_port_factory) -> AsyncIterator[Callable[[SiteBuilder], Awaitable[str]]]:
    """Start local aiohttp sites; *build* receives the base URL and returns path -> handler."""
    runners: list[web.AppRunner] = []

    async def _make(build: SiteBuilder) -> str:
        port = unused_tcp_port_factory()
        base = f"http://{HOST}:{port}"
        app = web.Application()
        for path, handler in build(base).items():
            app.router.add_route("*", path, handler)
        runner = web.AppRunner(app)
        await runner.setup()
        await web.TCPSite(runner, HOST, port).start()
        runners.append(runner)
        return base

    yield _make

    for runner in runners:
        await runner.cleanup()


@pytest_asyncio.fixture
async def session() -> AsyncIterator[ClientSession]:
    async with ClientSession(timeout=ClientTimeout(total=5)) as s:
        yield s


@pytest.fixture()
def closed_port_url(unused_tcp_port: int) -> str:
    """A URL nothing listens on."""
    return f"http://{HOST}:{unused_tcp_port}"


def _source_site(base: str) -> Dict[str, Handler]:
    return {
        "/": html_page("Home", "Home"),
        "/about": html_page("About Us", "About"),
        "/contact": html_page("Contact", "Contact"),
        "/team": html_page("Team", "Our team"),
        "/gone": html_page("Gone", "Gone"),
        "/sitemap_index.xml": sitemap_index(
            f"{base}/page-sitemap.xml",
            f"{base}/post-sitemap.xml",
            f"{base}/local-sitemap.xml",
        ),
        "/page-sitemap.xml": urlset(
            (f"{base}/about", "2024-05-01"),
            (f"{base}/contact", None),
        ),
        "/post-sitemap.xml": urlset(
            (f"{base}/team", "2024-06-01T10:00:00Z"),
            (f"{base}/gone", None),
            (f"{base}/about", "2024-05-01"),
        ),
        "/local-sitemap.xml": urlset((f"{base}/excluded", None)),
    }


def _target_site(base: str) -> Dict[str, Handler]:
    return {
        "/": html_page("Home", "Home"),
        "/about": html_page("About Us", "About"),
        "/contact": redirect_to("/contact-us"),
        "/contact-us": html_page("Contact", "Contact"),
        "/team": html_page("Team", "The team"),
        "/brand-new": html_page("Brand new", "Brand new"),
        "/sitemap.xml": urlset((f"{base}/about", None), (f"{base}/brand-new", "2024-07-01")),
    }


@pytest_asyncio.fixture
async def sites(make_site) -> Tuple[str, str]:
    """Old site and new site with a small sitemap each."""
    source = await make_site(_source_site)
    target = await make_site(_target_site)
    return source, target


@pytest.fixture()
def make_config(tmp_path: Path) -> Callable[..., CheckerConfig]:
    def _make(source: str, target: str, **overrides) -> CheckerConfig:
        values = dict(
            source_url=source,
            target_url=target,
            timeout=5.0,
            user_agent="TestAgent/1.0",
            cache_dir=str(tmp_path / "cache"),
        )
        values.update(overrides)
        return CheckerConfig(**values)

    return _make


@pytest.fixture()
def caches(tmp_path: Path) -> CachePair:
    config = CheckerConfig(
        source_url="http://old.example.com",
        target_url="http://new.example.com",
        cache_dir=str(tmp_path / "cache"),
    )
    return build_caches(config, FileStorage(tmp_path / "cache"))


def make_record(
    url: str,
    outcome: Outcome = Outcome.PRESENT,
    title: str = "Title",
    last_modified: Optional[datetime] = None,
) -> ComparisonRecord:
    """A plausible record for http://old.example.com pages."""
    path = url.replace("http://old.example.com", "") or "/"
    return ComparisonRecord(
        source_relative_path=path,
        source_url=url,
        target_relative_path=path,
        target_url=f"http://new.example.com{path}",
        outcome=outcome,
        source_title=title,
        target_title=title,
        title_comparison="Identical",
        og_title_comparison="Identical",
        last_modified=last_modified,
        checked_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )


def records(urls: Iterable[str]) -> list[ComparisonRecord]:
    return [make_record(u) for u in urls]
