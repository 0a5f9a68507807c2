# File: sitemap_checker/server.py
"""sitemap_checker.server: HTTP API with Server-Sent Events progress streams.

Routes (prefix ``/api/sitemap``)::

    GET  /test            liveness check
    GET  /cached          main cached result set or {"cached": false}
    GET  /cached-new      cached reverse-check result set
    POST /clear-cache     delete both cached sets
    POST /check-single    re-check one page, body {"pageUrl", "lastModified"?}
    GET  /check           full run as SSE, ?useCache=false forces a fresh run
    GET  /check-new       incremental run as SSE
    GET  /check-reverse   reverse run as SSE
"""

from __future__ import annotations

import json
from contextlib import aclosing
from typing import AsyncIterator, Awaitable, Callable, Optional

from aiohttp import web

from sitemap_checker.cache.result_cache import CachePair, build_caches
from sitemap_checker.config import CheckerConfig
from sitemap_checker.engine import CheckerEngine
from sitemap_checker.logger import logger
from sitemap_checker.models import ResultSet, RunEvent, utcnow
from sitemap_checker.parser.sitemap_parser import parse_lastmod

__all__ = ["create_app", "CONFIG_KEY", "CACHES_KEY"]

API_PREFIX = "/api/sitemap"

CONFIG_KEY = web.AppKey("config", CheckerConfig)
CACHES_KEY = web.AppKey("caches", CachePair)

_RunFactory = Callable[[CheckerEngine], AsyncIterator[RunEvent]]


@web.middleware
async def cors_middleware(
    request: web.Request, handler: Callable[[web.Request], Awaitable[web.StreamResponse]]
) -> web.StreamResponse:
    response = await handler(request)
    if not response.prepared:
        response.headers["Access-Control-Allow-Origin"] = "*"
    return response


def _cached_payload(cached: Optional[ResultSet]) -> dict:
    if cached is None:
        return {"cached": False}
    return {"cached": True, **cached.to_dict()}


def _engine(request: web.Request) -> CheckerEngine:
    return CheckerEngine(request.app[CONFIG_KEY], request.app[CACHES_KEY])


async def handle_test(request: web.Request) -> web.Response:
    return web.json_response({"message": "API is working", "timestamp": utcnow().isoformat()})


async def handle_cached(request: web.Request) -> web.Response:
    cached = await request.app[CACHES_KEY].main.load()
    return web.json_response(_cached_payload(cached))


async def handle_cached_new(request: web.Request) -> web.Response:
    cached = await request.app[CACHES_KEY].new_pages.load()
    return web.json_response(_cached_payload(cached))


async def handle_clear_cache(request: web.Request) -> web.Response:
    await request.app[CACHES_KEY].clear()
    return web.json_response({"message": "Cache cleared"})


async def handle_check_single(request: web.Request) -> web.Response:
    try:
        body = await request.json()
    except ValueError:
        return web.json_response({"error": "Request body must be JSON"}, status=400)
    page_url = body.get("pageUrl") if isinstance(body, dict) else None
    if not isinstance(page_url, str) or not page_url.strip():
        return web.json_response({"error": "pageUrl is required"}, status=400)
    last_modified = body.get("lastModified")
    if not isinstance(last_modified, (str, type(None))):
        return web.json_response({"error": "lastModified must be a date string"}, status=400)

    async with _engine(request) as engine:
        record = await engine.check_single(page_url.strip(), parse_lastmod(last_modified))
    return web.json_response(record.to_dict())


async def _stream_events(request: web.Request, run: _RunFactory) -> web.StreamResponse:
    response = web.StreamResponse(
        headers={
            "Content-Type": "text/event-stream",
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
            "Access-Control-Allow-Origin": "*",
        }
    )
    await response.prepare(request)
    await response.write(b": connected\n\n")

    try:
        async with _engine(request) as engine:
            async with aclosing(run(engine)) as events:
                async for event in events:
                    payload = json.dumps(event.to_dict(), ensure_ascii=False)
                    await response.write(f"data: {payload}\n\n".encode("utf-8"))
    except ConnectionResetError:
        logger.info("Client disconnected from %s", request.path)
        return response

    await response.write_eof()
    return response


async def handle_check(request: web.Request) -> web.StreamResponse:
    use_cache = request.query.get("useCache", "true").lower() not in ("false", "0", "no")
    return await _stream_events(request, lambda engine: engine.run_check(use_cache))


async def handle_check_new(request: web.Request) -> web.StreamResponse:
    return await _stream_events(request, lambda engine: engine.run_incremental())


async def handle_check_reverse(request: web.Request) -> web.StreamResponse:
    return await _stream_events(request, lambda engine: engine.run_reverse_check())


def create_app(config: CheckerConfig, caches: Optional[CachePair] = None) -> web.Application:
    """Build the web application; one cache pair (and lock) is shared by all requests."""
    app = web.Application(middlewares=[cors_middleware])
    app[CONFIG_KEY] = config
    app[CACHES_KEY] = caches or build_caches(config)

    app.router.add_get(f"{API_PREFIX}/test", handle_test)
    app.router.add_get(f"{API_PREFIX}/cached", handle_cached)
    app.router.add_get(f"{API_PREFIX}/cached-new", handle_cached_new)
    app.router.add_post(f"{API_PREFIX}/clear-cache", handle_clear_cache)
    app.router.add_post(f"{API_PREFIX}/check-single", handle_check_single)
    app.router.add_get(f"{API_PREFIX}/check", handle_check)
    app.router.add_get(f"{API_PREFIX}/check-new", handle_check_new)
    app.router.add_get(f"{API_PREFIX}/check-reverse", handle_check_reverse)
    return app
