# File: tests/test_resolver.py
from __future__ import annotations

import pytest

from conftest import html_page, redirect_to, status_only
from sitemap_checker.checker.resolver import MAX_REDIRECTS, RedirectResolver, Resolution


def _hop_chain(length: int):
    """Site where /hop0 -> /hop1 -> ... -> /hop<length> which serves a page."""

    def build(base: str):
        routes = {f"/hop{i}": redirect_to(f"/hop{i + 1}", status=302) for i in range(length)}
        routes[f"/hop{length}"] = html_page("End")
        return routes

    return build


@pytest.mark.asyncio()
async def test_plain_page_has_no_hops(make_site, session):
    base = await make_site(lambda b: {"/about": html_page("About")})
    result = await RedirectResolver(session).resolve(f"{base}/about")
    assert result == Resolution(200, f"{base}/about", 0)


@pytest.mark.asyncio()
async def test_relative_location_is_followed(make_site, session):
    base = await make_site(
        lambda b: {"/about": redirect_to("/about-us"), "/about-us": html_page("About")}
    )
    result = await RedirectResolver(session).resolve(f"{base}/about")
    assert result == Resolution(200, f"{base}/about-us", 1)


@pytest.mark.asyncio()
async def test_absolute_location_to_other_host(make_site, session):
    other = await make_site(lambda b: {"/landing": html_page("Landing")})
    base = await make_site(lambda b: {"/old": redirect_to(f"{other}/landing", status=308)})
    result = await RedirectResolver(session).resolve(f"{base}/old")
    assert result == Resolution(200, f"{other}/landing", 1)


@pytest.mark.asyncio()
async def test_chain_counts_every_hop(make_site, session):
    base = await make_site(_hop_chain(3))
    result = await RedirectResolver(session).resolve(f"{base}/hop0")
    assert result == Resolution(200, f"{base}/hop3", 3)


@pytest.mark.asyncio()
async def test_chain_of_exactly_ten_hops_resolves(make_site, session):
    base = await make_site(_hop_chain(MAX_REDIRECTS))
    result = await RedirectResolver(session).resolve(f"{base}/hop0")
    assert result == Resolution(200, f"{base}/hop{MAX_REDIRECTS}", MAX_REDIRECTS)


@pytest.mark.asyncio()
async def test_hop_limit_returns_last_redirect(make_site, session):
    base = await make_site(_hop_chain(15))
    result = await RedirectResolver(session).resolve(f"{base}/hop0")
    assert result.hops == MAX_REDIRECTS
    assert result.status == 302
    assert result.final_url == f"{base}/hop{MAX_REDIRECTS}"


@pytest.mark.asyncio()
async def test_redirect_loop_terminates(make_site, session):
    base = await make_site(lambda b: {"/a": redirect_to("/b"), "/b": redirect_to("/a")})
    result = await RedirectResolver(session, max_redirects=4).resolve(f"{base}/a")
    assert result == Resolution(301, f"{base}/a", 4)


@pytest.mark.asyncio()
async def test_missing_location_stops_with_redirect_status(make_site, session):
    base = await make_site(
        lambda b: {"/start": redirect_to("/broken"), "/broken": status_only(302)}
    )
    result = await RedirectResolver(session).resolve(f"{base}/start")
    assert result == Resolution(302, f"{base}/broken", 1)


@pytest.mark.asyncio()
async def test_not_found_is_terminal(make_site, session):
    base = await make_site(lambda b: {"/old": redirect_to("/nowhere")})
    result = await RedirectResolver(session).resolve(f"{base}/old")
    assert result == Resolution(404, f"{base}/nowhere", 1)


@pytest.mark.asyncio()
async def test_unreachable_host_fails_soft(session, closed_port_url):
    url = f"{closed_port_url}/about"
    result = await RedirectResolver(session).resolve(url)
    assert result == Resolution(0, url, 0)
    assert not result.reachable


@pytest.mark.asyncio()
async def test_unreachable_hop_fails_soft_for_whole_chain(make_site, session, closed_port_url):
    base = await make_site(lambda b: {"/old": redirect_to(f"{closed_port_url}/new")})
    result = await RedirectResolver(session).resolve(f"{base}/old")
    assert result == Resolution(0, f"{base}/old", 0)
