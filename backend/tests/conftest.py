"""
Pytest configuration and fixtures for SEO analyzer tests.
"""
from typing import AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from seo_analyzer.config import Settings
from seo_analyzer.core.deps import get_analyzer
from seo_analyzer.integrations.dataforseo import DataForSEOClient
from seo_analyzer.services.analyzer import SEOAnalyzer

from fixtures.sample_pages import DEMO_PAGE_HTML, PERFECT_PAGE_HTML, SAMPLE_ONPAGE_SUMMARY
from fixtures.transports import (
    DATAFORSEO_BASE_URL,
    dataforseo_transport,
    html_route,
    route_transport,
)


# ============================================================================
# Settings Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings with fast polling and no real credentials."""
    return Settings(
        DATAFORSEO_LOGIN="",
        DATAFORSEO_PASSWORD="",
        DATAFORSEO_POLL_INTERVAL=0.0,
        DATAFORSEO_POLL_TIMEOUT=5.0,
        ANALYSIS_DEADLINE_SECONDS=10.0,
    )


# ============================================================================
# Client Fixtures
# ============================================================================

@pytest_asyncio.fixture(scope="function")
async def http_clients() -> AsyncGenerator[Callable[[httpx.MockTransport], httpx.AsyncClient], None]:
    """Factory for MockTransport-backed clients, closed on teardown."""
    clients = []

    def _make(transport: httpx.MockTransport, **kwargs) -> httpx.AsyncClient:
        kwargs.setdefault("follow_redirects", True)
        client = httpx.AsyncClient(transport=transport, **kwargs)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()


@pytest.fixture
def make_analyzer(http_clients, test_settings) -> Callable[..., SEOAnalyzer]:
    """Build an SEOAnalyzer over fake site and DataForSEO transports.

    Without ``vendor_transport`` the DataForSEO client has no credentials,
    so the remote crawl is reported unavailable.
    """

    def _make(site_routes: dict, vendor_transport: httpx.MockTransport | None = None) -> SEOAnalyzer:
        site_client = http_clients(route_transport(site_routes))
        probe_client = http_clients(route_transport(site_routes), max_redirects=2)

        if vendor_transport is None:
            dataforseo = DataForSEOClient(
                http_clients(dataforseo_transport()),
                login="",
                password="",
                config=test_settings,
            )
        else:
            dataforseo = DataForSEOClient(
                http_clients(vendor_transport, base_url=DATAFORSEO_BASE_URL),
                login="login",
                password="password",
                config=test_settings,
                poll_interval=0.0,
            )

        return SEOAnalyzer(
            site_client=site_client,
            probe_client=probe_client,
            dataforseo=dataforseo,
            config=test_settings,
        )

    return _make


# ============================================================================
# FastAPI App Fixtures
# ============================================================================

@pytest.fixture
def demo_site_routes() -> dict:
    """The demo page over plain http with robots.txt and sitemap.xml present."""
    return {
        "http://demo.test/": html_route(DEMO_PAGE_HTML),
        "http://demo.test/robots.txt": html_route("User-agent: *\nAllow: /", content_type="text/plain"),
        "http://demo.test/sitemap.xml": html_route("<urlset></urlset>", content_type="application/xml"),
    }


@pytest.fixture(scope="function")
def app(make_analyzer, demo_site_routes) -> FastAPI:
    """Create test FastAPI application."""
    from seo_analyzer.main import app as main_app

    def override_get_analyzer():
        return make_analyzer(demo_site_routes)

    main_app.dependency_overrides[get_analyzer] = override_get_analyzer

    yield main_app

    main_app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def sample_html_page() -> str:
    """Sample HTML page for analyzer tests."""
    return PERFECT_PAGE_HTML


@pytest.fixture
def sample_onpage_summary() -> dict:
    """Raw DataForSEO summary result."""
    return SAMPLE_ONPAGE_SUMMARY
