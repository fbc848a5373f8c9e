"""
HTTP client construction.

Clients are built per analysis run from settings and handed to the
fetcher, prober and DataForSEO adapter, so tests can pass in clients
backed by ``httpx.MockTransport``.
"""
import httpx

from seo_analyzer.config import Settings, settings as default_settings


def build_site_client(
    max_redirects: int | None = None,
    timeout: float | None = None,
    config: Settings | None = None,
) -> httpx.AsyncClient:
    """Client for requests against the site being analyzed."""
    config = config or default_settings
    return httpx.AsyncClient(
        timeout=timeout if timeout is not None else config.HTML_FETCH_TIMEOUT,
        follow_redirects=True,
        max_redirects=max_redirects if max_redirects is not None else config.HTML_MAX_REDIRECTS,
        headers={
            "User-Agent": config.USER_AGENT,
            "Accept": "text/html,application/xhtml+xml",
        },
    )


def build_dataforseo_client(config: Settings | None = None) -> httpx.AsyncClient:
    """Client for the DataForSEO v3 API. Auth is added per request by DataForSEOClient."""
    config = config or default_settings
    return httpx.AsyncClient(
        base_url=config.DATAFORSEO_API_URL,
        timeout=config.DATAFORSEO_TIMEOUT,
        headers={
            "Content-Type": "application/json",
            "Accept": "application/json",
        },
    )
