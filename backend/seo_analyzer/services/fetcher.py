"""
Landing page fetcher and auxiliary resource prober.

Both work on an injected ``httpx.AsyncClient`` whose timeout, redirect
limit and user agent come from settings (see ``core.http``).
"""

import logging
import time

import httpx

from seo_analyzer.core.exceptions import FetchError

logger = logging.getLogger(__name__)

TEXT_CONTENT_MARKERS = ("text/", "html", "xml")


class HtmlFetcher:
    """Downloads the raw HTML of the page under analysis."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def fetch_html(self, url: str) -> str:
        """Fetch ``url`` and return its body as text.

        Raises:
            FetchError: on network errors, timeouts, non-2xx responses,
                non-text content types or an empty body.
        """
        start_time = time.time()
        try:
            response = await self.client.get(url)
        except httpx.TimeoutException as e:
            raise FetchError(f"Timed out fetching {url}") from e
        except httpx.TooManyRedirects as e:
            raise FetchError(f"Too many redirects fetching {url}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"Request to {url} failed: {type(e).__name__}: {e}") from e

        load_time_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"Fetched {url} -> {response.status_code} in {load_time_ms}ms")

        if not response.is_success:
            raise FetchError(f"Unexpected status {response.status_code} for {url}")

        content_type = response.headers.get("content-type", "").lower()
        if content_type and not any(marker in content_type for marker in TEXT_CONTENT_MARKERS):
            raise FetchError(f"Non-HTML response for {url} ({content_type})")

        html = response.text
        if not html or not html.strip():
            raise FetchError("Empty HTML response")

        return html


class ResourceProber:
    """Checks whether a resource such as robots.txt or sitemap.xml exists."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def probe(self, url: str) -> bool:
        """Return True when ``url`` resolves to a 2xx/3xx status. Never raises."""
        try:
            response = await self.client.get(url)
        except Exception as e:
            logger.debug(f"Probe failed for {url}: {type(e).__name__}: {e}")
            return False

        found = 200 <= response.status_code < 400
        logger.debug(f"Probe {url} -> {response.status_code} ({'found' if found else 'missing'})")
        return found
