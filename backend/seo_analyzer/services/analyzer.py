"""
SEO analysis orchestration.

One run per URL:
    1. Normalize and validate the URL (before any network call)
    2. Remote crawl and HTML fetch/parse, concurrently
    3. robots.txt and sitemap.xml probes, concurrently
    4. Evaluate rules, score, assemble the report

Degradable failures (HTML fetch, remote crawl, probes, single checks)
become report content. Only an invalid URL or the run deadline raise.
"""

import asyncio
import logging
import re
from contextlib import AsyncExitStack
from urllib.parse import urlparse

import httpx

from seo_analyzer.config import Settings, settings as default_settings
from seo_analyzer.core.exceptions import AnalysisTimeoutError, FetchError, InvalidURLError
from seo_analyzer.core.http import build_dataforseo_client, build_site_client
from seo_analyzer.integrations.dataforseo import DataForSEOClient, run_on_page_crawl
from seo_analyzer.schemas.report import SeoReport
from seo_analyzer.services.context import AnalysisContext
from seo_analyzer.services.fetcher import HtmlFetcher, ResourceProber
from seo_analyzer.services.html_analyzer import HtmlStructuralFacts, analyze_html
from seo_analyzer.services.report import assemble_report, build_summary
from seo_analyzer.services.rules import evaluate_rules
from seo_analyzer.services.scoring import compute_scores

logger = logging.getLogger(__name__)

SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
ANY_SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
ALLOWED_SCHEMES = ("http", "https")


def normalize_url(url: str) -> str:
    """Trim ``url``, assume ``https://`` for bare hosts and validate the result.

    Raises:
        InvalidURLError: if the URL is empty or does not parse as an
            http(s) URL with a host.
    """
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidURLError(url)

    if not SCHEME_PATTERN.match(candidate):
        if ANY_SCHEME_PATTERN.match(candidate):
            raise InvalidURLError(url, "Only http and https URLs are supported.")
        candidate = f"https://{candidate}"

    if any(char.isspace() for char in candidate):
        raise InvalidURLError(url, "URL must not contain whitespace.")

    try:
        parsed = urlparse(candidate)
        hostname = parsed.hostname
    except ValueError as e:
        raise InvalidURLError(url, "URL could not be parsed.") from e

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidURLError(url, "Only http and https URLs are supported.")
    if not hostname:
        raise InvalidURLError(url, "URL must include a host.")
    try:
        parsed.port
    except ValueError as e:
        raise InvalidURLError(url, "URL has an invalid port.") from e

    return candidate


def url_origin(url: str) -> str:
    """``scheme://host[:port]`` of ``url``, without credentials or path."""
    parsed = urlparse(url)
    host = parsed.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    port = f":{parsed.port}" if parsed.port else ""
    return f"{parsed.scheme.lower()}://{host}{port}"


class SEOAnalyzer:
    """Runs the full analysis pipeline for a single URL.

    Clients may be injected (tests pass ``httpx.MockTransport``-backed
    ones); anything not injected is built from settings for the run and
    closed when it ends.
    """

    def __init__(
        self,
        site_client: httpx.AsyncClient | None = None,
        probe_client: httpx.AsyncClient | None = None,
        dataforseo: DataForSEOClient | None = None,
        config: Settings | None = None,
    ):
        self.config = config or default_settings
        self.site_client = site_client
        self.probe_client = probe_client
        self.dataforseo = dataforseo

    async def analyze(self, url: str) -> SeoReport:
        """Analyze ``url`` and return the report.

        Raises:
            InvalidURLError: before any network call, for unusable input.
            AnalysisTimeoutError: when the run exceeds ANALYSIS_DEADLINE_SECONDS.
        """
        normalized = normalize_url(url)
        deadline = self.config.ANALYSIS_DEADLINE_SECONDS

        try:
            return await asyncio.wait_for(self._run(normalized), timeout=deadline)
        except asyncio.TimeoutError as e:
            logger.error(f"Analysis of {normalized} exceeded {deadline:.0f}s deadline")
            raise AnalysisTimeoutError(f"Analysis of {normalized} exceeded {deadline:.0f}s") from e

    async def _run(self, url: str) -> SeoReport:
        logger.info(f"Starting SEO analysis for {url}")
        origin = url_origin(url)

        async with AsyncExitStack() as stack:
            site_client = self.site_client or await stack.enter_async_context(
                build_site_client(config=self.config)
            )
            probe_client = self.probe_client or await stack.enter_async_context(
                build_site_client(max_redirects=self.config.RESOURCE_PROBE_MAX_REDIRECTS, config=self.config)
            )
            dataforseo = self.dataforseo
            if dataforseo is None:
                vendor_client = await stack.enter_async_context(build_dataforseo_client(self.config))
                dataforseo = DataForSEOClient(vendor_client, config=self.config)

            remote, (html_facts, html_error, html_fetch_failed) = await asyncio.gather(
                run_on_page_crawl(dataforseo, url),
                self._fetch_and_analyze(HtmlFetcher(site_client), url, origin),
            )

            prober = ResourceProber(probe_client)
            robots_txt_found, sitemap_found = await asyncio.gather(
                prober.probe(f"{origin}/robots.txt"),
                prober.probe(f"{origin}/sitemap.xml"),
            )

        context = AnalysisContext(
            url=url,
            origin=origin,
            https=urlparse(url).scheme.lower() == "https",
            robots_txt_found=robots_txt_found,
            sitemap_found=sitemap_found,
            html=html_facts,
            html_error=html_error,
            html_fetch_failed=html_fetch_failed,
            remote=remote,
        )

        checks, issues = evaluate_rules(context)
        scores, top_fixes = compute_scores(issues, self.config.TOP_FIXES_LIMIT)
        report = assemble_report(url, build_summary(context), scores, top_fixes, checks)

        logger.info(
            f"Completed SEO analysis for {url}: overall {scores.overall}, "
            f"{len(issues)} issues, {len(checks)} checks"
        )
        return report

    async def _fetch_and_analyze(
        self,
        fetcher: HtmlFetcher,
        url: str,
        origin: str,
    ) -> tuple[HtmlStructuralFacts | None, str | None, bool]:
        """Returns ``(facts, error, fetch_failed)``."""
        try:
            html = await fetcher.fetch_html(url)
        except FetchError as e:
            logger.warning(f"HTML fetch failed for {url}: {e}")
            return None, str(e), True

        try:
            return analyze_html(html, origin), None, False
        except Exception as e:
            logger.exception(f"Failed to parse HTML for {url}")
            return None, f"Unable to parse HTML: {e}", False


async def run_seo_analysis(url: str) -> SeoReport:
    """Analyze ``url`` with clients built from settings."""
    return await SEOAnalyzer().analyze(url)
