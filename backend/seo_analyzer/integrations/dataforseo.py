"""
DataForSEO On-Page API client.

Submits a single-URL crawl task, waits for it to finish and maps the
vendor summary into the neutral ``OnPageSummary`` shape.
"""
import asyncio
import base64
import logging
import time
from typing import Any

import httpx
from pydantic import ValidationError

from seo_analyzer.config import Settings, settings as default_settings
from seo_analyzer.core.exceptions import (
    CredentialsMissingError,
    PollTimeoutError,
    RemoteCrawlError,
    TaskCreationFailedError,
    TaskFailedError,
)
from seo_analyzer.schemas.onpage import (
    DataForSEOLinks,
    DataForSEOSummary,
    OnPageLinks,
    OnPageMeta,
    OnPageMobile,
    OnPagePageMetrics,
    OnPageSocial,
    OnPageSummary,
    OnPageTaskResult,
)
from seo_analyzer.services.context import (
    RemoteCrawlAvailable,
    RemoteCrawlOutcome,
    RemoteCrawlUnavailable,
)
from seo_analyzer.services.html_analyzer import SOCIAL_NETWORKS

logger = logging.getLogger(__name__)

STATUS_OK = 20000
STATUS_TASK_CREATED = 20100
STATUS_ERROR_THRESHOLD = 40000


class DataForSEOClient:
    """HTTP client for the DataForSEO On-Page API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        login: str | None = None,
        password: str | None = None,
        config: Settings | None = None,
        poll_interval: float | None = None,
        poll_timeout: float | None = None,
    ):
        config = config or default_settings
        self.client = client
        self.login = login if login is not None else config.DATAFORSEO_LOGIN
        self.password = password if password is not None else config.DATAFORSEO_PASSWORD
        self.max_crawl_pages = config.DATAFORSEO_MAX_CRAWL_PAGES
        self.enable_javascript = config.DATAFORSEO_ENABLE_JAVASCRIPT
        self.user_agent = config.DATAFORSEO_USER_AGENT
        self.poll_interval = poll_interval if poll_interval is not None else config.DATAFORSEO_POLL_INTERVAL
        self.poll_timeout = poll_timeout if poll_timeout is not None else config.DATAFORSEO_POLL_TIMEOUT

        # Create basic auth header
        credentials = f"{self.login}:{self.password}"
        encoded = base64.b64encode(credentials.encode()).decode()
        self.auth_header = f"Basic {encoded}"

    @property
    def has_credentials(self) -> bool:
        return bool(self.login and self.password)

    async def _request(
        self,
        method: str,
        endpoint: str,
        data: list[dict] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request to DataForSEO."""
        if not self.has_credentials:
            raise CredentialsMissingError()

        headers = {"Authorization": self.auth_header}
        try:
            if method.upper() == "POST":
                response = await self.client.post(endpoint, json=data, headers=headers)
            else:
                response = await self.client.get(endpoint, headers=headers)

            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise RemoteCrawlError(f"DataForSEO request {method} {endpoint} failed: {type(e).__name__}: {e}") from e
        except ValueError as e:
            raise RemoteCrawlError(f"DataForSEO returned invalid JSON for {endpoint}") from e

        if not isinstance(payload, dict):
            raise RemoteCrawlError(f"Unexpected DataForSEO payload for {endpoint}")
        return payload

    async def create_on_page_task(self, url: str) -> str:
        """Submit ``url`` as an On-Page crawl task and return the task id."""
        data = [{
            "target": url,
            "max_crawl_pages": self.max_crawl_pages,
            "enable_javascript": self.enable_javascript,
            "custom_user_agent": self.user_agent,
            "load_resources": True,
            "enable_content_analysis": True,
        }]

        try:
            result = await self._request("POST", "/on_page/task_post", data)
        except CredentialsMissingError:
            raise
        except RemoteCrawlError as e:
            raise TaskCreationFailedError(str(e)) from e

        tasks = result.get("tasks") or []
        if not tasks:
            raise TaskCreationFailedError("Unexpected response from DataForSEO task creation.")

        task = tasks[0]
        if task.get("status_code") != STATUS_TASK_CREATED or not task.get("id"):
            raise TaskCreationFailedError(
                f"Failed to create On-Page task: {task.get('status_message') or 'unknown error'}"
            )

        logger.info(f"[ONPAGE] Created task {task['id']} for {url}")
        return task["id"]

    async def poll_task(self, task_id: str) -> OnPageTaskResult:
        """Wait for the task to complete.

        Polls every ``poll_interval`` seconds. An error-range status fails
        immediately; running past ``poll_timeout`` raises PollTimeoutError.
        """
        start_time = time.monotonic()

        while True:
            if time.monotonic() - start_time > self.poll_timeout:
                raise PollTimeoutError(task_id, self.poll_timeout)

            result = await self._request("GET", f"/on_page/task_get/{task_id}")
            tasks = result.get("tasks") or []

            if tasks:
                task = tasks[0]
                status_code = task.get("status_code")

                if status_code == STATUS_OK:
                    task_result = task.get("result") or []
                    elapsed = time.monotonic() - start_time
                    logger.info(f"[ONPAGE] Task {task_id} completed in {elapsed:.2f}s")
                    return OnPageTaskResult(
                        task_id=task_id,
                        status_code=status_code,
                        items_count=len(task_result),
                        result=task_result[0] if task_result else {},
                    )

                if isinstance(status_code, int) and status_code >= STATUS_ERROR_THRESHOLD:
                    raise TaskFailedError(task_id, status_code, task.get("status_message"))

                logger.debug(f"[ONPAGE] Task {task_id} pending (status={status_code})")

            await asyncio.sleep(self.poll_interval)

    async def get_on_page_summary(self, task_id: str) -> OnPageSummary:
        """Fetch the task summary and map it to the neutral shape."""
        result = await self._request("GET", f"/on_page/summary/{task_id}")

        raw = None
        tasks = result.get("tasks") or []
        if tasks and tasks[0].get("result"):
            raw = tasks[0]["result"][0]

        if not raw:
            return OnPageSummary()

        try:
            vendor_summary = DataForSEOSummary.model_validate(raw)
        except ValidationError as e:
            raise RemoteCrawlError(f"Unexpected DataForSEO summary shape: {e.error_count()} errors") from e

        return map_on_page_summary(vendor_summary)

    async def crawl(self, url: str) -> OnPageSummary:
        """Run the whole create/poll/summary cycle for ``url``."""
        task_id = await self.create_on_page_task(url)
        await self.poll_task(task_id)
        return await self.get_on_page_summary(task_id)


def map_on_page_summary(raw: DataForSEOSummary) -> OnPageSummary:
    """Map the vendor summary onto ``OnPageSummary``.

    This is the only place that knows DataForSEO field names.
    """
    metrics = raw.page_metrics
    snapshot = raw.page_snapshot
    links = raw.links

    timing = metrics.page_timing if metrics else None

    return OnPageSummary(
        status_code=raw.status_code,
        meta=OnPageMeta(
            title=snapshot.title if snapshot else None,
            description=snapshot.meta_description if snapshot else None,
            robots=snapshot.meta_robots if snapshot else None,
            canonical=snapshot.canonical if snapshot else None,
        ),
        page_metrics=OnPagePageMetrics(
            size=metrics.content_size if metrics else None,
            load_time=timing.time_to_interactive if timing else None,
            resources=metrics.resource_fetches if metrics else None,
            html_bytes=metrics.html_size if metrics else None,
        ),
        links=OnPageLinks(
            internal=links.internal_links_count if links else None,
            external=links.external_links_count if links else None,
            depth=metrics.depth if metrics else None,
        ),
        mobile=OnPageMobile(
            friendly=metrics.is_mobile_friendly if metrics else None,
            viewport=bool(snapshot and snapshot.meta_viewport),
        ),
        social=OnPageSocial(
            open_graph=bool(snapshot and snapshot.og_tags_count),
            twitter=bool(snapshot and snapshot.twitter_tags_count),
            social_links=extract_social_links(links),
        ),
        headings=(metrics.headings if metrics and metrics.headings else {}),
        schema_types=[item.schema_type for item in raw.structured_data or [] if item.schema_type],
    )


def extract_social_links(links: DataForSEOLinks | None) -> list[str]:
    if not links or not links.internal_links:
        return []
    return [
        link.url
        for link in links.internal_links
        if link.url and any(network in link.url.lower() for network in SOCIAL_NETWORKS)
    ]


async def run_on_page_crawl(client: DataForSEOClient, url: str) -> RemoteCrawlOutcome:
    """Run the crawl for ``url`` and fold every failure into ``RemoteCrawlUnavailable``.

    The whole create/poll/summary cycle is bounded by ``poll_timeout`` so a
    slow vendor never outlives the analysis deadline.
    """
    try:
        summary = await asyncio.wait_for(client.crawl(url), timeout=client.poll_timeout)
    except asyncio.TimeoutError:
        reason = f"DataForSEO crawl exceeded {client.poll_timeout:.0f}s"
        logger.warning(f"[ONPAGE] Remote crawl unavailable for {url}: {reason}")
        return RemoteCrawlUnavailable(reason=reason)
    except CredentialsMissingError as e:
        logger.warning(f"[ONPAGE] Skipping remote crawl for {url}: {e}")
        return RemoteCrawlUnavailable(reason=str(e))
    except (RemoteCrawlError, httpx.HTTPError, ValidationError) as e:
        logger.warning(f"[ONPAGE] Remote crawl unavailable for {url}: {type(e).__name__}: {e}")
        return RemoteCrawlUnavailable(reason=str(e))

    return RemoteCrawlAvailable(summary=summary)
