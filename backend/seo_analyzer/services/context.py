"""
Per-run analysis context.

Built once by the analyzer after all I/O has resolved and read by every
rule. The remote crawl result is a tagged outcome so rules never have to
null-check the vendor summary field by field.
"""

from dataclasses import dataclass

from seo_analyzer.schemas.onpage import OnPageSummary
from seo_analyzer.services.html_analyzer import HtmlStructuralFacts


@dataclass(frozen=True)
class RemoteCrawlAvailable:
    summary: OnPageSummary


@dataclass(frozen=True)
class RemoteCrawlUnavailable:
    reason: str


RemoteCrawlOutcome = RemoteCrawlAvailable | RemoteCrawlUnavailable


@dataclass(frozen=True)
class AnalysisContext:
    url: str
    origin: str
    https: bool
    robots_txt_found: bool
    sitemap_found: bool
    html: HtmlStructuralFacts | None = None
    html_error: str | None = None
    html_fetch_failed: bool = False
    remote: RemoteCrawlOutcome = RemoteCrawlUnavailable(reason="not requested")

    @property
    def remote_summary(self) -> OnPageSummary | None:
        if isinstance(self.remote, RemoteCrawlAvailable):
            return self.remote.summary
        return None

    @property
    def crawl_depth(self) -> int | None:
        summary = self.remote_summary
        if summary is None or summary.links is None:
            return None
        return summary.links.depth

    @property
    def mobile_friendly(self) -> bool | None:
        summary = self.remote_summary
        if summary is None or summary.mobile is None:
            return None
        return summary.mobile.friendly

    @property
    def page_load_time(self) -> float | None:
        summary = self.remote_summary
        if summary is None or summary.page_metrics is None:
            return None
        return summary.page_metrics.load_time

    @property
    def resource_count(self) -> int | None:
        summary = self.remote_summary
        if summary is None or summary.page_metrics is None:
            return None
        return summary.page_metrics.resources
