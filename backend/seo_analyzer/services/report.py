"""
Report assembly.
"""

from datetime import datetime, timezone

from seo_analyzer.schemas.report import CheckDetail, ScoreMap, SeoReport, TopFix
from seo_analyzer.services.context import AnalysisContext


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2026-01-10T12:00:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_summary(context: AnalysisContext) -> dict:
    summary = {}

    if context.remote_summary is not None:
        summary.update(context.remote_summary.to_summary())

    if context.html is not None:
        summary["html"] = context.html.to_summary()

    summary["robotsTxtFound"] = context.robots_txt_found
    summary["sitemapFound"] = context.sitemap_found
    summary["https"] = context.https
    return summary


def assemble_report(
    url: str,
    summary: dict,
    scores: ScoreMap,
    top_fixes: list[TopFix],
    checks: list[CheckDetail],
) -> SeoReport:
    return SeoReport(
        url=url,
        analyzed_at=utc_timestamp(),
        status="ok",
        scores=scores,
        summary=summary,
        top_fixes=top_fixes,
        checks=checks,
    )
