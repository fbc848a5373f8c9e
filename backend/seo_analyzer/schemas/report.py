"""
SEO report schemas.

This is the output contract shared with every front-end, serialized with
camelCase keys (``analyzedAt``, ``topFixes``, ``contentTags`` ...).
"""
from typing import Any, Literal

from pydantic import ConfigDict, Field

from seo_analyzer.schemas.common import BaseSchema, CamelSchema

Impact = Literal["high", "medium", "low"]


class CheckDetail(CamelSchema):
    """Audit record of one rule's outcome."""

    model_config = ConfigDict(frozen=True)

    category: str
    item: str
    passed: bool
    details: str | None = None


class TopFix(CamelSchema):
    model_config = ConfigDict(frozen=True)

    title: str
    why: str
    how_to_fix: str
    impact: Impact


class ScoreMap(CamelSchema):
    model_config = ConfigDict(frozen=True)

    technical: int = Field(ge=0, le=100)
    content_tags: int = Field(ge=0, le=100)
    performance: int = Field(ge=0, le=100)
    mobile: int = Field(ge=0, le=100)
    navigability: int = Field(ge=0, le=100)
    social: int = Field(ge=0, le=100)
    overall: int = Field(ge=0, le=100)


class SeoReport(CamelSchema):
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "url": "https://example.com",
                "analyzedAt": "2026-01-10T12:00:00.000Z",
                "status": "ok",
                "scores": {
                    "technical": 70,
                    "contentTags": 85,
                    "performance": 100,
                    "mobile": 75,
                    "navigability": 90,
                    "social": 85,
                    "overall": 84,
                },
                "summary": {"robotsTxtFound": True, "sitemapFound": True, "https": True},
                "topFixes": [
                    {
                        "title": "Missing viewport meta tag",
                        "why": "Without a viewport tag, the page renders poorly on mobile devices.",
                        "howToFix": "Add <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\">.",
                        "impact": "high",
                    }
                ],
                "checks": [
                    {"category": "Technical", "item": "HTTPS in use", "passed": True, "details": "https://example.com"}
                ],
            }
        },
    )

    url: str
    analyzed_at: str
    status: Literal["ok", "error"] = "ok"
    scores: ScoreMap
    summary: dict[str, Any] = Field(default_factory=dict)
    top_fixes: list[TopFix] = Field(default_factory=list)
    checks: list[CheckDetail] = Field(default_factory=list)


class AnalyzeRequest(BaseSchema):
    """Request to analyze a page."""

    url: str = Field(
        ...,
        min_length=1,
        description="Absolute URL or bare host (https:// is assumed)",
        examples=["https://example.com"],
    )
