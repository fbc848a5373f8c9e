"""
DataForSEO On-Page schemas.

``DataForSEO*`` models describe the subset of the vendor's summary payload
we read; ``OnPageSummary`` is the neutral shape the rest of the analyzer
works with. Only ``map_on_page_summary`` in the integration touches both.
"""
from pydantic import BaseModel, ConfigDict, Field

from seo_analyzer.schemas.common import CamelSchema


class VendorSchema(BaseModel):
    """Lenient base for vendor payloads: unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")


class DataForSEOLink(VendorSchema):
    url: str | None = None


class DataForSEOLinks(VendorSchema):
    internal_links: list[DataForSEOLink] | None = None
    internal_links_count: int | None = None
    external_links_count: int | None = None


class DataForSEOPageTiming(VendorSchema):
    time_to_interactive: float | None = None


class DataForSEOPageMetrics(VendorSchema):
    content_size: int | None = None
    page_timing: DataForSEOPageTiming | None = None
    resource_fetches: int | None = None
    html_size: int | None = None
    depth: int | None = None
    is_mobile_friendly: bool | None = None
    headings: dict[str, int] | None = None


class DataForSEOPageSnapshot(VendorSchema):
    title: str | None = None
    meta_description: str | None = None
    meta_robots: str | None = None
    canonical: str | None = None
    meta_viewport: str | None = None
    og_tags_count: int | None = None
    twitter_tags_count: int | None = None


class DataForSEOStructuredData(VendorSchema):
    schema_type: str | None = None


class DataForSEOSummary(VendorSchema):
    status_code: int | None = None
    page_metrics: DataForSEOPageMetrics | None = None
    page_snapshot: DataForSEOPageSnapshot | None = None
    links: DataForSEOLinks | None = None
    structured_data: list[DataForSEOStructuredData] | None = None


class OnPageMeta(CamelSchema):
    title: str | None = None
    description: str | None = None
    robots: str | None = None
    canonical: str | None = None


class OnPagePageMetrics(CamelSchema):
    size: int | None = None
    load_time: float | None = None
    resources: int | None = None
    html_bytes: int | None = None


class OnPageLinks(CamelSchema):
    internal: int | None = None
    external: int | None = None
    depth: int | None = None


class OnPageMobile(CamelSchema):
    friendly: bool | None = None
    viewport: bool | None = None


class OnPageSocial(CamelSchema):
    open_graph: bool | None = None
    twitter: bool | None = None
    social_links: list[str] = Field(default_factory=list)


class OnPageSummary(CamelSchema):
    """Neutral remote crawl summary."""

    status_code: int | None = None
    meta: OnPageMeta | None = None
    page_metrics: OnPagePageMetrics | None = None
    links: OnPageLinks | None = None
    mobile: OnPageMobile | None = None
    social: OnPageSocial | None = None
    headings: dict[str, int] = Field(default_factory=dict)
    schema_types: list[str] = Field(default_factory=list)

    def to_summary(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class OnPageTaskResult(CamelSchema):
    task_id: str
    status_code: int
    items_count: int = 0
    result: dict = Field(default_factory=dict)
