"""
Pydantic schemas for the SEO analyzer API.
"""
from seo_analyzer.schemas.common import (
    BaseSchema,
    CamelSchema,
    ErrorResponse,
)
from seo_analyzer.schemas.onpage import (
    DataForSEOSummary,
    OnPageSummary,
    OnPageTaskResult,
)
from seo_analyzer.schemas.report import (
    AnalyzeRequest,
    CheckDetail,
    ScoreMap,
    SeoReport,
    TopFix,
)

__all__ = [
    "BaseSchema",
    "CamelSchema",
    "ErrorResponse",
    "DataForSEOSummary",
    "OnPageSummary",
    "OnPageTaskResult",
    "AnalyzeRequest",
    "CheckDetail",
    "ScoreMap",
    "SeoReport",
    "TopFix",
]
