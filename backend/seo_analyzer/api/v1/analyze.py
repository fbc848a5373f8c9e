"""
Analyze API Endpoint

Runs the full single-page SEO analysis synchronously and returns the report.
"""
import logging

from fastapi import APIRouter, HTTPException, status

from seo_analyzer.core.deps import Analyzer
from seo_analyzer.core.exceptions import (
    AnalysisTimeoutError,
    BadRequestError,
    GatewayTimeoutError,
    InvalidURLError,
)
from seo_analyzer.schemas.common import ErrorResponse
from seo_analyzer.schemas.report import AnalyzeRequest, SeoReport

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["Analyze"])


@router.post(
    "",
    response_model=SeoReport,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL"},
        504: {"model": ErrorResponse, "description": "Analysis deadline exceeded"},
        500: {"model": ErrorResponse, "description": "Unexpected analysis failure"},
    },
    summary="Analyze a page",
    description="""
    Run an SEO analysis of a single page.

    The page HTML is fetched and parsed, robots.txt and sitemap.xml are
    probed, and a DataForSEO On-Page crawl is requested when credentials
    are configured. The response contains category scores, the top fixes
    and every check that was evaluated.
    """,
)
async def analyze_page(
    request: AnalyzeRequest,
    analyzer: Analyzer,
) -> SeoReport:
    """Analyze a page and return its SEO report."""
    try:
        return await analyzer.analyze(request.url)
    except InvalidURLError as e:
        raise BadRequestError(e.reason)
    except AnalysisTimeoutError as e:
        raise GatewayTimeoutError(str(e))
    except Exception as e:
        logger.exception(f"Analysis failed for {request.url}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Analysis failed: {str(e)}",
        )
