"""
Core utilities for the SEO analyzer.
"""
from seo_analyzer.core.exceptions import (
    SEOAnalyzerError,
    InvalidURLError,
    FetchError,
    AnalysisTimeoutError,
    RemoteCrawlError,
    CredentialsMissingError,
    TaskCreationFailedError,
    TaskFailedError,
    PollTimeoutError,
    BadRequestError,
    GatewayTimeoutError,
)
from seo_analyzer.core.http import build_site_client, build_dataforseo_client

__all__ = [
    "SEOAnalyzerError",
    "InvalidURLError",
    "FetchError",
    "AnalysisTimeoutError",
    "RemoteCrawlError",
    "CredentialsMissingError",
    "TaskCreationFailedError",
    "TaskFailedError",
    "PollTimeoutError",
    "BadRequestError",
    "GatewayTimeoutError",
    "build_site_client",
    "build_dataforseo_client",
]
