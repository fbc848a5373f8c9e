"""
Exceptions for the SEO analyzer.

Domain errors are raised by the pipeline components; the HTTP exceptions
are what the API layer turns them into.
"""
from fastapi import HTTPException, status


class SEOAnalyzerError(Exception):
    """Base class for analyzer errors."""


class InvalidURLError(SEOAnalyzerError):
    """The URL to analyze is empty or malformed."""

    def __init__(self, url: str, reason: str = "A valid URL is required."):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason} (got {url!r})")


class FetchError(SEOAnalyzerError):
    """The landing page HTML could not be retrieved."""


class AnalysisTimeoutError(SEOAnalyzerError):
    """The analysis run exceeded its deadline."""


class RemoteCrawlError(SEOAnalyzerError):
    """Base class for DataForSEO On-Page failures."""


class CredentialsMissingError(RemoteCrawlError):
    """DataForSEO login/password are not configured."""

    def __init__(self):
        super().__init__(
            "Missing DataForSEO credentials. Set DATAFORSEO_LOGIN and DATAFORSEO_PASSWORD."
        )


class TaskCreationFailedError(RemoteCrawlError):
    """DataForSEO rejected the On-Page task."""


class TaskFailedError(RemoteCrawlError):
    """DataForSEO reported an error status for the task."""

    def __init__(self, task_id: str, status_code: int | None, message: str | None = None):
        self.task_id = task_id
        self.status_code = status_code
        super().__init__(
            f"Task {task_id} failed with status {status_code}: {message or 'DataForSEO task error.'}"
        )


class PollTimeoutError(RemoteCrawlError):
    """The On-Page task did not complete within the poll budget."""

    def __init__(self, task_id: str, timeout: float):
        self.task_id = task_id
        self.timeout = timeout
        super().__init__(
            f"Timed out after {timeout:.0f}s while waiting for DataForSEO task {task_id} to complete."
        )


class BadRequestError(HTTPException):
    """Bad request exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )


class GatewayTimeoutError(HTTPException):
    """Upstream work did not finish in time."""

    def __init__(self, detail: str = "Analysis timed out"):
        super().__init__(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=detail
        )
