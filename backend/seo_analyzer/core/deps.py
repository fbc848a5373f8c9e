"""
FastAPI dependencies.
"""
from typing import Annotated

from fastapi import Depends

from seo_analyzer.config import settings
from seo_analyzer.services.analyzer import SEOAnalyzer


def get_analyzer() -> SEOAnalyzer:
    """Analyzer built from settings; clients are created per run."""
    return SEOAnalyzer(config=settings)


Analyzer = Annotated[SEOAnalyzer, Depends(get_analyzer)]
