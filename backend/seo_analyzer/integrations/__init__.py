"""
External service integrations.

- dataforseo: DataForSEO On-Page API for the remote crawl
"""

from seo_analyzer.integrations.dataforseo import (
    DataForSEOClient,
    map_on_page_summary,
    run_on_page_crawl,
)

__all__ = [
    "DataForSEOClient",
    "map_on_page_summary",
    "run_on_page_crawl",
]
