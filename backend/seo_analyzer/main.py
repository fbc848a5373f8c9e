"""
FastAPI application entry point for the SEO analyzer.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from seo_analyzer.api.v1.router import api_router
from seo_analyzer.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

if not settings.dataforseo_configured:
    logger.warning("DataForSEO credentials not configured; remote crawl checks will be skipped")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.VERSION}


@app.get(f"{settings.API_V1_STR}/health")
async def api_health_check():
    """API health check endpoint."""
    return {"status": "healthy", "version": settings.VERSION}
