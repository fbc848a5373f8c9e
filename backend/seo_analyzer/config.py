from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    PROJECT_NAME: str = "SEO Analyzer"
    VERSION: str = "1.0.0"

    API_V1_STR: str = "/api/v1"

    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:5051"

    LOG_LEVEL: str = "INFO"

    # Target site fetching
    USER_AGENT: str = "seo-analyzer/1.0 (+https://github.com/seo-analyzer)"
    HTML_FETCH_TIMEOUT: float = 20.0
    HTML_MAX_REDIRECTS: int = 5
    RESOURCE_PROBE_MAX_REDIRECTS: int = 2

    # DataForSEO On-Page API
    DATAFORSEO_API_URL: str = "https://api.dataforseo.com/v3"
    DATAFORSEO_LOGIN: str = ""
    DATAFORSEO_PASSWORD: str = ""
    DATAFORSEO_TIMEOUT: float = 30.0
    DATAFORSEO_MAX_CRAWL_PAGES: int = 1
    DATAFORSEO_ENABLE_JAVASCRIPT: bool = True
    DATAFORSEO_USER_AGENT: str = "seo-analyzer/1.0"
    DATAFORSEO_POLL_INTERVAL: float = 5.0
    DATAFORSEO_POLL_TIMEOUT: float = 120.0

    # Whole-run deadline; covers the poll budget plus the HTML fetch timeout
    ANALYSIS_DEADLINE_SECONDS: float = 150.0

    TOP_FIXES_LIMIT: int = 5

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @field_validator("DATAFORSEO_MAX_CRAWL_PAGES")
    @classmethod
    def _check_max_crawl_pages(cls, value: int) -> int:
        if not 1 <= value <= 5:
            raise ValueError("DATAFORSEO_MAX_CRAWL_PAGES must be between 1 and 5")
        return value

    @property
    def cors_origins_list(self) -> List[str]:
        if isinstance(self.CORS_ORIGINS, str):
            return [o.strip() for o in self.CORS_ORIGINS.split(",")]
        return self.CORS_ORIGINS

    @property
    def dataforseo_configured(self) -> bool:
        return bool(self.DATAFORSEO_LOGIN and self.DATAFORSEO_PASSWORD)


settings = Settings()
