import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_config_logger = logging.getLogger(__name__)

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)
_STAFF_FILTERS = frozenset({"all", "pending", "in-progress", "completed"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Equipment Service Portal API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    database_url: str = "sqlite:///./service_portal.db"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Hosted identity provider (GoTrue-compatible auth REST API)
    identity_base_url: str = "http://localhost:54321"
    identity_api_key: str = ""
    identity_timeout: float = 10.0

    # Complaint views
    staff_default_filter: str = "pending"
    live_view_keepalive_seconds: int = 15

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore, identity provider calls
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_sync: str = "INFO"             # change feed + sync controllers

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        """Fall back to 'all' when the configured staff filter is not a known value."""
        if self.staff_default_filter.strip().lower() not in _STAFF_FILTERS:
            _config_logger.warning(
                "Unknown staff_default_filter %r, using 'all'", self.staff_default_filter
            )
            object.__setattr__(self, "staff_default_filter", "all")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
