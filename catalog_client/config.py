import logging
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_config_logger = logging.getLogger(__name__)

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    app_title: str = "Catalog Client"
    app_version: str = "0.1.0"
    app_env: str = "development"

    # Remote catalog API
    api_base_url: str = "http://localhost:4000/api"
    request_timeout: float = 10.0
    propagation_timeout: float = 30.0  # apply-to-all fan-out writes are slow

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore outbound HTTP
    log_level_api: str = "INFO"              # Catalog API client + gateways
    log_level_cache: str = "INFO"            # Cache, reorder and propagation services

    model_config = {
        "env_prefix": "CATALOG_",
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        """Normalise the base URL so endpoint paths can be appended verbatim."""
        if self.api_base_url.endswith("/"):
            _config_logger.debug("Stripping trailing slash from api_base_url")
            object.__setattr__(self, "api_base_url", self.api_base_url.rstrip("/"))


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
