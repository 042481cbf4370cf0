"""Application settings and configuration constants.

This module contains application settings, constants, and configuration
values for the content API backend.
"""

from pathlib import Path
from typing import Literal

from pydantic import EmailStr
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = Path(__file__).parent.parent.parent / ".env"

# --- Constants ---
MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 500
MAX_META_TITLE_LENGTH = 60
MAX_META_DESCRIPTION_LENGTH = 160
MAX_NAME_LENGTH = 100
MAX_SUBJECT_LENGTH = 200
MAX_MESSAGE_LENGTH = 2000

# Response constants
DEFAULT_ERROR_MESSAGE = "An unexpected server error occurred."
RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."
CONTACT_RATE_LIMIT_MESSAGE = "Too many contact submissions. Please try again later."
SUBSCRIPTION_RATE_LIMIT_MESSAGE = "Too many subscription attempts. Please try again later."


class Settings(BaseSettings):
    """Application settings with validation and default values."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Content API"
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True
    LOG_FILE: str = "logs/content_api.log"
    PRODUCTION_FRONTEND_URL: str | None = None
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # MongoDB Configuration
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "content_api"
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    MONGODB_CONNECT_RETRIES: int = 3

    # Pagination
    MAX_PAGE_SIZE: int = 100

    # Email Configuration
    MAIL_PROVIDER: Literal["gmail", "console"] = "console"
    MAIL_FROM: EmailStr | str = ""
    COMPANY_TARGET_EMAIL: EmailStr | str = ""
    GMAIL_TOKEN_FILE: Path = Path("secrets/token.json")
    GMAIL_SCOPES: list[str] = ["https://www.googleapis.com/auth/gmail.send"]
    SITE_NAME: str = "Content API"
    PUBLIC_API_URL: str = "http://localhost:8000"

    # Notification queue
    EMAIL_QUEUE_MAXSIZE: int = 100
    EMAIL_WORKERS: int = 2
    EMAIL_MAX_RETRIES: int = 3
    EMAIL_RETRY_BASE_DELAY: float = 1.0  # seconds
    EMAIL_RETRY_MAX_DELAY: float = 30.0  # seconds
    EMAIL_DRAIN_TIMEOUT: float = 10.0  # seconds

    # Rate limiting
    RATE_LIMIT_WINDOW_MINUTES: int = 15
    RATE_LIMIT_MAX_REQUESTS: int = 100
    CONTACT_RATE_LIMIT: str = "5 per 15 minutes"
    SUBSCRIPTION_RATE_LIMIT: str = "3 per hour"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def allowed_origins(self) -> list[str]:
        """CORS origins including the production frontend, if configured."""
        origins = list(self.CORS_ORIGINS)
        if self.PRODUCTION_FRONTEND_URL:
            origins.append(self.PRODUCTION_FRONTEND_URL)
        return origins


settings = Settings()


class LimiterConfig(BaseSettings):
    """Keyword arguments for the slowapi ``Limiter``."""

    model_config = SettingsConfigDict(case_sensitive=False)

    default_limits: list[str] = [
        f"{settings.RATE_LIMIT_MAX_REQUESTS} per {settings.RATE_LIMIT_WINDOW_MINUTES} minutes",
    ]
    storage_uri: str = settings.RATE_LIMIT_STORAGE_URI
    headers_enabled: bool = False
    strategy: Literal["fixed-window", "moving-window"] = "moving-window"
