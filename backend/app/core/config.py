# backend/app/core/config.py
import logging
import os
from typing import List

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import BRAND_NAME, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

load_dotenv()

logger = logging.getLogger(__name__)

_DEFAULT_SECRET_KEY = SecretStr("skillbridge-dev-secret-change-me")


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


class Settings(BaseSettings):
    app_name: str = BRAND_NAME
    environment: str = Field(default="development", description="development|test|production")
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = Field(
        default="sqlite:///./skillbridge.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = False

    # JWT verification
    secret_key: SecretStr = Field(
        default=_DEFAULT_SECRET_KEY,
        description="Secret key for JWT tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 hours

    api_prefix: str = "/api/v1"
    # Comma separated list of allowed origins
    cors_origins: str = "http://localhost:3000"

    # Bookable day grid used by the availability listing
    availability_start_hour: int = Field(default=9, ge=0, le=23)
    availability_end_hour: int = Field(default=17, ge=1, le=24)
    slot_step_minutes: int = Field(default=30, ge=5, le=240)

    default_page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = MAX_PAGE_SIZE

    slow_operation_threshold_seconds: float = 1.0
    slow_request_threshold_ms: int = 500

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        level = (v or "INFO").upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def _check_availability_window(self) -> "Settings":
        if self.availability_end_hour <= self.availability_start_hour:
            raise ValueError("availability_end_hour must be after availability_start_hour")
        return self

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in {"prod", "production"}

    def get_database_url(self) -> str:
        """Get the database URL for the current context."""
        if self.is_production and self.database_url.startswith("sqlite"):
            logger.warning("SQLite database configured in production environment")
        return self.database_url


settings = Settings()
