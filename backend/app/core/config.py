# backend/app/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


_BACKEND_ROOT = Path(__file__).resolve().parents[2]
ENV_FILE = _BACKEND_ROOT / ".env"

logger = logging.getLogger(__name__)

_DEFAULT_SECRET_KEY = SecretStr("dev-secret-change-me")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=None if os.getenv("CI") else ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "test", "staging", "production"] = Field(
        default="development",
        description="Deployment environment name",
    )
    is_testing: bool = Field(default=False, description="Set by the test suite")
    log_level: str = Field(default="INFO", description="Root log level")

    # Database
    database_url: str = Field(
        default="sqlite:///./peerlearn.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = False

    # Auth (tokens are minted by the external auth service; we only verify them)
    secret_key: SecretStr = Field(
        default=_DEFAULT_SECRET_KEY,
        description="Secret key for JWT tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 hours

    # Booking locks
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis URL for per-teacher booking locks (empty disables)",
    )
    booking_lock_ttl_seconds: int = Field(default=30, ge=1, le=600)
    booking_lock_namespace: str = "peerlearn"
    booking_lock_connect_timeout: float = Field(default=0.5, gt=0, le=10)

    # Session rules
    min_session_minutes: int = Field(default=30, ge=1)
    max_session_minutes: int = Field(default=180, ge=1)
    default_session_minutes: int = Field(default=60, ge=1)

    # CORS
    frontend_url: str = Field(default="http://localhost:5173")

    @field_validator("redis_url", mode="before")
    @classmethod
    def _blank_redis_is_none(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = (value or "INFO").strip().upper()
        if normalized not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return normalized

    @model_validator(mode="after")
    def _validate_session_bounds(self) -> "Settings":
        if self.min_session_minutes > self.max_session_minutes:
            raise ValueError("min_session_minutes cannot exceed max_session_minutes")
        if not (self.min_session_minutes <= self.default_session_minutes <= self.max_session_minutes):
            raise ValueError("default_session_minutes must lie within the session bounds")
        if self.environment == "production" and self.secret_key == _DEFAULT_SECRET_KEY:
            raise ValueError("SECRET_KEY must be set in production")
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()

if is_running_tests():
    settings.is_testing = True
