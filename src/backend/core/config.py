"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables (or a local .env file).
The resulting Settings object is built once at startup and handed to the
application context; nothing reads the environment after that.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Any, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STAFF_PASS = "change-this-staff-pass"
DEFAULT_IP_SALT = "change-this-salt-in-env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "OpenMic Vote"
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    SECRET_KEY: str = ""  # Required - signs the staff session cookie

    # Staff access
    STAFF_PASS: str = DEFAULT_STAFF_PASS
    STAFF_COOKIE_NAME: str = "staff"
    STAFF_SESSION_HOURS: int = 8
    JWT_ALGORITHM: str = "HS256"

    # Voter identity
    # Rotating the salt resets dedup history: every caller can vote again.
    IP_SALT: str = DEFAULT_IP_SALT
    TRUST_FORWARDED_FOR: bool = True
    VOTER_COOKIE_NAME: str = "_voter"
    VOTER_COOKIE_MAX_AGE_DAYS: int = 365
    COOKIE_SECURE: bool = False

    # Storage
    DATABASE_URL: str = "sqlite+aiosqlite:///./votes.sqlite"
    DATABASE_ECHO: bool = False

    # Voting rules
    VOTE_WINDOW_MINUTES: int = 0  # 0 = one vote per identity, forever
    COOKIE_GUARD_ENABLED: bool = False

    # Artists
    SLUG_MAX_ATTEMPTS: int = 5

    # Leaderboard
    LEADERBOARD_ORDER: Literal["total", "average"] = "total"

    @field_validator("SECRET_KEY", "STAFF_PASS", "IP_SALT")
    @classmethod
    def validate_required_secrets(cls, v: str, info: Any) -> str:
        """Validate that required secrets are set."""
        if not v:
            raise ValueError(f"{info.field_name} must be set in environment")
        return v

    @field_validator("VOTE_WINDOW_MINUTES")
    @classmethod
    def validate_vote_window(cls, v: int) -> int:
        if v < 0:
            raise ValueError("VOTE_WINDOW_MINUTES must be >= 0")
        return v

    @field_validator("SLUG_MAX_ATTEMPTS", "STAFF_SESSION_HOURS", "VOTER_COOKIE_MAX_AGE_DAYS")
    @classmethod
    def validate_positive(cls, v: int, info: Any) -> int:
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v

    @property
    def vote_window(self) -> timedelta | None:
        """Revote window, or None when each identity may vote only once."""
        if not self.VOTE_WINDOW_MINUTES:
            return None
        return timedelta(minutes=self.VOTE_WINDOW_MINUTES)

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.lower() == "production"

    @property
    def uses_default_secrets(self) -> list[str]:
        """Names of secrets still set to their shipped defaults."""
        defaults = []
        if self.STAFF_PASS == DEFAULT_STAFF_PASS:
            defaults.append("STAFF_PASS")
        if self.IP_SALT == DEFAULT_IP_SALT:
            defaults.append("IP_SALT")
        return defaults


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
