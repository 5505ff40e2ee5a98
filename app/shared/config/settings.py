# 📄 File: app/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The main configuration center that reads all settings from environment variables
# and provides them to the rest of our Plant Care app in an organized way.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for database, photo storage, logging and reminder scheduling.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - tzlocal for the machine's local timezone
#
# 🔄 Connected Modules / Calls From:
# - app.main (application startup)
# - app.shared.core.dependencies (service container wiring)
# - Database connection and logging setup

from datetime import tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from tzlocal import get_localzone


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="Pocket Plant Care", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    APP_DESCRIPTION: str = Field(
        default="Personal plant tracker with daily watering reminders",
        description="Application description"
    )
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=False, description="Debug mode flag")

    # =========================================================================
    # LOGGING
    # =========================================================================

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log output format (json/text)")
    LOG_FILE: Optional[str] = Field(default=None, description="Optional log file path")

    # =========================================================================
    # SERVER CONFIGURATION
    # =========================================================================

    HOST: str = Field(default="127.0.0.1", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    RELOAD: bool = Field(default=False, description="Auto-reload on changes")
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        description="Comma-separated list of allowed CORS origins"
    )

    # =========================================================================
    # DATABASE CONFIGURATION
    # =========================================================================

    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./data/plant_care.db",
        description="SQLAlchemy async database URL"
    )
    DB_ECHO: bool = Field(default=False, description="Echo SQL statements")
    DB_CREATE_SCHEMA: bool = Field(
        default=True,
        description="Create missing tables on startup (first run without Alembic)"
    )

    # =========================================================================
    # PHOTO STORAGE
    # =========================================================================

    PHOTO_STORAGE_DIR: Path = Field(
        default=Path("./data/photos"),
        description="Directory where plant photos are stored"
    )
    PHOTO_MAX_SIZE_MB: int = Field(default=10, description="Maximum accepted photo size")

    # =========================================================================
    # REMINDER SCHEDULING
    # =========================================================================

    TIMEZONE: Optional[str] = Field(
        default=None,
        description="IANA timezone for reminder wall-clock times (default: machine local zone)"
    )
    REMINDER_EXACT_ALARMS_ALLOWED: bool = Field(
        default=True,
        description="Whether precise one-shot alarms may be registered"
    )
    NOTIFICATIONS_ENABLED: bool = Field(
        default=True,
        description="Whether reminder notifications may be posted"
    )
    REMINDER_INEXACT_JITTER_SECONDS: int = Field(
        default=600,
        description="Maximum drift applied to inexact repeating reminders"
    )
    REMINDER_MISFIRE_GRACE_SECONDS: int = Field(
        default=3600,
        description="How late a missed reminder may still fire after wake-up"
    )
    REMINDER_RECONCILE_INTERVAL_MINUTES: int = Field(
        default=30,
        description="Period of the background reminder reconciliation pass (0 disables)"
    )
    DEFAULT_REMINDER_HOUR: int = Field(default=9, description="Default reminder hour")
    DEFAULT_REMINDER_MINUTE: int = Field(default=0, description="Default reminder minute")

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed_environments = ["development", "staging", "production", "test"]
        if v.lower() not in allowed_environments:
            raise ValueError(f"Environment must be one of {allowed_environments}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()

    @field_validator("TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Reject unknown IANA zone names early."""
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator("DEFAULT_REMINDER_HOUR")
    @classmethod
    def validate_reminder_hour(cls, v: int) -> int:
        if not 0 <= v <= 23:
            raise ValueError("Reminder hour must be between 0 and 23")
        return v

    @field_validator("DEFAULT_REMINDER_MINUTE")
    @classmethod
    def validate_reminder_minute(cls, v: int) -> int:
        if not 0 <= v <= 59:
            raise ValueError("Reminder minute must be between 0 and 59")
        return v

    @field_validator(
        "REMINDER_INEXACT_JITTER_SECONDS",
        "REMINDER_MISFIRE_GRACE_SECONDS",
        "REMINDER_RECONCILE_INTERVAL_MINUTES",
        "PHOTO_MAX_SIZE_MB",
    )
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Value must not be negative")
        return v

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def reminder_timezone(self) -> tzinfo:
        """Timezone used to interpret reminder hour/minute."""
        if self.TIMEZONE:
            return ZoneInfo(self.TIMEZONE)
        return get_localzone()

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.ENVIRONMENT == "test"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
