"""
Configuration management for ClinicBook.

This module provides centralized configuration using Pydantic Settings
for environment-based configuration management.
"""

import os
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import Field, ValidationInfo, field_validator, validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(env_prefix="MONGO_")

    uri: str = Field(
        default="mongodb://localhost:27017", description="MongoDB connection URI"
    )
    db_name: str = Field(default="clinicbook", description="MongoDB database name")
    operation_timeout_seconds: float = Field(
        default=10.0, description="Upper bound for a single store round-trip"
    )
    server_selection_timeout_ms: int = Field(
        default=15000, description="Motor server selection timeout"
    )

    @validator("uri")
    def validate_mongo_uri(cls, v: str) -> str:
        """Validate MongoDB URI format."""
        if not v:
            raise ValueError("MongoDB URI is required. Please set MONGO_URI environment variable.")
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                "MongoDB URI must start with 'mongodb://' or 'mongodb+srv://'"
            )
        return v

    @validator("operation_timeout_seconds")
    def validate_operation_timeout(cls, v: float) -> float:
        if v <= 0 or v > 120:
            raise ValueError("Operation timeout must be between 0 and 120 seconds")
        return v


class BookingSettings(BaseSettings):
    """Booking rules: capacity, clinic timezone and rate limiting."""

    model_config = SettingsConfigDict(env_prefix="BOOKING_")

    max_appointments_per_doctor_per_day: int = Field(
        default=4, description="Maximum non-cancelled appointments per doctor per day"
    )
    timezone: str = Field(default="Asia/Manila", description="Clinic timezone (IANA name)")
    rate_limit_attempts: int = Field(
        default=3, description="Booking attempts allowed per requester per window"
    )
    rate_limit_window_seconds: int = Field(
        default=3600, description="Sliding window for booking attempts"
    )
    required_shift_hours: int = Field(
        default=12, description="Exact shift length required when saving a doctor"
    )
    ledger_claim_grace_seconds: int = Field(
        default=120,
        description="Age after which a ledger hour with no appointment behind it is released",
    )

    @field_validator("max_appointments_per_doctor_per_day")
    @classmethod
    def validate_max_daily(cls, v: int) -> int:
        if not 1 <= v <= 48:
            raise ValueError("max_appointments_per_doctor_per_day must be between 1 and 48")
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator("rate_limit_attempts", "rate_limit_window_seconds", "ledger_claim_grace_seconds")
    @classmethod
    def validate_positive(cls, v: int, info: ValidationInfo) -> int:
        if v < 1:
            raise ValueError(f"{info.field_name} must be positive")
        return v

    @field_validator("required_shift_hours")
    @classmethod
    def validate_shift_hours(cls, v: int) -> int:
        if not 1 <= v <= 23:
            raise ValueError("required_shift_hours must be between 1 and 23")
        return v


class CleanupSettings(BaseSettings):
    """Periodic appointment cleanup sweep settings."""

    model_config = SettingsConfigDict(env_prefix="CLEANUP_")

    sweeper_enabled: bool = Field(
        default=True, description="Run the cleanup sweep inside the API process"
    )
    sweeper_interval_seconds: int = Field(
        default=3600, description="Interval in seconds between sweeps (default: 1 hour)"
    )

    @validator("sweeper_interval_seconds")
    def validate_interval(cls, v: int) -> int:
        if v < 60:
            raise ValueError("Sweeper interval must be at least 60 seconds")
        return v


class EmailSettings(BaseSettings):
    """EmailJS transactional email settings."""

    model_config = SettingsConfigDict(env_prefix="EMAILJS_")

    enabled: bool = Field(default=False, description="Send booking confirmation emails")
    api_url: str = Field(
        default="https://api.emailjs.com/api/v1.0/email/send",
        description="EmailJS REST endpoint",
    )
    service_id: str = Field(default="", description="EmailJS service ID")
    template_id: str = Field(default="", description="EmailJS template ID")
    public_key: str = Field(default="", description="EmailJS public key (user_id)")
    private_key: str = Field(default="", description="EmailJS private key (accessToken)")
    timeout_seconds: float = Field(default=10.0, description="HTTP timeout for EmailJS")
    clinic_phone: str = Field(default="+63 905 517 7314", description="Clinic phone shown in emails")
    clinic_address: str = Field(
        default="123 Healthcare St., Marikina, Philippines",
        description="Clinic address shown in emails",
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.enabled and self.service_id and self.template_id and self.public_key)


class CORSSettings(BaseSettings):
    """CORS configuration settings."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    allowed_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins",
    )
    allowed_methods: List[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        description="Allowed HTTP methods",
    )
    allowed_headers: List[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    @validator("allowed_origins", pre=True)
    def parse_allowed_origins(cls, v):
        """Parse allowed origins from string or list."""
        if isinstance(v, str):
            if v.startswith("[") and v.endswith("]"):
                import json

                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    return [v.strip()]
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format (json or text)")

    @validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @validator("format")
    def validate_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    app_name: str = Field(default="ClinicBook", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    app_env: str = Field(default="development", description="Application environment")
    debug: bool = Field(default=False, description="Debug mode")
    port: int = Field(default=8000, description="Application port")
    host: str = Field(default="0.0.0.0", description="Application host")
    store_backend: str = Field(
        default="mongo", description="Repository backend: mongo or memory"
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    booking: BookingSettings = Field(default_factory=BookingSettings)
    cleanup: CleanupSettings = Field(default_factory=CleanupSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        # Sub-settings read their own prefixed environment variables
        self.database = DatabaseSettings()
        self.booking = BookingSettings()
        self.cleanup = CleanupSettings()
        self.email = EmailSettings()
        self.cors = CORSSettings()
        self.logging = LoggingSettings()

    @validator("app_env")
    def validate_app_env(cls, v: str) -> str:
        """Validate application environment."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"App environment must be one of: {valid_envs}")
        return v.lower()

    @validator("store_backend")
    def validate_store_backend(cls, v: str) -> str:
        if v.lower() not in ("mongo", "memory"):
            raise ValueError("store_backend must be 'mongo' or 'memory'")
        return v.lower()

    @validator("port")
    def validate_port(cls, v: int) -> int:
        """Validate port number."""
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        return self.app_env == "testing"


_settings: Optional[Settings] = None


def _load_env_file_if_available() -> None:
    """Best-effort load of .env by searching current and parent directories.

    Already-set environment variables are never overridden.
    """
    cwd = Path(os.getcwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            load_dotenv(dotenv_path=str(candidate), override=False)
            break


def get_settings() -> Settings:
    """Get application settings instance (lazy-init with .env discovery)."""
    global _settings
    if _settings is None:
        _load_env_file_if_available()
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
