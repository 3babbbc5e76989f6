"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management using Pydantic Settings.

A single cached Settings instance is shared by the whole application
(``get_settings`` is wrapped in ``lru_cache``).

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url

from scanflow.domain.models import BarcodeMode


# Module logger
logger = logging.getLogger(__name__)


DEFAULT_ALLOWED_CONTENT_TYPES = '["image/jpeg", "image/png", "image/heic", "image/heif"]'


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        database_url: SQLAlchemy database connection string
        default_mode: Classification mode used when a request names none
        submission_url: Endpoint of the remote barcode store (optional)
        submission_timeout_seconds: Timeout applied to each submission
        max_upload_bytes: Largest accepted image upload
        allowed_content_types: Accepted upload types (JSON array string)
        event_queue_size: Buffer size of each session event queue
        cors_origins: Allowed CORS origins (JSON array string)

    Example:
        >>> settings = Settings()
        >>> settings.submission_timeout_seconds
        30.0
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Scanflow Barcode API",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=True,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(default="0.0.0.0", description="Server bind address")

    port: int = Field(default=8000, ge=1, le=65535, description="Server port number")

    # =========================================================================
    # DATABASE SETTINGS
    # =========================================================================
    database_url: str = Field(
        default="sqlite:///./storage/db/scanflow.db",
        description="SQLAlchemy database connection string"
    )

    # =========================================================================
    # SCANNING SETTINGS
    # =========================================================================
    default_mode: BarcodeMode = Field(
        default=BarcodeMode.STANDARD,
        description="Classification mode when a request does not specify one"
    )

    max_upload_bytes: int = Field(
        default=20 * 1024 * 1024,
        ge=1,
        description="Largest accepted image upload in bytes"
    )

    allowed_content_types: str = Field(
        default=DEFAULT_ALLOWED_CONTENT_TYPES,
        description="Accepted upload content types as JSON array string"
    )

    event_queue_size: int = Field(
        default=64,
        ge=1,
        le=10000,
        description="Pending events buffered per session subscriber"
    )

    # =========================================================================
    # SUBMISSION SETTINGS
    # =========================================================================
    submission_url: Optional[str] = Field(
        default=None,
        description="Remote barcode store endpoint; local store when unset"
    )

    submission_timeout_seconds: float = Field(
        default=30.0,
        ge=1,
        le=300,
        description="Timeout for one submission request"
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """Normalize the environment name, falling back to development."""
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("default_mode", mode="before")
    @classmethod
    def validate_default_mode(cls, value):
        if isinstance(value, str):
            return value.strip().capitalize()
        return value

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @staticmethod
    def _json_list(raw: str, fallback: List[str], label: str) -> List[str]:
        try:
            values = json.loads(raw)
            if isinstance(values, list):
                return [str(v) for v in values]
            return fallback
        except json.JSONDecodeError:
            logger.warning(f"Invalid {label} JSON: {raw}, using defaults")
            return fallback

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from JSON string to list."""
        return self._json_list(self.cors_origins, ["*"], "CORS origins")

    @property
    def allowed_content_types_list(self) -> List[str]:
        """Parse accepted upload content types from JSON string to list."""
        return self._json_list(
            self.allowed_content_types,
            json.loads(DEFAULT_ALLOWED_CONTENT_TYPES),
            "content types",
        )

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================
    def sqlite_file(self) -> Optional[Path]:
        """File backing a SQLite store; None for in-memory or server databases."""
        url = make_url(self.database_url)
        if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
            return None
        return Path(url.database)

    def ensure_directories(self) -> None:
        """Create the folder of a file-backed SQLite store."""
        db_file = self.sqlite_file()
        if db_file is not None:
            db_file.parent.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Barcode store folder ready: {db_file.parent}")

    def __repr__(self) -> str:
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"default_mode={self.default_mode.value!r}, "
            f"submission_url={self.submission_url!r})"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance.

    Returns:
        Cached Settings instance
    """
    settings = Settings()
    settings.ensure_directories()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
