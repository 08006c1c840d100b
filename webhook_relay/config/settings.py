"""
Module: settings.py
Description: Application configuration using pydantic-settings.

Configures all relay settings from environment variables with
validation and defaults. Supports .env files for local development.

Dependencies: pydantic, pydantic-settings
Author: Webhook Relay Team
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DistributionMode(str, Enum):
    """How a delivery is distributed after the primary forward."""

    FANOUT = "fanout"
    RETENTION = "retention"


def _validate_http_url(v: str) -> str:
    if not v or not isinstance(v, str):
        raise ValueError("URL must be a non-empty string")
    if not v.startswith(('http://', 'https://')):
        raise ValueError("URL must be a valid HTTP/HTTPS URL")
    return v


class Settings(BaseSettings):
    """Relay settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="Webhook Relay", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    service_name: str = Field(default="webhook-proxy", description="Service name reported by health checks")
    log_level: str = Field(default="INFO", description="Logging level")

    # Listener settings
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3080, ge=1, le=65535, description="Listen port")

    # Relay settings
    production_url: str = Field(
        default="http://localhost:8000/api/webhooks/stubhub",
        description="Primary destination every delivery is forwarded to"
    )
    distribution_mode: DistributionMode = Field(
        default=DistributionMode.FANOUT,
        description="Distribution strategy used after the primary forward"
    )
    forward_timeout: float = Field(
        default=10.0,
        gt=0,
        le=60,
        description="HTTP timeout in seconds for each forwarding attempt"
    )
    initial_secondaries: List[str] = Field(
        default_factory=list,
        description="Secondary destinations registered at startup (fan-out mode)"
    )

    # Retention settings
    poll_secret: Optional[str] = Field(
        default=None,
        description="Shared bearer secret required by GET /dev/poll"
    )
    retention_max_size: int = Field(
        default=100,
        ge=1,
        description="Maximum number of deliveries held for polling"
    )
    retention_ttl_seconds: int = Field(
        default=300,
        ge=1,
        description="Seconds a delivery stays pollable before it expires"
    )

    @field_validator('production_url')
    @classmethod
    def validate_production_url(cls, v: str) -> str:
        """Validate the primary destination is an absolute HTTP(S) URL."""
        return _validate_http_url(v)

    @field_validator('initial_secondaries')
    @classmethod
    def validate_initial_secondaries(cls, v: List[str]) -> List[str]:
        """Validate every seeded secondary destination."""
        return [_validate_http_url(url) for url in v]

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @property
    def is_fanout(self) -> bool:
        """Check if deliveries fan out to registered secondaries."""
        return self.distribution_mode == DistributionMode.FANOUT

    @property
    def is_retention(self) -> bool:
        """Check if deliveries are retained for polling."""
        return self.distribution_mode == DistributionMode.RETENTION


# Global settings instance
settings = Settings()
