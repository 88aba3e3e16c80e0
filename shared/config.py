"""
Shared configuration management for the properties cache service.
"""

from typing import List

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.errors import ConfigurationError


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = Field(default="local", description="Deployment environment name")
    log_level: str = Field(default="info", description="Log level for structlog and stdlib logging")

    # Upstream CMS
    sanity_api_url: str = Field(..., description="Sanity query API base URL ending in '?query='")
    sanity_content_type: str = Field(default="property", description="Document type selected by the refresh query")
    sanity_timeout_seconds: float = Field(default=30.0, gt=0, description="Upstream request timeout")

    # Refresher
    refresh_interval_seconds: float = Field(default=3600.0, gt=0, description="Delay between refresh cycles")

    # CORS
    cors_allowed_origins: List[str] = Field(default_factory=lambda: ["*"])
    cors_allowed_methods: List[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    cors_allowed_headers: List[str] = Field(default_factory=lambda: ["Content-Type", "X-API-Key"])

    @field_validator("sanity_api_url")
    @classmethod
    def _require_api_url(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("SANITY_API_URL must not be empty")
        return value.strip()


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int = 8000
    host: str = "0.0.0.0"


def get_config(service_name: str, **overrides) -> ServiceConfig:
    """Get configuration for a specific service.

    Raises ConfigurationError when required settings are missing or invalid.
    """
    try:
        return ServiceConfig(service_name=service_name, **overrides)
    except ValidationError as exc:
        missing = [
            ".".join(str(part) for part in error["loc"]).upper()
            for error in exc.errors()
        ]
        if "SANITY_API_URL" in missing:
            message = "SANITY_API_URL is not set in the environment"
        else:
            message = "Invalid service configuration"
        raise ConfigurationError(message, details={"fields": missing}) from exc
