"""
Shared configuration management for the Access Restrictions layer.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="RESTRICTIONS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local", description="Deployment environment name")
    log_level: str = Field(default="info", description="Root log level")

    # Observability
    enable_metrics: bool = Field(default=True, description="Record Prometheus decision counters")


class ServiceConfig(BaseConfig):
    """Restriction service configuration.

    Values here are service-wide fallbacks. An authenticator's own
    configuration map always wins when it carries the same key.
    """

    service_name: str = "restrictions"

    # IP restriction
    check_x_forwarded_for: bool = Field(
        default=True,
        description="Trust the first hop of X-Forwarded-For when no per-authenticator value is set"
    )

    # Time restriction
    default_timezone: str = Field(
        default="UTC",
        description="Timezone used when a time restriction does not name one"
    )


def get_config(service_name: str = "restrictions") -> ServiceConfig:
    """Get configuration for a service."""
    return ServiceConfig(service_name=service_name)
