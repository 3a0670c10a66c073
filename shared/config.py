"""
Shared configuration management for the ACL evaluator.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="ACL_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local", description="Deployment environment name")
    log_level: str = Field(default="info", description="Root log level")


class AclSettings(BaseConfig):
    """Evaluator settings, fixed for the lifetime of an evaluator."""

    # Reject malformed role sets when an evaluator is built
    validate_roles: bool = Field(default=True)

    # Count decisions in prometheus metrics
    metrics_enabled: bool = Field(default=True)

    # Optional YAML/JSON role definition file
    definitions_file: Optional[str] = Field(default=None)


def get_settings(**overrides) -> AclSettings:
    """Get evaluator settings from the environment, with explicit overrides."""
    return AclSettings(**overrides)
