"""Configuration management for fedcompose.

This module handles environment-based configuration using Pydantic Settings,
so composition runs can be tuned through ``FEDCOMPOSE_*`` environment
variables as well as explicit arguments.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

MalformedPolicy = Literal["ignore", "warn", "error"]


class CompositionConfig(BaseSettings):
    """Composition validation configuration."""

    # Environment
    environment: Literal["development", "testing", "production"] = Field(
        default="development", description="Application environment"
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Log level")
    json_logs: bool = Field(default=False, description="Enable JSON formatted logs")

    # Validation behaviour
    strict: bool = Field(
        default=False, description="Promote warnings to composition errors"
    )
    malformed_policy: MalformedPolicy = Field(
        default="warn",
        description="How to treat fragments missing a service name or value list",
    )
    max_workers: int = Field(
        default=1,
        ge=1,
        description="Worker threads for group evaluation (1 = sequential)",
    )

    class Config:
        """Pydantic configuration."""

        env_prefix = "FEDCOMPOSE_"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def is_concurrent(self) -> bool:
        """Check if groups should be evaluated in a worker pool."""
        return self.max_workers > 1
