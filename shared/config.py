"""
Shared configuration management for the access policy engine.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


WildcardQueryPolicy = Literal["evaluate", "reject"]


class PolicySettings(BaseSettings):
    """Engine settings, read from POLICY_* environment variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="POLICY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local", description="Deployment environment")
    log_level: str = Field(default="info", description="Log level for policy loggers")

    # Inheritance resolution
    max_inheritance_depth: int = Field(
        default=10,
        ge=1,
        description="Longest parent chain a role may resolve through"
    )

    # Query evaluation
    wildcard_query_policy: WildcardQueryPolicy = Field(
        default="evaluate",
        description="'reject' refuses queries whose resource and scope are both wildcards"
    )

    # Observability
    enable_metrics: bool = Field(default=True, description="Record Prometheus decision metrics")


def get_settings(**overrides) -> PolicySettings:
    """Get engine settings, applying explicit overrides over the environment."""
    return PolicySettings(**overrides)
