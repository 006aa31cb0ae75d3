"""
Configuration management for Gatekeeper.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GatekeeperSettings(BaseSettings):
    """Settings shared by every pipeline built in this process."""

    model_config = SettingsConfigDict(
        env_prefix="GATEKEEPER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    log_json: bool = Field(default=True)

    # Rule sets
    strict_rule_names: bool = Field(
        default=True,
        description="Reject duplicate rule names when a pipeline is built"
    )

    # Metrics
    enable_metrics: bool = Field(default=False)
    metrics_namespace: str = Field(default="gatekeeper")


@lru_cache()
def get_settings() -> GatekeeperSettings:
    """Get the process-wide settings, read once from the environment."""
    return GatekeeperSettings()
