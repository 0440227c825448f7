"""Configuration management for Agent Studio."""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AGENT_STUDIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Validation / confidence scoring
    validation_threshold: float = Field(
        0.8, ge=0.0, le=1.0, description="Confidence below this requires manual review"
    )
    max_agents_before_penalty: int = Field(
        10, ge=1, description="Agent count above which the oversize penalty applies"
    )
    missing_capability_penalty: float = Field(0.1, ge=0.0, description="Penalty per missing capability")
    conflict_penalty: float = Field(0.05, ge=0.0, description="Penalty per resolved conflict")
    oversize_penalty: float = Field(0.05, ge=0.0, description="Penalty for oversized configurations")

    # Configuration cache
    cache_enabled: bool = Field(True, description="Memoize resolutions by profile hash")
    cache_max_size: int = Field(128, ge=1, description="Maximum cached resolutions")
    cache_ttl_seconds: int = Field(1800, ge=1, description="Cache entry lifetime (30 minutes)")

    # Catalog
    catalog_path: Optional[str] = Field(None, description="YAML/JSON file replacing the built-in catalog")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field("INFO", description="Log level")
    log_json: bool = Field(False, description="Emit logs as JSON")

    # Output
    output_dir: str = Field("./agent-studio-output", description="Directory for generated bundles")
    output_format: Literal["yaml", "json"] = Field("yaml", description="Bundle serialization format")


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
