"""
Settings Management with Pydantic

Provides type-safe configuration management with:
- Environment variable support
- Validation
- Separate sections for the activity stream and Story Mode
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StreamConfig(BaseSettings):
    """Activity stream configuration."""
    model_config = SettingsConfigDict(
        env_prefix="STREAM_",
        extra="ignore"
    )

    max_events: int = Field(default=30, ge=1)
    commentary_seed: int = 42
    rotation_interval_seconds: float = Field(default=3.5, gt=0)


class StoryConfig(BaseSettings):
    """Story Mode step offsets, in seconds from start."""
    model_config = SettingsConfigDict(
        env_prefix="STORY_",
        extra="ignore"
    )

    surge_at: float = 0.8
    carrier_dip_at: float = 1.8
    decide_at: float = 2.8
    apply_at: float = 3.8
    finish_at: float = 5.2

    # Story values
    surge_value: float = 0.5
    carrier_dip_value: float = -0.12


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ORCHESTRATOR_",
        extra="ignore"
    )

    # Application
    app_name: str = "Delivery Promise & Capacity Orchestrator"
    debug: bool = False
    log_level: str = "INFO"

    # Sub-configurations
    stream: StreamConfig = Field(default_factory=StreamConfig)
    story: StoryConfig = Field(default_factory=StoryConfig)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        return cls(
            stream=StreamConfig(),
            story=StoryConfig()
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
