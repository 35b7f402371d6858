"""
Configuration Management

Centralized configuration for:
- Application name and logging
- Activity stream (capacity, commentary seed, rotation interval)
- Story Mode step timings
"""

from .settings import (
    Settings,
    StreamConfig,
    StoryConfig,
    get_settings
)

__all__ = [
    "Settings",
    "StreamConfig",
    "StoryConfig",
    "get_settings"
]
