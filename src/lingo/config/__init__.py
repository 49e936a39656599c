"""Configuration package for lingo."""

from lingo.config.app_config import (
    AppConfig,
    AuthConfig,
    DatabaseConfig,
    LeaderboardConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "AuthConfig",
    "DatabaseConfig",
    "LeaderboardConfig",
    "clear_config_cache",
    "load_app_config",
]
