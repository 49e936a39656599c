"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml
with fallback to built-in defaults.

Usage:
    from lingo.config.app_config import load_app_config

    config = load_app_config()
    db_path = config.database.path
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

# Environment override for the database location
DB_PATH_ENV = "LINGO_DB_PATH"


@dataclass
class DatabaseConfig:
    """SQLite database location."""

    path: Path = Path("db/lingo.db")


@dataclass
class AuthConfig:
    """Identity resolution settings.

    The upstream identity provider authenticates the request and forwards
    the opaque user id in ``user_header``. Paths starting with one of
    ``excluded_paths`` are static assets and skip identity resolution.
    """

    user_header: str = "X-User-Id"
    excluded_paths: list[str] = field(
        default_factory=lambda: [
            "/static",
            "/_next/static",
            "/_next/image",
            "/favicon.ico",
        ]
    )


@dataclass
class LeaderboardConfig:
    """Leaderboard settings."""

    limit: int = 10


@dataclass
class AppConfig:
    """Application-wide configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    leaderboard: LeaderboardConfig = field(default_factory=LeaderboardConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "database": {"path": "db/lingo.db"},
        "auth": {
            "user_header": "X-User-Id",
            "excluded_paths": [
                "/static",
                "/_next/static",
                "/_next/image",
                "/favicon.ico",
            ],
        },
        "leaderboard": {"limit": 10},
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    db_data = data.get("database") or {}
    db_path = os.environ.get(DB_PATH_ENV) or db_data.get(
        "path", defaults["database"]["path"]
    )

    auth_data = data.get("auth") or {}
    auth = AuthConfig(
        user_header=auth_data.get("user_header", defaults["auth"]["user_header"]),
        excluded_paths=list(
            auth_data.get("excluded_paths", defaults["auth"]["excluded_paths"])
        ),
    )

    board_data = data.get("leaderboard") or {}
    leaderboard = LeaderboardConfig(
        limit=int(board_data.get("limit", defaults["leaderboard"]["limit"])),
    )

    return AppConfig(
        database=DatabaseConfig(path=Path(db_path)),
        auth=auth,
        leaderboard=leaderboard,
    )


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
