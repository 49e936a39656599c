"""SQLite database connection and schema management.

Provides connection management and schema initialization for the
course catalog, per-user progress, subscriptions and admins.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

from lingo.config.app_config import load_app_config

logger = structlog.get_logger(__name__)

# Current database path (set by init_db, otherwise taken from config)
_db_path: Path | None = None


def init_db(db_path: Path | None = None) -> None:
    """Initialize database with schema.

    Creates the database file and all required tables if they don't exist.

    Args:
        db_path: Path to database file. Defaults to the configured path.
    """
    global _db_path
    _db_path = db_path or load_app_config().database.path

    with get_db() as conn:
        _create_schema(conn)

    logger.info("database.initialized", path=str(_db_path))


def get_db_path() -> Path:
    """Return the database path currently in use."""
    return _db_path or load_app_config().database.path


@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Get database connection as context manager.

    Yields:
        SQLite connection with row factory set to sqlite3.Row

    Example:
        with get_db() as conn:
            rows = conn.execute("SELECT * FROM courses").fetchall()
    """
    db_path = get_db_path()

    # Ensure directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")

    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create database schema.

    Uses IF NOT EXISTS for idempotency.
    """
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS courses (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            image_src TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS units (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            course_id INTEGER NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
            "order" INTEGER NOT NULL
        );

        CREATE TABLE IF NOT EXISTS lessons (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            unit_id INTEGER NOT NULL REFERENCES units(id) ON DELETE CASCADE,
            "order" INTEGER NOT NULL
        );

        CREATE TABLE IF NOT EXISTS challenges (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            lesson_id INTEGER NOT NULL REFERENCES lessons(id) ON DELETE CASCADE,
            type TEXT NOT NULL CHECK(type IN ('SELECT', 'ASSIST')),
            question TEXT NOT NULL,
            "order" INTEGER NOT NULL
        );

        CREATE TABLE IF NOT EXISTS challenge_options (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            challenge_id INTEGER NOT NULL REFERENCES challenges(id) ON DELETE CASCADE,
            text TEXT NOT NULL,
            correct INTEGER NOT NULL DEFAULT 0,
            image_src TEXT,
            audio_src TEXT
        );

        CREATE TABLE IF NOT EXISTS challenge_progress (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            challenge_id INTEGER NOT NULL REFERENCES challenges(id) ON DELETE CASCADE,
            completed INTEGER NOT NULL DEFAULT 0
        );

        CREATE TABLE IF NOT EXISTS user_progress (
            user_id TEXT PRIMARY KEY,
            user_name TEXT NOT NULL DEFAULT 'User',
            user_image_src TEXT NOT NULL DEFAULT '/mascot.svg',
            active_course_id INTEGER REFERENCES courses(id) ON DELETE CASCADE,
            hearts INTEGER NOT NULL DEFAULT 5,
            points INTEGER NOT NULL DEFAULT 0
        );

        CREATE TABLE IF NOT EXISTS user_subscription (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL UNIQUE,
            stripe_customer_id TEXT NOT NULL UNIQUE,
            stripe_subscription_id TEXT NOT NULL UNIQUE,
            stripe_price_id TEXT,
            stripe_current_period_end TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS admin (
            user_id TEXT PRIMARY KEY
        );

        -- Indexes
        CREATE INDEX IF NOT EXISTS idx_units_course ON units(course_id);
        CREATE INDEX IF NOT EXISTS idx_lessons_unit ON lessons(unit_id);
        CREATE INDEX IF NOT EXISTS idx_challenges_lesson ON challenges(lesson_id);
        CREATE INDEX IF NOT EXISTS idx_options_challenge ON challenge_options(challenge_id);
        CREATE INDEX IF NOT EXISTS idx_progress_user_challenge
            ON challenge_progress(user_id, challenge_id);
        CREATE INDEX IF NOT EXISTS idx_user_progress_points ON user_progress(points);
        """
    )
