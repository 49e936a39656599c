"""Catalog and user-state seeding.

Loads a YAML seed file into the database. Expected layout:

    courses:
      - title: Spanish
        image_src: /es.svg
        units:
          - title: Unit 1
            description: Learn the basics of Spanish
            lessons:
              - title: Nouns
                challenges:
                  - type: SELECT
                    question: Which one of these is "the man"?
                    options:
                      - {text: el hombre, correct: true, image_src: /man.svg}
                      - {text: la mujer, correct: false}
    users:
      - user_id: user_1
        user_name: Ana
        active_course: Spanish
        points: 40
    admins: [user_1]

``order`` defaults to the 1-based position in its list.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog
import yaml

from lingo.db.database import get_db

logger = structlog.get_logger(__name__)

CHALLENGE_TYPES = ("SELECT", "ASSIST")


class SeedError(Exception):
    """Raised when seed data is malformed."""


@dataclass
class SeedResult:
    """Counts of inserted rows."""

    courses: int = 0
    units: int = 0
    lessons: int = 0
    challenges: int = 0
    options: int = 0
    users: int = 0
    admins: int = 0


def seed_from_yaml(path: Path, reset: bool = False) -> SeedResult:
    """Load a YAML seed file.

    Args:
        path: Seed file
        reset: Delete existing catalog and user state first

    Raises:
        SeedError: If the file is missing or malformed
    """
    if not path.exists():
        raise SeedError(f"Seed file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise SeedError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise SeedError(f"Seed file must contain a mapping: {path}")

    return seed_catalog(data, reset=reset)


def seed_catalog(data: dict[str, Any], reset: bool = False) -> SeedResult:
    """Insert courses, users and admins from a parsed seed mapping.

    Runs in one transaction; nothing is written if any entry is invalid.
    """
    result = SeedResult()

    with get_db() as conn:
        if reset:
            reset_catalog(conn)

        course_ids: dict[str, int] = {}
        for course in data.get("courses") or []:
            title = _require(course, "title", "course")
            course_ids[title] = _insert_course(conn, title, course, result)

        for user in data.get("users") or []:
            user_id = _require(user, "user_id", "user")
            active = user.get("active_course")
            if active is not None and active not in course_ids:
                row = conn.execute(
                    "SELECT id FROM courses WHERE title = ?", (active,)
                ).fetchone()
                if row is None:
                    raise SeedError(f"Unknown active_course for user: {active}")
                course_ids[active] = row["id"]

            insert_user_progress(
                conn,
                user_id=user_id,
                user_name=user.get("user_name", "User"),
                user_image_src=user.get("user_image_src", "/mascot.svg"),
                active_course_id=course_ids.get(active) if active else None,
                hearts=int(user.get("hearts", 5)),
                points=int(user.get("points", 0)),
            )
            result.users += 1

        for user_id in data.get("admins") or []:
            if isinstance(user_id, (dict, list)) or not user_id:
                raise SeedError(f"Each admin must be a user id: {user_id!r}")
            insert_admin(conn, str(user_id))
            result.admins += 1

    logger.info("seed.completed", **vars(result))
    return result


def reset_catalog(conn: sqlite3.Connection) -> None:
    """Delete all catalog and per-user rows."""
    for table in (
        "challenge_progress",
        "challenge_options",
        "challenges",
        "lessons",
        "units",
        "user_progress",
        "user_subscription",
        "admin",
        "courses",
    ):
        conn.execute(f"DELETE FROM {table}")
    logger.info("seed.reset")


def _insert_course(
    conn: sqlite3.Connection, title: str, course: dict[str, Any], result: SeedResult
) -> int:
    course_id = conn.execute(
        "INSERT INTO courses (title, image_src) VALUES (?, ?)",
        (title, course.get("image_src", "")),
    ).lastrowid
    result.courses += 1

    for u_pos, unit in enumerate(course.get("units") or [], start=1):
        unit_id = conn.execute(
            'INSERT INTO units (title, description, course_id, "order") '
            "VALUES (?, ?, ?, ?)",
            (
                _require(unit, "title", "unit"),
                unit.get("description", ""),
                course_id,
                unit.get("order", u_pos),
            ),
        ).lastrowid
        result.units += 1

        for l_pos, lesson in enumerate(unit.get("lessons") or [], start=1):
            lesson_id = conn.execute(
                'INSERT INTO lessons (title, unit_id, "order") VALUES (?, ?, ?)',
                (_require(lesson, "title", "lesson"), unit_id, lesson.get("order", l_pos)),
            ).lastrowid
            result.lessons += 1

            for c_pos, challenge in enumerate(lesson.get("challenges") or [], start=1):
                _insert_challenge(conn, lesson_id, challenge, c_pos, result)

    logger.debug("seed.course_inserted", course_id=course_id, title=title)
    return course_id


def _insert_challenge(
    conn: sqlite3.Connection,
    lesson_id: int,
    challenge: dict[str, Any],
    position: int,
    result: SeedResult,
) -> None:
    question = _require(challenge, "question", "challenge")
    challenge_type = challenge.get("type", "SELECT")
    if challenge_type not in CHALLENGE_TYPES:
        raise SeedError(
            f"Invalid challenge type '{challenge_type}', expected one of {CHALLENGE_TYPES}"
        )

    challenge_id = conn.execute(
        'INSERT INTO challenges (lesson_id, type, question, "order") VALUES (?, ?, ?, ?)',
        (
            lesson_id,
            challenge_type,
            question,
            challenge.get("order", position),
        ),
    ).lastrowid
    result.challenges += 1

    for option in challenge.get("options") or []:
        conn.execute(
            "INSERT INTO challenge_options "
            "(challenge_id, text, correct, image_src, audio_src) VALUES (?, ?, ?, ?, ?)",
            (
                challenge_id,
                _require(option, "text", "option"),
                1 if option.get("correct") else 0,
                option.get("image_src"),
                option.get("audio_src"),
            ),
        )
        result.options += 1


def _require(entry: Any, key: str, kind: str) -> Any:
    if not isinstance(entry, dict) or not entry.get(key):
        raise SeedError(f"Each {kind} needs a '{key}': {entry!r}")
    return entry[key]


# =============================================================================
# USER STATE WRITERS
# =============================================================================


def insert_user_progress(
    conn: sqlite3.Connection,
    user_id: str,
    user_name: str = "User",
    user_image_src: str = "/mascot.svg",
    active_course_id: int | None = None,
    hearts: int = 5,
    points: int = 0,
) -> None:
    """Insert or replace a user's progress record."""
    conn.execute(
        "INSERT OR REPLACE INTO user_progress "
        "(user_id, user_name, user_image_src, active_course_id, hearts, points) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        (user_id, user_name, user_image_src, active_course_id, hearts, points),
    )


def insert_challenge_progress(
    conn: sqlite3.Connection, user_id: str, challenge_id: int, completed: bool
) -> int:
    """Insert a progress row for (user, challenge). Returns its id."""
    return conn.execute(
        "INSERT INTO challenge_progress (user_id, challenge_id, completed) "
        "VALUES (?, ?, ?)",
        (user_id, challenge_id, 1 if completed else 0),
    ).lastrowid


def insert_subscription(
    conn: sqlite3.Connection,
    user_id: str,
    stripe_customer_id: str,
    stripe_subscription_id: str,
    stripe_price_id: str | None,
    stripe_current_period_end: datetime,
) -> int:
    """Insert a subscription record. Returns its id."""
    return conn.execute(
        "INSERT INTO user_subscription "
        "(user_id, stripe_customer_id, stripe_subscription_id, stripe_price_id, "
        "stripe_current_period_end) VALUES (?, ?, ?, ?, ?)",
        (
            user_id,
            stripe_customer_id,
            stripe_subscription_id,
            stripe_price_id,
            stripe_current_period_end.isoformat(),
        ),
    ).lastrowid


def insert_admin(conn: sqlite3.Connection, user_id: str) -> None:
    """Add a user to the admin table (no-op if present)."""
    conn.execute("INSERT OR IGNORE INTO admin (user_id) VALUES (?)", (user_id,))
