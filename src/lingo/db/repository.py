"""Row loaders for the catalog and per-user tables.

Each loader takes an open connection, runs ordered equality-filtered
selects and assembles nested records (eager loading done in Python, one
query per level). Loaders do not resolve identity or memoize; see
lingo.db.queries for the request-scoped surface.
"""

from __future__ import annotations

import sqlite3
from collections import defaultdict
from datetime import datetime, timezone
from typing import Iterable

import structlog

from lingo.db.models import (
    Challenge,
    ChallengeOption,
    ChallengeProgress,
    Course,
    LeaderboardEntry,
    Lesson,
    Unit,
    UserProgress,
    UserSubscription,
)

logger = structlog.get_logger(__name__)


def _placeholders(ids: list[int]) -> str:
    return ", ".join("?" for _ in ids)


# =============================================================================
# COURSES
# =============================================================================


def fetch_courses(conn: sqlite3.Connection) -> list[Course]:
    """Fetch all courses, without units."""
    rows = conn.execute("SELECT * FROM courses ORDER BY id").fetchall()
    return [_row_to_course(row) for row in rows]


def fetch_course(
    conn: sqlite3.Connection, course_id: int, with_units: bool = False
) -> Course | None:
    """Fetch a course by id.

    Args:
        conn: Open connection
        course_id: Course id
        with_units: Also load ordered units and their ordered lessons

    Returns:
        Course if found, None otherwise
    """
    row = conn.execute("SELECT * FROM courses WHERE id = ?", (course_id,)).fetchone()
    if row is None:
        return None

    course = _row_to_course(row)
    if with_units:
        units = _fetch_units(conn, course_id)
        lessons_by_unit = _fetch_lessons(conn, [u.id for u in units])
        for unit in units:
            unit.lessons = lessons_by_unit.get(unit.id, [])
        course.units = units

    return course


# =============================================================================
# UNIT TREE
# =============================================================================


def fetch_units_tree(
    conn: sqlite3.Connection, course_id: int, user_id: str
) -> list[Unit]:
    """Fetch units -> lessons -> challenges -> progress for one course.

    Progress rows are filtered to ``user_id``. Every level is ordered by
    ``order`` ascending, ties broken by id.
    """
    units = _fetch_units(conn, course_id)
    lessons_by_unit = _fetch_lessons(conn, [u.id for u in units])

    lesson_ids = [l.id for lessons in lessons_by_unit.values() for l in lessons]
    challenges_by_lesson = _fetch_challenges(conn, lesson_ids)

    challenge_ids = [
        c.id for challenges in challenges_by_lesson.values() for c in challenges
    ]
    progress_by_challenge = _fetch_progress(conn, challenge_ids, user_id)

    for unit in units:
        unit.lessons = lessons_by_unit.get(unit.id, [])
        for lesson in unit.lessons:
            lesson.challenges = challenges_by_lesson.get(lesson.id, [])
            for challenge in lesson.challenges:
                challenge.challenge_progress = progress_by_challenge.get(
                    challenge.id, []
                )

    logger.debug(
        "repository.units_tree_loaded",
        course_id=course_id,
        units=len(units),
        lessons=len(lesson_ids),
        challenges=len(challenge_ids),
    )
    return units


def fetch_lesson(
    conn: sqlite3.Connection, lesson_id: int, user_id: str
) -> Lesson | None:
    """Fetch a lesson with ordered challenges, their options and progress.

    Returns:
        Lesson if found, None otherwise
    """
    row = conn.execute("SELECT * FROM lessons WHERE id = ?", (lesson_id,)).fetchone()
    if row is None:
        return None

    lesson = _row_to_lesson(row)
    lesson.challenges = _fetch_challenges(conn, [lesson_id]).get(lesson_id, [])

    challenge_ids = [c.id for c in lesson.challenges]
    options = _fetch_options(conn, challenge_ids)
    progress = _fetch_progress(conn, challenge_ids, user_id)
    for challenge in lesson.challenges:
        challenge.challenge_options = options.get(challenge.id, [])
        challenge.challenge_progress = progress.get(challenge.id, [])

    return lesson


def _fetch_units(conn: sqlite3.Connection, course_id: int) -> list[Unit]:
    rows = conn.execute(
        'SELECT * FROM units WHERE course_id = ? ORDER BY "order", id',
        (course_id,),
    ).fetchall()
    return [_row_to_unit(row) for row in rows]


def _fetch_lessons(
    conn: sqlite3.Connection, unit_ids: list[int]
) -> dict[int, list[Lesson]]:
    if not unit_ids:
        return {}
    rows = conn.execute(
        f'SELECT * FROM lessons WHERE unit_id IN ({_placeholders(unit_ids)}) '
        'ORDER BY "order", id',
        unit_ids,
    ).fetchall()
    return _group((_row_to_lesson(row) for row in rows), "unit_id")


def _fetch_challenges(
    conn: sqlite3.Connection, lesson_ids: list[int]
) -> dict[int, list[Challenge]]:
    if not lesson_ids:
        return {}
    rows = conn.execute(
        f'SELECT * FROM challenges WHERE lesson_id IN ({_placeholders(lesson_ids)}) '
        'ORDER BY "order", id',
        lesson_ids,
    ).fetchall()
    return _group((_row_to_challenge(row) for row in rows), "lesson_id")


def _fetch_options(
    conn: sqlite3.Connection, challenge_ids: list[int]
) -> dict[int, list[ChallengeOption]]:
    if not challenge_ids:
        return {}
    rows = conn.execute(
        "SELECT * FROM challenge_options "
        f"WHERE challenge_id IN ({_placeholders(challenge_ids)}) ORDER BY id",
        challenge_ids,
    ).fetchall()
    return _group((_row_to_option(row) for row in rows), "challenge_id")


def _fetch_progress(
    conn: sqlite3.Connection, challenge_ids: list[int], user_id: str
) -> dict[int, list[ChallengeProgress]]:
    if not challenge_ids:
        return {}
    rows = conn.execute(
        "SELECT * FROM challenge_progress "
        f"WHERE challenge_id IN ({_placeholders(challenge_ids)}) AND user_id = ? "
        "ORDER BY id",
        [*challenge_ids, user_id],
    ).fetchall()
    return _group((_row_to_progress(row) for row in rows), "challenge_id")


def _group(records: Iterable, parent_key: str) -> dict[int, list]:
    """Group child records by their parent id, keeping query order."""
    grouped: dict[int, list] = defaultdict(list)
    for record in records:
        grouped[getattr(record, parent_key)].append(record)
    return dict(grouped)


# =============================================================================
# USER STATE
# =============================================================================


def fetch_user_progress(
    conn: sqlite3.Connection, user_id: str
) -> UserProgress | None:
    """Fetch a user's progress record with its active course (no units)."""
    row = conn.execute(
        "SELECT * FROM user_progress WHERE user_id = ?", (user_id,)
    ).fetchone()
    if row is None:
        return None

    progress = _row_to_user_progress(row)
    if progress.active_course_id is not None:
        progress.active_course = fetch_course(conn, progress.active_course_id)
    return progress


def fetch_subscription(
    conn: sqlite3.Connection, user_id: str
) -> UserSubscription | None:
    """Fetch a user's subscription record."""
    row = conn.execute(
        "SELECT * FROM user_subscription WHERE user_id = ?", (user_id,)
    ).fetchone()
    if row is None:
        return None
    return _row_to_subscription(row)


def fetch_top_users(conn: sqlite3.Connection, limit: int) -> list[LeaderboardEntry]:
    """Fetch the top users by points, highest first (ties by user_id)."""
    rows = conn.execute(
        "SELECT user_id, user_name, user_image_src, points FROM user_progress "
        "ORDER BY points DESC, user_id LIMIT ?",
        (limit,),
    ).fetchall()
    return [
        LeaderboardEntry(
            user_id=row["user_id"],
            user_name=row["user_name"],
            user_image_src=row["user_image_src"],
            points=row["points"],
        )
        for row in rows
    ]


def fetch_is_admin(conn: sqlite3.Connection, user_id: str) -> bool:
    """Membership test against the admin table."""
    row = conn.execute(
        "SELECT 1 FROM admin WHERE user_id = ?", (user_id,)
    ).fetchone()
    return row is not None


# =============================================================================
# ROW CONVERSION
# =============================================================================


def _row_to_course(row) -> Course:
    return Course(id=row["id"], title=row["title"], image_src=row["image_src"])


def _row_to_unit(row) -> Unit:
    return Unit(
        id=row["id"],
        course_id=row["course_id"],
        title=row["title"],
        description=row["description"],
        order=row["order"],
    )


def _row_to_lesson(row) -> Lesson:
    return Lesson(
        id=row["id"],
        unit_id=row["unit_id"],
        title=row["title"],
        order=row["order"],
    )


def _row_to_challenge(row) -> Challenge:
    return Challenge(
        id=row["id"],
        lesson_id=row["lesson_id"],
        type=row["type"],
        question=row["question"],
        order=row["order"],
    )


def _row_to_option(row) -> ChallengeOption:
    return ChallengeOption(
        id=row["id"],
        challenge_id=row["challenge_id"],
        text=row["text"],
        correct=bool(row["correct"]),
        image_src=row["image_src"],
        audio_src=row["audio_src"],
    )


def _row_to_progress(row) -> ChallengeProgress:
    return ChallengeProgress(
        id=row["id"],
        user_id=row["user_id"],
        challenge_id=row["challenge_id"],
        completed=bool(row["completed"]),
    )


def _row_to_user_progress(row) -> UserProgress:
    return UserProgress(
        user_id=row["user_id"],
        user_name=row["user_name"],
        user_image_src=row["user_image_src"],
        active_course_id=row["active_course_id"],
        hearts=row["hearts"],
        points=row["points"],
    )


def _row_to_subscription(row) -> UserSubscription:
    return UserSubscription(
        id=row["id"],
        user_id=row["user_id"],
        stripe_customer_id=row["stripe_customer_id"],
        stripe_subscription_id=row["stripe_subscription_id"],
        stripe_price_id=row["stripe_price_id"],
        stripe_current_period_end=parse_timestamp(row["stripe_current_period_end"]),
    )


def parse_timestamp(value: str) -> datetime:
    """Parse a stored ISO timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
