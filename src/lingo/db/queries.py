"""Request-scoped read queries.

Every function resolves the current request's identity, runs its reads,
reshapes the rows and is memoized for the rest of the request (see
lingo.auth.request_scope). Results are shared within the request
and must be treated as read-only. Missing identity or missing records never
raise: they yield None, [], 0 or False.

Functions:
- get_user_progress() -> UserProgress | None
- get_units() -> list[Unit]
- get_courses() -> list[Course]
- get_course_by_id(course_id) -> Course | None
- get_course_progress() -> CourseProgress | None
- get_lesson(lesson_id=None) -> Lesson | None
- get_lesson_percentage() -> int
- get_user_subscription() -> SubscriptionStatus | None
- get_top_ten_users() -> list[LeaderboardEntry]
- get_is_admin() -> bool
"""

from __future__ import annotations

import structlog

from lingo.auth.request_scope import current_user_id, request_cached
from lingo.config.app_config import load_app_config
from lingo.core.progress import (
    find_active_lesson,
    lesson_percentage,
    normalize_lesson,
    normalize_units,
)
from lingo.core.subscription import is_subscription_active
from lingo.db.database import get_db
from lingo.db.models import (
    Course,
    CourseProgress,
    LeaderboardEntry,
    Lesson,
    SubscriptionStatus,
    Unit,
    UserProgress,
)
from lingo.db.repository import (
    fetch_course,
    fetch_courses,
    fetch_is_admin,
    fetch_lesson,
    fetch_subscription,
    fetch_top_users,
    fetch_units_tree,
    fetch_user_progress,
)

logger = structlog.get_logger(__name__)


@request_cached
def get_user_progress() -> UserProgress | None:
    """Current user's progress record with its active course."""
    user_id = current_user_id()
    if not user_id:
        return None

    with get_db() as conn:
        return fetch_user_progress(conn, user_id)


@request_cached
def get_units() -> list[Unit]:
    """Units of the active course, lessons annotated with ``completed``.

    Returns:
        Units in ``order``, each with ordered lessons; [] when the user is
        anonymous or has no active course.
    """
    user_id = current_user_id()
    user_progress = get_user_progress()

    if not user_id or user_progress is None or not user_progress.active_course_id:
        return []

    with get_db() as conn:
        units = fetch_units_tree(conn, user_progress.active_course_id, user_id)

    return normalize_units(units)


@request_cached
def get_courses() -> list[Course]:
    """All courses."""
    with get_db() as conn:
        return fetch_courses(conn)


@request_cached
def get_course_by_id(course_id: int) -> Course | None:
    """Course with ordered units and lessons, or None if not found."""
    with get_db() as conn:
        return fetch_course(conn, course_id, with_units=True)


@request_cached
def get_course_progress() -> CourseProgress | None:
    """Pointer to the first unfinished lesson of the active course.

    Returns:
        CourseProgress (fields None once the course is finished), or None
        when the user is anonymous or has no active course.
    """
    user_id = current_user_id()
    user_progress = get_user_progress()

    if not user_id or user_progress is None or not user_progress.active_course_id:
        return None

    with get_db() as conn:
        units = fetch_units_tree(conn, user_progress.active_course_id, user_id)

    active_lesson = find_active_lesson(units)

    logger.debug(
        "queries.course_progress",
        course_id=user_progress.active_course_id,
        active_lesson_id=active_lesson.id if active_lesson else None,
    )
    return CourseProgress(
        active_lesson=active_lesson,
        active_lesson_id=active_lesson.id if active_lesson else None,
    )


@request_cached
def get_lesson(lesson_id: int | None = None) -> Lesson | None:
    """Lesson with challenges annotated with ``completed``.

    Args:
        lesson_id: Lesson to load. Defaults to the active lesson.

    Returns:
        Lesson with ordered challenges (options and the user's progress
        rows included), or None.
    """
    user_id = current_user_id()
    if not user_id:
        return None

    if not lesson_id:
        course_progress = get_course_progress()
        lesson_id = course_progress.active_lesson_id if course_progress else None

    if not lesson_id:
        return None

    with get_db() as conn:
        lesson = fetch_lesson(conn, lesson_id, user_id)

    if lesson is None:
        return None

    return normalize_lesson(lesson)


@request_cached
def get_lesson_percentage() -> int:
    """Completion percentage (0-100) of the active lesson."""
    course_progress = get_course_progress()

    if course_progress is None or not course_progress.active_lesson_id:
        return 0

    lesson = get_lesson(course_progress.active_lesson_id)
    return lesson_percentage(lesson)


@request_cached
def get_user_subscription() -> SubscriptionStatus | None:
    """Current user's subscription and whether it is active.

    Returns None when the user has no subscription record, which is
    distinct from a record with ``is_active=False``.
    """
    user_id = current_user_id()
    if not user_id:
        return None

    with get_db() as conn:
        subscription = fetch_subscription(conn, user_id)

    if subscription is None:
        return None

    return SubscriptionStatus(
        subscription=subscription,
        is_active=is_subscription_active(subscription),
    )


@request_cached
def get_top_ten_users() -> list[LeaderboardEntry]:
    """Leaderboard: users with the most points, highest first."""
    if not current_user_id():
        return []

    with get_db() as conn:
        return fetch_top_users(conn, load_app_config().leaderboard.limit)


@request_cached
def get_is_admin() -> bool:
    """Whether the current user is an admin."""
    user_id = current_user_id()
    if not user_id:
        return False

    with get_db() as conn:
        return fetch_is_admin(conn, user_id)
