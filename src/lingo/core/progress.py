"""Completion normalization over already-fetched progress trees.

Pure functions: no database access, no side effects. Inputs are never
mutated; annotated copies are returned.

Rules:
- A challenge is completed iff it has at least one progress row and every
  row is completed. No rows means not completed.
- A lesson is completed iff it has at least one challenge and every
  challenge is completed. An empty lesson is never completed.
- The active lesson is the first lesson (unit order, then lesson order)
  holding a challenge that is not completed. Empty lessons are skipped.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Iterable

import structlog

from lingo.db.models import Challenge, Lesson, Unit

logger = structlog.get_logger(__name__)


def is_challenge_completed(challenge: Challenge) -> bool:
    """Check whether every progress row of a challenge is completed.

    Args:
        challenge: Challenge with its per-user progress rows loaded

    Returns:
        False when there are no progress rows.
    """
    rows = challenge.challenge_progress
    return len(rows) > 0 and all(row.completed for row in rows)


def is_lesson_completed(lesson: Lesson) -> bool:
    """Check whether a lesson has challenges and all of them are completed."""
    challenges = lesson.challenges
    return len(challenges) > 0 and all(is_challenge_completed(c) for c in challenges)


def has_incomplete_challenge(lesson: Lesson) -> bool:
    """Check whether a lesson holds at least one unfinished challenge.

    A challenge is unfinished when it has no progress rows or any row is
    not completed. Lessons without challenges have none.
    """
    return any(
        not challenge.challenge_progress
        or any(not row.completed for row in challenge.challenge_progress)
        for challenge in lesson.challenges
    )


def normalize_lesson(lesson: Lesson) -> Lesson:
    """Annotate ``completed`` on every challenge and on the lesson itself.

    Args:
        lesson: Lesson with challenges and per-user progress rows

    Returns:
        New Lesson; challenge order is preserved.
    """
    challenges = [
        replace(challenge, completed=is_challenge_completed(challenge))
        for challenge in lesson.challenges
    ]
    return replace(
        lesson,
        challenges=challenges,
        completed=len(challenges) > 0 and all(c.completed for c in challenges),
    )


def normalize_units(units: Iterable[Unit]) -> list[Unit]:
    """Annotate ``completed`` on every lesson of every unit."""
    return [
        replace(unit, lessons=[normalize_lesson(lesson) for lesson in unit.lessons])
        for unit in units
    ]


def find_active_lesson(units: Iterable[Unit]) -> Lesson | None:
    """Return the first lesson that still has an unfinished challenge.

    Args:
        units: Units in ``order``, each with ordered lessons, challenges and
            per-user progress rows

    Returns:
        The lesson, with ``unit`` set to a lesson-less copy of its unit, or
        None when every lesson is finished.
    """
    for unit in units:
        for lesson in unit.lessons:
            if has_incomplete_challenge(lesson):
                return replace(lesson, unit=replace(unit, lessons=[]))
    return None


def lesson_percentage(lesson: Lesson | None) -> int:
    """Percentage of completed challenges in a lesson, rounded half up.

    Returns 0 for a missing lesson or a lesson without challenges.
    """
    if lesson is None:
        return 0

    total = len(lesson.challenges)
    if total == 0:
        logger.warning("progress.empty_lesson_percentage", lesson_id=lesson.id)
        return 0

    done = sum(1 for challenge in lesson.challenges if is_challenge_completed(challenge))
    return math.floor(done * 100 / total + 0.5)
