"""Core derivations over fetched progress data.

Modules:
- progress: challenge/lesson completion, active lesson, lesson percentage
- subscription: subscription active check with grace period
"""

from lingo.core.progress import (
    find_active_lesson,
    has_incomplete_challenge,
    is_challenge_completed,
    is_lesson_completed,
    lesson_percentage,
    normalize_lesson,
    normalize_units,
)
from lingo.core.subscription import GRACE_PERIOD, is_subscription_active

__all__ = [
    "GRACE_PERIOD",
    "find_active_lesson",
    "has_incomplete_challenge",
    "is_challenge_completed",
    "is_lesson_completed",
    "is_subscription_active",
    "lesson_percentage",
    "normalize_lesson",
    "normalize_units",
]
