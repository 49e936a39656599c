"""Record types for the course catalog and per-user state.

Hierarchy: Course -> Unit -> Lesson -> Challenge -> (ChallengeOption,
ChallengeProgress). Child collections are ordered by their ``order`` field.

``completed`` on Lesson and Challenge is derived, never stored. See
lingo.core.progress.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

ChallengeType = Literal["SELECT", "ASSIST"]


@dataclass
class ChallengeOption:
    """Answer option for a challenge."""

    id: int
    challenge_id: int
    text: str
    correct: bool
    image_src: str | None = None
    audio_src: str | None = None


@dataclass
class ChallengeProgress:
    """Per-user progress row for a challenge."""

    id: int
    user_id: str
    challenge_id: int
    completed: bool


@dataclass
class Challenge:
    """A single question inside a lesson."""

    id: int
    lesson_id: int
    type: ChallengeType
    question: str
    order: int
    challenge_options: list[ChallengeOption] = field(default_factory=list)
    challenge_progress: list[ChallengeProgress] = field(default_factory=list)
    completed: bool = False


@dataclass
class Lesson:
    """Ordered group of challenges inside a unit.

    ``unit`` is only populated by the course-progress lookup, and then
    without its lessons.
    """

    id: int
    unit_id: int
    title: str
    order: int
    challenges: list[Challenge] = field(default_factory=list)
    completed: bool = False
    unit: Unit | None = None


@dataclass
class Unit:
    """Ordered group of lessons inside a course."""

    id: int
    course_id: int
    title: str
    description: str
    order: int
    lessons: list[Lesson] = field(default_factory=list)


@dataclass
class Course:
    """A language course."""

    id: int
    title: str
    image_src: str
    units: list[Unit] = field(default_factory=list)


@dataclass
class UserProgress:
    """Per-user snapshot: active course, hearts and points."""

    user_id: str
    user_name: str
    user_image_src: str
    active_course_id: int | None
    hearts: int
    points: int
    active_course: Course | None = None


@dataclass
class UserSubscription:
    """Billing subscription record for a user."""

    id: int
    user_id: str
    stripe_customer_id: str
    stripe_subscription_id: str
    stripe_price_id: str | None
    stripe_current_period_end: datetime


@dataclass
class SubscriptionStatus:
    """Subscription record plus its derived active flag."""

    subscription: UserSubscription
    is_active: bool


@dataclass
class CourseProgress:
    """Pointer to the first lesson the user has not finished.

    Both fields are None once every lesson of the active course is done.
    """

    active_lesson: Lesson | None
    active_lesson_id: int | None


@dataclass
class LeaderboardEntry:
    """Projection of UserProgress shown on the leaderboard."""

    user_id: str
    user_name: str
    user_image_src: str
    points: int
