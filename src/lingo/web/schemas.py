"""Pydantic schemas for the Web API.

Serialization models for courses, units, lessons, challenges and the
per-user views built on them.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from lingo import __version__
from lingo.db.models import SubscriptionStatus


# =============================================================================
# CATALOG SCHEMAS
# =============================================================================


class ChallengeOptionResponse(BaseModel):
    """Answer option of a challenge."""

    id: int
    challenge_id: int
    text: str
    correct: bool
    image_src: str | None = None
    audio_src: str | None = None

    model_config = {"from_attributes": True}


class ChallengeProgressResponse(BaseModel):
    """Progress row of the current user for a challenge."""

    id: int
    user_id: str
    challenge_id: int
    completed: bool

    model_config = {"from_attributes": True}


class ChallengeResponse(BaseModel):
    """Challenge with derived completion."""

    id: int
    lesson_id: int
    type: str
    question: str
    order: int
    completed: bool = False
    challenge_options: list[ChallengeOptionResponse] = Field(default_factory=list)
    challenge_progress: list[ChallengeProgressResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class UnitSummary(BaseModel):
    """Unit without its lessons."""

    id: int
    course_id: int
    title: str
    description: str
    order: int

    model_config = {"from_attributes": True}


class LessonResponse(BaseModel):
    """Lesson with derived completion."""

    id: int
    unit_id: int
    title: str
    order: int
    completed: bool = False
    challenges: list[ChallengeResponse] = Field(default_factory=list)
    unit: UnitSummary | None = None

    model_config = {"from_attributes": True}


class UnitResponse(UnitSummary):
    """Unit with its ordered lessons."""

    lessons: list[LessonResponse] = Field(default_factory=list)


class CourseResponse(BaseModel):
    """Course, optionally with ordered units."""

    id: int
    title: str
    image_src: str
    units: list[UnitResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class CourseListResponse(BaseModel):
    """Response for list of courses."""

    courses: list[CourseResponse]
    count: int


# =============================================================================
# USER SCHEMAS
# =============================================================================


class UserProgressResponse(BaseModel):
    """Current user's progress snapshot."""

    user_id: str
    user_name: str
    user_image_src: str
    active_course_id: int | None
    hearts: int
    points: int
    active_course: CourseResponse | None = None

    model_config = {"from_attributes": True}


class CourseProgressResponse(BaseModel):
    """Pointer to the first unfinished lesson."""

    active_lesson: LessonResponse | None = None
    active_lesson_id: int | None = None

    model_config = {"from_attributes": True}


class PercentageResponse(BaseModel):
    """Active lesson completion percentage."""

    percentage: int = Field(..., ge=0, le=100)


class SubscriptionResponse(BaseModel):
    """Subscription record plus active flag."""

    id: int
    user_id: str
    stripe_customer_id: str
    stripe_subscription_id: str
    stripe_price_id: str | None
    stripe_current_period_end: datetime
    is_active: bool

    @classmethod
    def from_status(cls, status: SubscriptionStatus) -> SubscriptionResponse:
        sub = status.subscription
        return cls(
            id=sub.id,
            user_id=sub.user_id,
            stripe_customer_id=sub.stripe_customer_id,
            stripe_subscription_id=sub.stripe_subscription_id,
            stripe_price_id=sub.stripe_price_id,
            stripe_current_period_end=sub.stripe_current_period_end,
            is_active=status.is_active,
        )


class LeaderboardEntryResponse(BaseModel):
    """Leaderboard row."""

    user_id: str
    user_name: str
    user_image_src: str
    points: int

    model_config = {"from_attributes": True}


class LeaderboardResponse(BaseModel):
    """Top users by points."""

    users: list[LeaderboardEntryResponse]
    count: int


class AdminResponse(BaseModel):
    """Admin membership of the current user."""

    is_admin: bool


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = __version__
    timestamp: str
