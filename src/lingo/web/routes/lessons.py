"""Lesson endpoints."""

from fastapi import APIRouter, HTTPException, status

from lingo.db.queries import get_lesson
from lingo.web.schemas import LessonResponse

router = APIRouter(prefix="/api/lessons", tags=["lessons"])


@router.get("/active", response_model=LessonResponse | None)
async def active_lesson() -> LessonResponse | None:
    """The current user's active lesson, or null when there is none."""
    lesson = get_lesson()
    if lesson is None:
        return None
    return LessonResponse.model_validate(lesson)


@router.get("/{lesson_id}", response_model=LessonResponse)
async def lesson_detail(lesson_id: int) -> LessonResponse:
    """A lesson with challenges, options and the user's progress.

    Ids below 1 never name a lesson; they are not treated as "active".
    """
    lesson = get_lesson(lesson_id) if lesson_id >= 1 else None

    if lesson is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Lesson '{lesson_id}' not found",
        )

    return LessonResponse.model_validate(lesson)
