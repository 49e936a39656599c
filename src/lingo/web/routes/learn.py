"""Learning path endpoints for the current user.

Anonymous users and users without an active course get empty values
(null, [] or 0) rather than errors.
"""

from fastapi import APIRouter

from lingo.db.queries import (
    get_course_progress,
    get_lesson_percentage,
    get_units,
    get_user_progress,
)
from lingo.web.schemas import (
    CourseProgressResponse,
    PercentageResponse,
    UnitResponse,
    UserProgressResponse,
)

router = APIRouter(prefix="/api/learn", tags=["learn"])


@router.get("/progress", response_model=UserProgressResponse | None)
async def user_progress() -> UserProgressResponse | None:
    """Current user's progress snapshot and active course."""
    progress = get_user_progress()
    if progress is None:
        return None
    return UserProgressResponse.model_validate(progress)


@router.get("/units", response_model=list[UnitResponse])
async def units() -> list[UnitResponse]:
    """Units of the active course with lesson completion."""
    return [UnitResponse.model_validate(u) for u in get_units()]


@router.get("/course-progress", response_model=CourseProgressResponse | None)
async def course_progress() -> CourseProgressResponse | None:
    """First unfinished lesson of the active course."""
    progress = get_course_progress()
    if progress is None:
        return None
    return CourseProgressResponse.model_validate(progress)


@router.get("/percentage", response_model=PercentageResponse)
async def lesson_percentage() -> PercentageResponse:
    """Completion percentage of the active lesson."""
    return PercentageResponse(percentage=get_lesson_percentage())
