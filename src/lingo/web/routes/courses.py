"""Course catalog endpoints."""

from fastapi import APIRouter, HTTPException, status

from lingo.db.queries import get_course_by_id, get_courses
from lingo.web.schemas import CourseListResponse, CourseResponse

router = APIRouter(prefix="/api/courses", tags=["courses"])


@router.get("", response_model=CourseListResponse)
async def list_courses() -> CourseListResponse:
    """List all courses."""
    courses = [CourseResponse.model_validate(c) for c in get_courses()]
    return CourseListResponse(courses=courses, count=len(courses))


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(course_id: int) -> CourseResponse:
    """Get a course with its ordered units and lessons."""
    course = get_course_by_id(course_id)

    if course is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Course '{course_id}' not found",
        )

    return CourseResponse.model_validate(course)
