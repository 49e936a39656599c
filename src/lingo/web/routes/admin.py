"""Admin membership endpoint."""

from fastapi import APIRouter

from lingo.db.queries import get_is_admin
from lingo.web.schemas import AdminResponse

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/me", response_model=AdminResponse)
async def admin_membership() -> AdminResponse:
    """Whether the current user is an admin."""
    return AdminResponse(is_admin=get_is_admin())
