"""Leaderboard endpoint."""

from fastapi import APIRouter

from lingo.db.queries import get_top_ten_users
from lingo.web.schemas import LeaderboardEntryResponse, LeaderboardResponse

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


@router.get("", response_model=LeaderboardResponse)
async def leaderboard() -> LeaderboardResponse:
    """Top users by points."""
    users = [LeaderboardEntryResponse.model_validate(u) for u in get_top_ten_users()]
    return LeaderboardResponse(users=users, count=len(users))
