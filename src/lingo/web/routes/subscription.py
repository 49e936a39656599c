"""Subscription status endpoint."""

from fastapi import APIRouter

from lingo.db.queries import get_user_subscription
from lingo.web.schemas import SubscriptionResponse

router = APIRouter(prefix="/api/subscription", tags=["subscription"])


@router.get("", response_model=SubscriptionResponse | None)
async def subscription_status() -> SubscriptionResponse | None:
    """Current user's subscription, or null when not subscribed."""
    status = get_user_subscription()
    if status is None:
        return None
    return SubscriptionResponse.from_status(status)
