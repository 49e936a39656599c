"""Subscription status evaluation."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from lingo.db.models import UserSubscription

DAY_IN_MS = 86_400_000

# Extra day after the billing period ends before the subscription lapses
GRACE_PERIOD = timedelta(milliseconds=DAY_IN_MS)


def is_subscription_active(
    subscription: UserSubscription, now: datetime | None = None
) -> bool:
    """Check whether a subscription is paid and within its period plus grace.

    Args:
        subscription: Subscription record
        now: Reference time. Defaults to the current UTC time; a naive value
            is read as UTC.

    Returns:
        True iff the record has a price id and
        ``stripe_current_period_end + GRACE_PERIOD > now``.
    """
    if not subscription.stripe_price_id:
        return False

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return subscription.stripe_current_period_end + GRACE_PERIOD > now
