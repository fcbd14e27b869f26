"""
Subscription and trial status.

Two separate views exist on purpose:

- determine_status() derives free / trial / pro from role, subscription
  and account age. It is what login reports.
- get_subscription_status() returns the stored subscription status
  (active / expired / cancelled). It is what the session endpoint reports.
"""

from datetime import datetime, timedelta
from typing import Optional, Protocol

from shared.config import get_settings
from shared.database import as_utc, utcnow
from shared.models import (
    SubscriptionPlan,
    SubscriptionSnapshot,
    SubscriptionStatus,
    UserRole,
)

from .models import PlanState


class SubscriptionHolder(Protocol):
    """Anything with a role, a creation time and an optional subscription."""

    role: str
    created_at: datetime
    subscription: Optional[object]


def _snapshot(subscription: Optional[object]) -> Optional[SubscriptionSnapshot]:
    if subscription is None or isinstance(subscription, SubscriptionSnapshot):
        return subscription
    return SubscriptionSnapshot.model_validate(subscription)


def calculate_trial_end_date(
    start: Optional[datetime] = None,
    trial_days: Optional[int] = None,
) -> datetime:
    """Trial end for an account created at `start` (default now)."""
    if trial_days is None:
        trial_days = get_settings().trial_duration_days
    return (as_utc(start) or utcnow()) + timedelta(days=trial_days)


def has_active_pro_subscription(
    subscription: Optional[object],
    now: Optional[datetime] = None,
) -> bool:
    """True for a pro plan that is active and not past its expiry."""
    sub = _snapshot(subscription)
    if sub is None:
        return False
    if sub.plan != SubscriptionPlan.PRO or sub.status != SubscriptionStatus.ACTIVE:
        return False
    expires_at = as_utc(sub.expires_at)
    return expires_at is None or expires_at > (now or utcnow())


def is_pro(user: SubscriptionHolder, now: Optional[datetime] = None) -> bool:
    """Admins, and users holding an active pro subscription."""
    if UserRole(user.role) == UserRole.ADMIN:
        return True
    return has_active_pro_subscription(user.subscription, now)


def determine_status(
    user: SubscriptionHolder,
    now: Optional[datetime] = None,
    trial_days: Optional[int] = None,
) -> PlanState:
    """
    Effective plan at login time.

    Admin or active pro subscription gives pro. Otherwise the account is
    on trial for trial_days after creation, then free.
    """
    now = now or utcnow()
    if is_pro(user, now):
        return PlanState.PRO

    trial_end = calculate_trial_end_date(user.created_at, trial_days)
    if now < trial_end:
        return PlanState.TRIAL
    return PlanState.FREE


def get_subscription_status(user: SubscriptionHolder) -> SubscriptionStatus:
    """Stored subscription status, active when there is no row."""
    sub = _snapshot(user.subscription)
    if sub is None:
        return SubscriptionStatus.ACTIVE
    return SubscriptionStatus(sub.status)


def get_trial_ends_at(user: SubscriptionHolder) -> Optional[datetime]:
    """The free plan's expiry, or None for any other plan."""
    sub = _snapshot(user.subscription)
    if sub is None or sub.plan != SubscriptionPlan.FREE:
        return None
    return as_utc(sub.expires_at)
