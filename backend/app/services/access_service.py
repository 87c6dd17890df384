from __future__ import annotations

from sqlalchemy.orm import Session

from app.core.clock import Clock, as_utc, system_clock
from app.models.constants import SUBSCRIPTION_STATUS_PAUSED, USABLE_STATUS_VALUES
from app.models.subscription import Subscription
from app.services.subscription_store import SubscriptionStore


NO_SUBSCRIPTION = 'Your organization does not have an active subscription. Please contact your administrator.'
UNDETERMINED_END = (
    'Your organization subscription has undetermined ending time. Please contact your administrator to renew.'
)
EXPIRED = "Your organization's subscription has expired. Please contact your administrator to renew."
PAUSED = "Your organization's subscription is currently paused. Please contact your administrator to resume it."
NOT_ACTIVE = "Your organization's subscription is not active. Please contact your administrator."


def evaluate_subscription(subscription: Subscription | None, *, clock: Clock = system_clock) -> tuple[bool, str | None]:
    if subscription is None:
        return False, NO_SUBSCRIPTION

    # A missing end date is treated as invalid, never as unlimited.
    ended_at = as_utc(subscription.ended_at)
    if ended_at is None:
        return False, UNDETERMINED_END
    if subscription.status == SUBSCRIPTION_STATUS_PAUSED:
        return False, PAUSED
    if ended_at < clock.now():
        return False, EXPIRED
    if subscription.status not in USABLE_STATUS_VALUES:
        return False, NOT_ACTIVE
    return True, None


def check_subscription_access(
    db: Session, organization_id: int, *, clock: Clock = system_clock
) -> tuple[bool, str | None]:
    subscription = SubscriptionStore.find_by_organization_id(db, organization_id)
    return evaluate_subscription(subscription, clock=clock)


def is_subscription_usable(db: Session, organization_id: int, *, clock: Clock = system_clock) -> bool:
    usable, _ = check_subscription_access(db, organization_id, clock=clock)
    return usable
