from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.subscription import Subscription, SubscriptionHistory


SNAPSHOT_FIELDS = ('plan_id', 'status', 'started_at', 'ended_at', 'paused_at', 'cancelled_at')


def snapshot(subscription: Subscription) -> dict:
    return {field: getattr(subscription, field) for field in SNAPSHOT_FIELDS}


def record_change(
    db: Session,
    *,
    subscription: Subscription,
    previous: dict | None,
    changed_by_user_id: str,
    changed_at: datetime,
    notes: str | None = None,
) -> SubscriptionHistory:
    """Append one immutable history row with before/after snapshots of a subscription."""
    history = SubscriptionHistory(
        subscription_id=subscription.id,
        changed_by_user_id=changed_by_user_id,
        change_timestamp=changed_at,
        notes=notes,
    )
    for field, value in snapshot(subscription).items():
        setattr(history, f'new_{field}', value)
    for field in SNAPSHOT_FIELDS:
        setattr(history, f'previous_{field}', (previous or {}).get(field))

    db.add(history)
    db.flush()
    return history


def list_history(db: Session, *, subscription_id: int) -> list[SubscriptionHistory]:
    return db.scalars(
        select(SubscriptionHistory)
        .where(SubscriptionHistory.subscription_id == subscription_id)
        .order_by(SubscriptionHistory.change_timestamp.desc(), SubscriptionHistory.id.desc())
    ).all()
