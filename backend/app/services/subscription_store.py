from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.models.constants import SUBSCRIPTION_STATUS_ACTIVE, SUBSCRIPTION_STATUS_EXPIRED
from app.models.subscription import Subscription


class SubscriptionStore:
    @staticmethod
    def insert(db: Session, subscription: Subscription) -> Subscription:
        db.add(subscription)
        db.flush()
        return subscription

    @staticmethod
    def find_by_organization_id(db: Session, organization_id: int, *, for_update: bool = False) -> Subscription | None:
        query = select(Subscription).where(Subscription.organization_id == organization_id)
        if for_update:
            query = query.with_for_update()
        return db.scalar(query)

    @staticmethod
    def find_active_for_organization(db: Session, organization_id: int, *, now: datetime) -> Subscription | None:
        return db.scalar(
            select(Subscription).where(
                Subscription.organization_id == organization_id,
                Subscription.status == SUBSCRIPTION_STATUS_ACTIVE,
                Subscription.ended_at > now,
            )
        )

    @staticmethod
    def update(db: Session, subscription: Subscription) -> Subscription:
        db.add(subscription)
        db.flush()
        return subscription

    @staticmethod
    def sweep_expired(db: Session, *, now: datetime) -> int:
        """
        Mark every active subscription whose end date has passed as expired.

        Returns the number of rows changed; a second run without new lapses returns 0.
        """
        expired_ids = db.scalars(
            select(Subscription.id)
            .where(
                Subscription.status == SUBSCRIPTION_STATUS_ACTIVE,
                Subscription.ended_at.is_not(None),
                Subscription.ended_at < now,
            )
            .with_for_update(skip_locked=True)
        ).all()
        if not expired_ids:
            return 0

        result = db.execute(
            update(Subscription)
            .where(
                Subscription.id.in_(expired_ids),
                Subscription.status == SUBSCRIPTION_STATUS_ACTIVE,
            )
            .values(status=SUBSCRIPTION_STATUS_EXPIRED)
            .execution_options(synchronize_session='evaluate')
        )
        db.flush()
        return int(result.rowcount or 0)
