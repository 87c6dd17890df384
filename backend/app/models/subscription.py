from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base_class import Base
from app.models.mixins import BigIntegerId, IntegerPrimaryKeyMixin, TimestampMixin


class Subscription(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = 'subscriptions'
    __table_args__ = (
        UniqueConstraint('organization_id', name='uq_subscriptions_organization'),
        CheckConstraint(
            "status in ('active', 'paused', 'cancelled', 'expired')",
            name='subscription_status_values',
        ),
    )

    organization_id: Mapped[int] = mapped_column(
        BigIntegerId, ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False
    )
    plan_id: Mapped[int] = mapped_column(
        BigIntegerId, ForeignKey('plans.id', ondelete='RESTRICT'), nullable=False
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='active')
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    paused_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class SubscriptionHistory(IntegerPrimaryKeyMixin, Base):
    __tablename__ = 'subscriptions_history'

    subscription_id: Mapped[int] = mapped_column(
        BigIntegerId, ForeignKey('subscriptions.id', ondelete='CASCADE'), nullable=False
    )
    changed_by_user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    change_timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    previous_plan_id: Mapped[int | None] = mapped_column(BigIntegerId, nullable=True)
    previous_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    previous_started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    previous_ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    previous_paused_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    previous_cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    new_plan_id: Mapped[int] = mapped_column(BigIntegerId, nullable=False)
    new_status: Mapped[str] = mapped_column(String(20), nullable=False)
    new_started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    new_ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    new_paused_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    new_cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


Index('ix_subscriptions_status', Subscription.status)
Index('ix_subscriptions_plan', Subscription.plan_id)
Index('ix_subscriptions_history_subscription', SubscriptionHistory.subscription_id)
