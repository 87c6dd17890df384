from __future__ import annotations

from datetime import datetime
from decimal import Decimal
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.clock import Clock, as_utc, system_clock
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.constants import (
    DEFAULT_MAX_MEMBERS,
    DEFAULT_MAX_PROJECTS,
    DEFAULT_PRIVATE_STORAGE_PER_USER,
    DEFAULT_SHARED_STORAGE_PER_PROJECT,
    SUBSCRIPTION_STATUS_ACTIVE,
    SUBSCRIPTION_STATUS_CANCELLED,
    SUBSCRIPTION_STATUS_PAUSED,
    SUBSCRIPTION_STATUS_VALUES,
    USER_SETTABLE_STATUS_VALUES,
)
from app.models.organization import Organization
from app.models.subscription import Subscription
from app.services import history_service, plan_service
from app.services.plan_store import PlanStore
from app.services.subscription_store import SubscriptionStore
from app.utils.duration import add_duration


logger = logging.getLogger(__name__)


def get_subscription(db: Session, organization_id: int) -> Subscription | None:
    return SubscriptionStore.find_by_organization_id(db, organization_id)


def create_subscription(
    db: Session,
    *,
    organization_id: int,
    validity: str,
    plan_id: int | None = None,
    member_limit: int | None = None,
    projects_limit: int | None = None,
    shared_storage_per_project: int | None = None,
    private_storage: int | None = None,
    price: Decimal | float | None = None,
    currency: str | None = None,
    clock: Clock = system_clock,
) -> Subscription:
    organization = db.scalar(select(Organization).where(Organization.id == organization_id))
    if not organization:
        raise NotFoundError('Organization does not exist', {'organization_id': organization_id})

    if SubscriptionStore.find_by_organization_id(db, organization_id):
        raise ConflictError('Organization already has a subscription', {'organization_id': organization_id})

    now = clock.now()
    ended_at = add_duration(now, validity)
    if ended_at <= now:
        raise ValidationError('Subscription validity must be a positive duration', {'validity': validity})

    if plan_id is None:
        plan = plan_service.create_plan(
            db,
            name=plan_service.custom_plan_name(organization_id),
            max_members=DEFAULT_MAX_MEMBERS if member_limit is None else member_limit,
            max_projects=DEFAULT_MAX_PROJECTS if projects_limit is None else projects_limit,
            shared_storage_per_project=(
                DEFAULT_SHARED_STORAGE_PER_PROJECT if shared_storage_per_project is None else shared_storage_per_project
            ),
            private_storage_per_user=DEFAULT_PRIVATE_STORAGE_PER_USER if private_storage is None else private_storage,
            price=price,
            currency=currency,
            is_public=False,
        )
    else:
        plan = plan_service.get_plan(db, plan_id)

    subscription = SubscriptionStore.insert(
        db,
        Subscription(
            organization_id=organization_id,
            plan_id=plan.id,
            status=SUBSCRIPTION_STATUS_ACTIVE,
            started_at=now,
            ended_at=ended_at,
        ),
    )
    logger.info(
        'Created subscription %s for organization %s on plan %s until %s',
        subscription.id,
        organization_id,
        plan.id,
        ended_at.isoformat(),
    )
    return subscription


def apply_status_transition(subscription: Subscription, status: str, *, now: datetime) -> bool:
    """
    Move a subscription to an operator-requested status.

    Returns False when the status is unchanged. 'expired' is only ever set by the sweeper.
    """
    if status not in SUBSCRIPTION_STATUS_VALUES:
        raise ValidationError(f'Unknown subscription status: {status!r}', {'status': status})
    if status == subscription.status:
        return False
    if status not in USER_SETTABLE_STATUS_VALUES:
        raise ValidationError('Subscriptions can only be expired by the expiry sweep', {'status': status})

    if status == SUBSCRIPTION_STATUS_PAUSED:
        subscription.paused_at = now
        subscription.cancelled_at = None
    elif status == SUBSCRIPTION_STATUS_CANCELLED:
        subscription.cancelled_at = now
        subscription.paused_at = None
    else:
        subscription.paused_at = None
        subscription.cancelled_at = None
    subscription.status = status
    return True


def update_subscription(
    db: Session,
    *,
    organization_id: int,
    display_name: str,
    new_plan_id: int | None,
    max_members: int,
    max_projects: int,
    shared_storage_per_project: int,
    private_storage_per_user: int,
    status: str,
    changed_by_user_id: str,
    extend_duration: str | None = None,
    price: Decimal | float | None = None,
    currency: str | None = None,
    notes: str | None = None,
    clock: Clock = system_clock,
) -> Subscription:
    if not (changed_by_user_id or '').strip():
        raise ValidationError('changed_by_user_id is required')
    if not (display_name or '').strip():
        raise ValidationError('Organization display name is required')

    organization = db.scalar(select(Organization).where(Organization.id == organization_id))
    if not organization:
        raise NotFoundError('Organization does not exist', {'organization_id': organization_id})

    subscription = SubscriptionStore.find_by_organization_id(db, organization.id, for_update=True)
    if not subscription:
        raise NotFoundError(
            'Subscription for this organization does not exist', {'organization_id': organization_id}
        )

    previous = history_service.snapshot(subscription)
    now = clock.now()

    if organization.name != display_name:
        organization.name = display_name
        db.flush()

    final_plan_id = plan_service.resolve_plan(
        db,
        new_plan_id=new_plan_id,
        original_plan_id=previous['plan_id'],
        organization_id=organization.id,
        max_members=max_members,
        max_projects=max_projects,
        shared_storage_per_project=shared_storage_per_project,
        private_storage_per_user=private_storage_per_user,
        price=price,
        currency=currency,
    )
    subscription.plan_id = final_plan_id

    apply_status_transition(subscription, status, now=now)

    if extend_duration is not None:
        current_end = as_utc(subscription.ended_at) or now
        subscription.ended_at = add_duration(current_end, extend_duration)

    SubscriptionStore.update(db, subscription)

    history_service.record_change(
        db,
        subscription=subscription,
        previous=previous,
        changed_by_user_id=changed_by_user_id,
        changed_at=now,
        notes=notes,
    )

    original_plan = PlanStore.find(db, previous['plan_id'])
    if original_plan and not original_plan.is_public and original_plan.id != final_plan_id:
        plan_service.delete_plan_if_unreferenced(db, original_plan.id)

    logger.info(
        'Subscription %s for organization %s updated by %s: status %s -> %s, plan %s -> %s',
        subscription.id,
        organization.id,
        changed_by_user_id,
        previous['status'],
        subscription.status,
        previous['plan_id'],
        final_plan_id,
    )
    return subscription
