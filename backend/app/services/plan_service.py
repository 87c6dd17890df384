from __future__ import annotations

from decimal import Decimal, InvalidOperation
import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.constants import CUSTOM_PLAN_NAME_TEMPLATE
from app.models.plan import Plan
from app.services.plan_store import PlanStore


logger = logging.getLogger(__name__)


def custom_plan_name(organization_id: int) -> str:
    return CUSTOM_PLAN_NAME_TEMPLATE.format(organization_id=organization_id)


def normalize_currency(currency: str | None, *, fallback: str | None = None) -> str:
    value = (currency or fallback or settings.DEFAULT_CURRENCY).strip().upper()
    if len(value) != 3 or not value.isalpha():
        raise ValidationError(f'Invalid currency code: {currency!r}', {'currency': currency})
    return value


def normalize_price(price: Decimal | float | int | str | None) -> Decimal | None:
    if price is None:
        return None
    try:
        value = Decimal(str(price))
    except InvalidOperation as exc:
        raise ValidationError(f'Invalid price: {price!r}', {'price': str(price)}) from exc
    if not value.is_finite() or value < 0:
        raise ValidationError('Price must be a non-negative amount', {'price': str(price)})
    return value.quantize(Decimal('0.01'))


def validate_quotas(
    *,
    max_members: int,
    max_projects: int,
    shared_storage_per_project: int,
    private_storage_per_user: int,
) -> None:
    if max_members is None or max_members <= 0:
        raise ValidationError('max_members must be greater than zero', {'max_members': max_members})
    if max_projects is None or max_projects <= 0:
        raise ValidationError('max_projects must be greater than zero', {'max_projects': max_projects})
    if shared_storage_per_project is None or shared_storage_per_project < 0:
        raise ValidationError(
            'shared_storage_per_project must not be negative',
            {'shared_storage_per_project': shared_storage_per_project},
        )
    if private_storage_per_user is None or private_storage_per_user < 0:
        raise ValidationError(
            'private_storage_per_user must not be negative',
            {'private_storage_per_user': private_storage_per_user},
        )


def get_plan(db: Session, plan_id: int) -> Plan:
    plan = PlanStore.find(db, plan_id)
    if not plan:
        raise NotFoundError('Plan not found', {'plan_id': plan_id})
    return plan


def list_plans(db: Session, *, search: str = '', limit: int | None = None, offset: int = 0) -> list[Plan]:
    return PlanStore.find_all_admin(db, search=search, limit=limit, offset=offset)


def list_public_plans(db: Session) -> list[Plan]:
    return PlanStore.find_all_public(db)


def subscription_count(db: Session, plan_id: int) -> int:
    return PlanStore.count_subscriptions_referencing(db, plan_id)


def create_plan(
    db: Session,
    *,
    name: str,
    max_members: int,
    max_projects: int,
    shared_storage_per_project: int,
    private_storage_per_user: int,
    price: Decimal | float | None = None,
    currency: str | None = None,
    is_public: bool = False,
) -> Plan:
    if not (name or '').strip():
        raise ValidationError('Plan name is required')
    validate_quotas(
        max_members=max_members,
        max_projects=max_projects,
        shared_storage_per_project=shared_storage_per_project,
        private_storage_per_user=private_storage_per_user,
    )
    return PlanStore.create(
        db,
        name=name.strip(),
        max_members=max_members,
        max_projects=max_projects,
        shared_storage_per_project=shared_storage_per_project,
        private_storage_per_user=private_storage_per_user,
        price=normalize_price(price),
        currency=normalize_currency(currency),
        is_public=bool(is_public),
    )


def update_plan(
    db: Session,
    plan_id: int,
    *,
    name: str,
    max_members: int,
    max_projects: int,
    shared_storage_per_project: int,
    private_storage_per_user: int,
    price: Decimal | float | None = None,
    currency: str | None = None,
    is_public: bool = False,
) -> Plan:
    plan = get_plan(db, plan_id)
    if not (name or '').strip():
        raise ValidationError('Plan name is required')
    validate_quotas(
        max_members=max_members,
        max_projects=max_projects,
        shared_storage_per_project=shared_storage_per_project,
        private_storage_per_user=private_storage_per_user,
    )
    plan.name = name.strip()
    plan.max_members = max_members
    plan.max_projects = max_projects
    plan.shared_storage_per_project = shared_storage_per_project
    plan.private_storage_per_user = private_storage_per_user
    plan.price = normalize_price(price)
    plan.currency = normalize_currency(currency, fallback=plan.currency)
    plan.is_public = bool(is_public)
    return PlanStore.update(db, plan)


def delete_plan(db: Session, plan_id: int) -> None:
    count = PlanStore.count_subscriptions_referencing(db, plan_id)
    if count > 0:
        logger.warning('Refusing to delete plan %s referenced by %s subscriptions', plan_id, count)
        raise ConflictError(
            f'Cannot delete plan: it is used by {count} subscriptions',
            {'plan_id': plan_id, 'subscription_count': count},
        )
    plan = get_plan(db, plan_id)
    PlanStore.delete(db, plan)


def resolve_plan(
    db: Session,
    *,
    new_plan_id: int | None,
    original_plan_id: int | None,
    organization_id: int,
    max_members: int,
    max_projects: int,
    shared_storage_per_project: int,
    private_storage_per_user: int,
    price: Decimal | float | None,
    currency: str | None,
) -> int:
    """
    Decide which plan a subscription should point to after an update.

    1. ``new_plan_id`` is an existing public plan: adopt it unchanged.
    2. The current plan is an existing custom plan: update its quotas in place.
    3. Otherwise fork a new custom plan for the organization.
    """
    new_plan = PlanStore.find(db, new_plan_id)
    if new_plan and new_plan.is_public:
        return new_plan.id

    validate_quotas(
        max_members=max_members,
        max_projects=max_projects,
        shared_storage_per_project=shared_storage_per_project,
        private_storage_per_user=private_storage_per_user,
    )

    original_plan = PlanStore.find(db, original_plan_id)
    if original_plan and not original_plan.is_public:
        original_plan.max_members = max_members
        original_plan.max_projects = max_projects
        original_plan.shared_storage_per_project = shared_storage_per_project
        original_plan.private_storage_per_user = private_storage_per_user
        original_plan.price = normalize_price(price)
        original_plan.currency = normalize_currency(currency, fallback=original_plan.currency)
        PlanStore.update(db, original_plan)
        logger.info('Updated custom plan %s for organization %s', original_plan.id, organization_id)
        return original_plan.id

    custom_plan = PlanStore.create(
        db,
        name=custom_plan_name(organization_id),
        max_members=max_members,
        max_projects=max_projects,
        shared_storage_per_project=shared_storage_per_project,
        private_storage_per_user=private_storage_per_user,
        price=normalize_price(price),
        currency=normalize_currency(currency),
        is_public=False,
    )
    logger.info('Created custom plan %s for organization %s', custom_plan.id, organization_id)
    return custom_plan.id


def delete_plan_if_unreferenced(db: Session, plan_id: int) -> bool:
    """
    Remove a custom plan nobody points at any more.

    The reference count is re-checked here so a plan re-adopted concurrently is kept.
    """
    plan = PlanStore.find(db, plan_id)
    if not plan or plan.is_public:
        return False
    count = PlanStore.count_subscriptions_referencing(db, plan_id)
    if count > 0:
        logger.info('Keeping custom plan %s, still referenced by %s subscriptions', plan_id, count)
        return False
    PlanStore.delete(db, plan)
    logger.info('Deleted orphaned custom plan %s', plan_id)
    return True
