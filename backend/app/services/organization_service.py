from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.clock import Clock, system_clock
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.organization import Organization
from app.models.plan import Plan
from app.models.subscription import Subscription
from app.services import subscription_service
from app.services.plan_store import PlanStore
from app.services.subscription_store import SubscriptionStore


@dataclass(frozen=True)
class OrganizationOverview:
    organization: Organization
    subscription: Subscription
    plan: Plan


def get_organization(db: Session, organization_id: int) -> Organization:
    organization = db.scalar(select(Organization).where(Organization.id == organization_id))
    if not organization:
        raise NotFoundError('Organization does not exist', {'organization_id': organization_id})
    return organization


def list_organizations(
    db: Session, *, search: str = '', limit: int | None = None, offset: int = 0
) -> tuple[list[Organization], int]:
    query = select(Organization)
    count_query = select(func.count()).select_from(Organization)
    term = (search or '').strip().lower()
    if term:
        query = query.where(func.lower(Organization.name).contains(term))
        count_query = count_query.where(func.lower(Organization.name).contains(term))
    query = query.order_by(Organization.id.asc()).offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return db.scalars(query).all(), int(db.scalar(count_query) or 0)


def create_organization(
    db: Session,
    *,
    name: str,
    contact_first_name: str | None = None,
    contact_last_name: str | None = None,
    contact_email: str | None = None,
    contact_phone: str | None = None,
    admin_uid: str | None = None,
) -> Organization:
    organization = Organization(
        name=(name or '').strip(),
        contact_first_name=contact_first_name,
        contact_last_name=contact_last_name,
        contact_email=contact_email,
        contact_phone=contact_phone,
        admin_uid=admin_uid,
    )
    db.add(organization)
    db.flush()
    return organization


def create_organization_with_subscription(
    db: Session,
    *,
    name: str,
    admin_uid: str,
    validity: str,
    plan_id: int | None = None,
    member_limit: int | None = None,
    projects_limit: int | None = None,
    shared_storage_per_project: int | None = None,
    private_storage: int | None = None,
    price: Decimal | float | None = None,
    currency: str | None = None,
    contact_first_name: str | None = None,
    contact_last_name: str | None = None,
    contact_email: str | None = None,
    contact_phone: str | None = None,
    clock: Clock = system_clock,
) -> tuple[Organization, Subscription]:
    """
    Create a tenant together with its subscription.

    Callers run this inside one transaction so a failing subscription leaves no organization behind.
    Provisioning the admin account on the host platform happens outside this service.
    """
    if not (admin_uid or '').strip():
        raise ValidationError('Organization admin user ID is required')

    organization = create_organization(
        db,
        name=name,
        contact_first_name=contact_first_name,
        contact_last_name=contact_last_name,
        contact_email=contact_email,
        contact_phone=contact_phone,
        admin_uid=admin_uid.strip(),
    )
    subscription = subscription_service.create_subscription(
        db,
        organization_id=organization.id,
        validity=validity,
        plan_id=plan_id,
        member_limit=member_limit,
        projects_limit=projects_limit,
        shared_storage_per_project=shared_storage_per_project,
        private_storage=private_storage,
        price=price,
        currency=currency,
        clock=clock,
    )
    return organization, subscription


def update_organization(
    db: Session,
    organization_id: int,
    *,
    name: str,
    contact_first_name: str | None = None,
    contact_last_name: str | None = None,
    contact_email: str | None = None,
    contact_phone: str | None = None,
) -> Organization:
    organization = get_organization(db, organization_id)
    if not (name or '').strip():
        raise ValidationError('Organization name is required')
    organization.name = name.strip()
    organization.contact_first_name = contact_first_name
    organization.contact_last_name = contact_last_name
    organization.contact_email = contact_email
    organization.contact_phone = contact_phone
    db.flush()
    return organization


def get_organization_overview(db: Session, organization_id: int) -> OrganizationOverview:
    organization = get_organization(db, organization_id)

    subscription = SubscriptionStore.find_by_organization_id(db, organization.id)
    if not subscription:
        raise NotFoundError('No subscription found for this organization', {'organization_id': organization_id})

    plan = PlanStore.find(db, subscription.plan_id)
    if not plan:
        raise NotFoundError(
            'The plan associated with this subscription could not be found',
            {'organization_id': organization_id, 'plan_id': subscription.plan_id},
        )
    return OrganizationOverview(organization=organization, subscription=subscription, plan=plan)


def assert_member_capacity(db: Session, organization_id: int, *, current_members: int) -> None:
    # Member counts come from the host platform's group membership storage.
    overview = get_organization_overview(db, organization_id)
    if current_members >= overview.plan.max_members:
        raise ConflictError(
            'Organization member limit reached for current subscription plan',
            {'organization_id': organization_id, 'max_members': overview.plan.max_members},
        )
