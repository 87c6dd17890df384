from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import Actor, get_clock, require_admin, require_organization_access, require_usable_subscription
from app.core.clock import Clock
from app.core.errors import NotFoundError
from app.db.session import get_db, transaction
from app.schemas.common import PaginationMeta
from app.schemas.organization import (
    OrganizationCreate,
    OrganizationCreatedOut,
    OrganizationListResponse,
    OrganizationOut,
    OrganizationOverviewOut,
    OrganizationUpdate,
)
from app.schemas.plan import PlanOut
from app.schemas.subscription import (
    SubscriptionHistoryOut,
    SubscriptionOut,
    SubscriptionUpdate,
    SubscriptionUsabilityOut,
)
from app.services import access_service, history_service, organization_service, subscription_service


router = APIRouter(prefix='/organizations', tags=['organizations'])


def _get_subscription_or_404(db: Session, organization_id: int):
    organization_service.get_organization(db, organization_id)
    subscription = subscription_service.get_subscription(db, organization_id)
    if not subscription:
        raise NotFoundError('No subscription found for this organization', {'organization_id': organization_id})
    return subscription


@router.get('', response_model=OrganizationListResponse)
def list_organizations(
    search: str = '',
    limit: int | None = 50,
    offset: int = 0,
    db: Session = Depends(get_db),
    _: Actor = Depends(require_admin),
) -> OrganizationListResponse:
    rows, total = organization_service.list_organizations(db, search=search, limit=limit, offset=offset)
    return OrganizationListResponse(
        items=[OrganizationOut.model_validate(row) for row in rows],
        meta=PaginationMeta(limit=limit, offset=offset, total=total),
    )


@router.post('', response_model=OrganizationCreatedOut, status_code=status.HTTP_201_CREATED)
def create_organization(
    payload: OrganizationCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: Actor = Depends(require_admin),
) -> OrganizationCreatedOut:
    with transaction(db):
        organization, subscription = organization_service.create_organization_with_subscription(
            db,
            name=payload.name,
            admin_uid=payload.admin_uid,
            validity=payload.validity,
            plan_id=payload.plan_id,
            member_limit=payload.member_limit,
            projects_limit=payload.projects_limit,
            shared_storage_per_project=payload.shared_storage_per_project,
            private_storage=payload.private_storage,
            price=payload.price,
            currency=payload.currency,
            contact_first_name=payload.contact_first_name,
            contact_last_name=payload.contact_last_name,
            contact_email=payload.contact_email,
            contact_phone=payload.contact_phone,
            clock=clock,
        )
    return OrganizationCreatedOut(
        organization=OrganizationOut.model_validate(organization),
        subscription=SubscriptionOut.model_validate(subscription),
    )


@router.get(
    '/{organization_id}',
    response_model=OrganizationOverviewOut,
    dependencies=[Depends(require_usable_subscription)],
)
def get_organization(
    organization_id: int,
    db: Session = Depends(get_db),
    _: Actor = Depends(require_organization_access),
) -> OrganizationOverviewOut:
    overview = organization_service.get_organization_overview(db, organization_id)
    return OrganizationOverviewOut(
        organization=OrganizationOut.model_validate(overview.organization),
        subscription=SubscriptionOut.model_validate(overview.subscription),
        plan=PlanOut.model_validate(overview.plan),
    )


@router.put(
    '/{organization_id}',
    response_model=OrganizationOut,
    dependencies=[Depends(require_usable_subscription)],
)
def update_organization(
    organization_id: int,
    payload: OrganizationUpdate,
    db: Session = Depends(get_db),
    _: Actor = Depends(require_organization_access),
) -> OrganizationOut:
    with transaction(db):
        organization = organization_service.update_organization(db, organization_id, **payload.model_dump())
    return OrganizationOut.model_validate(organization)


@router.get('/{organization_id}/subscription', response_model=SubscriptionOut)
def get_subscription(
    organization_id: int,
    db: Session = Depends(get_db),
    _: Actor = Depends(require_organization_access),
) -> SubscriptionOut:
    return SubscriptionOut.model_validate(_get_subscription_or_404(db, organization_id))


@router.put('/{organization_id}/subscription', response_model=SubscriptionOut)
def update_subscription(
    organization_id: int,
    payload: SubscriptionUpdate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    actor: Actor = Depends(require_admin),
) -> SubscriptionOut:
    with transaction(db):
        subscription = subscription_service.update_subscription(
            db,
            organization_id=organization_id,
            display_name=payload.display_name,
            new_plan_id=payload.plan_id,
            max_members=payload.max_members,
            max_projects=payload.max_projects,
            shared_storage_per_project=payload.shared_storage_per_project,
            private_storage_per_user=payload.private_storage_per_user,
            status=payload.status,
            extend_duration=payload.extend_duration,
            price=payload.price,
            currency=payload.currency,
            notes=payload.notes,
            changed_by_user_id=actor.user_id,
            clock=clock,
        )
    return SubscriptionOut.model_validate(subscription)


@router.get('/{organization_id}/subscription/history', response_model=list[SubscriptionHistoryOut])
def list_subscription_history(
    organization_id: int,
    db: Session = Depends(get_db),
    _: Actor = Depends(require_admin),
) -> list[SubscriptionHistoryOut]:
    subscription = _get_subscription_or_404(db, organization_id)
    rows = history_service.list_history(db, subscription_id=subscription.id)
    return [SubscriptionHistoryOut.model_validate(row) for row in rows]


@router.get('/{organization_id}/subscription/usable', response_model=SubscriptionUsabilityOut)
def get_subscription_usability(
    organization_id: int,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: Actor = Depends(require_organization_access),
) -> SubscriptionUsabilityOut:
    usable, reason = access_service.check_subscription_access(db, organization_id, clock=clock)
    return SubscriptionUsabilityOut(organization_id=organization_id, usable=usable, reason=reason)
