from app.schemas.organization import (
    OrganizationCreate,
    OrganizationCreatedOut,
    OrganizationListResponse,
    OrganizationOut,
    OrganizationOverviewOut,
    OrganizationUpdate,
)
from app.schemas.plan import PlanCreate, PlanDetailOut, PlanListResponse, PlanOut, PlanUpdate
from app.schemas.subscription import (
    SubscriptionHistoryOut,
    SubscriptionOut,
    SubscriptionUpdate,
    SubscriptionUsabilityOut,
    SweepResultOut,
)

__all__ = [
    'OrganizationCreate',
    'OrganizationCreatedOut',
    'OrganizationListResponse',
    'OrganizationOut',
    'OrganizationOverviewOut',
    'OrganizationUpdate',
    'PlanCreate',
    'PlanDetailOut',
    'PlanListResponse',
    'PlanOut',
    'PlanUpdate',
    'SubscriptionHistoryOut',
    'SubscriptionOut',
    'SubscriptionUpdate',
    'SubscriptionUsabilityOut',
    'SweepResultOut',
]
