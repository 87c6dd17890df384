from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.common import BaseSchema, TimestampedSchema
from app.schemas.plan import PlanQuotas


class SubscriptionOut(TimestampedSchema):
    organization_id: int
    plan_id: int
    status: str
    started_at: datetime
    ended_at: datetime | None
    paused_at: datetime | None
    cancelled_at: datetime | None


class SubscriptionUpdate(PlanQuotas):
    display_name: str = Field(min_length=1, max_length=255)
    plan_id: int | None = None
    status: Literal['active', 'paused', 'cancelled']
    extend_duration: str | None = None
    notes: str | None = None


class SubscriptionHistoryOut(BaseSchema):
    id: int
    subscription_id: int
    changed_by_user_id: str
    change_timestamp: datetime
    previous_plan_id: int | None
    previous_status: str | None
    previous_started_at: datetime | None
    previous_ended_at: datetime | None
    previous_paused_at: datetime | None
    previous_cancelled_at: datetime | None
    new_plan_id: int
    new_status: str
    new_started_at: datetime
    new_ended_at: datetime | None
    new_paused_at: datetime | None
    new_cancelled_at: datetime | None
    notes: str | None


class SubscriptionUsabilityOut(BaseModel):
    organization_id: int
    usable: bool
    reason: str | None = None


class SweepResultOut(BaseModel):
    expired: int


class SubscriptionTerms(BaseModel):
    validity: str = Field(min_length=1)
    plan_id: int | None = None
    member_limit: int | None = Field(default=None, gt=0)
    projects_limit: int | None = Field(default=None, gt=0)
    shared_storage_per_project: int | None = Field(default=None, ge=0)
    private_storage: int | None = Field(default=None, ge=0)
    price: Decimal | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
