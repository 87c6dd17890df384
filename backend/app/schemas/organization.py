from pydantic import BaseModel, EmailStr, Field

from app.schemas.common import PaginationMeta, TimestampedSchema
from app.schemas.plan import PlanOut
from app.schemas.subscription import SubscriptionOut, SubscriptionTerms


class OrganizationContact(BaseModel):
    contact_first_name: str | None = Field(default=None, max_length=100)
    contact_last_name: str | None = Field(default=None, max_length=100)
    contact_email: EmailStr | None = None
    contact_phone: str | None = Field(default=None, max_length=50)


class OrganizationCreate(SubscriptionTerms, OrganizationContact):
    name: str = Field(min_length=1, max_length=255)
    admin_uid: str = Field(min_length=1, max_length=64)


class OrganizationUpdate(OrganizationContact):
    name: str = Field(min_length=1, max_length=255)


class OrganizationOut(TimestampedSchema):
    name: str
    contact_first_name: str | None
    contact_last_name: str | None
    contact_email: str | None
    contact_phone: str | None
    admin_uid: str | None


class OrganizationListResponse(BaseModel):
    items: list[OrganizationOut]
    meta: PaginationMeta


class OrganizationCreatedOut(BaseModel):
    organization: OrganizationOut
    subscription: SubscriptionOut


class OrganizationOverviewOut(BaseModel):
    organization: OrganizationOut
    subscription: SubscriptionOut
    plan: PlanOut
