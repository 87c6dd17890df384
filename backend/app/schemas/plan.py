from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import TimestampedSchema


class PlanQuotas(BaseModel):
    max_members: int = Field(gt=0)
    max_projects: int = Field(gt=0)
    shared_storage_per_project: int = Field(ge=0)
    private_storage_per_user: int = Field(ge=0)
    price: Decimal | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)

    @field_validator('currency')
    @classmethod
    def normalize_currency(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not value.isalpha():
            raise ValueError('currency must be a 3-letter code')
        return value.upper()


class PlanCreate(PlanQuotas):
    name: str = Field(min_length=1, max_length=255)
    is_public: bool = False


class PlanUpdate(PlanCreate):
    pass


class PlanOut(TimestampedSchema):
    name: str
    max_members: int
    max_projects: int
    shared_storage_per_project: int
    private_storage_per_user: int
    price: Decimal | None
    currency: str
    is_public: bool


class PlanDetailOut(PlanOut):
    subscription_count: int = 0


class PlanListResponse(BaseModel):
    plans: list[PlanOut]
