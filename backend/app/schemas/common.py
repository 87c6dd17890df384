from datetime import datetime

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class TimestampedSchema(BaseSchema):
    id: int
    created_at: datetime
    updated_at: datetime


class PaginationMeta(BaseModel):
    limit: int | None
    offset: int
    total: int
