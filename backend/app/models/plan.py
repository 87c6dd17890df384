from decimal import Decimal

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.config import settings
from app.db.base_class import Base
from app.models.constants import (
    DEFAULT_MAX_MEMBERS,
    DEFAULT_MAX_PROJECTS,
    DEFAULT_PRIVATE_STORAGE_PER_USER,
    DEFAULT_SHARED_STORAGE_PER_PROJECT,
)
from app.models.mixins import IntegerPrimaryKeyMixin, TimestampMixin


class Plan(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = 'plans'
    __table_args__ = (
        CheckConstraint('max_members > 0', name='plan_max_members_positive'),
        CheckConstraint('max_projects > 0', name='plan_max_projects_positive'),
        CheckConstraint('shared_storage_per_project >= 0', name='plan_shared_storage_non_negative'),
        CheckConstraint('private_storage_per_user >= 0', name='plan_private_storage_non_negative'),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    max_members: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_MAX_MEMBERS)
    max_projects: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_MAX_PROJECTS)
    shared_storage_per_project: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=DEFAULT_SHARED_STORAGE_PER_PROJECT
    )
    private_storage_per_user: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=DEFAULT_PRIVATE_STORAGE_PER_USER
    )
    price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default=lambda: settings.DEFAULT_CURRENCY)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


Index('ix_plans_is_public', Plan.is_public)
