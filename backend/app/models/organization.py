from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base_class import Base
from app.models.mixins import IntegerPrimaryKeyMixin, TimestampMixin


class Organization(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = 'organizations'

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    contact_last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # Identity of the organization administrator on the host user platform.
    admin_uid: Mapped[str | None] = mapped_column(String(64), nullable=True)


Index('ix_organizations_admin_uid', Organization.admin_uid)
