from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


# SQLite only autoincrements INTEGER PRIMARY KEY columns.
BigIntegerId = BigInteger().with_variant(Integer(), 'sqlite')


class IntegerPrimaryKeyMixin:
    id: Mapped[int] = mapped_column(BigIntegerId, primary_key=True, autoincrement=True)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
