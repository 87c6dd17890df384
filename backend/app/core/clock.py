from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(UTC)


system_clock = SystemClock()


def as_utc(value: datetime | None) -> datetime | None:
    """
    Normalize a datetime read back from storage to an aware UTC value.

    SQLite drops the offset on round-trip, PostgreSQL keeps it; both store UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
