import calendar
import re
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.core.errors import ValidationError


_TERM = re.compile(r'([+-]?)\s*(\d+)\s*(minute|hour|day|week|month|year)s?\b', re.IGNORECASE)
_SEPARATORS = re.compile(r'[\s,]+|\band\b', re.IGNORECASE)


@dataclass(frozen=True)
class Duration:
    """A calendar-aware interval: whole months plus a fixed delta."""

    months: int = 0
    delta: timedelta = timedelta()

    def apply(self, value: datetime) -> datetime:
        return _add_months(value, self.months) + self.delta

    @property
    def is_zero(self) -> bool:
        return self.months == 0 and not self.delta


def parse_duration(expression: str | None) -> Duration:
    """
    Parse a human duration phrase such as '1 year', '3 months' or '+15 days'.

    Terms may be chained ('1 year 2 months', '1 month + 2 days'); each term may carry a sign.
    """
    text = (expression or '').strip()
    if not text:
        raise ValidationError('Duration expression is empty')

    months = 0
    delta = timedelta()
    matched = False
    try:
        for match in _TERM.finditer(text):
            matched = True
            sign = -1 if match.group(1) == '-' else 1
            amount = sign * int(match.group(2))
            unit = match.group(3).lower()
            if unit == 'year':
                months += amount * 12
            elif unit == 'month':
                months += amount
            elif unit == 'week':
                delta += timedelta(weeks=amount)
            elif unit == 'day':
                delta += timedelta(days=amount)
            elif unit == 'hour':
                delta += timedelta(hours=amount)
            else:
                delta += timedelta(minutes=amount)
    except (OverflowError, ValueError) as exc:
        raise ValidationError(f'Duration {expression!r} is out of range', {'expression': expression}) from exc

    leftover = _SEPARATORS.sub('', _TERM.sub('', text))
    if not matched or leftover:
        raise ValidationError(f'Invalid duration expression: {expression!r}', {'expression': expression})
    return Duration(months=months, delta=delta)


def add_duration(value: datetime, expression: str) -> datetime:
    duration = parse_duration(expression)
    try:
        return duration.apply(value)
    except (OverflowError, ValueError) as exc:
        raise ValidationError(f'Duration {expression!r} is out of range', {'expression': expression}) from exc


def _add_months(value: datetime, months: int) -> datetime:
    if not months:
        return value
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    # Clamp to the last day of the target month (Jan 31 + 1 month -> Feb 28/29).
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
