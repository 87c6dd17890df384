from datetime import UTC, datetime, timedelta

import pytest

from app.core.errors import ValidationError
from app.utils.duration import add_duration, parse_duration


START = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    ('expression', 'expected'),
    [
        ('1 year', datetime(2027, 3, 1, 12, 0, tzinfo=UTC)),
        ('3 months', datetime(2026, 6, 1, 12, 0, tzinfo=UTC)),
        ('1 month', datetime(2026, 4, 1, 12, 0, tzinfo=UTC)),
        ('+15 days', START + timedelta(days=15)),
        ('2 weeks', START + timedelta(weeks=2)),
        ('1 Day', START + timedelta(days=1)),
        ('1 year 2 months', datetime(2027, 5, 1, 12, 0, tzinfo=UTC)),
        ('1 month + 2 days', datetime(2026, 4, 3, 12, 0, tzinfo=UTC)),
        ('-1 day', START - timedelta(days=1)),
        ('6 hours and 30 minutes', START + timedelta(hours=6, minutes=30)),
    ],
)
def test_add_duration_supported_phrases(expression: str, expected: datetime) -> None:
    assert add_duration(START, expression) == expected


def test_month_arithmetic_clamps_to_month_end() -> None:
    assert add_duration(datetime(2026, 1, 31, tzinfo=UTC), '1 month') == datetime(2026, 2, 28, tzinfo=UTC)
    assert add_duration(datetime(2028, 2, 29, tzinfo=UTC), '1 year') == datetime(2029, 2, 28, tzinfo=UTC)


def test_one_year_from_march_is_365_days() -> None:
    assert add_duration(START, '1 year') - START == timedelta(days=365)


@pytest.mark.parametrize('expression', ['', '   ', 'forever', '1 fortnight', 'year', '3 months extra', None])
def test_invalid_phrases_raise_validation_error(expression: str | None) -> None:
    with pytest.raises(ValidationError):
        parse_duration(expression)


@pytest.mark.parametrize(
    'expression',
    [
        '9000 years',
        '+9999999999 days',
        '9999999999 weeks',
        '99999999999999 hours',
        '-9999999999999999 minutes',
        '1' * 5000 + ' days',
    ],
)
def test_out_of_range_duration_is_a_validation_error(expression: str) -> None:
    with pytest.raises(ValidationError):
        add_duration(START, expression)
