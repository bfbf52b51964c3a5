"""Tests for date helpers and money formatting."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from computerstore.money import fraction_str, money_str, to_decimal
from computerstore.time_utils import (
    current_week_start,
    day_bounds,
    month_bounds,
    parse_iso_datetime,
    to_utc_z,
    week_bounds,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2026-10-19", datetime(2026, 10, 19)),
        ("2026-10-19T14:30", datetime(2026, 10, 19, 14, 30)),
        ("2026-10-19T14:30:00Z", datetime(2026, 10, 19, 14, 30)),
        ("2026-10-19T17:30:00+03:00", datetime(2026, 10, 19, 14, 30)),
        ("  ", None),
        (None, None),
    ],
)
def test_parse_iso_datetime(raw, expected):
    assert parse_iso_datetime(raw) == expected


def test_parse_iso_datetime_rejects_garbage():
    with pytest.raises(ValueError):
        parse_iso_datetime("next tuesday")


def test_to_utc_z():
    assert to_utc_z(datetime(2026, 10, 19, 14, 30, 5, 999)) == "2026-10-19T14:30:05Z"
    assert to_utc_z(None) is None


def test_calendar_ranges():
    assert day_bounds(datetime(2026, 10, 19, 23, 59)) == (datetime(2026, 10, 19), datetime(2026, 10, 20))
    assert week_bounds(date(2026, 10, 12)) == (datetime(2026, 10, 12), datetime(2026, 10, 19))
    assert month_bounds(2026, 12) == (datetime(2026, 12, 1), datetime(2027, 1, 1))
    # 2026-10-22 is a Thursday
    assert current_week_start(date(2026, 10, 22)) == datetime(2026, 10, 19)


def test_money_helpers():
    assert to_decimal(0.1) == Decimal("0.1")
    assert money_str(Decimal("123.455")) == "123.46"
    assert fraction_str(Decimal("0.1500")) == "0.15"
    for bad in ("abc", float("nan"), True):
        with pytest.raises(ValueError):
            to_decimal(bad)
