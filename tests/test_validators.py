"""Tests for time and date validators."""
from datetime import date

import pytest

from planner_server.errors import ParseError, ValidationError
from planner_server.validators import compare_time, is_valid_date, is_valid_time, normalize_date, parse_date


@pytest.mark.parametrize("value, expected", [
    ("07:00", True),
    ("00:00", True),
    ("23:59", True),
    ("24:00", False),
    ("7:00", False),
    ("12:60", False),
    ("12:5", False),
    ("07:00\n", False),
    ("\u0660\u0667:00", False),  # Arabic-Indic digits
    ("", False),
    (None, False),
])
def test_is_valid_time(value, expected) -> None:
    assert is_valid_time(value) is expected


def test_compare_time_orders_by_hour_then_minute() -> None:
    assert compare_time("09:00", "09:01") == -1
    assert compare_time("10:00", "09:59") == 1
    assert compare_time("08:30", "08:30") == 0


def test_compare_time_rejects_invalid_input() -> None:
    with pytest.raises(ParseError):
        compare_time("9:00", "10:00")


@pytest.mark.parametrize("value, expected", [
    ("29/02/2024", True),   # leap year
    ("29/02/2023", False),
    ("29/02/1900", False),  # century, not a leap year
    ("29/02/2000", True),
    ("31/04/2025", False),  # April has 30 days
    ("30/04/2025", True),
    ("1/4/2025", True),
    ("00/04/2025", False),
    ("15/13/2025", False),
    ("15/00/2025", False),
    ("15/06/999", False),
    ("01/01/10000", False),
    ("01/04/2025\n", False),
    ("15-06-2025", False),
    ("15/06", False),
    ("a/b/c", False),
    ("", False),
    (None, False),
])
def test_is_valid_date(value, expected) -> None:
    assert is_valid_date(value) is expected


def test_normalize_date_pads_day_and_month() -> None:
    assert normalize_date("1/4/2025") == "01/04/2025"
    assert normalize_date("25/12/2025") == "25/12/2025"


def test_normalize_date_rejects_invalid_dates() -> None:
    with pytest.raises(ValidationError):
        normalize_date("31/04/2025")


def test_parse_date() -> None:
    assert parse_date("08/12/2025") == date(2025, 12, 8)
    assert parse_date("8/12/2025") == date(2025, 12, 8)
    # None means "could not parse"
    assert parse_date("garbage") is None
    assert parse_date("31/02/2025") is None


def test_parse_date_returns_none_for_out_of_range_years() -> None:
    assert parse_date("01/01/10000") is None
    assert parse_date("31/12/9999") == date(9999, 12, 31)
