# -*- coding: utf-8 -*-
"""
Validators and normalizers for time-of-day and calendar-date strings.

Times are ``HH:MM`` (24h, always two digits). Dates are ``D/M/YYYY`` on
input and are stored as zero-padded ``DD/MM/YYYY``.
"""
from __future__ import annotations

import calendar
import re
import typing as t
from datetime import date

from .errors import ParseError, ValidationError

# Matched with fullmatch: ASCII digits only, no trailing newline.
_TIME_RE = re.compile(r"([01][0-9]|2[0-3]):([0-5][0-9])")
_DATE_RE = re.compile(r"([0-9]{1,2})/([0-9]{1,2})/([0-9]+)")


def is_valid_time(value: t.Any) -> bool:
    """True iff ``value`` is an ``HH:MM`` string in 00:00-23:59."""
    return isinstance(value, str) and _TIME_RE.fullmatch(value) is not None


def _time_parts(value: str) -> tuple[int, int]:
    match = _TIME_RE.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise ParseError(f"Invalid time: {value!r}")
    return int(match.group(1)), int(match.group(2))


def compare_time(a: str, b: str) -> int:
    """Compares two valid time strings by hour, then minute.

    :return: -1, 0 or 1.
    :raises ParseError: If either input is not a valid time; callers are
        expected to validate first.
    """
    pa, pb = _time_parts(a), _time_parts(b)
    return (pa > pb) - (pa < pb)


def _date_parts(value: t.Any) -> t.Optional[tuple[int, int, int]]:
    if not isinstance(value, str):
        return None
    match = _DATE_RE.fullmatch(value)
    if match is None:
        return None
    day, month, year = (int(g) for g in match.groups())
    return day, month, year


def is_valid_date(value: t.Any) -> bool:
    """True iff ``value`` is a real calendar date written as D/M/YYYY.

    Day and month may have one or two digits, the year must have four
    digits and the day must exist in that month (leap years included).
    """
    parts = _date_parts(value)
    if parts is None:
        return False
    day, month, year = parts
    if not 1000 <= year <= 9999 or not 1 <= month <= 12 or day < 1:
        return False
    return day <= calendar.monthrange(year, month)[1]


def normalize_date(value: str) -> str:
    """Re-renders a valid date string as DD/MM/YYYY.

    :raises ValidationError: If ``value`` is not a valid date.
    """
    if not is_valid_date(value):
        raise ValidationError("date", f"Invalid date {value!r}, expected DD/MM/YYYY")
    day, month, year = _date_parts(value)
    return f"{day:02d}/{month:02d}/{year}"


def parse_date(value: t.Any) -> t.Optional[date]:
    """Converts a valid date string to a ``date``.

    Returns None on malformed input. None here always means "could not
    parse", never "no date".
    """
    if not is_valid_date(value):
        return None
    day, month, year = _date_parts(value)
    try:
        return date(year, month, day)
    except (ValueError, OverflowError):
        return None
