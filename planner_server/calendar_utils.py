# -*- coding: utf-8 -*-
"""
Date arithmetic for the weekly view.

Weeks start on Monday. Dates are plain local ``datetime.date`` values; there
is no timezone handling anywhere in the planner.
"""
from __future__ import annotations

import typing as t
from dataclasses import dataclass
from datetime import date, timedelta

Weekday = t.Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

DAYS: tuple[Weekday, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
DAYS_VI: tuple[str, ...] = ("Thứ Hai", "Thứ Ba", "Thứ Tư", "Thứ Năm", "Thứ Sáu", "Thứ Bảy", "Chủ Nhật")


@dataclass(frozen=True)
class WeekOption:
    """One entry of the week picker."""
    offset: int
    monday: date
    label: str


def week_start(day: date) -> date:
    """Returns the Monday on or before ``day``."""
    return day - timedelta(days=day.weekday())


def week_dates(monday: date) -> list[date]:
    """Returns the seven dates of the week starting at ``monday``."""
    return [monday + timedelta(days=i) for i in range(7)]


def format_date(day: date) -> str:
    """Formats a date as zero-padded DD/MM/YYYY."""
    return f"{day.day:02d}/{day.month:02d}/{day.year}"


def weekday_name(day: date) -> Weekday:
    return DAYS[day.weekday()]


def weekday_label(weekday: Weekday) -> str:
    """Localized header label for a weekday, e.g. 'Thứ Hai' for Monday."""
    return DAYS_VI[DAYS.index(weekday)]


def week_label(monday: date) -> str:
    """Label of a week as 'DD/MM/YYYY - DD/MM/YYYY' (Monday to Sunday)."""
    return f"{format_date(monday)} - {format_date(monday + timedelta(days=6))}"


def week_options(current_week: date, before: int = 2, after: int = 7) -> list[WeekOption]:
    """Builds the week picker entries around ``current_week``.

    :param current_week: Any date of the anchor week; normalized to its Monday.
    :param before: Number of weeks offered before the anchor week.
    :param after: Number of weeks offered after the anchor week.
    :return: Options for offsets ``-before..+after`` in ascending order.
    """
    anchor = week_start(current_week)
    options = []
    for offset in range(-before, after + 1):
        monday = anchor + timedelta(weeks=offset)
        options.append(WeekOption(offset=offset, monday=monday, label=week_label(monday)))
    return options
