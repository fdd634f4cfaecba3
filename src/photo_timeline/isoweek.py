"""ISO-8601 week numbering."""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Any


def _thursday_of_week(value: date) -> date:
    # ISO weeks belong to the year that contains their Thursday
    day = date(value.year, value.month, value.day)
    return day + timedelta(days=4 - day.isoweekday())


def iso_week(value: Any) -> int:
    """ISO-8601 week number (1-53) of a date or datetime.

    Only the calendar fields are used, so no time-zone drift applies.
    Anything that is not a usable date yields week 1.
    """
    if not isinstance(value, date):
        return 1
    try:
        thursday = _thursday_of_week(value)
    except OverflowError:
        return 1
    days_elapsed = (thursday - date(thursday.year, 1, 1)).days
    return math.ceil((days_elapsed + 1) / 7)


def iso_week_year(value: date) -> int:
    """Year that owns the ISO week of ``value`` (differs near Jan 1 / Dec 31)."""
    try:
        return _thursday_of_week(value).year
    except OverflowError:
        return value.year


def iso_week_start(year: int, week: int) -> date:
    """Monday of ISO week ``week`` of ``year``.

    January 4th always falls in week 1, so the week is found by stepping
    whole weeks from it and aligning back to Monday.
    """
    anchor = date(year, 1, 4) + timedelta(weeks=week - 1)
    return anchor - timedelta(days=anchor.isoweekday() - 1)
