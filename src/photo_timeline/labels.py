"""Human-readable labels for timeline group keys.

The strings and formats come in through a LabelStrings value chosen by the
host; nothing here reads the process locale.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from photo_timeline.isoweek import iso_week_start
from photo_timeline.models import GroupMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LabelStrings:
    """Words and layouts used to render labels. Defaults are US English."""

    today: str = "Today"
    yesterday: str = "Yesterday"
    month_names: tuple[str, ...] = (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    )
    month_abbreviations: tuple[str, ...] = (
        "Jan", "Feb", "Mar", "Apr", "May", "Jun",
        "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
    )
    weekday_names: tuple[str, ...] = (  # Monday first
        "Monday", "Tuesday", "Wednesday", "Thursday",
        "Friday", "Saturday", "Sunday",
    )
    day_format: str = "{weekday}, {month} {day}, {year}"
    month_format: str = "{month} {year}"
    week_format: str = "{start_month} {start_day} - {end_month} {end_day}, {end_year}"

    def long_date(self, value: date) -> str:
        return self.day_format.format(
            weekday=self.weekday_names[value.weekday()],
            month=self.month_names[value.month - 1],
            day=value.day,
            year=value.year,
        )


def _day_label(key: str, labels: LabelStrings, today: date) -> str:
    year, month, day = (int(part) for part in key.split("-"))
    value = date(year, month, day)
    if value == today:
        return labels.today
    if value == today - timedelta(days=1):
        return labels.yesterday
    return labels.long_date(value)


def _week_label(key: str, labels: LabelStrings) -> str:
    year, week = key.split("-W")
    start = iso_week_start(int(year), int(week))
    end = start + timedelta(days=6)
    return labels.week_format.format(
        start_month=labels.month_abbreviations[start.month - 1],
        start_day=start.day,
        end_month=labels.month_abbreviations[end.month - 1],
        end_day=end.day,
        end_year=end.year,
    )


def _month_label(key: str, labels: LabelStrings) -> str:
    year, month = (int(part) for part in key.split("-"))
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range: {month}")
    return labels.month_format.format(month=labels.month_names[month - 1], year=year)


def format_group_key(
    key: str,
    mode: GroupMode | str,
    labels: Optional[LabelStrings] = None,
    today: Optional[date] = None,
) -> str:
    """Render a group key for display.

    ``day`` keys become "Today"/"Yesterday" relative to ``today`` or a long
    date; ``week`` keys become a Monday-Sunday range; ``month`` keys a month
    name and year; ``year`` keys are shown as-is. A key that does not have
    the shape of its mode is returned unchanged.
    """
    mode = GroupMode.parse(mode)
    labels = labels or LabelStrings()
    today = today or date.today()

    try:
        if mode is GroupMode.DAY:
            return _day_label(key, labels, today)
        if mode is GroupMode.WEEK:
            return _week_label(key, labels)
        if mode is GroupMode.MONTH:
            return _month_label(key, labels)
    except (ValueError, IndexError, OverflowError) as e:
        logger.debug(f"Cannot format {mode.value} key {key!r}: {e}")
        return key
    return key
