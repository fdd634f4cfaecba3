"""Normalization of loosely-typed date values into timezone-aware instants."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Optional

from dateutil import parser as dateparser

from photo_timeline.config import EPOCH_SECONDS_CUTOFF
from photo_timeline.models import SidecarTimestamp

logger = logging.getLogger(__name__)

_EXIF_DATE_RE = re.compile(r"(\d{4}):(\d{2}):(\d{2})\s+(\d{2}):(\d{2}):(\d{2})")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

# Fills fields missing from free-form strings; keeps results independent of today
_PARSE_DEFAULT = datetime(1970, 1, 1)
# Second fill; a year that differs between the two parses came from no text
_PARSE_ALT_DEFAULT = datetime(1980, 1, 1)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _attach_zone(value: datetime, tz: Optional[tzinfo]) -> Optional[datetime]:
    """Give a naive wall-clock datetime a zone without shifting its fields.

    Aware values pass through unless their offset is unusable (24h or more).
    """
    if value.tzinfo is not None:
        try:
            value.utcoffset()
        except ValueError as e:
            logger.debug(f"Unusable UTC offset on {value!r}: {e}")
            return None
        return value
    if tz is not None:
        return value.replace(tzinfo=tz)
    try:
        return value.astimezone()
    except (OverflowError, OSError, ValueError):
        # Local offset unknown this far from the epoch
        return value.replace(tzinfo=timezone.utc)


def _from_epoch(**delta: float) -> Optional[datetime]:
    try:
        return _EPOCH + timedelta(**delta)
    except OverflowError:
        return None


def _from_epoch_seconds(seconds: float) -> Optional[datetime]:
    return _from_epoch(seconds=seconds)


def _from_epoch_number(value: float) -> Optional[datetime]:
    if not math.isfinite(value):
        return None
    if value < EPOCH_SECONDS_CUTOFF:
        return _from_epoch_seconds(value)
    return _from_epoch(milliseconds=value)


def _leading_int(value: Any) -> Optional[int]:
    """Integer prefix of a number or string ("1609459200abc" -> 1609459200)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if match:
            return int(match.group(1))
    return None


def _from_timestamp_field(timestamp: Any) -> Optional[datetime]:
    if not timestamp:
        return None
    seconds = _leading_int(timestamp)
    if seconds is None:
        return None
    return _from_epoch_seconds(seconds)


def _from_exif_string(match: re.Match, tz: Optional[tzinfo]) -> Optional[datetime]:
    year, month, day, hour, minute, second = (int(g) for g in match.groups())
    try:
        naive = datetime(year, month, day, hour, minute, second)
    except ValueError:
        logger.debug(f"Out-of-range EXIF date: {match.group(0)!r}")
        return None
    return _attach_zone(naive, tz)


def _from_free_string(value: str, tz: Optional[tzinfo]) -> Optional[datetime]:
    text = value.strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = dateparser.parse(text, default=_PARSE_DEFAULT)
            alt = dateparser.parse(text, default=_PARSE_ALT_DEFAULT)
        except (dateparser.ParserError, ValueError, OverflowError, TypeError):
            return None
        if parsed.year != alt.year:
            # "Monday", "May", "12", "10:30": no year in the text
            logger.debug(f"No year in date string: {text!r}")
            return None
    return _attach_zone(parsed, tz)


def parse_date(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Normalize a date value of unknown shape into an aware datetime.

    Accepted shapes:
      - number: epoch seconds below EPOCH_SECONDS_CUTOFF, else milliseconds
      - ``{"timestamp": ...}`` mapping or SidecarTimestamp: epoch seconds
      - ``"YYYY:MM:DD HH:MM:SS"`` (EXIF text): wall-clock fields kept as-is
      - any other string: ISO-8601, then dateutil's general parser

    Naive results are attached to ``tz`` (default: host local zone) without
    shifting. Empty, zero and unparseable values return None; never raises.
    """
    if not value or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return _from_epoch_number(value)

    if isinstance(value, SidecarTimestamp):
        return _from_timestamp_field(value.timestamp)

    if isinstance(value, Mapping):
        return _from_timestamp_field(value.get("timestamp"))

    if isinstance(value, datetime):
        return _attach_zone(value, tz)

    if isinstance(value, str):
        match = _EXIF_DATE_RE.fullmatch(value)
        if match:
            return _from_exif_string(match, tz)
        return _from_free_string(value, tz)

    return None
