"""Date bucketing: group keys, newest-first grouping and burst stacks."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timezone, tzinfo
from typing import Iterable, Optional

from photo_timeline.config import DEFAULT_STACK_GAP_SECONDS
from photo_timeline.isoweek import iso_week, iso_week_year
from photo_timeline.labels import LabelStrings, format_group_key
from photo_timeline.models import (
    GroupMode,
    PhotoGroup,
    PhotoRecord,
    PhotoStack,
    SidecarRecord,
)
from photo_timeline.resolver import Resolver
from photo_timeline.sidecar import SidecarIndex, find_sidecar

logger = logging.getLogger(__name__)


def _in_zone(instant: datetime, tz: Optional[tzinfo]) -> datetime:
    try:
        return instant.astimezone(tz) if tz is not None else instant.astimezone()
    except (OverflowError, OSError, ValueError):
        return instant


def key_for_instant(
    instant: datetime,
    mode: GroupMode | str,
    tz: Optional[tzinfo] = None,
) -> str:
    """Group key of an instant seen from zone ``tz`` (default: host local zone).

    Every format is zero-padded and year-first, so descending string order
    is descending chronological order.
    """
    mode = GroupMode.parse(mode)
    local = _in_zone(instant, tz)

    if mode is GroupMode.YEAR:
        return f"{local.year:04d}"
    if mode is GroupMode.MONTH:
        return f"{local.year:04d}-{local.month:02d}"
    if mode is GroupMode.WEEK:
        return f"{iso_week_year(local):04d}-W{iso_week(local):02d}"
    return f"{local.year:04d}-{local.month:02d}-{local.day:02d}"


def group_key(
    photo: PhotoRecord,
    mode: GroupMode | str = GroupMode.DAY,
    sidecar: Optional[SidecarRecord] = None,
    tz: Optional[tzinfo] = None,
    now: Optional[datetime] = None,
) -> str:
    instant = Resolver(tz, now).resolve(photo, sidecar).instant
    return key_for_instant(instant, mode, tz)


def _today(tz: Optional[tzinfo], now: Optional[datetime]) -> date:
    return _in_zone(now or datetime.now(timezone.utc), tz).date()


def group_by_date(
    photos: Iterable[PhotoRecord],
    mode: GroupMode | str = GroupMode.DAY,
    sidecar_index: Optional[SidecarIndex] = None,
    tz: Optional[tzinfo] = None,
    now: Optional[datetime] = None,
    labels: Optional[LabelStrings] = None,
    today: Optional[date] = None,
    resolver: Optional[Resolver] = None,
) -> list[PhotoGroup]:
    """Partition photos into date buckets, newest first.

    Groups are ordered by descending key. Inside a group photos are ordered
    by descending capture time; equal times keep their input order. Every
    photo lands in exactly one group.
    """
    mode = GroupMode.parse(mode)
    resolver = resolver or Resolver(tz, now)

    buckets: dict[str, list[tuple[datetime, PhotoRecord]]] = defaultdict(list)
    for photo in photos:
        sidecar = find_sidecar(sidecar_index, photo.name)
        instant = resolver.resolve(photo, sidecar).instant
        buckets[key_for_instant(instant, mode, tz)].append((instant, photo))

    today = today or _today(tz, now)
    groups: list[PhotoGroup] = []
    for key in sorted(buckets, reverse=True):
        # sorted() is stable, also with reverse=True
        entries = sorted(buckets[key], key=lambda entry: entry[0], reverse=True)
        groups.append(PhotoGroup(
            key=key,
            label=format_group_key(key, mode, labels, today),
            photos=[photo for _, photo in entries],
        ))

    logger.debug(f"group_by_date({mode.value}): {len(groups)} groups")
    return groups


def photo_counts_by_date(
    photos: Iterable[PhotoRecord],
    mode: GroupMode | str = GroupMode.DAY,
    sidecar_index: Optional[SidecarIndex] = None,
    tz: Optional[tzinfo] = None,
    now: Optional[datetime] = None,
) -> dict[str, int]:
    """Number of photos per group key."""
    mode = GroupMode.parse(mode)
    resolver = Resolver(tz, now)
    counts: dict[str, int] = defaultdict(int)
    for photo in photos:
        sidecar = find_sidecar(sidecar_index, photo.name)
        instant = resolver.resolve(photo, sidecar).instant
        counts[key_for_instant(instant, mode, tz)] += 1
    return dict(counts)


def stack_photos(
    photos: Iterable[PhotoRecord],
    gap_seconds: float = DEFAULT_STACK_GAP_SECONDS,
    sidecar_index: Optional[SidecarIndex] = None,
    tz: Optional[tzinfo] = None,
    now: Optional[datetime] = None,
    resolver: Optional[Resolver] = None,
) -> list[PhotoStack]:
    """Split an ordered run of photos into stacks of near-simultaneous shots.

    A photo joins the current stack when its capture time is within
    ``gap_seconds`` of the previous photo's; order is preserved. Meant for
    the newest-first photo list of one PhotoGroup.
    """
    if gap_seconds < 0:
        raise ValueError(f"gap_seconds must be >= 0, got {gap_seconds}")
    resolver = resolver or Resolver(tz, now)

    stacks: list[PhotoStack] = []
    previous: Optional[datetime] = None
    for photo in photos:
        sidecar = find_sidecar(sidecar_index, photo.name)
        instant = resolver.resolve(photo, sidecar).instant
        if previous is not None and abs((previous - instant).total_seconds()) <= gap_seconds:
            stacks[-1].photos.append(photo)
        else:
            stacks.append(PhotoStack(id=photo.id, photos=[photo], timestamp=instant))
        previous = instant
    return stacks
