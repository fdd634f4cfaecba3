"""Capture-time resolution: pick one authoritative instant per photo."""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from typing import Iterator, Optional

from photo_timeline.config import LEGACY_DATE_FIELDS
from photo_timeline.dates import parse_date
from photo_timeline.models import (
    DateSource,
    PhotoRecord,
    ResolvedCaptureTime,
    SidecarRecord,
)

logger = logging.getLogger(__name__)


def _metadata_candidates(photo: PhotoRecord) -> Iterator[tuple[DateSource, str, object]]:
    if photo.photo is not None:
        yield DateSource.TAKEN_DATE_TIME, "photo.takenDateTime", photo.photo.taken_date_time
    for attr, upstream in LEGACY_DATE_FIELDS:
        yield DateSource.LEGACY_FIELD, upstream, getattr(photo.legacy, attr)


def _sidecar_candidates(sidecar: SidecarRecord) -> Iterator[tuple[DateSource, str, object]]:
    yield DateSource.SIDECAR_TAKEN, "photoTakenTime", sidecar.photo_taken_time
    yield DateSource.SIDECAR_CREATED, "creationTime", sidecar.creation_time


class Resolver:
    """Resolves capture times in a fixed zone against a fixed "now".

    Candidates, first parseable wins:
      1. photo.takenDateTime
      2. legacy / vendor fields, in LEGACY_DATE_FIELDS order
      3. matched sidecar photoTakenTime, then creationTime
      4. filesystem modification time
      5. now

    Results are memoized per (photo, sidecar) object pair for the lifetime of
    the instance, so one instance should serve one grouping pass.
    """

    def __init__(
        self,
        tz: Optional[tzinfo] = None,
        now: Optional[datetime] = None,
    ) -> None:
        self.tz = tz
        self.now = now
        # Values hold the keyed objects so their ids stay unique
        self._cache: dict[tuple[int, int], tuple[object, object, ResolvedCaptureTime]] = {}

    def exif_date(self, photo: PhotoRecord) -> Optional[ResolvedCaptureTime]:
        """Capture time from embedded metadata only (steps 1-2), or None."""
        for source, name, value in _metadata_candidates(photo):
            if not value:
                continue
            instant = parse_date(value, self.tz)
            if instant is not None:
                return ResolvedCaptureTime(instant, source, name)
            logger.debug(f"{photo.name}: unparseable {name}={value!r}, trying next")
        return None

    def resolve(
        self,
        photo: PhotoRecord,
        sidecar: Optional[SidecarRecord] = None,
    ) -> ResolvedCaptureTime:
        key = (id(photo), id(sidecar))
        cached = self._cache.get(key)
        if cached is None:
            cached = (photo, sidecar, self._resolve(photo, sidecar))
            self._cache[key] = cached
        return cached[2]

    def _resolve(
        self,
        photo: PhotoRecord,
        sidecar: Optional[SidecarRecord],
    ) -> ResolvedCaptureTime:
        resolved = self.exif_date(photo)
        if resolved is not None:
            return resolved

        if sidecar is not None:
            for source, name, value in _sidecar_candidates(sidecar):
                instant = parse_date(value, self.tz)
                if instant is not None:
                    return ResolvedCaptureTime(instant, source, f"sidecar.{name}")

        if photo.modified is not None:
            instant = parse_date(photo.modified, self.tz)
            if instant is not None:
                logger.debug(f"{photo.name}: no capture metadata, using mtime")
                return ResolvedCaptureTime(instant, DateSource.MODIFIED, "mdate")

        logger.debug(f"{photo.name}: no usable date, falling back to now")
        if self.now is None:
            # Pinned on first use; every undated photo of the pass shares it
            self.now = datetime.now(timezone.utc)
        now = self.now
        if now.tzinfo is None:
            now = now.astimezone()
        return ResolvedCaptureTime(now, DateSource.NOW, "now")


def exif_date(
    photo: PhotoRecord,
    tz: Optional[tzinfo] = None,
) -> Optional[datetime]:
    """Capture instant from the photo's own metadata, ignoring sidecars and mtime."""
    resolved = Resolver(tz).exif_date(photo)
    return resolved.instant if resolved else None


def resolve_capture(
    photo: PhotoRecord,
    sidecar: Optional[SidecarRecord] = None,
    tz: Optional[tzinfo] = None,
    now: Optional[datetime] = None,
) -> ResolvedCaptureTime:
    """Resolve a photo's capture time together with the source that produced it."""
    return Resolver(tz, now).resolve(photo, sidecar)


def resolve_capture_time(
    photo: PhotoRecord,
    sidecar: Optional[SidecarRecord] = None,
    tz: Optional[tzinfo] = None,
    now: Optional[datetime] = None,
) -> datetime:
    """Resolve a photo's capture instant. Always returns an aware datetime."""
    return resolve_capture(photo, sidecar, tz, now).instant
