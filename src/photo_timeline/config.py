"""Configuration constants and runtime config dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import FrozenSet, Optional

from photo_timeline.labels import LabelStrings
from photo_timeline.models import GroupMode

IMAGE_EXTENSIONS: FrozenSet[str] = frozenset({
    "jpg", "jpeg", "png", "gif", "webp",
    "heic", "heif", "tiff", "tif",
})

# Media types Google Takeout writes JSON sidecars for
SIDECAR_MEDIA_EXTENSIONS: FrozenSet[str] = frozenset({
    "jpg", "jpeg", "png", "gif", "webp",
    "heic", "heif", "mp4", "mov",
})

# Ordered: <image>.json, Takeout's long form, then its truncated form
SIDECAR_SUFFIXES: tuple[str, ...] = (
    ".json",
    ".supplemental-metadata.json",
    ".suppl.json",
)

REJECTED_NAME_FRAGMENTS: tuple[str, ...] = (".json", ".xml", ".txt")
EXCLUDED_MIME_FRAGMENTS: tuple[str, ...] = ("svg", "icon")

# Epoch seconds of 3000-01-01; smaller numbers are seconds, larger are ms
EPOCH_SECONDS_CUTOFF: int = 32503680000

# (LegacyDateFields attribute, upstream property path), highest priority first
LEGACY_DATE_FIELDS: tuple[tuple[str, str], ...] = (
    ("exif_date_time_original", "exifDateTimeOriginal"),
    ("exif_date", "exifDate"),
    ("date_taken", "dateTaken"),
    ("photo_taken_time", "photoTakenTime"),
    ("date_time_original", "dateTimeOriginal"),
    ("metadata_exif_date_time_original", "metadata.exifDateTimeOriginal"),
    ("metadata_date_taken", "metadata.dateTaken"),
    ("metadata_photo_taken_time", "metadata.photoTakenTime"),
    ("metadata_date_time_original", "metadata.dateTimeOriginal"),
    ("oc_exif_date", "oc:exif-date"),
    ("oc_date_taken", "oc:date-taken"),
    ("oc_photo_taken_time", "oc:photo-taken-time"),
    ("additional_exif_date", "additionalData.exifDate"),
    ("additional_date_taken", "additionalData.dateTaken"),
    ("exif_tag_date_time_original", "exif.DateTimeOriginal"),
    ("exif_tag_date_time", "exif.DateTime"),
)

EARTH_RADIUS_METERS: int = 6_371_000

DEFAULT_STACK_GAP_SECONDS: int = 60
DEFAULT_CLUSTER_RADIUS_METERS: int = 500


@dataclass(frozen=True)
class TimelineConfig:
    """Immutable runtime configuration assembled by the host application."""

    mode: GroupMode = GroupMode.DAY
    tz: Optional[tzinfo] = None  # None = host local zone
    labels: LabelStrings = field(default_factory=LabelStrings)
    today: Optional[date] = None  # None = current date in `tz`
    use_sidecars: bool = True
    stack_gap_seconds: int = DEFAULT_STACK_GAP_SECONDS
