"""Core data types shared by the timeline engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


class GroupMode(str, enum.Enum):
    """Calendar granularity of a timeline bucket."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @classmethod
    def parse(cls, value: "GroupMode | str") -> "GroupMode":
        """Look up a mode by its name, raising ValueError for unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            available = ", ".join(sorted(m.value for m in cls))
            raise ValueError(
                f"Unknown group mode '{value}'. Available: {available}"
            ) from None


class DateSource(enum.Enum):
    """Where a resolved capture time came from."""

    TAKEN_DATE_TIME = "taken_date_time"  # photo.takenDateTime
    LEGACY_FIELD = "legacy_field"  # historical / vendor property names
    SIDECAR_TAKEN = "sidecar_taken"  # sidecar photoTakenTime
    SIDECAR_CREATED = "sidecar_created"  # sidecar creationTime
    MODIFIED = "modified"  # filesystem modification time
    NOW = "now"  # nothing usable, wall clock


@dataclass(frozen=True)
class GeoCoordinates:
    latitude: float
    longitude: float
    altitude: Optional[float] = None


@dataclass(frozen=True)
class GraphPhoto:
    """Photo facet of a resource as indexed by the storage server."""

    taken_date_time: Any = None  # usually an ISO-8601 string
    camera_make: Optional[str] = None
    camera_model: Optional[str] = None
    f_number: Optional[float] = None
    focal_length: Optional[float] = None
    iso: Optional[int] = None
    orientation: Optional[int] = None
    exposure_numerator: Optional[int] = None
    exposure_denominator: Optional[int] = None
    location: Optional[GeoCoordinates] = None


@dataclass(frozen=True)
class LegacyDateFields:
    """Capture-date properties written by older extractors and vendors.

    One slot per known upstream property; the lookup order lives in
    ``config.LEGACY_DATE_FIELDS``. Values keep their upstream shape (number,
    string or ``{"timestamp": ...}`` mapping) and are normalized lazily.
    """

    exif_date_time_original: Any = None
    exif_date: Any = None
    date_taken: Any = None
    photo_taken_time: Any = None
    date_time_original: Any = None
    metadata_exif_date_time_original: Any = None
    metadata_date_taken: Any = None
    metadata_photo_taken_time: Any = None
    metadata_date_time_original: Any = None
    oc_exif_date: Any = None
    oc_date_taken: Any = None
    oc_photo_taken_time: Any = None
    additional_exif_date: Any = None
    additional_date_taken: Any = None
    exif_tag_date_time_original: Any = None
    exif_tag_date_time: Any = None


@dataclass(frozen=True)
class PhotoRecord:
    """One listed file believed to be an image. Never mutated by the engine."""

    id: str
    name: str
    mime_type: Optional[str] = None
    photo: Optional[GraphPhoto] = None
    modified: Optional[datetime] = None  # filesystem mtime
    legacy: LegacyDateFields = field(default_factory=LegacyDateFields)
    location: Optional[GeoCoordinates] = None
    is_folder: bool = False
    path: Optional[str] = None


@dataclass(frozen=True)
class SidecarTimestamp:
    """``{"timestamp": "<epoch seconds>", "formatted": ...}`` as found in sidecars."""

    timestamp: Any
    formatted: Optional[str] = None


@dataclass(frozen=True)
class SidecarRecord:
    """Parsed Google Photos / Takeout JSON sidecar."""

    filename: str = ""
    title: Optional[str] = None
    description: Optional[str] = None
    photo_taken_time: Optional[SidecarTimestamp] = None
    creation_time: Optional[SidecarTimestamp] = None
    geo_data: Optional[GeoCoordinates] = None
    geo_data_exif: Optional[GeoCoordinates] = None  # preferred over geo_data


@dataclass(frozen=True)
class SidecarFile:
    """A raw sidecar entry as listed: file name plus undecoded JSON text."""

    name: str
    content: str


@dataclass(frozen=True)
class ResolvedCaptureTime:
    instant: datetime  # timezone-aware
    source: DateSource
    field: str  # upstream field name, e.g. "photo.takenDateTime"


@dataclass
class PhotoStack:
    """Photos taken within a short gap of each other, newest first."""

    id: str
    photos: list[PhotoRecord]
    timestamp: datetime


@dataclass
class PhotoGroup:
    """One timeline bucket: key, display label and newest-first photos."""

    key: str
    label: str
    photos: list[PhotoRecord] = field(default_factory=list)


@dataclass
class MarkerCluster:
    """Located photos drawn as one map marker, anchored at the first member."""

    latitude: float
    longitude: float
    photos: list[PhotoRecord] = field(default_factory=list)


@dataclass
class TimelineResult:
    """Grouped output plus summary counters for one timeline build."""

    groups: list[PhotoGroup] = field(default_factory=list)
    records_seen: int = 0
    photos: int = 0
    sidecars_parsed: int = 0
    sidecars_matched: int = 0
    date_sources: dict[DateSource, int] = field(default_factory=dict)
    sidecar_index: dict[str, SidecarRecord] = field(default_factory=dict)
    # Resolver used by the build; later stacking reuses its times and "now"
    resolver: Any = field(default=None, repr=False, compare=False)
