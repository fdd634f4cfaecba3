"""Adapter from loosely-typed resource dictionaries to PhotoRecord.

The listing collaborator hands over JSON-like mappings whose date fields
vary between server versions and extractors. Every field read here is named
explicitly; unknown keys are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterable, Optional

from photo_timeline.config import LEGACY_DATE_FIELDS
from photo_timeline.dates import parse_date
from photo_timeline.models import (
    GeoCoordinates,
    GraphPhoto,
    LegacyDateFields,
    PhotoRecord,
)

logger = logging.getLogger(__name__)


def _lookup(raw: Mapping, path: str) -> Any:
    """Follow a dotted property path through nested mappings."""
    value: Any = raw
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def _str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _coordinates(raw: Any) -> Optional[GeoCoordinates]:
    if not isinstance(raw, Mapping):
        return None
    latitude = _number(raw.get("latitude"))
    longitude = _number(raw.get("longitude"))
    if latitude is None or longitude is None:
        return None
    return GeoCoordinates(latitude, longitude, _number(raw.get("altitude")))


def _graph_photo(raw: Any) -> Optional[GraphPhoto]:
    if not isinstance(raw, Mapping):
        return None
    return GraphPhoto(
        taken_date_time=raw.get("takenDateTime"),
        camera_make=_str(raw.get("cameraMake")),
        camera_model=_str(raw.get("cameraModel")),
        f_number=_number(raw.get("fNumber")),
        focal_length=_number(raw.get("focalLength")),
        iso=_int(raw.get("iso")),
        orientation=_int(raw.get("orientation")),
        exposure_numerator=_int(raw.get("exposureNumerator")),
        exposure_denominator=_int(raw.get("exposureDenominator")),
        location=_coordinates(raw.get("location")),
    )


def photo_from_resource(raw: Mapping) -> PhotoRecord:
    """Build a PhotoRecord from one listed resource mapping."""
    legacy = LegacyDateFields(**{
        attr: _lookup(raw, path) for attr, path in LEGACY_DATE_FIELDS
    })

    modified_raw = raw.get("mdate") or raw.get("mtime")
    modified = parse_date(modified_raw)
    if modified_raw and modified is None:
        logger.debug(f"{raw.get('name')}: unparseable mdate {modified_raw!r}")

    record_id = raw.get("id") or raw.get("fileId") or ""
    return PhotoRecord(
        id=str(record_id),
        name=_str(raw.get("name")) or "",
        mime_type=_str(raw.get("mimeType")),
        photo=_graph_photo(raw.get("photo")),
        modified=modified,
        legacy=legacy,
        location=_coordinates(raw.get("location")),
        is_folder=bool(raw.get("isFolder")) or raw.get("type") == "folder",
        path=_str(raw.get("filePath")) or _str(raw.get("webDavPath")) or _str(raw.get("path")),
    )


def photos_from_resources(raws: Iterable[Mapping]) -> list[PhotoRecord]:
    return [photo_from_resource(raw) for raw in raws]
