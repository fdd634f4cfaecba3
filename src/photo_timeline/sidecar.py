"""Google Photos / Takeout JSON sidecar recognition, parsing and indexing.

Recognized names, matched case-insensitively on the media extension:
  - photo.jpg.json
  - photo.jpg.supplemental-metadata.json
  - photo.jpg.suppl.json
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any, Iterable, Optional

from photo_timeline.config import SIDECAR_MEDIA_EXTENSIONS, SIDECAR_SUFFIXES
from photo_timeline.models import (
    GeoCoordinates,
    SidecarFile,
    SidecarRecord,
    SidecarTimestamp,
)

logger = logging.getLogger(__name__)

_MEDIA_EXT_ALTERNATION = "|".join(sorted(SIDECAR_MEDIA_EXTENSIONS))

_SIDECAR_PATTERNS: tuple[re.Pattern, ...] = tuple(
    re.compile(
        rf"^(.+\.(?:{_MEDIA_EXT_ALTERNATION})){re.escape(suffix)}$",
        re.IGNORECASE,
    )
    for suffix in SIDECAR_SUFFIXES
)

# Keyed by bare lower-cased image name
SidecarIndex = dict[str, SidecarRecord]


def is_sidecar(filename: str) -> bool:
    return image_name_from_sidecar(filename) is not None


def image_name_from_sidecar(filename: str) -> Optional[str]:
    """Name of the media file a sidecar describes, or None if not a sidecar."""
    if not filename:
        return None
    for pattern in _SIDECAR_PATTERNS:
        match = pattern.match(filename)
        if match:
            return match.group(1)
    return None


def sidecar_filenames(image_name: str) -> list[str]:
    """Candidate sidecar names for an image, in convention order."""
    return [f"{image_name}{suffix}" for suffix in SIDECAR_SUFFIXES]


def _timestamp(raw: Any) -> Optional[SidecarTimestamp]:
    if not isinstance(raw, Mapping) or raw.get("timestamp") is None:
        return None
    formatted = raw.get("formatted")
    return SidecarTimestamp(
        timestamp=raw["timestamp"],
        formatted=formatted if isinstance(formatted, str) else None,
    )


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _geo(raw: Any) -> Optional[GeoCoordinates]:
    if not isinstance(raw, Mapping):
        return None
    latitude = _number(raw.get("latitude"))
    longitude = _number(raw.get("longitude"))
    if latitude is None or longitude is None:
        return None
    return GeoCoordinates(latitude, longitude, _number(raw.get("altitude")))


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def parse_sidecar_content(text: str, filename: str = "") -> Optional[SidecarRecord]:
    """Parse sidecar JSON text. Malformed or non-object JSON yields None."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError, ValueError) as e:
        logger.warning(f"Failed to parse sidecar JSON {filename or '<unnamed>'}: {e}")
        return None

    if not isinstance(data, Mapping):
        logger.warning(
            f"Sidecar {filename or '<unnamed>'} is not a JSON object "
            f"({type(data).__name__})"
        )
        return None

    return SidecarRecord(
        filename=filename,
        title=_text(data.get("title")),
        description=_text(data.get("description")),
        photo_taken_time=_timestamp(data.get("photoTakenTime")),
        creation_time=_timestamp(data.get("creationTime")),
        geo_data=_geo(data.get("geoData")),
        geo_data_exif=_geo(data.get("geoDataExif")),
    )


def build_sidecar_index(files: Iterable[SidecarFile]) -> SidecarIndex:
    """Map lower-cased image names to their parsed sidecars.

    Keys are bare file names, so same-named images in different folders
    collide: the later sidecar replaces the earlier one and a warning is
    logged. Callers needing per-folder pairing index each folder separately.
    Files that are not sidecars, or whose JSON does not parse, are skipped.
    """
    index: SidecarIndex = {}
    for entry in files:
        image_name = image_name_from_sidecar(entry.name)
        if image_name is None:
            continue
        record = parse_sidecar_content(entry.content, entry.name)
        if record is None:
            continue
        key = image_name.lower()
        if key in index:
            logger.warning(
                f"Sidecar {entry.name} replaces {index[key].filename} "
                f"for image name '{key}'"
            )
        index[key] = record
    logger.debug(f"Sidecar index: {len(index)} entries")
    return index


def sidecar_location(sidecar: Optional[SidecarRecord]) -> Optional[GeoCoordinates]:
    """Sidecar position, EXIF-derived data first; a zero coordinate means no fix."""
    if sidecar is None:
        return None
    for geo in (sidecar.geo_data_exif, sidecar.geo_data):
        if geo is not None and geo.latitude != 0 and geo.longitude != 0:
            return geo
    return None


def find_sidecar(
    index: Optional[SidecarIndex],
    image_name: str,
) -> Optional[SidecarRecord]:
    """Sidecar matched to an image name, if the index has one."""
    if not index or not image_name:
        return None
    return index.get(image_name.lower())
