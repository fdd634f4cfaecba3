"""Decide which listed resources are photos."""

from __future__ import annotations

import logging
from typing import Iterable

from photo_timeline.config import (
    EXCLUDED_MIME_FRAGMENTS,
    IMAGE_EXTENSIONS,
    REJECTED_NAME_FRAGMENTS,
)
from photo_timeline.models import PhotoRecord

logger = logging.getLogger(__name__)


def _extension(name: str) -> str:
    return name.rsplit(".", 1)[-1] if "." in name else ""


def is_image(record: PhotoRecord) -> bool:
    """True for photographic images.

    Folders and names containing ``.json``, ``.xml`` or ``.txt`` are never
    images. A MIME type, when present, decides alone: ``image/*`` except SVG
    and icons. Without one the extension must be on the allow-list.
    """
    if record.is_folder:
        return False

    name = (record.name or "").lower()
    if any(fragment in name for fragment in REJECTED_NAME_FRAGMENTS):
        return False

    if record.mime_type:
        mime = record.mime_type.lower()
        if not mime.startswith("image/"):
            return False
        return not any(fragment in mime for fragment in EXCLUDED_MIME_FRAGMENTS)

    return _extension(name) in IMAGE_EXTENSIONS


def filter_photos(records: Iterable[PhotoRecord]) -> list[PhotoRecord]:
    """Keep only photo records, preserving input order."""
    records = list(records)
    photos = [r for r in records if is_image(r)]
    logger.info(f"filter_photos: {len(records)} files -> {len(photos)} photos")
    return photos
