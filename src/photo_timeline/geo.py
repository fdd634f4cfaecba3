"""Great-circle distance and map-marker clustering."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from photo_timeline.config import DEFAULT_CLUSTER_RADIUS_METERS, EARTH_RADIUS_METERS
from photo_timeline.models import (
    GeoCoordinates,
    MarkerCluster,
    PhotoRecord,
    SidecarRecord,
)
from photo_timeline.sidecar import SidecarIndex, find_sidecar, sidecar_location

logger = logging.getLogger(__name__)


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in meters on a spherical Earth (~0.5% error)."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
        * math.sin(dlon / 2) ** 2
    )
    a = min(1.0, a)  # rounding near antipodes
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def photo_location(
    photo: PhotoRecord,
    sidecar: Optional[SidecarRecord] = None,
) -> Optional[GeoCoordinates]:
    """Where a photo was taken: its own coordinates, else its sidecar's."""
    if photo.location is not None:
        return photo.location
    if photo.photo is not None and photo.photo.location is not None:
        return photo.photo.location
    return sidecar_location(sidecar)


def cluster_markers(
    photos: Iterable[PhotoRecord],
    radius_meters: float = DEFAULT_CLUSTER_RADIUS_METERS,
    sidecar_index: Optional[SidecarIndex] = None,
) -> list[MarkerCluster]:
    """Greedy clustering of located photos for map display.

    Each photo joins the first cluster whose anchor (first member) lies
    within ``radius_meters``, otherwise it anchors a new cluster. Input order
    decides anchors and membership order. Photos without a location are
    left out.
    """
    if radius_meters < 0:
        raise ValueError(f"radius_meters must be >= 0, got {radius_meters}")

    clusters: list[MarkerCluster] = []
    skipped = 0
    for photo in photos:
        location = photo_location(photo, find_sidecar(sidecar_index, photo.name))
        if location is None:
            skipped += 1
            continue
        for cluster in clusters:
            distance = distance_meters(
                cluster.latitude, cluster.longitude,
                location.latitude, location.longitude,
            )
            if distance <= radius_meters:
                cluster.photos.append(photo)
                break
        else:
            clusters.append(MarkerCluster(
                latitude=location.latitude,
                longitude=location.longitude,
                photos=[photo],
            ))

    logger.debug(f"cluster_markers: {len(clusters)} clusters, {skipped} photos without GPS")
    return clusters
