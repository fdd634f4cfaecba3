"""Normalize photo metadata into capture times and date-ordered groups."""

from photo_timeline.bucketing import (
    group_by_date,
    group_key,
    photo_counts_by_date,
    stack_photos,
)
from photo_timeline.classifier import filter_photos, is_image
from photo_timeline.dates import parse_date
from photo_timeline.geo import cluster_markers, distance_meters, photo_location
from photo_timeline.isoweek import iso_week, iso_week_start
from photo_timeline.labels import LabelStrings, format_group_key
from photo_timeline.logging_setup import setup_logging
from photo_timeline.models import (
    DateSource,
    GeoCoordinates,
    GroupMode,
    PhotoGroup,
    PhotoRecord,
    SidecarFile,
    SidecarRecord,
)
from photo_timeline.pipeline import Timeline
from photo_timeline.resolver import exif_date, resolve_capture, resolve_capture_time
from photo_timeline.resources import photo_from_resource
from photo_timeline.sidecar import (
    build_sidecar_index,
    image_name_from_sidecar,
    is_sidecar,
    parse_sidecar_content,
)

__version__ = "0.1.0"
