"""Timeline orchestrator: classify -> sidecars -> resolve -> group."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime
from typing import Iterable, Optional

from photo_timeline.bucketing import group_by_date, stack_photos
from photo_timeline.classifier import filter_photos
from photo_timeline.config import DEFAULT_CLUSTER_RADIUS_METERS, TimelineConfig
from photo_timeline.geo import cluster_markers
from photo_timeline.models import (
    GroupMode,
    MarkerCluster,
    PhotoGroup,
    PhotoRecord,
    PhotoStack,
    SidecarFile,
    TimelineResult,
)
from photo_timeline.resolver import Resolver
from photo_timeline.sidecar import build_sidecar_index, find_sidecar

logger = logging.getLogger(__name__)


class Timeline:
    """Turns one listing of records and sidecar files into date groups.

    Holds configuration only; every build works on its own index and
    resolver, so one instance may serve concurrent builds.
    """

    def __init__(self, config: Optional[TimelineConfig] = None) -> None:
        self.config = config or TimelineConfig()
        self.mode = GroupMode.parse(self.config.mode)

    def build(
        self,
        records: Iterable[PhotoRecord],
        sidecar_files: Iterable[SidecarFile] = (),
        now: Optional[datetime] = None,
    ) -> TimelineResult:
        result = TimelineResult()
        records = list(records)
        result.records_seen = len(records)

        # Phase 1: Keep photos only
        logger.info("Phase 1/4: Classifying records...")
        photos = filter_photos(records)
        result.photos = len(photos)

        if not photos:
            logger.info("No photos to group.")
            return result

        # Phase 2: Index sidecars by image name
        if self.config.use_sidecars:
            logger.info("Phase 2/4: Indexing sidecar files...")
            result.sidecar_index = build_sidecar_index(sidecar_files)
            result.sidecars_parsed = len(result.sidecar_index)
        else:
            logger.info("Phase 2/4: Sidecars disabled, skipping")

        # Phase 3: Resolve one capture time per photo
        logger.info("Phase 3/4: Resolving capture times...")
        resolver = Resolver(self.config.tz, now)
        result.resolver = resolver
        sources: Counter = Counter()
        for photo in photos:
            sidecar = find_sidecar(result.sidecar_index, photo.name)
            if sidecar is not None:
                result.sidecars_matched += 1
            sources[resolver.resolve(photo, sidecar).source] += 1
        result.date_sources = dict(sources)
        logger.info(
            "  "
            + ", ".join(f"{source.value}={count}" for source, count in sources.items())
        )

        # Phase 4: Group and label
        logger.info(f"Phase 4/4: Grouping by {self.mode.value}...")
        result.groups = group_by_date(
            photos,
            self.mode,
            sidecar_index=result.sidecar_index,
            tz=self.config.tz,
            now=now,
            labels=self.config.labels,
            today=self.config.today,
            resolver=resolver,
        )
        logger.info(
            f"  {result.photos} photos in {len(result.groups)} groups, "
            f"{result.sidecars_matched} with sidecar"
        )
        return result

    def stacks(
        self,
        result: TimelineResult,
        group: PhotoGroup,
        now: Optional[datetime] = None,
    ) -> list[PhotoStack]:
        """Burst stacks inside one group of a previous build.

        Capture times come from the build's resolver, so undated photos keep
        the "now" they were grouped under. Passing ``now`` re-resolves instead.
        """
        return stack_photos(
            group.photos,
            self.config.stack_gap_seconds,
            sidecar_index=result.sidecar_index,
            tz=self.config.tz,
            now=now,
            resolver=result.resolver if now is None else None,
        )

    def markers(
        self,
        result: TimelineResult,
        radius_meters: float = DEFAULT_CLUSTER_RADIUS_METERS,
    ) -> list[MarkerCluster]:
        """Map clusters over every grouped photo, newest first."""
        photos = [photo for group in result.groups for photo in group.photos]
        return cluster_markers(photos, radius_meters, result.sidecar_index)
