"""Shared test fixtures."""

import itertools
from datetime import datetime, timezone

import pytest

from photo_timeline.models import (
    GraphPhoto,
    PhotoRecord,
    SidecarRecord,
    SidecarTimestamp,
)


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_photo():
    """Factory fixture for PhotoRecord with sequential ids and names."""
    counter = itertools.count(1)

    def _make(name=None, taken=None, **overrides):
        n = next(counter)
        defaults = dict(id=str(n), name=name or f"IMG_{n:04d}.jpg")
        if taken is not None:
            defaults["photo"] = GraphPhoto(taken_date_time=taken)
        defaults.update(overrides)
        return PhotoRecord(**defaults)

    return _make


@pytest.fixture
def make_sidecar():
    """Factory fixture for SidecarRecord from epoch-second timestamps."""

    def _make(taken=None, created=None, **overrides):
        defaults = dict(
            filename="IMG_0001.jpg.json",
            photo_taken_time=SidecarTimestamp(str(taken)) if taken is not None else None,
            creation_time=SidecarTimestamp(str(created)) if created is not None else None,
        )
        defaults.update(overrides)
        return SidecarRecord(**defaults)

    return _make
