"""Tests for date bucketing."""

from datetime import date, datetime, timedelta, timezone

import pytest
from dateutil.tz import tzoffset

from photo_timeline.bucketing import (
    group_by_date,
    group_key,
    key_for_instant,
    photo_counts_by_date,
    stack_photos,
)
from photo_timeline.models import (
    GroupMode,
    LegacyDateFields,
    SidecarRecord,
    SidecarTimestamp,
)

UTC = timezone.utc


def _at(*args) -> datetime:
    return datetime(*args, tzinfo=UTC)


class TestGroupKey:
    @pytest.mark.parametrize("mode,key", [
        ("year", "2026"),
        ("month", "2026-01"),
        ("week", "2026-W02"),
        ("day", "2026-01-10"),
        (GroupMode.DAY, "2026-01-10"),
        ("MONTH", "2026-01"),
    ])
    def test_formats(self, make_photo, mode, key):
        photo = make_photo(modified=_at(2026, 1, 10, 15, 0))
        assert group_key(photo, mode, tz=UTC) == key

    def test_zero_padding(self):
        assert key_for_instant(_at(987, 3, 5), "day", UTC) == "0987-03-05"

    def test_week_uses_iso_week_year(self):
        assert key_for_instant(_at(2024, 12, 30), "week", UTC) == "2025-W01"
        assert key_for_instant(_at(2021, 1, 3), "week", UTC) == "2020-W53"

    def test_display_zone_applies(self):
        late = _at(2026, 1, 10, 23, 30)
        plus_two = timezone(timedelta(hours=2))
        assert key_for_instant(late, "day", UTC) == "2026-01-10"
        assert key_for_instant(late, "day", plus_two) == "2026-01-11"

    def test_unusable_offset_keeps_wall_fields(self):
        instant = datetime(2021, 1, 15, 14, 30, tzinfo=tzoffset(None, 99 * 3600))
        assert key_for_instant(instant, "day", UTC) == "2021-01-15"

    def test_sidecar_used(self, make_photo):
        photo = make_photo(modified=_at(2026, 1, 10))
        sidecar = SidecarRecord(photo_taken_time=SidecarTimestamp("1609459200"))
        assert group_key(photo, "day", sidecar, tz=UTC) == "2021-01-01"

    def test_unknown_mode(self, make_photo):
        with pytest.raises(ValueError, match="Unknown group mode"):
            group_key(make_photo(), "decade")


class TestGroupByDate:
    @pytest.mark.parametrize("mode", list(GroupMode))
    def test_empty(self, mode):
        assert group_by_date([], mode) == []

    def test_groups_sorted_newest_first(self, make_photo):
        photos = [
            make_photo("a.jpg", modified=_at(2026, 1, 8)),
            make_photo("b.jpg", modified=_at(2026, 1, 10)),
            make_photo("c.jpg", modified=_at(2026, 1, 9)),
        ]

        groups = group_by_date(photos, "day", tz=UTC)

        assert [g.key for g in groups] == ["2026-01-10", "2026-01-09", "2026-01-08"]
        assert [len(g.photos) for g in groups] == [1, 1, 1]

    def test_later_time_first_within_group(self, make_photo):
        morning = make_photo("morning.jpg", modified=_at(2026, 1, 10, 8, 0))
        evening = make_photo("evening.jpg", modified=_at(2026, 1, 10, 20, 0))

        groups = group_by_date([morning, evening], "day", tz=UTC)

        assert len(groups) == 1
        assert groups[0].photos == [evening, morning]

    def test_ties_keep_input_order(self, make_photo):
        same = _at(2026, 1, 10, 12, 0)
        photos = [make_photo(f"{n}.jpg", modified=same) for n in "xyz"]

        groups = group_by_date(photos, "day", tz=UTC)

        assert [p.name for p in groups[0].photos] == ["x.jpg", "y.jpg", "z.jpg"]

    def test_every_photo_in_exactly_one_group(self, make_photo):
        photos = [
            make_photo(modified=_at(2025, 12, 31) + timedelta(hours=7 * i))
            for i in range(40)
        ]

        for mode in GroupMode:
            groups = group_by_date(photos, mode, tz=UTC)
            grouped = [p.id for g in groups for p in g.photos]
            assert sorted(grouped) == sorted(p.id for p in photos)

    def test_month_keys_across_year_end(self, make_photo):
        photos = [
            make_photo(modified=_at(2025, 12, 31)),
            make_photo(modified=_at(2026, 1, 1)),
            make_photo(modified=_at(2025, 2, 1)),
        ]
        keys = [g.key for g in group_by_date(photos, "month", tz=UTC)]
        assert keys == ["2026-01", "2025-12", "2025-02"]

    def test_week_keys_across_year_end(self, make_photo):
        photos = [
            make_photo(modified=_at(2020, 12, 31)),  # 2020-W53
            make_photo(modified=_at(2021, 1, 4)),  # 2021-W01
            make_photo(modified=_at(2021, 1, 2)),  # 2020-W53
        ]
        groups = group_by_date(photos, "week", tz=UTC)
        assert [g.key for g in groups] == ["2021-W01", "2020-W53"]
        assert len(groups[1].photos) == 2

    def test_capture_metadata_beats_mtime(self, make_photo):
        photo = make_photo(taken="2021:06:01 10:00:00", modified=_at(2026, 1, 10))
        groups = group_by_date([photo], "day", tz=UTC)
        assert groups[0].key == "2021-06-01"

    def test_out_of_range_offset_falls_back_to_mtime(self, make_photo):
        photo = make_photo(taken="2021-01-15T14:30:00+99:00", modified=_at(2026, 1, 10))
        groups = group_by_date([photo], "day", tz=UTC)
        assert [g.key for g in groups] == ["2026-01-10"]

    def test_yearless_legacy_value_falls_back_to_mtime(self, make_photo):
        photo = make_photo(
            legacy=LegacyDateFields(exif_date="Monday"),
            modified=_at(2026, 1, 10),
        )
        groups = group_by_date([photo], "day", tz=UTC)
        assert [g.key for g in groups] == ["2026-01-10"]

    def test_sidecar_index_lookup(self, make_photo):
        photo = make_photo("IMG_0001.JPG", modified=_at(2026, 1, 10))
        index = {"img_0001.jpg": SidecarRecord(
            photo_taken_time=SidecarTimestamp("1609459200"),
        )}

        groups = group_by_date([photo], "day", sidecar_index=index, tz=UTC)

        assert groups[0].key == "2021-01-01"

    def test_labels(self, make_photo):
        photos = [
            make_photo(modified=_at(2026, 1, 10)),
            make_photo(modified=_at(2026, 1, 9)),
            make_photo(modified=_at(2026, 1, 3)),
        ]

        groups = group_by_date(photos, "day", tz=UTC, today=date(2026, 1, 10))

        assert [g.label for g in groups] == [
            "Today", "Yesterday", "Saturday, January 3, 2026",
        ]

    def test_today_derived_from_now(self, make_photo, now):
        photo = make_photo(modified=now - timedelta(hours=1))
        groups = group_by_date([photo], "day", tz=UTC, now=now)
        assert groups[0].label == "Today"

    def test_undated_photos_land_on_now(self, make_photo, now):
        groups = group_by_date([make_photo(), make_photo()], "day", tz=UTC, now=now)
        assert [g.key for g in groups] == ["2026-10-19"]
        assert len(groups[0].photos) == 2


class TestPhotoCountsByDate:
    def test_counts(self, make_photo):
        photos = [
            make_photo(modified=_at(2026, 1, 10, 9)),
            make_photo(modified=_at(2026, 1, 10, 18)),
            make_photo(modified=_at(2026, 2, 1)),
        ]
        assert photo_counts_by_date(photos, tz=UTC) == {"2026-01-10": 2, "2026-02-01": 1}
        assert photo_counts_by_date(photos, "month", tz=UTC) == {"2026-01": 2, "2026-02": 1}

    def test_empty(self):
        assert photo_counts_by_date([]) == {}


class TestStackPhotos:
    def test_burst_is_stacked(self, make_photo):
        photos = [
            make_photo(modified=_at(2026, 1, 10, 12, 0, 0)),
            make_photo(modified=_at(2026, 1, 10, 11, 59, 30)),
            make_photo(modified=_at(2026, 1, 10, 11, 59, 0)),
            make_photo(modified=_at(2026, 1, 10, 11, 0, 0)),
        ]

        stacks = stack_photos(photos, gap_seconds=60, tz=UTC)

        assert [len(s.photos) for s in stacks] == [3, 1]
        assert stacks[0].id == photos[0].id
        assert stacks[0].timestamp == _at(2026, 1, 10, 12, 0, 0)
        assert stacks[1].photos == [photos[3]]

    def test_zero_gap_only_joins_identical_times(self, make_photo):
        same = _at(2026, 1, 10, 12, 0)
        photos = [
            make_photo(modified=same),
            make_photo(modified=same),
            make_photo(modified=same - timedelta(seconds=1)),
        ]
        assert [len(s.photos) for s in stack_photos(photos, 0, tz=UTC)] == [2, 1]

    def test_empty(self):
        assert stack_photos([]) == []

    def test_negative_gap(self):
        with pytest.raises(ValueError):
            stack_photos([], gap_seconds=-1)
