from datetime import datetime, timezone

import pytest

from crack_monitor.models import Building, parse_buildings, parse_timestamp, parse_width


def test_parse_buildings_keeps_order_and_fields(buildings):
    assert [b.id for b in buildings] == [1, 2, 3]
    hanbit = buildings[0]
    assert hanbit.thumbnail == "https://example.com/hanbit.jpg"
    assert hanbit.waypoints[0].label == "1F-East"
    assert hanbit.waypoints[0].cracks[1].width_mm == 0.35
    assert hanbit.waypoints[0].cracks[1].waypoint_label == "1F-East"


def test_missing_nested_collections_are_empty():
    building = Building.from_dict({"id": 9, "name": "Empty"})
    assert building.waypoints == ()

    building = Building.from_dict({"id": 9, "waypoints": [{"label": "A"}, {"label": "B", "cracks": None}]})
    assert [w.cracks for w in building.waypoints] == [(), ()]


def test_malformed_entries_are_skipped():
    building = Building.from_dict({
        "id": 4,
        "waypoints": ["bogus", {"label": "A", "cracks": [42, {"widthMm": 0.2}]}],
    })
    assert len(building.waypoints) == 1
    assert len(building.waypoints[0].cracks) == 1

    assert Building.from_dict({"id": 5, "waypoints": "nope"}).waypoints == ()


def test_parse_buildings_rejects_non_array():
    with pytest.raises(ValueError):
        parse_buildings({"buildings": []})


@pytest.mark.parametrize("raw, expected", [
    (0.3, 0.3),
    (1, 1.0),
    ("0.25", 0.25),
    (None, None),
    (True, None),
    ("wide", None),
    (float("nan"), None),
    ([0.1], None),
])
def test_parse_width(raw, expected):
    assert parse_width(raw) == expected


def test_parse_timestamp_variants():
    assert parse_timestamp("2025-05-10T08:00:00Z") == datetime(2025, 5, 10, 8, tzinfo=timezone.utc)
    assert parse_timestamp("2025-05-10T08:00:00") == datetime(2025, 5, 10, 8, tzinfo=timezone.utc)
    assert parse_timestamp("not a date") is None
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None


def test_parse_timestamp_backend_formats():
    nanos = parse_timestamp("2025-05-01T10:00:00.123456789")
    assert nanos is not None
    assert nanos.year == 2025 and nanos.microsecond == 123456
    assert nanos.nanosecond == 789

    assert parse_timestamp("2025-05-01T19:00:00+0900") == datetime(2025, 5, 1, 10, tzinfo=timezone.utc)


def test_buildings_are_immutable(buildings):
    with pytest.raises(AttributeError):
        buildings[0].name = "Renamed"
