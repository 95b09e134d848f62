import pytest

from crack_monitor.models import parse_buildings


@pytest.fixture
def raw_buildings():
    return [
        {
            "id": 1,
            "name": "Hanbit Tower",
            "address": "12 Sejong-daero, Seoul",
            "thumbnail": "https://example.com/hanbit.jpg",
            "waypoints": [
                {"label": "1F-East", "cracks": [
                    {"widthMm": 0.1, "crackType": "hairline", "timestamp": "2025-03-01T09:00:00"},
                    {"widthMm": 0.35, "crackType": "structural", "timestamp": "2025-04-02T10:30:00"},
                ]},
            ],
        },
        {
            "id": 2,
            "name": "Riverside Apartments",
            "address": "3 Hangang-ro, Seoul",
            "waypoints": [],
        },
        {
            "id": 3,
            "name": "Namsan Library",
            "address": None,
            "waypoints": [
                {"label": "Roof", "cracks": [
                    {"widthMm": 0.25, "crackType": "shrinkage", "timestamp": "2025-05-10T08:00:00Z"},
                    {"widthMm": None, "crackType": "shrinkage", "timestamp": "2025-05-11T08:00:00Z"},
                ]},
                {"label": "Stairwell"},
            ],
        },
    ]


@pytest.fixture
def buildings(raw_buildings):
    return parse_buildings(raw_buildings)
