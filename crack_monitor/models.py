"""
models.py - Building / Waypoint / Crack records

Immutable records for the inspection data returned by the building API.
Parsing is tolerant: missing or malformed nested data becomes an empty
sequence or None, it never raises.

Wire format (JSON):
    [{"id": 1, "name": "...", "address": "...", "thumbnail": "...",
      "waypoints": [{"label": "A-1",
                     "cracks": [{"widthMm": 0.25, "crackType": "...",
                                 "timestamp": "2025-05-01T10:00:00",
                                 "imageUrl": "..."}]}]}]
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Tuple
import logging
import math

import pandas as pd

logger = logging.getLogger(__name__)


def parse_width(value: Any) -> Optional[float]:
    """Convert a raw widthMm value to float, or None if it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        width = float(value)
    elif isinstance(value, str):
        try:
            width = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return width if math.isfinite(width) else None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp string.

    Accepts nanosecond fractions and colon-less offsets ('+0900').
    Naive timestamps are taken as UTC so that every parsed value is
    comparable with every other one.

    Returns:
        Timezone-aware pandas Timestamp (a datetime subclass), or None if
        the value cannot be parsed
    """
    if not isinstance(value, str) or not value.strip():
        return None
    parsed = pd.to_datetime(value.strip(), utc=True, errors='coerce')
    if pd.isna(parsed):
        return None
    return parsed


def _as_list(value: Any, what: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning(f"Expected a list for '{what}', got {type(value).__name__}; treating as empty")
        return []
    return value


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class Crack:
    """Single observed crack."""
    width_mm: Optional[float] = None
    crack_type: Optional[str] = None
    timestamp: Optional[str] = None
    waypoint_label: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def checked_at(self) -> Optional[datetime]:
        """Parsed timestamp (None if absent or unparseable)."""
        return parse_timestamp(self.timestamp)

    @classmethod
    def from_dict(cls, data: dict, waypoint_label: Optional[str] = None) -> "Crack":
        return cls(
            width_mm=parse_width(data.get('widthMm')),
            crack_type=_optional_str(data.get('crackType')),
            timestamp=_optional_str(data.get('timestamp')),
            waypoint_label=waypoint_label,
            image_url=_optional_str(data.get('imageUrl'))
        )


@dataclass(frozen=True)
class Waypoint:
    """Labelled inspection location within a building."""
    label: Optional[str] = None
    cracks: Tuple[Crack, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "Waypoint":
        label = _optional_str(data.get('label'))
        cracks = []
        for item in _as_list(data.get('cracks'), 'cracks'):
            if not isinstance(item, dict):
                logger.warning(f"Skipping malformed crack record in waypoint {label!r}")
                continue
            cracks.append(Crack.from_dict(item, waypoint_label=label))
        return cls(label=label, cracks=tuple(cracks))


@dataclass(frozen=True)
class Building:
    """Structure under inspection, composed of waypoints."""
    id: Any
    name: Optional[str] = None
    address: Optional[str] = None
    thumbnail: Optional[str] = None
    waypoints: Tuple[Waypoint, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "Building":
        waypoints = []
        for item in _as_list(data.get('waypoints'), 'waypoints'):
            if not isinstance(item, dict):
                logger.warning(f"Skipping malformed waypoint record in building {data.get('id')!r}")
                continue
            waypoints.append(Waypoint.from_dict(item))
        return cls(
            id=data.get('id'),
            name=_optional_str(data.get('name')),
            address=_optional_str(data.get('address')),
            thumbnail=_optional_str(data.get('thumbnail')),
            waypoints=tuple(waypoints)
        )


def parse_buildings(payload: Any) -> Tuple[Building, ...]:
    """
    Parse the /buildings response body.

    Args:
        payload: Decoded JSON; must be a list

    Returns:
        Tuple of Building records in response order

    Raises:
        ValueError: If the payload is not a JSON array
    """
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array of buildings, got {type(payload).__name__}")

    buildings = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            logger.warning(f"Skipping malformed building record at index {index}")
            continue
        buildings.append(Building.from_dict(item))
    return tuple(buildings)
