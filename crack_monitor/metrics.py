"""
metrics.py - Crack Metrics and Severity Classification

This module contains the per-building derivations used by the dashboard:
1. Crack extraction (flattening building -> waypoint -> crack)
2. Card metrics (count, max/avg width, last checked, crack types)
3. Severity level classification from the maximum crack width

Severity thresholds (millimetres, exact inequalities on the raw value):
------------------------------------------------------------------------
    width >= 0.3        -> SEVERE
    0.2 <= width < 0.3  -> CAUTION
    width < 0.2 / None  -> OBSERVE

Null widths:
------------
The card view counts a missing width as 0 for max/average, while the
ranking and severity-filter views exclude missing widths entirely
(see collect_widths()). Both behaviours are intentional.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Iterable, List, Optional, Tuple
import logging

from .models import Building, Crack

logger = logging.getLogger(__name__)

SEVERE_THRESHOLD_MM = 0.3
CAUTION_THRESHOLD_MM = 0.2


class SeverityLevel(Enum):
    """Severity classification for a building's worst crack."""
    OBSERVE = "observe"
    CAUTION = "caution"
    SEVERE = "severe"

    @property
    def rank(self) -> int:
        """Ordering key: higher is more severe."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    SeverityLevel.OBSERVE: 0,
    SeverityLevel.CAUTION: 1,
    SeverityLevel.SEVERE: 2,
}

# Display order of the filter buttons
SEVERITY_FILTER_ORDER = (SeverityLevel.SEVERE, SeverityLevel.CAUTION, SeverityLevel.OBSERVE)


@dataclass(frozen=True)
class BuildingMetrics:
    """Card-view metrics for one building."""
    crack_count: int
    max_width: float
    avg_width: float
    last_checked: Optional[str]
    crack_types: Tuple[str, ...]

    @property
    def severity(self) -> SeverityLevel:
        return classify_severity(self.max_width if self.crack_count else None)


def extract_cracks(building: Building) -> List[Crack]:
    """
    Flatten all cracks of a building in waypoint order.

    Each Crack already carries its waypoint label.

    Args:
        building: Building record (waypoints/cracks may be empty)

    Returns:
        List of Crack records
    """
    return [crack for waypoint in building.waypoints for crack in waypoint.cracks]


def collect_widths(building: Building) -> List[float]:
    """Non-null crack widths of a building, in waypoint order."""
    return [c.width_mm for c in extract_cracks(building) if c.width_mm is not None]


def max_width(widths: Iterable[float]) -> Optional[float]:
    """Maximum of the widths, or None for an empty sequence."""
    widths = list(widths)
    return max(widths) if widths else None


def round_half_up(value: float, places: int = 2) -> float:
    """Round the exact binary value half away from zero (display rounding)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def find_last_checked(cracks: Iterable[Crack]) -> Optional[str]:
    """
    Timestamp of the most recently checked crack.

    Later cracks win ties. Cracks whose timestamp cannot be parsed only
    win when no crack has a parseable timestamp.

    Returns:
        The raw timestamp string, or None if there are no cracks
    """
    latest: Optional[Crack] = None
    latest_at: Optional[datetime] = None
    for crack in cracks:
        checked_at = crack.checked_at
        if latest is None:
            latest, latest_at = crack, checked_at
            continue
        if checked_at is None:
            if latest_at is None:
                latest = crack
            continue
        if latest_at is None or checked_at >= latest_at:
            latest, latest_at = crack, checked_at
    return latest.timestamp if latest is not None else None


def extract_building_metrics(building: Building) -> BuildingMetrics:
    """
    Compute the card-view metrics of a building.

    Missing widths count as 0 here. The average is rounded half-up to
    2 decimals.

    Args:
        building: Building record

    Returns:
        BuildingMetrics (all zero / None for a building without cracks)
    """
    cracks = extract_cracks(building)
    if not cracks:
        return BuildingMetrics(
            crack_count=0,
            max_width=0.0,
            avg_width=0.0,
            last_checked=None,
            crack_types=()
        )

    widths = [c.width_mm or 0.0 for c in cracks]
    crack_types = tuple(dict.fromkeys(c.crack_type for c in cracks if c.crack_type))

    return BuildingMetrics(
        crack_count=len(cracks),
        max_width=max(widths),
        avg_width=round_half_up(sum(widths) / len(cracks)),
        last_checked=find_last_checked(cracks),
        crack_types=crack_types
    )


def classify_severity(
    max_width_mm: Optional[float],
    severe_threshold: float = SEVERE_THRESHOLD_MM,
    caution_threshold: float = CAUTION_THRESHOLD_MM
) -> SeverityLevel:
    """
    Classify a maximum crack width into a severity level.

    Args:
        max_width_mm: Maximum crack width in millimetres, or None
        severe_threshold: Lower bound of SEVERE (default: 0.3)
        caution_threshold: Lower bound of CAUTION (default: 0.2)

    Returns:
        SeverityLevel enum value (OBSERVE, CAUTION, or SEVERE)
    """
    if max_width_mm is None:
        return SeverityLevel.OBSERVE
    if max_width_mm >= severe_threshold:
        return SeverityLevel.SEVERE
    if max_width_mm >= caution_threshold:
        return SeverityLevel.CAUTION
    return SeverityLevel.OBSERVE


def building_severity(building: Building, **thresholds) -> SeverityLevel:
    """Severity of a building from its non-null widths (no widths -> OBSERVE)."""
    return classify_severity(max_width(collect_widths(building)), **thresholds)


def get_severity_label(level: SeverityLevel) -> str:
    """
    Get the Korean display label for a severity level.

    Returns:
        '심각', '주의', or '관찰'
    """
    korean_labels = {
        SeverityLevel.SEVERE: "심각",
        SeverityLevel.CAUTION: "주의",
        SeverityLevel.OBSERVE: "관찰"
    }
    return korean_labels.get(level, "알 수 없음")


def get_severity_color(level: SeverityLevel) -> str:
    """Hex display colour for a severity level."""
    color_map = {
        SeverityLevel.SEVERE: "#ff4444",
        SeverityLevel.CAUTION: "#ffaa00",
        SeverityLevel.OBSERVE: "#44cc66",
    }
    return color_map.get(level, "#ffffff")


def thresholds_from_config(config: dict) -> dict:
    """
    Keyword arguments for classify_severity() from the 'severity' config section.

    Falls back to the default thresholds unless 0 <= caution < severe.
    """
    severity = config.get('severity', {})
    severe = float(severity.get('severe_threshold_mm', SEVERE_THRESHOLD_MM))
    caution = float(severity.get('caution_threshold_mm', CAUTION_THRESHOLD_MM))
    if not 0.0 <= caution < severe:
        logger.warning(
            f"Invalid severity thresholds (caution={caution}, severe={severe}); "
            f"using defaults {CAUTION_THRESHOLD_MM}/{SEVERE_THRESHOLD_MM}"
        )
        severe, caution = SEVERE_THRESHOLD_MM, CAUTION_THRESHOLD_MM
    return {
        'severe_threshold': severe,
        'caution_threshold': caution,
    }
