"""
ranking.py - Crack Statistics Aggregation and Top-N Rankings

Computes the dashboard summary over the full building list:
- Total crack count (non-null widths only)
- Top-N buildings by crack count, maximum width and average width

Buildings without any numeric width contribute 0 to the total and never
appear in a ranking. Ties keep the input order (Python's sort is stable).

Usage:
    from crack_monitor.ranking import compute_crack_stats

    stats = compute_crack_stats(buildings)
    for entry in stats.top_by_count:
        print(entry.name, entry.crack_count)
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .metrics import collect_widths
from .models import Building

DEFAULT_TOP_N = 3

RANKING_KEYS = ('crack_count', 'max_width', 'avg_width')


@dataclass(frozen=True)
class BuildingCrackStats:
    """Width statistics of one building (non-null widths only)."""
    id: Any
    name: Optional[str]
    crack_count: int
    max_width: float
    avg_width: float


@dataclass(frozen=True)
class CrackStats:
    """Global totals and rankings."""
    total_cracks: int
    top_by_count: Tuple[BuildingCrackStats, ...]
    top_by_max_width: Tuple[BuildingCrackStats, ...]
    top_by_avg_width: Tuple[BuildingCrackStats, ...]


def building_crack_stats(building: Building) -> Optional[BuildingCrackStats]:
    """
    Width statistics for one building.

    Returns:
        BuildingCrackStats, or None if the building has no numeric widths
    """
    widths = collect_widths(building)
    if not widths:
        return None
    return BuildingCrackStats(
        id=building.id,
        name=building.name,
        crack_count=len(widths),
        max_width=max(widths),
        avg_width=sum(widths) / len(widths)
    )


def rank_by(
    stats: Iterable[BuildingCrackStats],
    key: str,
    top_n: int = DEFAULT_TOP_N
) -> Tuple[BuildingCrackStats, ...]:
    """
    Sort descending by one metric and keep the first top_n entries.

    Args:
        stats: Per-building statistics
        key: One of RANKING_KEYS
        top_n: Maximum number of entries to return

    Returns:
        Tuple of at most top_n entries

    Raises:
        ValueError: If key is not a ranking metric
    """
    if key not in RANKING_KEYS:
        raise ValueError(f"Unknown ranking key: {key!r}")
    ordered = sorted(stats, key=lambda s: getattr(s, key), reverse=True)
    return tuple(ordered[:max(top_n, 0)])


def compute_crack_stats(buildings: Sequence[Building], top_n: int = DEFAULT_TOP_N) -> CrackStats:
    """
    Aggregate crack statistics over all buildings.

    Args:
        buildings: Full building list
        top_n: Ranking length (default: 3)

    Returns:
        CrackStats with the total and the three rankings
    """
    total_cracks = 0
    stats: List[BuildingCrackStats] = []

    for building in buildings:
        entry = building_crack_stats(building)
        if entry is None:
            continue
        total_cracks += entry.crack_count
        stats.append(entry)

    return CrackStats(
        total_cracks=total_cracks,
        top_by_count=rank_by(stats, 'crack_count', top_n),
        top_by_max_width=rank_by(stats, 'max_width', top_n),
        top_by_avg_width=rank_by(stats, 'avg_width', top_n)
    )
