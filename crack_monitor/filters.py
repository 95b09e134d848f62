"""
filters.py - Building Search and Severity Filter Pipeline

Two steps, always re-derived from the source list:
1. Text search: case-insensitive substring match on name or address
2. Severity filter: keep buildings whose worst crack falls in the active set

An empty search term and an empty filter set return the input unchanged.
"""

from typing import AbstractSet, Iterable, List, Optional, Sequence

from .metrics import SeverityLevel, building_severity
from .models import Building


def normalize_term(term: Optional[str]) -> str:
    """Strip and lower-case a search term (None -> '')."""
    return (term or "").strip().lower()


def matches_search(building: Building, term: Optional[str]) -> bool:
    """True if the term is empty or found in the building's name or address."""
    needle = normalize_term(term)
    if not needle:
        return True
    return any(
        field is not None and needle in field.lower()
        for field in (building.name, building.address)
    )


def filter_by_search(buildings: Iterable[Building], term: Optional[str]) -> List[Building]:
    return [b for b in buildings if matches_search(b, term)]


def filter_by_severity(
    buildings: Iterable[Building],
    active_filters: AbstractSet[SeverityLevel],
    **thresholds
) -> List[Building]:
    """
    Keep buildings whose severity is in active_filters.

    An empty active_filters set disables severity filtering.
    """
    if not active_filters:
        return list(buildings)
    return [b for b in buildings if building_severity(b, **thresholds) in active_filters]


def apply_filters(
    buildings: Sequence[Building],
    search_term: Optional[str] = "",
    active_filters: AbstractSet[SeverityLevel] = frozenset(),
    **thresholds
) -> List[Building]:
    """
    Run the full search & filter pipeline.

    Args:
        buildings: Source building list (not modified)
        search_term: Free-text search term
        active_filters: Selected severity levels
        **thresholds: Optional classify_severity() threshold overrides

    Returns:
        New list of matching buildings in source order
    """
    result = filter_by_search(buildings, search_term)
    return filter_by_severity(result, active_filters, **thresholds)


def toggle_filter(
    active_filters: AbstractSet[SeverityLevel],
    level: SeverityLevel
) -> frozenset:
    """Return a new filter set with level added, or removed if already active."""
    if level in active_filters:
        return frozenset(active_filters) - {level}
    return frozenset(active_filters) | {level}
