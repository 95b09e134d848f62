"""
crack_monitor - Building Crack Monitoring Dashboard

Core components:
- models.py: Building / Waypoint / Crack records parsed from the API
- metrics.py: Per-building crack metrics and severity classification
- ranking.py: Crack totals and top-N rankings
- filters.py: Search and severity filter pipeline
- store.py: Immutable dashboard state and its controller
- api_client.py: Building list client
- elevation.py: Elevation lookup proxy (Flask)
- app.py: Streamlit dashboard
"""

from .exceptions import (
    CrackMonitorError,
    BuildingFetchError,
    ElevationLookupError,
    ConfigurationError
)

from .models import (
    Building,
    Waypoint,
    Crack,
    parse_buildings
)

from .metrics import (
    SeverityLevel,
    BuildingMetrics,
    extract_cracks,
    collect_widths,
    extract_building_metrics,
    classify_severity,
    building_severity,
    get_severity_label
)

from .ranking import (
    BuildingCrackStats,
    CrackStats,
    compute_crack_stats
)

from .filters import (
    apply_filters,
    toggle_filter
)

from .store import (
    DashboardState,
    DashboardStore,
    LoadStatus
)

from .api_client import BuildingApiClient

__all__ = [
    # Exceptions
    'CrackMonitorError',
    'BuildingFetchError',
    'ElevationLookupError',
    'ConfigurationError',
    # Models
    'Building',
    'Waypoint',
    'Crack',
    'parse_buildings',
    # Metrics
    'SeverityLevel',
    'BuildingMetrics',
    'extract_cracks',
    'collect_widths',
    'extract_building_metrics',
    'classify_severity',
    'building_severity',
    'get_severity_label',
    # Ranking
    'BuildingCrackStats',
    'CrackStats',
    'compute_crack_stats',
    # Filters
    'apply_filters',
    'toggle_filter',
    # Store
    'DashboardState',
    'DashboardStore',
    'LoadStatus',
    # API client
    'BuildingApiClient'
]
