"""
store.py - Dashboard State and Controller

The dashboard's UI state is one immutable DashboardState value. Every
transition returns a new state; derived views (filtered list, crack
statistics) are computed from the state on access and never cached.

DashboardStore owns the current state, applies transitions and notifies
subscribers after each one.

Usage:
    store = DashboardStore(top_n=3)
    store.subscribe(lambda state: print(state.status))
    store.load(client)
    store.set_search_term("tower")
    store.toggle_filter(SeverityLevel.SEVERE)
    visible = store.state.filtered_buildings
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple
import logging

from .exceptions import BuildingFetchError
from .filters import apply_filters, toggle_filter
from .metrics import SeverityLevel
from .models import Building
from .ranking import CrackStats, DEFAULT_TOP_N, compute_crack_stats

logger = logging.getLogger(__name__)


class LoadStatus(Enum):
    """Lifecycle of the single initial fetch."""
    LOADING = "LOADING"
    READY = "READY"
    ERROR = "ERROR"


@dataclass(frozen=True)
class DashboardState:
    """Immutable snapshot of the dashboard."""
    status: LoadStatus = LoadStatus.LOADING
    buildings: Tuple[Building, ...] = ()
    search_term: str = ""
    active_filters: FrozenSet[SeverityLevel] = frozenset()
    error: Optional[str] = None
    top_n: int = DEFAULT_TOP_N
    thresholds: Dict[str, float] = field(default_factory=dict, hash=False, compare=False)

    @property
    def is_ready(self) -> bool:
        return self.status is LoadStatus.READY

    @property
    def filtered_buildings(self) -> List[Building]:
        """Buildings matching the search term and severity filters (empty until READY)."""
        if not self.is_ready:
            return []
        return apply_filters(self.buildings, self.search_term, self.active_filters, **self.thresholds)

    @property
    def crack_stats(self) -> CrackStats:
        return compute_crack_stats(self.buildings, self.top_n)


# =============================================================================
# STATE TRANSITIONS (pure)
# =============================================================================

def load_succeeded(state: DashboardState, buildings: Tuple[Building, ...]) -> DashboardState:
    return replace(state, status=LoadStatus.READY, buildings=tuple(buildings), error=None)


def load_failed(state: DashboardState, message: str) -> DashboardState:
    return replace(state, status=LoadStatus.ERROR, buildings=(), error=message)


def with_search_term(state: DashboardState, term: str) -> DashboardState:
    return replace(state, search_term=term or "")


def with_filter_toggled(state: DashboardState, level: SeverityLevel) -> DashboardState:
    return replace(state, active_filters=toggle_filter(state.active_filters, level))


def with_filters(state: DashboardState, levels) -> DashboardState:
    return replace(state, active_filters=frozenset(levels))


class DashboardStore:
    """
    Single owner of the dashboard state.

    Subscribers are called with the new state after every transition.
    """

    def __init__(self, top_n: int = DEFAULT_TOP_N, thresholds: Optional[Dict[str, float]] = None):
        self._state = DashboardState(top_n=top_n, thresholds=dict(thresholds or {}))
        self._listeners: List[Callable[[DashboardState], None]] = []

    @property
    def state(self) -> DashboardState:
        return self._state

    def subscribe(self, listener: Callable[[DashboardState], None]) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _dispatch(self, new_state: DashboardState) -> DashboardState:
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    def load(self, client) -> DashboardState:
        """
        Perform the initial fetch with the given BuildingApiClient.

        A failure moves the store to ERROR; it is not retried.
        """
        if self._state.status is not LoadStatus.LOADING:
            logger.debug(f"Skipping fetch, store already {self._state.status.value}")
            return self._state

        try:
            buildings = client.fetch_buildings()
        except BuildingFetchError as e:
            logger.error(f"Initial building load failed: {e}")
            return self._dispatch(load_failed(self._state, str(e)))

        return self._dispatch(load_succeeded(self._state, buildings))

    def set_search_term(self, term: str) -> DashboardState:
        if term == self._state.search_term:
            return self._state
        return self._dispatch(with_search_term(self._state, term))

    def toggle_filter(self, level: SeverityLevel) -> DashboardState:
        return self._dispatch(with_filter_toggled(self._state, level))

    def set_filters(self, levels) -> DashboardState:
        levels = frozenset(levels)
        if levels == self._state.active_filters:
            return self._state
        return self._dispatch(with_filters(self._state, levels))
