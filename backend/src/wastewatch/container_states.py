"""
Container state catalog.

Fixed vocabulary of problems that can be reported on a waste container,
in display/priority order, with the color each one is rendered in.
"""
from enum import Enum
from typing import Any, FrozenSet, Iterable, List, Optional

from .errors import UnknownStateError
from .models import SignalStatus, parse_enum


class ContainerState(str, Enum):
    """Reported container problems. Declaration order is catalog order."""
    OVERFLOWING = 'overflowing'
    BULKY_WASTE = 'bulkyWaste'
    DAMAGED = 'damaged'
    FALLEN = 'fallen'
    BURNT = 'burnt'
    MISSING_LID = 'missingLid'
    DIRTY = 'dirty'


STATE_COLORS = {
    ContainerState.OVERFLOWING: '#DC2626',
    ContainerState.BULKY_WASTE: '#7C3AED',
    ContainerState.DAMAGED: '#EA580C',
    ContainerState.FALLEN: '#D97706',
    ContainerState.BURNT: '#1F2937',
    ContainerState.MISSING_LID: '#0891B2',
    ContainerState.DIRTY: '#65A30D',
}

# Catalog index; lower = rendered first and wins ties
STATE_PRIORITY = {state: index for index, state in enumerate(ContainerState)}

SIGNAL_STATUS_COLORS = {
    SignalStatus.PENDING: '#F59E0B',
    SignalStatus.IN_PROGRESS: '#3B82F6',
    SignalStatus.RESOLVED: '#10B981',
    SignalStatus.REJECTED: '#EF4444',
}

DEFAULT_MARKER_COLOR = '#6B7280'


def all_states() -> List[ContainerState]:
    """All container states in catalog order."""
    return list(ContainerState)


def parse_state(value: Any) -> ContainerState:
    """Parse a single tag. Raises UnknownStateError for anything outside the catalog."""
    return parse_enum(ContainerState, value)


def parse_states(values: Optional[Iterable[Any]]) -> FrozenSet[ContainerState]:
    """
    Parse a collection of tags into a state set.

    Duplicates collapse; ``None`` means no states reported. Anything other
    than a list, tuple or set (a bare string or a mapping) is rejected.
    """
    if values is None:
        return frozenset()
    if not isinstance(values, (list, tuple, set, frozenset)):
        raise UnknownStateError(values)
    return frozenset(parse_state(value) for value in values)


def sort_states(states: Iterable[ContainerState]) -> List[ContainerState]:
    """Order a state collection by catalog order, dropping duplicates."""
    return sorted(set(states), key=STATE_PRIORITY.__getitem__)


def states_to_list(states: Iterable[ContainerState]) -> List[str]:
    """Serialize a state set as an ordered list of tags with no duplicates."""
    return [state.value for state in sort_states(states)]


def color_of(state: Any) -> str:
    """Hex color for a container state."""
    return STATE_COLORS[parse_state(state)]


def primary_state(states: Iterable[Any]) -> Optional[ContainerState]:
    """Highest-priority state present, or None for an empty set."""
    ordered = sort_states(parse_states(states))
    return ordered[0] if ordered else None


def marker_color(states: Iterable[Any], default: str = DEFAULT_MARKER_COLOR) -> str:
    """Map marker color for a container showing the given states."""
    state = primary_state(states)
    if state is None:
        return default
    return STATE_COLORS[state]


def signal_status_color(status: Any) -> str:
    """Badge color for a signal status."""
    return SIGNAL_STATUS_COLORS[parse_enum(SignalStatus, status)]
