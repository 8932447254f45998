"""
Assignment progress aggregation.

An activity counts as done on a container once the container's live state
no longer reports it. A container is complete when none of the assignment's
activities are still reported on it. Progress is derived on demand from the
assignment and a snapshot of current container states; nothing is cached.
"""
import collections.abc
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .assignments import Assignment
from .container_states import ContainerState, parse_states, sort_states, states_to_list

StateSnapshot = Union[
    Mapping[str, Optional[Iterable[Any]]],
    Callable[[str], Optional[Iterable[Any]]],
]


@dataclass(frozen=True)
class ContainerProgress:
    """Progress of one container within an assignment."""
    container_id: str
    is_complete: bool
    completed_activities: Tuple[ContainerState, ...]
    pending_activities: Tuple[ContainerState, ...]
    public_number: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'containerId': self.container_id,
            'publicNumber': self.public_number,
            'isComplete': self.is_complete,
            'completedActivities': states_to_list(self.completed_activities),
            'pendingActivities': states_to_list(self.pending_activities),
        }


@dataclass(frozen=True)
class AssignmentProgress:
    """Assignment-level progress plus per-container detail in assignment order."""
    assignment_id: str
    total_containers: int
    completed_containers: int
    percentage_complete: int
    container_statuses: Tuple[ContainerProgress, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'assignmentId': self.assignment_id,
            'totalContainers': self.total_containers,
            'completedContainers': self.completed_containers,
            'percentageComplete': self.percentage_complete,
            'containerStatuses': [status.to_dict() for status in self.container_statuses],
        }


def percentage_complete(completed: int, total: int) -> int:
    """
    ``completed / total * 100`` rounded to the nearest integer, halves up.

    Decimal arithmetic keeps the result exact, so 1/8 gives 13 rather than
    whatever float rounding would produce for 12.5.
    """
    if total <= 0:
        raise ValueError('total must be positive')
    ratio = Decimal(completed) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def _state_lookup(current_states: StateSnapshot) -> Callable[[str], Optional[Iterable[Any]]]:
    if isinstance(current_states, collections.abc.Mapping):
        return current_states.get
    return current_states


def container_progress(
    container_id: str,
    activities: Iterable[ContainerState],
    current: Optional[Iterable[Any]],
    public_number: Optional[str] = None
) -> ContainerProgress:
    """
    Progress of a single container.

    ``current`` of ``None`` means the container's state is unknown and is
    treated as nothing reported.
    """
    relevant = frozenset(activities)
    reported = parse_states(current)
    pending = relevant & reported
    completed = relevant - reported
    return ContainerProgress(
        container_id=container_id,
        is_complete=not pending,
        completed_activities=tuple(sort_states(completed)),
        pending_activities=tuple(sort_states(pending)),
        public_number=public_number,
    )


def compute_progress(
    assignment: Assignment,
    current_states: StateSnapshot,
    public_numbers: Optional[Mapping[str, str]] = None
) -> AssignmentProgress:
    """
    Derive progress for an assignment.

    Args:
        assignment: The assignment; its activities apply to every container
        current_states: Mapping or provider of container id -> current reported states
        public_numbers: Optional container id -> public number, for display

    Returns:
        AssignmentProgress; container order follows ``assignment.containers``
    """
    lookup = _state_lookup(current_states)
    numbers = public_numbers or {}

    statuses: List[ContainerProgress] = [
        container_progress(
            container_id,
            assignment.activities,
            lookup(container_id),
            numbers.get(container_id),
        )
        for container_id in assignment.containers
    ]

    total = len(statuses)
    completed = sum(1 for status in statuses if status.is_complete)
    return AssignmentProgress(
        assignment_id=assignment.id,
        total_containers=total,
        completed_containers=completed,
        percentage_complete=percentage_complete(completed, total),
        container_statuses=tuple(statuses),
    )
