"""
Assignment model and status lifecycle.
Lifecycle: pending → in-progress → completed, pending/in-progress → cancelled
"""
import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional, Tuple

from .container_states import ContainerState, parse_states, states_to_list
from .errors import InvalidAssignmentError, InvalidTransitionError, NotFoundError
from .models import AssignmentStatus, parse_enum
from .utils import utc_now

ASSIGNMENT_TRANSITIONS = {
    AssignmentStatus.PENDING: frozenset({
        AssignmentStatus.IN_PROGRESS,
        AssignmentStatus.CANCELLED,
    }),
    AssignmentStatus.IN_PROGRESS: frozenset({
        AssignmentStatus.COMPLETED,
        AssignmentStatus.CANCELLED,
    }),
    AssignmentStatus.COMPLETED: frozenset(),
    AssignmentStatus.CANCELLED: frozenset(),
}

# Statuses a dispatcher may create an assignment in
INITIAL_STATUSES = (AssignmentStatus.PENDING, AssignmentStatus.IN_PROGRESS)


@dataclass(frozen=True)
class Assignment:
    """
    A unit of field work.

    Attributes:
        id: Stable identifier
        title: Short summary
        containers: Target container ids, unique, in dispatch order
        assigned_to: Worker id
        activities: Container states this assignment resolves, applied to every container
        status: Lifecycle status
        description: Optional free text
        due_date: Optional ISO date
        completed_at: Set once, when the assignment is completed
        created_at: ISO timestamp
        updated_at: ISO timestamp
    """
    id: str
    title: str
    containers: Tuple[str, ...]
    assigned_to: str
    activities: FrozenSet[ContainerState]
    status: AssignmentStatus = AssignmentStatus.PENDING
    description: Optional[str] = None
    due_date: Optional[str] = None
    completed_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


def _reference_id(value: Any) -> Optional[str]:
    """Accept either a bare id or a populated record carrying ``id``."""
    if isinstance(value, dict):
        value = value.get('id')
    if value is None or value == '':
        return None
    return str(value)


def _parse_containers(values: Any) -> Tuple[str, ...]:
    if not isinstance(values, (list, tuple)):
        raise InvalidAssignmentError('containers must be a list of container ids')

    seen = []
    for value in values:
        container_id = _reference_id(value)
        if container_id is None:
            raise InvalidAssignmentError(f"Invalid container reference: {value!r}")
        if container_id not in seen:
            seen.append(container_id)

    if not seen:
        raise InvalidAssignmentError('An assignment needs at least one container')
    return tuple(seen)


def _parse_activities(values: Any) -> FrozenSet[ContainerState]:
    if not isinstance(values, (list, tuple)):
        raise InvalidAssignmentError('activities must be a list of container states')
    activities = parse_states(values)
    if not activities:
        raise InvalidAssignmentError('An assignment needs at least one activity')
    return activities


def _parse_title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidAssignmentError('Assignment title is required')
    return value.strip()


def _parse_description(value: Any) -> Optional[str]:
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise InvalidAssignmentError('Assignment description must be text')
    return value


def _parse_assignee(value: Any) -> str:
    assignee = _reference_id(value)
    if assignee is None:
        raise InvalidAssignmentError('assignedTo is required')
    return assignee


def create_assignment(
    assignment_id: str,
    data: Dict[str, Any],
    now: Optional[str] = None
) -> Assignment:
    """
    Validate dispatcher input and build a new assignment.

    Args:
        assignment_id: Identifier assigned by the caller
        data: Untyped input (camelCase keys)
        now: Timestamp override

    Raises:
        InvalidAssignmentError: Missing title/assignee or empty containers/activities
        UnknownStateError: Unknown activity tag or status
    """
    status = parse_enum(AssignmentStatus, data.get('status', AssignmentStatus.PENDING))
    if status not in INITIAL_STATUSES:
        raise InvalidAssignmentError(
            f"Assignments cannot be created as '{status.value}'",
            {'status': status.value},
        )

    timestamp = now or utc_now()
    return Assignment(
        id=assignment_id,
        title=_parse_title(data.get('title')),
        containers=_parse_containers(data.get('containers')),
        assigned_to=_parse_assignee(data.get('assignedTo')),
        activities=_parse_activities(data.get('activities')),
        status=status,
        description=_parse_description(data.get('description')),
        due_date=data.get('dueDate'),
        created_at=timestamp,
        updated_at=timestamp,
    )


def assignment_from_item(item: Optional[Dict[str, Any]]) -> Assignment:
    """Rebuild an assignment from its stored record."""
    if not item:
        raise NotFoundError('Assignment not found')

    return Assignment(
        id=item['assignmentId'],
        title=_parse_title(item.get('title')),
        containers=_parse_containers(item.get('containers')),
        assigned_to=_parse_assignee(item.get('assignedTo')),
        activities=_parse_activities(item.get('activities')),
        status=parse_enum(AssignmentStatus, item.get('status', AssignmentStatus.PENDING)),
        description=_parse_description(item.get('description')),
        due_date=item.get('dueDate'),
        completed_at=item.get('completedAt'),
        created_at=item.get('createdAt'),
        updated_at=item.get('updatedAt'),
    )


def assignment_to_item(assignment: Assignment) -> Dict[str, Any]:
    """Flat record for the assignments table."""
    item = {
        'assignmentId': assignment.id,
        'title': assignment.title,
        'containers': list(assignment.containers),
        'assignedTo': assignment.assigned_to,
        'activities': states_to_list(assignment.activities),
        'status': assignment.status.value,
        'createdAt': assignment.created_at,
        'updatedAt': assignment.updated_at,
    }
    optional = {
        'description': assignment.description,
        'dueDate': assignment.due_date,
        'completedAt': assignment.completed_at,
    }
    item.update({k: v for k, v in optional.items() if v is not None})
    return item


def transition_assignment(
    assignment: Assignment,
    new_status: Any,
    now: Optional[str] = None
) -> Assignment:
    """
    Move an assignment to a new status.

    Completing stamps ``completed_at``; completed and cancelled are terminal.

    Raises:
        UnknownStateError: Status outside the enumeration
        InvalidTransitionError: Move not in the transition table
    """
    target = parse_enum(AssignmentStatus, new_status)
    if target not in ASSIGNMENT_TRANSITIONS[assignment.status]:
        raise InvalidTransitionError(assignment.status.value, target.value, 'assignment')

    timestamp = now or utc_now()
    changes = {'status': target, 'updated_at': timestamp}
    if target == AssignmentStatus.COMPLETED:
        changes['completed_at'] = timestamp
    return dataclasses.replace(assignment, **changes)
