"""
Signal model, edit policy and status lifecycle.

A signal is a citizen report against a city object. Citizens may edit their
own signal while it is still pending; only operators move its status or
write admin notes. Every operation returns a new Signal.
"""
import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from .container_states import ContainerState, parse_states, states_to_list
from .errors import (
    EditNotPermittedError,
    InvalidSignalError,
    InvalidTransitionError,
    NotFoundError,
    PhotoNotFoundError,
)
from .models import SignalCategory, SignalStatus, parse_enum
from .photos import ExistingPhoto, PendingPhoto, Photo, photo_from_item, photo_to_item
from .utils import utc_now

_UNSET = object()

SIGNAL_TRANSITIONS = {
    SignalStatus.PENDING: frozenset({
        SignalStatus.IN_PROGRESS,
        SignalStatus.RESOLVED,
        SignalStatus.REJECTED,
    }),
    SignalStatus.IN_PROGRESS: frozenset({
        SignalStatus.RESOLVED,
        SignalStatus.REJECTED,
    }),
    SignalStatus.RESOLVED: frozenset(),
    SignalStatus.REJECTED: frozenset(),
}


@dataclass(frozen=True)
class Signal:
    """
    A citizen report.

    Attributes:
        id: Stable identifier
        title: Short summary, never empty
        category: What kind of city object is affected
        status: Lifecycle status
        container_state: Reported container problems; only for waste containers
        photos: Ordered photo references
        description: Optional free text
        city_object: Optional ``{'id', 'name'}`` association
        location: Optional ``{'address', 'lat', 'lng'}`` association
        admin_notes: Operator-only annotation
        reported_by: Owner-of-record user id
        created_at: ISO timestamp
        updated_at: ISO timestamp
    """
    id: str
    title: str
    category: SignalCategory
    status: SignalStatus = SignalStatus.PENDING
    container_state: FrozenSet[ContainerState] = frozenset()
    photos: Tuple[Photo, ...] = ()
    description: Optional[str] = None
    city_object: Optional[Dict[str, Any]] = field(default=None, compare=False)
    location: Optional[Dict[str, Any]] = field(default=None, compare=False)
    admin_notes: Optional[str] = None
    reported_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


def _clean_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise InvalidSignalError('Signal title is required')
    return title.strip()


def _clean_description(description: Any) -> Optional[str]:
    if description is None or description == '':
        return None
    if not isinstance(description, str):
        raise InvalidSignalError('Signal description must be text')
    return description


def _check_container_state(category: SignalCategory, states: FrozenSet[ContainerState]) -> None:
    if states and category != SignalCategory.WASTE_CONTAINER:
        raise InvalidSignalError(
            f"containerState is only allowed for '{SignalCategory.WASTE_CONTAINER.value}' signals",
            {'category': category.value},
        )


def _parse_photos(items: Any) -> Tuple[Photo, ...]:
    if items is None:
        return ()
    if not isinstance(items, (list, tuple)):
        raise InvalidSignalError('photos must be a list')
    return tuple(photo_from_item(item) for item in items)


def _pending_index(photos: Tuple[Photo, ...], photo: PendingPhoto) -> Optional[int]:
    # The same object first, then the first equal reference
    for index, candidate in enumerate(photos):
        if candidate is photo:
            return index
    for index, candidate in enumerate(photos):
        if candidate == photo:
            return index
    return None



def create_signal(
    signal_id: str,
    data: Dict[str, Any],
    reported_by: Optional[str] = None,
    now: Optional[str] = None
) -> Signal:
    """
    Validate a citizen submission and build a new pending signal.

    Args:
        signal_id: Identifier assigned by the caller
        data: Untyped submission (camelCase keys)
        reported_by: Submitting user's id
        now: Timestamp override

    Returns:
        New Signal with status pending

    Raises:
        InvalidSignalError: Missing title, bad photo or state/category mismatch
        UnknownStateError: Unknown category or container state tag
    """
    timestamp = now or utc_now()
    category = parse_enum(SignalCategory, data.get('category', SignalCategory.OTHER))
    states = parse_states(data.get('containerState'))
    _check_container_state(category, states)

    return Signal(
        id=signal_id,
        title=_clean_title(data.get('title')),
        category=category,
        status=SignalStatus.PENDING,
        container_state=states,
        photos=_parse_photos(data.get('photos')),
        description=_clean_description(data.get('description')),
        city_object=data.get('cityObject'),
        location=data.get('location'),
        reported_by=reported_by,
        created_at=timestamp,
        updated_at=timestamp,
    )


def signal_from_item(item: Optional[Dict[str, Any]]) -> Signal:
    """Rebuild a signal from its stored record, rejecting unknown tags."""
    if not item:
        raise NotFoundError('Signal not found')

    category = parse_enum(SignalCategory, item.get('category', SignalCategory.OTHER))
    states = parse_states(item.get('containerState'))
    _check_container_state(category, states)

    return Signal(
        id=item['signalId'],
        title=_clean_title(item.get('title')),
        category=category,
        status=parse_enum(SignalStatus, item.get('status', SignalStatus.PENDING)),
        container_state=states,
        photos=_parse_photos(item.get('photos')),
        description=_clean_description(item.get('description')),
        city_object=item.get('cityObject'),
        location=item.get('location'),
        admin_notes=item.get('adminNotes'),
        reported_by=item.get('reportedBy'),
        created_at=item.get('createdAt'),
        updated_at=item.get('updatedAt'),
    )


def signal_to_item(signal: Signal) -> Dict[str, Any]:
    """Flat record for the signals table. Optional empty fields are omitted."""
    item = {
        'signalId': signal.id,
        'title': signal.title,
        'category': signal.category.value,
        'status': signal.status.value,
        'containerState': states_to_list(signal.container_state),
        'photos': [photo_to_item(photo) for photo in signal.photos],
        'createdAt': signal.created_at,
        'updatedAt': signal.updated_at,
    }
    optional = {
        'description': signal.description,
        'cityObject': signal.city_object,
        'location': signal.location,
        'adminNotes': signal.admin_notes,
        'reportedBy': signal.reported_by,
    }
    item.update({k: v for k, v in optional.items() if v is not None})
    return item


def can_edit_signal(signal: Signal, user_id: Optional[str]) -> bool:
    """Citizen edit rule: owner of record and the signal is still pending."""
    return (
        user_id is not None
        and signal.reported_by == user_id
        and signal.status == SignalStatus.PENDING
    )


def _require_edit(can_edit: bool, signal: Signal) -> None:
    if not can_edit:
        raise EditNotPermittedError(
            f"Signal {signal.id} cannot be edited",
            {'signalId': signal.id, 'status': signal.status.value},
        )


def edit_signal(
    signal: Signal,
    can_edit: bool,
    title: Any = _UNSET,
    description: Any = _UNSET,
    container_state: Any = _UNSET,
    now: Optional[str] = None
) -> Signal:
    """
    Apply citizen field edits. Only the fields passed are changed.

    Raises:
        EditNotPermittedError: When ``can_edit`` is false
        InvalidSignalError: Empty title, non-text description or states on a non-container signal
        UnknownStateError: Unknown container state tag
    """
    _require_edit(can_edit, signal)

    changes = {}
    if title is not _UNSET:
        changes['title'] = _clean_title(title)
    if description is not _UNSET:
        changes['description'] = _clean_description(description)
    if container_state is not _UNSET:
        states = parse_states(container_state)
        _check_container_state(signal.category, states)
        changes['container_state'] = states

    if not changes:
        return signal
    return dataclasses.replace(signal, updated_at=now or utc_now(), **changes)


def add_photos(
    signal: Signal,
    photos: Iterable[Photo],
    can_edit: bool,
    now: Optional[str] = None
) -> Signal:
    """Append photos to the signal's working set."""
    _require_edit(can_edit, signal)
    added = tuple(photos)
    if not added:
        return signal
    return dataclasses.replace(
        signal,
        photos=signal.photos + added,
        updated_at=now or utc_now(),
    )


def remove_photo(
    signal: Signal,
    photo: Any,
    can_edit: bool,
    now: Optional[str] = None
) -> Signal:
    """
    Remove one photo.

    Existing photos (or a bare id string) are matched by persisted id and
    must be present. Pending photos have no id; only one occurrence is
    removed, the same object if present, otherwise the first equal one.
    Removing a pending photo that is not in the working set is a no-op.

    Raises:
        EditNotPermittedError: When ``can_edit`` is false
        PhotoNotFoundError: Persisted id not present on the signal
    """
    _require_edit(can_edit, signal)

    if isinstance(photo, PendingPhoto):
        index = _pending_index(signal.photos, photo)
        if index is None:
            return signal
        remaining = signal.photos[:index] + signal.photos[index + 1:]
    else:
        photo_id = photo.id if isinstance(photo, ExistingPhoto) else str(photo)
        remaining = tuple(
            p for p in signal.photos
            if not (isinstance(p, ExistingPhoto) and p.id == photo_id)
        )
        if len(remaining) == len(signal.photos):
            raise PhotoNotFoundError(photo_id)

    if len(remaining) == len(signal.photos):
        return signal
    return dataclasses.replace(signal, photos=remaining, updated_at=now or utc_now())


def transition_signal(
    signal: Signal,
    new_status: Any,
    is_operator: bool,
    admin_notes: Any = _UNSET,
    now: Optional[str] = None
) -> Signal:
    """
    Move a signal to a new status, optionally setting admin notes.

    Raises:
        EditNotPermittedError: Caller is not an operator
        UnknownStateError: Status outside the enumeration
        InvalidTransitionError: Move not in the transition table
    """
    if not is_operator:
        raise EditNotPermittedError(
            'Only operators can change signal status',
            {'signalId': signal.id},
        )

    target = parse_enum(SignalStatus, new_status)
    if target not in SIGNAL_TRANSITIONS[signal.status]:
        raise InvalidTransitionError(signal.status.value, target.value, 'signal')

    changes = {'status': target, 'updated_at': now or utc_now()}
    if admin_notes is not _UNSET:
        changes['admin_notes'] = admin_notes or None
    return dataclasses.replace(signal, **changes)


def set_admin_notes(
    signal: Signal,
    notes: Optional[str],
    is_operator: bool,
    now: Optional[str] = None
) -> Signal:
    """Write the operator annotation without touching status."""
    if not is_operator:
        raise EditNotPermittedError(
            'Only operators can set admin notes',
            {'signalId': signal.id},
        )
    return dataclasses.replace(signal, admin_notes=notes or None, updated_at=now or utc_now())
