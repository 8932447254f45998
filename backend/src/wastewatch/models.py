"""
Status and category enumerations for the signals backend.
Signal lifecycle: Pending → In progress → Resolved/Rejected
Assignment lifecycle: Pending → In progress → Completed (or Cancelled)
"""
from enum import Enum
from typing import Any, Type, TypeVar

from .errors import UnknownStateError

E = TypeVar('E', bound=Enum)


class SignalStatus(str, Enum):
    """Signal lifecycle statuses."""
    PENDING = 'pending'
    IN_PROGRESS = 'in-progress'
    RESOLVED = 'resolved'
    REJECTED = 'rejected'


class SignalCategory(str, Enum):
    """What kind of city object a signal is about."""
    WASTE_CONTAINER = 'waste-container'
    STREET_LIGHT = 'street-light'
    ROAD = 'road'
    GREEN_AREA = 'green-area'
    OTHER = 'other'


class AssignmentStatus(str, Enum):
    """Assignment statuses."""
    PENDING = 'pending'
    IN_PROGRESS = 'in-progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class ContainerStatus(str, Enum):
    """Operational status of a waste container."""
    ACTIVE = 'active'
    FULL = 'full'
    MAINTENANCE = 'maintenance'
    INACTIVE = 'inactive'


class WasteType(str, Enum):
    """Container waste streams."""
    TRASH_CAN = 'trashCan'
    RECYCLABLES = 'recyclables'
    GLASS = 'glass'
    ORGANIC = 'organic'
    BULKY = 'bulky'


class UserGroup:
    """Cognito groups used for capability checks."""
    CITIZEN = 'citizen'
    OPERATOR = 'operator'
    DISPATCHER = 'dispatcher'
    WORKER = 'worker'


def parse_enum(enum_cls: Type[E], value: Any) -> E:
    """
    Convert an untyped value into a member of a closed enumeration.

    Args:
        enum_cls: The enumeration to parse into
        value: Member or raw tag string

    Returns:
        The matching enum member

    Raises:
        UnknownStateError: If the value is not one of the enumeration's tags
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        raise UnknownStateError(value, enum_cls.__name__) from None
