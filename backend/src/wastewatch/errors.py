"""
Error taxonomy for the signals backend.

Every domain operation either returns a new value or raises one of these,
leaving its inputs untouched. Handlers turn them into API responses through
``utils.error_response``.
"""
from typing import Any, Dict, Optional


class WasteWatchError(Exception):
    """Base class for all domain errors."""

    error_code = 'WASTEWATCH_ERROR'

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary for logging/serialization."""
        return {
            'error': self.error_code,
            'message': self.message,
            'details': self.details,
        }


class UnknownStateError(WasteWatchError):
    """A value outside one of the closed enumerations."""

    error_code = 'UNKNOWN_STATE'

    def __init__(self, value: Any, enumeration: str = 'ContainerState'):
        super().__init__(
            f"Unknown {enumeration} value: {value!r}",
            {'value': value, 'enumeration': enumeration},
        )
        self.value = value
        self.enumeration = enumeration


class InvalidTransitionError(WasteWatchError):
    """Illegal status change; the entity is left unchanged."""

    error_code = 'INVALID_TRANSITION'

    def __init__(self, current: str, requested: str, entity: str = 'entity'):
        super().__init__(
            f"Cannot transition {entity} from '{current}' to '{requested}'",
            {'current': current, 'requested': requested, 'entity': entity},
        )
        self.current = current
        self.requested = requested
        self.entity = entity


class EditNotPermittedError(WasteWatchError):
    """Mutation attempted without the required capability or status."""

    error_code = 'EDIT_NOT_PERMITTED'


class PhotoNotFoundError(WasteWatchError):
    """Photo removal referenced a persisted id not present on the signal."""

    error_code = 'PHOTO_NOT_FOUND'

    def __init__(self, photo_id: str):
        super().__init__(f"Photo not found: {photo_id}", {'photoId': photo_id})
        self.photo_id = photo_id


class InvalidAssignmentError(WasteWatchError):
    """Assignment construction failed validation."""

    error_code = 'INVALID_ASSIGNMENT'


class InvalidSignalError(WasteWatchError):
    """Signal construction or edit failed validation."""

    error_code = 'INVALID_SIGNAL'


class NotFoundError(WasteWatchError):
    """A referenced record does not exist in the store."""

    error_code = 'NOT_FOUND'


class PhotoUploadError(WasteWatchError):
    """The photo storage collaborator failed to persist a new photo."""

    error_code = 'PHOTO_UPLOAD_FAILED'


class StoreUnavailableError(WasteWatchError):
    """The backing store could not be read at all."""

    error_code = 'STORE_UNAVAILABLE'
