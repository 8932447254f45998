"""
Signal photo references.

A photo is either already persisted (``ExistingPhoto``, addressed by its
storage id) or captured locally and waiting for upload (``PendingPhoto``,
addressed only by its local key).
"""
import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Union

from .errors import InvalidSignalError


@dataclass(frozen=True)
class ExistingPhoto:
    """Persisted photo; ``id`` is the storage key."""
    id: str
    url: Optional[str] = None


@dataclass(frozen=True)
class PendingPhoto:
    """Locally captured photo not yet uploaded."""
    local_key: str
    content_type: str = 'image/jpeg'
    data: bytes = field(default=b'', compare=False, repr=False)


Photo = Union[ExistingPhoto, PendingPhoto]


def photo_from_item(item: Dict[str, Any]) -> Photo:
    """
    Build a photo reference from an untyped record.

    Records carrying ``id`` are existing photos. Records carrying ``localKey``
    are new photos; their ``data`` is base64-encoded image content.
    """
    if not isinstance(item, dict):
        raise InvalidSignalError(f"Invalid photo reference: {item!r}")

    if item.get('id'):
        return ExistingPhoto(id=str(item['id']), url=item.get('url'))

    local_key = item.get('localKey')
    if not local_key:
        raise InvalidSignalError("Photo needs either an 'id' or a 'localKey'")

    try:
        data = base64.b64decode(item.get('data') or '', validate=True)
    except (binascii.Error, ValueError, TypeError):
        raise InvalidSignalError(f"Photo {local_key} has invalid base64 data") from None

    return PendingPhoto(
        local_key=str(local_key),
        content_type=item.get('contentType', 'image/jpeg'),
        data=data,
    )


def photo_to_item(photo: Photo) -> Dict[str, Any]:
    """Serialize an existing photo for storage."""
    if isinstance(photo, PendingPhoto):
        raise InvalidSignalError(
            f"Photo {photo.local_key} must be uploaded before it can be stored"
        )
    item = {'id': photo.id}
    if photo.url:
        item['url'] = photo.url
    return item


def pending_photos(photos: Iterable[Photo]) -> Tuple[PendingPhoto, ...]:
    """Photos that still need uploading, in order."""
    return tuple(p for p in photos if isinstance(p, PendingPhoto))


def persist_pending_photos(
    photos: Iterable[Photo],
    uploader: Callable[[PendingPhoto], str]
) -> Tuple[ExistingPhoto, ...]:
    """
    Upload every pending photo and return the list as existing photos.

    Args:
        photos: Ordered photo references
        uploader: Storage collaborator; takes a pending photo, returns its persisted id

    Returns:
        Same photos in the same order, all existing
    """
    persisted = []
    for photo in photos:
        if isinstance(photo, PendingPhoto):
            persisted.append(ExistingPhoto(id=uploader(photo)))
        else:
            persisted.append(photo)
    return tuple(persisted)
