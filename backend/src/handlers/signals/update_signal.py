"""
Update Signal Handler.
The citizen who reported a signal edits it while it is still pending.
"""
import dataclasses
from wastewatch.config import config
from wastewatch.logging import logger, log_event
from wastewatch.auth import get_user_sub
from wastewatch.dynamo import get_item, put_item
from wastewatch.errors import WasteWatchError
from wastewatch.photos import ExistingPhoto, persist_pending_photos, photo_from_item
from wastewatch.s3_utils import upload_photo, delete_photo, sign_photo_urls
from wastewatch.signals import (
    add_photos,
    can_edit_signal,
    edit_signal,
    remove_photo,
    signal_from_item,
    signal_to_item,
)
from wastewatch.utils import format_response, error_response, parse_body, get_path_param, utc_now

# Body key -> edit_signal keyword
EDITABLE_FIELDS = {
    'title': 'title',
    'description': 'description',
    'containerState': 'container_state',
}


def handler(event, context):
    """
    PATCH /signals/{signalId}

    Body (all optional):
    {
        "title": "...",
        "description": "...",
        "containerState": ["overflowing"],
        "removePhotoIds": ["media/signals/<uuid>.jpg"],
        "newPhotos": [{"localKey": "...", "contentType": "image/jpeg", "data": "<base64>"}]
    }
    """
    log_event(event)

    user_id = get_user_sub(event)
    if not user_id:
        return format_response(401, {'message': 'Unauthorized'})

    signal_id = get_path_param(event, 'signalId')
    if not signal_id:
        return format_response(400, {'message': 'Missing signalId'})

    try:
        body = parse_body(event)
        signal = signal_from_item(get_item(config.SIGNALS_TABLE, {'signalId': signal_id}))
        allowed = can_edit_signal(signal, user_id)
        now = utc_now()

        changes = {kw: body[key] for key, kw in EDITABLE_FIELDS.items() if key in body}
        updated = edit_signal(signal, allowed, now=now, **changes)

        for photo_id in body.get('removePhotoIds') or []:
            updated = remove_photo(updated, photo_id, allowed, now=now)

        new_photos = [photo_from_item(p) for p in body.get('newPhotos') or []]
        updated = add_photos(updated, new_photos, allowed, now=now)
        updated = dataclasses.replace(
            updated,
            photos=persist_pending_photos(updated.photos, upload_photo)
        )

        item = signal_to_item(updated)
        if not put_item(config.SIGNALS_TABLE, item):
            return format_response(500, {'message': 'Failed to save signal'})

        # Objects are only deleted once the signal no longer references them
        kept_ids = {p.id for p in updated.photos}
        for photo in signal.photos:
            if isinstance(photo, ExistingPhoto) and photo.id not in kept_ids:
                delete_photo(photo.id)

        logger.info(f"Signal {signal_id} updated by {user_id}")
        return format_response(200, sign_photo_urls(item))

    except WasteWatchError as e:
        logger.warning(f"Rejected edit of signal {signal_id}: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error updating signal {signal_id}: {e}")
        return format_response(500, {'message': 'Internal Server Error'})
