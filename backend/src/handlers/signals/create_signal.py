"""
Create Signal Handler.
A citizen reports a problem with a waste container or another city object.
New photos in the submission are uploaded to S3 before the signal is stored.
"""
import dataclasses
import uuid
from wastewatch.config import config
from wastewatch.logging import logger, log_event
from wastewatch.auth import get_user_sub
from wastewatch.dynamo import put_item
from wastewatch.errors import WasteWatchError
from wastewatch.photos import persist_pending_photos
from wastewatch.s3_utils import upload_photo, sign_photo_urls
from wastewatch.signals import create_signal, signal_to_item
from wastewatch.utils import format_response, error_response, parse_body


def handler(event, context):
    """
    POST /signals

    Body:
    {
        "title": "...",
        "description": "...",
        "category": "waste-container",
        "containerState": ["overflowing", "damaged"],
        "cityObject": {"id": "...", "name": "..."},
        "location": {"address": "...", "lat": 42.69, "lng": 23.32},
        "photos": [{"localKey": "...", "contentType": "image/jpeg", "data": "<base64>"}]
    }
    """
    log_event(event)

    user_id = get_user_sub(event)
    if not user_id:
        return format_response(401, {'message': 'Unauthorized'})

    try:
        signal = create_signal(str(uuid.uuid4()), parse_body(event), reported_by=user_id)
        signal = dataclasses.replace(
            signal,
            photos=persist_pending_photos(signal.photos, upload_photo)
        )

        item = signal_to_item(signal)
        if not put_item(config.SIGNALS_TABLE, item):
            return format_response(500, {'message': 'Failed to save signal'})

        logger.info(f"Signal {signal.id} created by {user_id} with {len(signal.photos)} photos")
        return format_response(201, sign_photo_urls(item))

    except WasteWatchError as e:
        logger.warning(f"Rejected signal submission: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error creating signal: {e}")
        return format_response(500, {'message': 'Internal Server Error'})
