"""
Review Signal Handler.
Operators move a signal through its lifecycle and annotate it.
"""
from wastewatch.config import config
from wastewatch.logging import logger, log_event
from wastewatch.auth import get_user_sub, is_operator
from wastewatch.dynamo import get_item, put_item
from wastewatch.errors import InvalidSignalError, WasteWatchError
from wastewatch.s3_utils import sign_photo_urls
from wastewatch.signals import set_admin_notes, signal_from_item, signal_to_item, transition_signal
from wastewatch.utils import format_response, error_response, parse_body, get_path_param


def handler(event, context):
    """
    POST /operator/signals/{signalId}/status

    Body:
    {
        "status": "in-progress" | "resolved" | "rejected",  (optional)
        "adminNotes": "Optional notes"
    }
    """
    log_event(event)

    if not get_user_sub(event):
        return format_response(401, {'message': 'Unauthorized'})

    signal_id = get_path_param(event, 'signalId')
    if not signal_id:
        return format_response(400, {'message': 'Missing signalId'})

    try:
        body = parse_body(event)
        operator = is_operator(event)
        signal = signal_from_item(get_item(config.SIGNALS_TABLE, {'signalId': signal_id}))

        if 'status' in body:
            notes = {'admin_notes': body['adminNotes']} if 'adminNotes' in body else {}
            updated = transition_signal(signal, body['status'], operator, **notes)
        elif 'adminNotes' in body:
            updated = set_admin_notes(signal, body['adminNotes'], operator)
        else:
            raise InvalidSignalError('Provide a status and/or adminNotes')

        item = signal_to_item(updated)
        if not put_item(config.SIGNALS_TABLE, item):
            return format_response(500, {'message': 'Failed to save signal'})

        logger.info(f"Signal {signal_id}: {signal.status.value} -> {updated.status.value}")
        return format_response(200, sign_photo_urls(item))

    except WasteWatchError as e:
        logger.warning(f"Rejected review of signal {signal_id}: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error reviewing signal {signal_id}: {e}")
        return format_response(500, {'message': 'Internal Server Error'})
