"""
Resolve Container States Handler.
A field worker clears the problems they fixed from a container's live state,
which is what assignment progress is computed from.
"""
from wastewatch.config import config
from wastewatch.logging import logger, log_event
from wastewatch.auth import get_user_sub, is_worker
from wastewatch.containers import clear_container_states, container_from_item, container_to_dict
from wastewatch.container_states import states_to_list
from wastewatch.dynamo import get_item, update_item
from wastewatch.errors import EditNotPermittedError, WasteWatchError
from wastewatch.utils import format_response, error_response, parse_body, get_path_param


def handler(event, context):
    """
    POST /containers/{containerId}/resolve

    Body:
    {
        "states": ["overflowing", "bulkyWaste"]
    }
    """
    log_event(event)

    worker_id = get_user_sub(event)
    if not worker_id:
        return format_response(401, {'message': 'Unauthorized'})

    container_id = get_path_param(event, 'containerId')
    if not container_id:
        return format_response(400, {'message': 'Missing containerId'})

    try:
        if not is_worker(event):
            raise EditNotPermittedError('Only field workers can resolve container states')

        container = container_from_item(
            get_item(config.CONTAINERS_TABLE, {'containerId': container_id})
        )
        updated = clear_container_states(container, parse_body(event).get('states') or [])

        if updated is not container:
            success = update_item(
                config.CONTAINERS_TABLE,
                {'containerId': container_id},
                'SET #state = :state, updatedAt = :ts',
                {':state': states_to_list(updated.state), ':ts': updated.updated_at},
                {'#state': 'state'}
            )
            if not success:
                return format_response(500, {'message': 'Failed to update container'})

            cleared = states_to_list(container.state - updated.state)
            logger.info(f"Worker {worker_id} cleared {cleared} on container {container_id}")

        return format_response(200, container_to_dict(updated))

    except WasteWatchError as e:
        logger.warning(f"Rejected resolve on container {container_id}: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error resolving container {container_id}: {e}")
        return format_response(500, {'message': 'Internal Server Error'})
