"""
List Containers Handler.
Feeds the map view with containers, their reported states and marker colors.
"""
from wastewatch.logging import logger, log_event
from wastewatch.containers import container_to_dict, list_containers
from wastewatch.errors import WasteWatchError
from wastewatch.utils import format_response, error_response, get_query_param

# Map view loads everything in one page
DEFAULT_LIMIT = 100


def handler(event, context):
    """
    GET /containers?status=active&wasteType=recyclables&limit=100
    """
    log_event(event)

    try:
        try:
            limit = int(get_query_param(event, 'limit', DEFAULT_LIMIT))
        except (TypeError, ValueError):
            return format_response(400, {'message': 'limit must be an integer'})

        containers = list_containers(
            status=get_query_param(event, 'status'),
            waste_type=get_query_param(event, 'wasteType'),
            limit=limit,
        )
        return format_response(200, {
            'containers': [container_to_dict(c) for c in containers],
            'count': len(containers),
        })

    except WasteWatchError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error listing containers: {e}")
        return format_response(500, {'message': 'Internal Server Error'})
