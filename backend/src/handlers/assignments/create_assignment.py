"""
Create Assignment Handler.
A dispatcher sends a field worker to resolve a set of problems on a set of containers.
"""
import uuid
from wastewatch.config import config
from wastewatch.logging import logger, log_event
from wastewatch.auth import get_user_sub, is_dispatcher
from wastewatch.assignments import create_assignment, assignment_to_item
from wastewatch.containers import load_containers
from wastewatch.dynamo import put_item
from wastewatch.errors import EditNotPermittedError, InvalidAssignmentError, WasteWatchError
from wastewatch.utils import format_response, error_response, parse_body


def handler(event, context):
    """
    POST /assignments

    Body:
    {
        "title": "...",
        "description": "...",
        "containers": ["container-1", "container-2"],
        "assignedTo": "worker-sub",
        "activities": ["overflowing", "bulkyWaste"],
        "dueDate": "2026-11-01"
    }
    """
    log_event(event)

    dispatcher_id = get_user_sub(event)
    if not dispatcher_id:
        return format_response(401, {'message': 'Unauthorized'})

    try:
        if not is_dispatcher(event):
            raise EditNotPermittedError('Only dispatchers can create assignments')

        assignment = create_assignment(str(uuid.uuid4()), parse_body(event))

        known = load_containers(list(assignment.containers))
        missing = [cid for cid in assignment.containers if cid not in known]
        if missing:
            raise InvalidAssignmentError(
                f"Unknown containers: {', '.join(missing)}",
                {'containers': missing},
            )

        item = assignment_to_item(assignment)
        if not put_item(config.ASSIGNMENTS_TABLE, item):
            return format_response(500, {'message': 'Failed to save assignment'})

        logger.info(
            f"Assignment {assignment.id} created by {dispatcher_id} for {assignment.assigned_to}: "
            f"{len(assignment.containers)} containers, {len(assignment.activities)} activities"
        )
        return format_response(201, item)

    except WasteWatchError as e:
        logger.warning(f"Rejected assignment: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error creating assignment: {e}")
        return format_response(500, {'message': 'Internal Server Error'})
