"""
Assignment Progress Handler.
Recomputes progress from the current state of every container on each request.
"""
from wastewatch.config import config
from wastewatch.logging import logger, log_event
from wastewatch.auth import get_user_sub
from wastewatch.assignments import assignment_from_item
from wastewatch.containers import load_containers
from wastewatch.dynamo import get_item
from wastewatch.errors import WasteWatchError
from wastewatch.progress import compute_progress
from wastewatch.utils import format_response, error_response, get_path_param


def handler(event, context):
    """
    GET /assignments/{assignmentId}/progress
    """
    log_event(event)

    if not get_user_sub(event):
        return format_response(401, {'message': 'Unauthorized'})

    assignment_id = get_path_param(event, 'assignmentId')
    if not assignment_id:
        return format_response(400, {'message': 'Missing assignmentId'})

    try:
        assignment = assignment_from_item(
            get_item(config.ASSIGNMENTS_TABLE, {'assignmentId': assignment_id})
        )

        # Containers missing from the table count as reporting no states
        containers = load_containers(list(assignment.containers))
        if len(containers) < len(assignment.containers):
            logger.warning(
                f"Assignment {assignment_id}: {len(assignment.containers) - len(containers)} "
                f"containers unavailable"
            )

        progress = compute_progress(
            assignment,
            {cid: c.state for cid, c in containers.items()},
            {cid: c.public_number for cid, c in containers.items()},
        )
        return format_response(200, progress.to_dict())

    except WasteWatchError as e:
        logger.warning(f"Cannot compute progress for {assignment_id}: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error computing progress for {assignment_id}: {e}")
        return format_response(500, {'message': 'Internal Server Error'})
