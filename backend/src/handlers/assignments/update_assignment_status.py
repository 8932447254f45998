"""
Update Assignment Status Handler.
Dispatchers may make any legal transition; the assigned worker may start and complete their own work.
"""
from wastewatch.config import config
from wastewatch.logging import logger, log_event
from wastewatch.auth import get_user_sub, is_dispatcher
from wastewatch.assignments import assignment_from_item, assignment_to_item, transition_assignment
from wastewatch.dynamo import get_item, put_item
from wastewatch.errors import EditNotPermittedError, WasteWatchError
from wastewatch.models import AssignmentStatus, parse_enum
from wastewatch.utils import format_response, error_response, parse_body, get_path_param

WORKER_STATUSES = (AssignmentStatus.IN_PROGRESS, AssignmentStatus.COMPLETED)


def handler(event, context):
    """
    POST /assignments/{assignmentId}/status

    Body:
    {
        "status": "in-progress" | "completed" | "cancelled"
    }
    """
    log_event(event)

    user_id = get_user_sub(event)
    if not user_id:
        return format_response(401, {'message': 'Unauthorized'})

    assignment_id = get_path_param(event, 'assignmentId')
    if not assignment_id:
        return format_response(400, {'message': 'Missing assignmentId'})

    try:
        requested = parse_enum(AssignmentStatus, parse_body(event).get('status'))
        assignment = assignment_from_item(
            get_item(config.ASSIGNMENTS_TABLE, {'assignmentId': assignment_id})
        )

        is_assignee = assignment.assigned_to == user_id
        if not is_dispatcher(event) and not (is_assignee and requested in WORKER_STATUSES):
            raise EditNotPermittedError(
                f"Not allowed to set assignment {assignment_id} to '{requested.value}'",
                {'assignmentId': assignment_id},
            )

        updated = transition_assignment(assignment, requested)

        item = assignment_to_item(updated)
        if not put_item(config.ASSIGNMENTS_TABLE, item):
            return format_response(500, {'message': 'Failed to save assignment'})

        logger.info(f"Assignment {assignment_id}: {assignment.status.value} -> {updated.status.value}")
        return format_response(200, item)

    except WasteWatchError as e:
        logger.warning(f"Rejected status change of assignment {assignment_id}: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error updating assignment {assignment_id}: {e}")
        return format_response(500, {'message': 'Internal Server Error'})
