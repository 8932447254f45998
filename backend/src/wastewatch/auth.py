"""
Authentication utilities for extracting user info from Cognito tokens.
"""
from typing import Optional

from .models import UserGroup


def get_user_sub(event: dict) -> Optional[str]:
    """
    Extract user sub (unique ID) from Cognito authorizer claims.

    Args:
        event: API Gateway Lambda proxy event

    Returns:
        User sub string or None if not authenticated
    """
    try:
        return event['requestContext']['authorizer']['claims']['sub']
    except (KeyError, TypeError):
        return None


def get_user_groups(event: dict) -> list:
    """Extract user groups (citizen, operator, dispatcher, worker) from Cognito claims."""
    try:
        groups = event['requestContext']['authorizer']['claims'].get('cognito:groups', '')
        if isinstance(groups, str):
            return groups.split(',') if groups else []
        return groups or []
    except (KeyError, TypeError, AttributeError):
        return []


def is_operator(event: dict) -> bool:
    """Check if user may review signals (status changes, admin notes)."""
    return UserGroup.OPERATOR in get_user_groups(event)


def is_dispatcher(event: dict) -> bool:
    """Check if user may create and manage assignments."""
    return UserGroup.DISPATCHER in get_user_groups(event)


def is_worker(event: dict) -> bool:
    """Check if user belongs to the field worker group."""
    return UserGroup.WORKER in get_user_groups(event)
