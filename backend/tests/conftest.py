"""
Shared fixtures for handler and model tests.
"""
import json
import pytest

from wastewatch.assignments import Assignment
from wastewatch.container_states import ContainerState


@pytest.fixture
def make_event():
    """Build an API Gateway proxy event with Cognito claims."""
    def _make_event(sub='citizen-1', groups='citizen', body=None, path=None, query=None):
        event = {
            'httpMethod': 'POST',
            'body': json.dumps(body) if body is not None else None,
            'pathParameters': path,
            'queryStringParameters': query,
        }
        if sub is not None:
            event['requestContext'] = {
                'authorizer': {'claims': {'sub': sub, 'cognito:groups': groups}}
            }
        return event
    return _make_event


@pytest.fixture
def assignment():
    """Two containers, two activities."""
    return Assignment(
        id='assignment-1',
        title='Clear Mladost 4 containers',
        containers=('A', 'B'),
        assigned_to='worker-1',
        activities=frozenset({ContainerState.OVERFLOWING, ContainerState.DAMAGED}),
    )
