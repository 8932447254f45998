"""
Waste container records and containers-table access.
"""
import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from boto3.dynamodb.conditions import Attr

from .config import config
from .container_states import ContainerState, marker_color, parse_states, states_to_list
from .dynamo import batch_get_items, scan_items
from .errors import NotFoundError, StoreUnavailableError, UnknownStateError
from .logging import logger
from .models import ContainerStatus, WasteType, parse_enum
from .utils import utc_now


@dataclass(frozen=True)
class WasteContainer:
    """A waste container as held in the containers table."""
    id: str
    public_number: Optional[str] = None
    waste_type: WasteType = WasteType.TRASH_CAN
    status: ContainerStatus = ContainerStatus.ACTIVE
    state: FrozenSet[ContainerState] = frozenset()
    address: Optional[str] = None
    updated_at: Optional[str] = None


def container_from_item(item: Optional[Dict[str, Any]]) -> WasteContainer:
    """Rebuild a container from its stored record, rejecting unknown tags."""
    if not item:
        raise NotFoundError('Container not found')

    return WasteContainer(
        id=item['containerId'],
        public_number=item.get('publicNumber'),
        waste_type=parse_enum(WasteType, item.get('wasteType', WasteType.TRASH_CAN)),
        status=parse_enum(ContainerStatus, item.get('status', ContainerStatus.ACTIVE)),
        state=parse_states(item.get('state')),
        address=item.get('address'),
        updated_at=item.get('updatedAt'),
    )


def container_to_dict(container: WasteContainer) -> Dict[str, Any]:
    """API representation, including the marker color for map display."""
    return {
        'id': container.id,
        'publicNumber': container.public_number,
        'wasteType': container.waste_type.value,
        'status': container.status.value,
        'state': states_to_list(container.state),
        'markerColor': marker_color(container.state),
        'address': container.address,
        'updatedAt': container.updated_at,
    }


def clear_container_states(
    container: WasteContainer,
    states: Iterable[Any],
    now: Optional[str] = None
) -> WasteContainer:
    """Remove fixed problems from a container's live state."""
    cleared = parse_states(states)
    remaining = container.state - cleared
    if remaining == container.state:
        return container
    return dataclasses.replace(container, state=remaining, updated_at=now or utc_now())


def load_containers(container_ids: List[str]) -> Dict[str, WasteContainer]:
    """
    Fetch containers by id.

    Records that fail validation are logged and left out, so callers see
    them as unavailable.

    Raises:
        StoreUnavailableError: The containers table could not be read
    """
    items = batch_get_items(config.CONTAINERS_TABLE, 'containerId', container_ids)
    if items is None:
        raise StoreUnavailableError('Container states are unavailable')

    containers = {}
    for item in items:
        try:
            container = container_from_item(item)
        except UnknownStateError as e:
            logger.error(f"Skipping container {item.get('containerId')}: {e.message}")
            continue
        containers[container.id] = container
    return containers


def list_containers(
    status: Optional[str] = None,
    waste_type: Optional[str] = None,
    limit: Optional[int] = None
) -> List[WasteContainer]:
    """
    List containers, optionally filtered by status and waste type.

    Raises:
        UnknownStateError: Filter value outside its enumeration
    """
    filter_expression = None
    if status:
        filter_expression = Attr('status').eq(parse_enum(ContainerStatus, status).value)
    if waste_type:
        condition = Attr('wasteType').eq(parse_enum(WasteType, waste_type).value)
        filter_expression = condition if filter_expression is None else filter_expression & condition

    containers = []
    for item in scan_items(config.CONTAINERS_TABLE, filter_expression, limit):
        try:
            containers.append(container_from_item(item))
        except UnknownStateError as e:
            logger.error(f"Skipping container {item.get('containerId')}: {e.message}")
    return containers
