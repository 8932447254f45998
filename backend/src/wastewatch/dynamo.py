"""
DynamoDB utility functions for the signals, assignments and containers tables.
"""
import boto3
from typing import List, Dict, Any, Optional
from botocore.exceptions import BotoCoreError, ClientError
from .config import config
from .logging import logger

dynamodb = boto3.resource('dynamodb', region_name=config.AWS_REGION)

# BatchGetItem accepts at most 100 keys per request
BATCH_GET_LIMIT = 100


def get_item(table_name: str, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Get a single item from DynamoDB."""
    try:
        table = dynamodb.Table(table_name)
        response = table.get_item(Key=key)
        return response.get('Item')
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error getting item from {table_name}: {e}")
        return None


def put_item(table_name: str, item: Dict[str, Any]) -> bool:
    """Write a full item, replacing any previous version."""
    try:
        table = dynamodb.Table(table_name)
        table.put_item(Item=item)
        return True
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error writing item to {table_name}: {e}")
        return False


def update_item(
    table_name: str,
    key: Dict[str, Any],
    update_expression: str,
    expression_values: Dict[str, Any],
    expression_names: Optional[Dict[str, str]] = None
) -> bool:
    """Update an item in DynamoDB."""
    try:
        table = dynamodb.Table(table_name)

        params = {
            'Key': key,
            'UpdateExpression': update_expression,
            'ExpressionAttributeValues': expression_values
        }

        if expression_names:
            params['ExpressionAttributeNames'] = expression_names

        table.update_item(**params)
        return True

    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error updating item in {table_name}: {e}")
        return False


def batch_get_items(
    table_name: str,
    key_name: str,
    key_values: List[str]
) -> Optional[List[Dict[str, Any]]]:
    """
    Fetch many items by partition key.
    Handles chunking (max 100 keys per batch) and unprocessed keys.

    Args:
        table_name: Name of the DynamoDB table
        key_name: Partition key attribute name
        key_values: Partition key values to fetch

    Returns:
        Items found; missing keys are simply absent. None on error.
    """
    unique_values = list(dict.fromkeys(key_values))
    items = []

    try:
        for i in range(0, len(unique_values), BATCH_GET_LIMIT):
            chunk = unique_values[i:i + BATCH_GET_LIMIT]
            request = {table_name: {'Keys': [{key_name: value} for value in chunk]}}

            while request:
                response = dynamodb.batch_get_item(RequestItems=request)
                items.extend(response.get('Responses', {}).get(table_name, []))
                request = response.get('UnprocessedKeys') or None

        return items

    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error batch reading from {table_name}: {e}")
        return None


def scan_items(
    table_name: str,
    filter_expression: Optional[Any] = None,
    limit: Optional[int] = None
) -> List[Dict[str, Any]]:
    """
    Scan a table, following pagination until ``limit`` items are collected.

    Returns:
        List of items matching the filter, empty on error
    """
    try:
        table = dynamodb.Table(table_name)

        scan_params = {}
        if filter_expression is not None:
            scan_params['FilterExpression'] = filter_expression

        items = []
        while True:
            response = table.scan(**scan_params)
            items.extend(response.get('Items', []))

            if limit and len(items) >= limit:
                return items[:limit]
            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                return items
            scan_params['ExclusiveStartKey'] = last_key

    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error scanning {table_name}: {e}")
        return []
