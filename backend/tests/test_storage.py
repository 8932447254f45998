"""
Tests for the DynamoDB and S3 adapters.
"""
import pytest
from unittest.mock import MagicMock, patch
from botocore.exceptions import ClientError

from wastewatch.container_states import ContainerState
from wastewatch.containers import clear_container_states, container_from_item, load_containers
from wastewatch.errors import (
    NotFoundError,
    PhotoUploadError,
    StoreUnavailableError,
    UnknownStateError,
)
from wastewatch.photos import PendingPhoto


def client_error(operation):
    return ClientError({'Error': {'Code': 'ProvisionedThroughputExceededException',
                                  'Message': 'slow down'}}, operation)


class TestBatchGetItems:
    """Chunking and unprocessed keys."""

    def test_chunks_of_one_hundred(self):
        from wastewatch import dynamo

        keys = [f"c{i}" for i in range(150)]
        mock_db = MagicMock()
        mock_db.batch_get_item.side_effect = [
            {'Responses': {'containers': [{'containerId': k} for k in keys[:100]]}},
            {'Responses': {'containers': [{'containerId': k} for k in keys[100:]]}},
        ]

        with patch.object(dynamo, 'dynamodb', mock_db):
            items = dynamo.batch_get_items('containers', 'containerId', keys + ['c0'])

        assert len(items) == 150
        assert mock_db.batch_get_item.call_count == 2
        first_request = mock_db.batch_get_item.call_args_list[0].kwargs['RequestItems']
        assert len(first_request['containers']['Keys']) == 100

    def test_unprocessed_keys_are_retried(self):
        from wastewatch import dynamo

        unprocessed = {'containers': {'Keys': [{'containerId': 'c2'}]}}
        mock_db = MagicMock()
        mock_db.batch_get_item.side_effect = [
            {'Responses': {'containers': [{'containerId': 'c1'}]}, 'UnprocessedKeys': unprocessed},
            {'Responses': {'containers': [{'containerId': 'c2'}]}, 'UnprocessedKeys': {}},
        ]

        with patch.object(dynamo, 'dynamodb', mock_db):
            items = dynamo.batch_get_items('containers', 'containerId', ['c1', 'c2'])

        assert [i['containerId'] for i in items] == ['c1', 'c2']
        assert mock_db.batch_get_item.call_args_list[1].kwargs['RequestItems'] == unprocessed

    def test_errors_return_none(self):
        from wastewatch import dynamo

        mock_db = MagicMock()
        mock_db.batch_get_item.side_effect = client_error('BatchGetItem')

        with patch.object(dynamo, 'dynamodb', mock_db):
            assert dynamo.batch_get_items('containers', 'containerId', ['c1']) is None


class TestContainers:
    """Container records and the snapshot used for progress."""

    def test_record_parsing(self):
        container = container_from_item({
            'containerId': 'c1', 'publicNumber': 'SO-0001', 'wasteType': 'recyclables',
            'status': 'full', 'state': ['overflowing', 'dirty'],
        })
        assert container.public_number == 'SO-0001'
        assert container.state == frozenset({ContainerState.OVERFLOWING, ContainerState.DIRTY})

    def test_missing_record(self):
        with pytest.raises(NotFoundError):
            container_from_item(None)

    def test_corrupt_records_are_unavailable(self):
        items = [
            {'containerId': 'c1', 'state': ['overflowing']},
            {'containerId': 'c2', 'state': ['teleported']},
        ]
        with patch('wastewatch.containers.batch_get_items', return_value=items):
            containers = load_containers(['c1', 'c2', 'c3'])

        assert list(containers) == ['c1']

    def test_store_outage_is_not_an_empty_snapshot(self):
        with patch('wastewatch.containers.batch_get_items', return_value=None):
            with pytest.raises(StoreUnavailableError):
                load_containers(['c1', 'c2'])

    def test_no_records_found(self):
        with patch('wastewatch.containers.batch_get_items', return_value=[]):
            assert load_containers(['c1']) == {}

    def test_clear_states(self):
        container = container_from_item({'containerId': 'c1', 'state': ['overflowing', 'dirty']})

        cleared = clear_container_states(container, ['overflowing'], now='2026-10-19T10:00:00Z')
        assert cleared.state == frozenset({ContainerState.DIRTY})
        assert cleared.updated_at == '2026-10-19T10:00:00Z'
        assert clear_container_states(container, ['damaged']) is container

    def test_clear_rejects_unknown_tags(self):
        container = container_from_item({'containerId': 'c1', 'state': []})
        with pytest.raises(UnknownStateError):
            clear_container_states(container, ['sparkling'])


class TestPhotoUpload:
    """S3 photo storage collaborator."""

    def test_upload_returns_key(self):
        from wastewatch import s3_utils

        mock_s3 = MagicMock()
        with patch.object(s3_utils, 's3_client', mock_s3), \
                patch.object(s3_utils.config, 'MEDIA_BUCKET', 'wastewatch-media'):
            key = s3_utils.upload_photo(PendingPhoto('cam-1', 'image/png', b'png-bytes'))

        assert key.startswith(s3_utils.config.PHOTO_PREFIX)
        assert key.endswith('.png')
        mock_s3.put_object.assert_called_once_with(
            Bucket='wastewatch-media', Key=key, Body=b'png-bytes', ContentType='image/png'
        )

    def test_upload_without_bucket(self):
        from wastewatch import s3_utils

        with patch.object(s3_utils.config, 'MEDIA_BUCKET', ''):
            with pytest.raises(PhotoUploadError):
                s3_utils.upload_photo(PendingPhoto('cam-1', data=b'x'))

    def test_upload_failure(self):
        from wastewatch import s3_utils

        mock_s3 = MagicMock()
        mock_s3.put_object.side_effect = client_error('PutObject')
        with patch.object(s3_utils, 's3_client', mock_s3), \
                patch.object(s3_utils.config, 'MEDIA_BUCKET', 'wastewatch-media'):
            with pytest.raises(PhotoUploadError):
                s3_utils.upload_photo(PendingPhoto('cam-1', data=b'x'))

    def test_empty_photo_is_rejected(self):
        from wastewatch import s3_utils

        with patch.object(s3_utils.config, 'MEDIA_BUCKET', 'wastewatch-media'):
            with pytest.raises(PhotoUploadError):
                s3_utils.upload_photo(PendingPhoto('cam-1'))
