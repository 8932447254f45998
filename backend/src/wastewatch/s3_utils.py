"""
S3 utility functions for signal photos.
Uploads new photos, deletes removed ones and generates presigned URLs for private bucket access.
"""
import uuid
import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from .config import config
from .errors import PhotoUploadError
from .logging import logger
from .photos import PendingPhoto

# S3 client with custom signature version for presigned URLs
s3_client = boto3.client(
    's3',
    region_name=config.AWS_REGION,
    config=BotoConfig(signature_version='s3v4')
)

CONTENT_TYPE_EXTENSIONS = {
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/heic': 'heic',
    'image/webp': 'webp',
}


def photo_key(content_type: str) -> str:
    """New object key under the configured photo prefix."""
    extension = CONTENT_TYPE_EXTENSIONS.get(content_type, 'bin')
    return f"{config.PHOTO_PREFIX}{uuid.uuid4()}.{extension}"


def upload_photo(photo: PendingPhoto, bucket_name: str = None) -> str:
    """
    Persist a locally captured photo.

    Args:
        photo: Pending photo carrying its image bytes
        bucket_name: Optional bucket name, defaults to config.MEDIA_BUCKET

    Returns:
        The S3 key, used as the photo's persisted id

    Raises:
        PhotoUploadError: No bucket configured, empty payload or S3 failure
    """
    bucket = bucket_name or config.MEDIA_BUCKET
    if not bucket:
        raise PhotoUploadError('No MEDIA_BUCKET configured', {'localKey': photo.local_key})
    if not photo.data:
        raise PhotoUploadError(
            f"Photo {photo.local_key} has no content",
            {'localKey': photo.local_key},
        )

    key = photo_key(photo.content_type)
    try:
        s3_client.put_object(
            Bucket=bucket,
            Key=key,
            Body=photo.data,
            ContentType=photo.content_type
        )
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error uploading photo {photo.local_key}: {e}")
        raise PhotoUploadError(
            f"Could not upload photo {photo.local_key}",
            {'localKey': photo.local_key},
        ) from e

    logger.info(f"Uploaded photo {photo.local_key} as {key}")
    return key


def delete_photo(s3_key: str, bucket_name: str = None) -> bool:
    """
    Delete a persisted photo by its key.

    Returns:
        True if deleted, False otherwise
    """
    bucket = bucket_name or config.MEDIA_BUCKET
    if not bucket or not s3_key:
        return False

    try:
        s3_client.delete_object(Bucket=bucket, Key=s3_key)
        logger.info(f"Deleted photo {s3_key}")
        return True
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error deleting photo {s3_key}: {e}")
        return False


def generate_presigned_url(
    s3_key: str,
    expiration: int = None,
    bucket_name: str = None
) -> str:
    """
    Generate a presigned URL for S3 object download.

    Args:
        s3_key: The S3 object key (e.g., 'media/signals/uuid.jpg')
        expiration: URL expiration time in seconds (default from config)
        bucket_name: Optional bucket name, defaults to config.MEDIA_BUCKET

    Returns:
        Presigned URL string or original key if generation fails
    """
    if not s3_key:
        return s3_key

    bucket = bucket_name or config.MEDIA_BUCKET
    if not bucket:
        logger.warning("No MEDIA_BUCKET configured, returning original key")
        return s3_key

    # External URLs are returned as-is
    if s3_key.startswith('http://') or s3_key.startswith('https://'):
        return s3_key

    try:
        url = s3_client.generate_presigned_url(
            'get_object',
            Params={
                'Bucket': bucket,
                'Key': s3_key
            },
            ExpiresIn=expiration or config.PRESIGNED_URL_EXPIRATION
        )
        return url

    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error generating presigned URL for {s3_key}: {e}")
        return s3_key


def sign_photo_urls(item: dict) -> dict:
    """Copy of a signal record whose photos carry presigned download URLs."""
    signed = dict(item)
    signed['photos'] = [
        {**photo, 'url': generate_presigned_url(photo['id'])}
        for photo in item.get('photos', [])
    ]
    return signed
