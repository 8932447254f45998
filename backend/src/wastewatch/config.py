"""
Configuration module for Lambda handlers.
Loads all environment variables needed by the signals backend.
"""
import os


class Config:
    """Centralized configuration from environment variables."""

    # AWS Region
    AWS_REGION = os.environ.get('AWS_REGION', 'eu-central-1')

    # DynamoDB Tables
    SIGNALS_TABLE = os.environ.get('SIGNALS_TABLE', '')
    ASSIGNMENTS_TABLE = os.environ.get('ASSIGNMENTS_TABLE', '')
    CONTAINERS_TABLE = os.environ.get('CONTAINERS_TABLE', '')

    # S3 Buckets
    MEDIA_BUCKET = os.environ.get('MEDIA_BUCKET', '')
    PHOTO_PREFIX = os.environ.get('PHOTO_PREFIX', 'media/signals/')
    PRESIGNED_URL_EXPIRATION = int(os.environ.get('PRESIGNED_URL_EXPIRATION', '3600'))

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


config = Config()
