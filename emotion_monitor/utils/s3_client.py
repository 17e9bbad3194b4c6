"""
S3 wrapper for moving exported data between prefixes.
"""

from typing import Any, List, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from .errors import ExternalCallError
from .logging_config import get_logger

logger = get_logger(__name__)

# DeleteObjects accepts at most this many keys per request
DELETE_BATCH_SIZE = 1000


class StorageError(ExternalCallError):
    """Custom exception for S3 errors."""
    pass


class S3Storage:
    """List, copy and delete objects within one account's buckets."""

    def __init__(self, client: Optional[Any] = None):
        self.client = client or boto3.client('s3', config=BotoConfig(retries={'max_attempts': 0}))

    def list_keys(self, bucket_name: str, prefix: str) -> List[str]:
        """
        List every object key under a prefix.

        Raises:
            StorageError: If listing fails
        """
        keys = []
        try:
            paginator = self.client.get_paginator('list_objects_v2')
            for page in paginator.paginate(Bucket=bucket_name, Prefix=prefix):
                keys.extend(obj['Key'] for obj in page.get('Contents', []) if obj.get('Key'))
        except (ClientError, BotoCoreError) as e:
            logger.error(f'Failed to list s3://{bucket_name}/{prefix}: {e}')
            raise StorageError(f'List objects failed: {e}')

        logger.debug(f'keys under {prefix}: {keys}')
        return keys

    def delete_keys(self, bucket_name: str, keys: List[str]) -> None:
        """
        Delete objects in batches.

        Raises:
            StorageError: If a batch request fails or reports per-key errors
        """
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            batch = keys[start:start + DELETE_BATCH_SIZE]
            for key in batch:
                logger.debug(f'delete object: {key}')
            try:
                response = self.client.delete_objects(Bucket=bucket_name,
                                                      Delete={'Objects': [{'Key': key} for key in batch], 'Quiet': True})
            except (ClientError, BotoCoreError) as e:
                logger.error(f'Failed to delete objects from {bucket_name}: {e}')
                raise StorageError(f'Delete objects failed: {e}')

            errors = response.get('Errors') or []
            if errors:
                raise StorageError(f"Delete objects failed for {len(errors)} key(s), first: {errors[0].get('Key')}")

    def copy_object(self, bucket_name: str, source_key: str, destination_key: str) -> None:
        """
        Copy one object within a bucket.

        Raises:
            StorageError: If the copy fails
        """
        logger.debug(f'copy from {source_key} to {destination_key}')
        try:
            self.client.copy_object(CopySource={'Bucket': bucket_name, 'Key': source_key},
                                    Bucket=bucket_name,
                                    Key=destination_key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f'Failed to copy {source_key} to {destination_key}: {e}')
            raise StorageError(f'Copy object failed: {e}')
