"""
Export and archival of the emotion table.
"""

import posixpath
from typing import Any, List, Mapping
from urllib.parse import unquote_plus

from ..utils.config import ArchivalConfig, ExportConfig
from ..utils.dynamo_client import TableExporter
from ..utils.logging_config import get_logger
from ..utils.s3_client import S3Storage, StorageError

logger = get_logger(__name__)

MANIFEST_FILE = 'manifest-files.json'
DATA_FOLDER = 'data/'


def source_data_folder(manifest_key: str) -> str:
    """Replace the manifest file name in a key with the data folder name."""
    return manifest_key.replace(MANIFEST_FILE, DATA_FOLDER)


def destination_key(processed_prefix: str, source_key: str) -> str:
    """Place a source object directly under the processed prefix, dropping its directories."""
    return f'{processed_prefix}{posixpath.basename(source_key)}'


class ExportTrigger:
    """Start the periodic point-in-time export of the emotion table."""

    def __init__(self, config: ExportConfig, exporter: TableExporter):
        self.config = config
        self.exporter = exporter

    def start(self) -> str:
        description = self.exporter.export_table(self.config.table_arn, self.config.bucket_name)
        return description.get('ExportArn', '')


class ArchivalPipeline:
    """Move a completed export's data files into the processed prefix."""

    def __init__(self, config: ArchivalConfig, storage: S3Storage):
        self.config = config
        self.storage = storage

    def handle_event(self, s3_event: Mapping[str, Any]) -> List[str]:
        """
        React to S3 object-created records for export manifests in the configured bucket.

        Returns:
            Manifest keys that were processed
        """
        processed = []
        for record in s3_event.get('Records', []):
            s3 = record.get('s3', {})
            bucket_name = s3.get('bucket', {}).get('name')
            object_key = unquote_plus(s3.get('object', {}).get('key') or '')
            if bucket_name != self.config.bucket_name or not object_key:
                logger.debug(f'Ignoring record for bucket {bucket_name}')
                continue
            if MANIFEST_FILE not in object_key:
                continue

            self.move_data(object_key)
            processed.append(object_key)
        return processed

    def move_data(self, manifest_key: str) -> List[str]:
        """
        Replace the processed prefix's contents with the export's data files.

        Clearing the prefix is best effort: if it cannot be listed the copy still
        runs. Copies are not retried or rolled back, so a failure can leave a
        partial migration.

        Args:
            manifest_key: Key of the export's manifest-files.json object

        Returns:
            Destination keys written

        Raises:
            StorageError: If the deletion, the source listing or a copy fails
        """
        bucket_name = self.config.bucket_name
        processed_prefix = self.config.processed_prefix

        try:
            old_keys = self.storage.list_keys(bucket_name, processed_prefix)
        except StorageError as e:
            logger.warning(f'Could not list {processed_prefix}, keeping existing objects: {e}')
            old_keys = []
        if old_keys:
            self.storage.delete_keys(bucket_name, old_keys)
            logger.info(f'Deleted {len(old_keys)} object(s) under {processed_prefix}')

        data_folder = source_data_folder(manifest_key)
        logger.info(f'data folder: {data_folder}')

        copied = []
        for key in self.storage.list_keys(bucket_name, data_folder):
            target = destination_key(processed_prefix, key)
            self.storage.copy_object(bucket_name, key, target)
            copied.append(target)

        logger.info(f'Copied {len(copied)} object(s) to {processed_prefix}')
        return copied
