"""
DynamoDB wrapper for the emotion table.
"""

from typing import Any, Dict, List, Optional, Tuple

import boto3
from boto3.dynamodb.conditions import Key
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ..models.core import EmotionRecord
from .errors import ExternalCallError
from .logging_config import get_logger

logger = get_logger(__name__)


class EmotionStoreError(ExternalCallError):
    """Custom exception for DynamoDB errors."""
    pass


class EmotionStore:
    """Persist and query scored messages in DynamoDB."""

    def __init__(self, table_name: str, date_index_name: str = 'gsi-date', resource: Optional[Any] = None):
        """
        Initialize the store.

        Args:
            table_name: Emotion table name
            date_index_name: Name of the secondary index keyed by date
            resource: Pre-built DynamoDB service resource, created if None
        """
        resource = resource or boto3.resource('dynamodb', config=BotoConfig(retries={'max_attempts': 0}))
        self.table = resource.Table(table_name)
        self.table_name = table_name
        self.date_index_name = date_index_name

        logger.info(f'Initialized EmotionStore for table: {table_name}')

    def put_record(self, record: EmotionRecord) -> None:
        """Write a record, replacing any existing item with the same event_id.

        Raises:
            EmotionStoreError: If the write fails
        """
        try:
            self.table.put_item(Item=record.to_item())
            logger.debug(f'Entry registered to DynamoDB: {record.event_id}')
        except (ClientError, BotoCoreError) as e:
            logger.error(f'Failed to put record {record.event_id}: {e}')
            raise EmotionStoreError(f'Put record failed: {e}')

    def query_page(self, date: str, exclusive_start_key: Optional[Dict[str, Any]] = None
                   ) -> Tuple[List[EmotionRecord], Optional[Dict[str, Any]]]:
        """
        Fetch one page of records for a date from the date index.

        Args:
            date: Date string in YYYY-MM-DD format
            exclusive_start_key: Continuation key from the previous page

        Returns:
            Tuple of (records, last_evaluated_key); the key is None on the last page

        Raises:
            EmotionStoreError: If the query fails or returns malformed items
        """
        params = {
            'IndexName': self.date_index_name,
            'KeyConditionExpression': Key('date').eq(date),
            'ScanIndexForward': True,
        }
        if exclusive_start_key:
            params['ExclusiveStartKey'] = exclusive_start_key

        try:
            response = self.table.query(**params)
        except (ClientError, BotoCoreError) as e:
            logger.error(f'Failed to query {self.date_index_name} for {date}: {e}')
            raise EmotionStoreError(f'Query failed: {e}')

        try:
            records = [EmotionRecord.from_item(item) for item in response.get('Items', [])]
        except ValueError as e:
            raise EmotionStoreError(f'Malformed item in {self.table_name}: {e}')

        return records, response.get('LastEvaluatedKey')

    def query_date(self, date: str) -> List[EmotionRecord]:
        """
        Fetch every record for a date, following continuation keys sequentially.

        Args:
            date: Date string in YYYY-MM-DD format

        Returns:
            All records in index order
        """
        records, last_evaluated_key = self.query_page(date)
        pages = 1
        while last_evaluated_key:
            page, last_evaluated_key = self.query_page(date, last_evaluated_key)
            records.extend(page)
            pages += 1

        logger.info(f'Fetched {len(records)} entries for {date} in {pages} page(s)')
        return records


class TableExporter:
    """Start point-in-time exports of DynamoDB tables to S3."""

    def __init__(self, client: Optional[Any] = None):
        self.client = client or boto3.client('dynamodb', config=BotoConfig(retries={'max_attempts': 0}))

    def export_table(self, table_arn: str, bucket_name: str) -> Dict[str, Any]:
        """
        Start a point-in-time export of the table to S3 in DynamoDB JSON format.

        Returns:
            ExportDescription from the API response

        Raises:
            EmotionStoreError: If the export cannot be started
        """
        try:
            response = self.client.export_table_to_point_in_time(TableArn=table_arn,
                                                                 S3Bucket=bucket_name,
                                                                 ExportFormat='DYNAMODB_JSON')
        except (ClientError, BotoCoreError) as e:
            logger.error(f'Failed to start export of {table_arn}: {e}')
            raise EmotionStoreError(f'Export failed: {e}')

        description = response.get('ExportDescription', {})
        logger.info(f"Started export {description.get('ExportArn')} to s3://{bucket_name}")
        return description
