"""
SQS wrapper for handing accepted Slack events to the scoring pipeline.
"""

from typing import Any, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ..models.core import MessageEventRequest
from .errors import ExternalCallError
from .logging_config import get_logger

logger = get_logger(__name__)


class QueueError(ExternalCallError):
    """Custom exception for SQS errors."""
    pass


class MessageQueue:
    """Send message events to a FIFO queue."""

    def __init__(self, queue_url: str, client: Optional[Any] = None):
        self.queue_url = queue_url
        self.client = client or boto3.client('sqs', config=BotoConfig(retries={'max_attempts': 0}))

    def send(self, request: MessageEventRequest) -> str:
        """
        Enqueue a message event.

        Messages are grouped by channel and deduplicated by Slack event id.

        Returns:
            The SQS message id

        Raises:
            QueueError: If the send fails
        """
        try:
            response = self.client.send_message(QueueUrl=self.queue_url,
                                                MessageBody=request.to_json(),
                                                MessageGroupId=request.event.channel,
                                                MessageDeduplicationId=request.event_id)
        except (ClientError, BotoCoreError) as e:
            logger.error(f'Failed to send {request.event_id} to queue: {e}')
            raise QueueError(f'Send message failed: {e}')

        message_id = response.get('MessageId', '')
        logger.debug(f'Queued event {request.event_id} as message {message_id}')
        return message_id
