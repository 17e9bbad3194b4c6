"""
Slack webhook receiver: answer URL verification and forward user messages to the queue.
"""

import hmac
from typing import Any, Dict, Mapping, Optional, Tuple

from ..models.core import (EVENT_CALLBACK_TYPE, MESSAGE_EVENT_TYPE, URL_VERIFICATION_TYPE, EventChallengeRequest,
                           MessageEventRequest)
from ..utils.config import IngestionConfig
from ..utils.errors import ExternalCallError, ValidationRejectedError
from ..utils.logging_config import get_logger
from ..utils.sqs_client import MessageQueue

logger = get_logger(__name__)

# Subtypes containing any of these are notifications rather than user messages
EXCLUDED_SUBTYPE_MARKERS = ('bot', 'channel', 'notification')

Response = Tuple[int, Dict[str, Any]]


def verify_challenge(request: EventChallengeRequest, verification_token: Optional[str]) -> bool:
    if not verification_token:
        return False
    token_matches = hmac.compare_digest(request.token.encode('utf-8'), verification_token.encode('utf-8'))
    return token_matches and request.type == URL_VERIFICATION_TYPE


def validate_message_request(request: MessageEventRequest) -> None:
    """
    Check that an event callback is a plain user message worth scoring.

    Raises:
        ValidationRejectedError: If the event is excluded
    """
    if request.type != EVENT_CALLBACK_TYPE or request.event.type != MESSAGE_EVENT_TYPE:
        raise ValidationRejectedError('Wrong event type.')

    if request.event.bot_id is not None:
        raise ValidationRejectedError('Bot message.')

    subtype = request.event.subtype
    if subtype is not None and any(marker in subtype for marker in EXCLUDED_SUBTYPE_MARKERS):
        raise ValidationRejectedError('Bot/Channel notifications.')

    if not request.event.text:
        raise ValidationRejectedError('Empty text.')


class WebhookService:
    """Handle one Slack Events API delivery.

    Everything other than a failed URL verification is acknowledged with 200 so
    Slack does not retry deliveries that were deliberately dropped.
    """

    def __init__(self, config: IngestionConfig, queue: Optional[MessageQueue] = None):
        self.config = config
        self.queue = queue

    def handle(self, payload: Mapping[str, Any]) -> Response:
        """
        Process a decoded webhook body.

        Returns:
            Tuple of (status_code, response_body)
        """
        try:
            challenge_request = EventChallengeRequest.from_dict(payload)
        except ValueError:
            challenge_request = None

        if challenge_request is not None:
            if not verify_challenge(challenge_request, self.config.verification_token):
                logger.warning('URL verification failed')
                return 400, {'success': False, 'message': 'Error Verifying.'}
            return 200, {'challenge': challenge_request.challenge}

        try:
            message_request = MessageEventRequest.from_dict(payload)
        except ValueError as e:
            logger.info(f'Error converting to message request: {e}')
            return 200, {}

        try:
            validate_message_request(message_request)
        except ValidationRejectedError as e:
            logger.info(f'Dropping event {message_request.event_id}: {e}')
            return 200, {}

        if self.queue is None:
            logger.error('Queue URL not available, dropping event')
            return 200, {}

        try:
            self.queue.send(message_request)
        except ExternalCallError as e:
            logger.error(f'Error sending event {message_request.event_id} to queue: {e}')

        return 200, {}
