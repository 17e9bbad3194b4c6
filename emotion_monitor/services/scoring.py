"""
Scoring pipeline: score queued messages, persist them and raise threshold alerts.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping

from ..models.core import EmotionRecord, EmotionScores, MessageEventRequest
from ..utils.config import ScoringConfig
from ..utils.dynamo_client import EmotionStore
from ..utils.errors import ExtractionFailedError, ValidationRejectedError
from ..utils.logging_config import get_logger
from ..utils.slack_client import SlackClient
from .extraction import ExtractionClient

logger = get_logger(__name__)

ANGER_WARNING = 'This message scored high for *anger*. Take a breath before you continue the conversation.'
DISGUST_WARNING = 'This message scored high for *disgust*. Consider how others in the channel may read it.'
CONTEMPT_WARNING = 'This message scored high for *contempt*. Try rephrasing it with respect for the reader.'

# Checked in this order; fear, joy, sad and surprise never alert
ALERT_RULES = (
    ('anger', ANGER_WARNING),
    ('disgust', DISGUST_WARNING),
    ('contempt', CONTEMPT_WARNING),
)


def exceeded_alerts(scores: EmotionScores, threshold: float) -> List[str]:
    """Return the names of alerting emotions whose score is strictly above the threshold."""
    return [emotion for emotion, _ in ALERT_RULES if getattr(scores, emotion) > threshold]


def format_alert(user_id: str, message: str) -> str:
    return f':warning:<@{user_id}>:warning:\n{message}'


@dataclass
class ScoringReport:
    """Outcome of one batch."""
    scored: List[str] = field(default_factory=list)
    rejected: int = 0
    failed: List[str] = field(default_factory=list)
    alerts: int = 0


class ScoringPipeline:
    """Consume queued Slack message events one at a time."""

    def __init__(self, config: ScoringConfig, extraction: ExtractionClient, store: EmotionStore, slack: SlackClient):
        self.config = config
        self.extraction = extraction
        self.store = store
        self.slack = slack

    def parse_record(self, record: Mapping[str, Any]) -> MessageEventRequest:
        """
        Validate one SQS record and parse its body.

        Raises:
            ValidationRejectedError: If the record comes from another queue or its body is malformed
        """
        source_arn = record.get('eventSourceARN')
        if source_arn is not None and source_arn != self.config.queue_arn:
            raise ValidationRejectedError(f'wrong event source: {source_arn}')

        body = record.get('body')
        if not body:
            raise ValidationRejectedError('record has no body')

        try:
            return MessageEventRequest.from_json(body)
        except ValueError as e:
            raise ValidationRejectedError(f'error parsing message: {e}')

    def process_batch(self, records: Iterable[Mapping[str, Any]]) -> ScoringReport:
        """
        Score, persist and alert for each record of a batch, in order.

        Rejected records and records the model could not score are skipped.
        Any other failure propagates and abandons the rest of the batch.

        Args:
            records: SQS event records

        Returns:
            ScoringReport for the batch
        """
        report = ScoringReport()
        for record in records:
            try:
                request = self.parse_record(record)
            except ValidationRejectedError as e:
                logger.warning(f"Skipping record {record.get('messageId')}: {e}")
                report.rejected += 1
                continue

            try:
                scores = self.extraction.score_emotion(request.event.text)
            except ExtractionFailedError as e:
                logger.error(f'Failed to score event {request.event_id}: {e}')
                report.failed.append(request.event_id)
                continue

            report.alerts += self.process_message(request, scores)
            report.scored.append(request.event_id)

        logger.info(f'Scored {len(report.scored)} message(s), rejected {report.rejected}, '
                    f'failed {len(report.failed)}, sent {report.alerts} alert(s)')
        return report

    def process_message(self, request: MessageEventRequest, scores: EmotionScores) -> int:
        """
        Persist a scored message and post an alert for each exceeded threshold.

        Returns:
            Number of alerts posted
        """
        record = EmotionRecord.from_message(request, scores)
        self.store.put_record(record)

        event = request.event
        messages = dict(ALERT_RULES)
        alerts = exceeded_alerts(scores, self.config.alert_threshold)
        for emotion in alerts:
            logger.info(f'{emotion} score {getattr(scores, emotion)} over threshold for event {request.event_id}')
            self.slack.post_message(event.channel, format_alert(event.user, messages[emotion]), thread_ts=event.event_ts)
        return len(alerts)
