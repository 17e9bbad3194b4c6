"""
AWS Lambda entry points, one per trigger.

Each invocation loads its own configuration and builds its own collaborators.
Failures are logged and the invocation still returns an empty result, so the
platform does not redeliver the trigger.
"""

import base64
import json
from typing import Any, Dict

from .services.aggregation import AggregationPipeline
from .services.archival import ArchivalPipeline, ExportTrigger
from .services.extraction import ExtractionClient
from .services.ingestion import WebhookService
from .services.scoring import ScoringPipeline
from .utils.bedrock_llm import BedrockLLM
from .utils.config import (load_aggregation_config, load_archival_config, load_bedrock_config, load_export_config,
                           load_ingestion_config, load_scoring_config, load_slack_config)
from .utils.dynamo_client import EmotionStore, TableExporter
from .utils.errors import EmotionMonitorError
from .utils.logging_config import get_logger
from .utils.s3_client import S3Storage
from .utils.slack_client import SlackClient
from .utils.sqs_client import MessageQueue

logger = get_logger(__name__)


def _http_response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {'statusCode': status_code, 'headers': {'Content-Type': 'application/json'}, 'body': json.dumps(body)}


def _decode_body(event: Dict[str, Any]) -> Any:
    body = event.get('body') or ''
    if event.get('isBase64Encoded'):
        body = base64.b64decode(body).decode('utf-8')
    return json.loads(body)


def webhook_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """API Gateway proxy handler for the Slack Events API."""
    try:
        payload = _decode_body(event)
    except (ValueError, UnicodeDecodeError) as e:
        logger.warning(f'Webhook body is not JSON: {e}')
        return _http_response(200, {})

    config = load_ingestion_config()
    queue = MessageQueue(config.queue_url) if config.queue_url else None
    status_code, body = WebhookService(config, queue).handle(payload)
    return _http_response(status_code, body)


def sqs_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Score a batch of queued message events."""
    try:
        config = load_scoring_config()
        extraction = ExtractionClient(BedrockLLM(load_bedrock_config()))
        store = EmotionStore(config.table_name)
        slack = SlackClient(load_slack_config())

        ScoringPipeline(config, extraction, store, slack).process_batch(event.get('Records', []))
        logger.info('finish processing sqs event with success!')
    except EmotionMonitorError as e:
        logger.error(f'Error processing sqs event: {e}')
    return {}


def daily_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Post the previous business day's summaries."""
    try:
        config = load_aggregation_config()
        extraction = ExtractionClient(BedrockLLM(load_bedrock_config()))
        store = EmotionStore(config.table_name, config.date_index_name)
        slack = SlackClient(load_slack_config())

        AggregationPipeline(config, extraction, store, slack).run()
        logger.info('finish processing daily event with success!')
    except EmotionMonitorError as e:
        logger.error(f'Error processing daily event: {e}')
    return {}


def export_start_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Start the scheduled export of the emotion table."""
    try:
        config = load_export_config()
        ExportTrigger(config, TableExporter()).start()
        logger.info('finish processing export start event with success!')
    except EmotionMonitorError as e:
        logger.error(f'Error processing export start event: {e}')
    return {}


def export_finish_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Move a finished export into the processed prefix."""
    try:
        config = load_archival_config()

        ArchivalPipeline(config, S3Storage()).handle_event(event)
        logger.info('finish processing export finish event with success!')
    except EmotionMonitorError as e:
        logger.error(f'Error processing export finish event: {e}')
    return {}
