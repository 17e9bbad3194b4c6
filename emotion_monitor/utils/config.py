"""
Configuration management for AWS services and application settings.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigMissingError

load_dotenv()

# Environment keys
SLACK_VERIFICATION_TOKEN = 'SLACK_VERIFICATION_TOKEN'
BOT_OAUTH_TOKEN = 'BOT_OAUTH_TOKEN'
RESULT_CHANNEL_ID = 'RESULT_CHANNEL_ID'
TABLE_NAME = 'TABLE_NAME'
TABLE_ARN = 'TABLE_ARN'
QUEUE_URL = 'QUEUE_URL'
QUEUE_ARN = 'QUEUE_ARN'
CHAT_MODEL = 'CHAT_MODEL'
IMMEDIATE_WARNING_THRESHOLD = 'IMMEDIATE_WARNING_THRESHOLD'
PROCESSED_S3_FOLDER = 'PROCESSED_S3_FOLDER'
BUCKET_NAME = 'BUCKET_NAME'


@dataclass
class BedrockChatConfig:
    """Configuration for the Amazon Bedrock Converse API."""
    region: str
    model_id: str
    max_tokens: int
    temperature: float


@dataclass
class SlackConfig:
    """Configuration for the Slack Web API."""
    bot_token: str
    api_url: str
    timeout: int


@dataclass
class ScoringConfig:
    """Configuration for the queue-driven scoring pipeline."""
    queue_arn: str
    table_name: str
    alert_threshold: float


@dataclass
class AggregationConfig:
    """Configuration for the daily aggregation pipeline."""
    table_name: str
    date_index_name: str
    result_channel_id: str


@dataclass
class ExportConfig:
    """Configuration for triggering the DynamoDB export."""
    table_arn: str
    bucket_name: str


@dataclass
class ArchivalConfig:
    """Configuration for moving exported data into the processed prefix."""
    bucket_name: str
    processed_prefix: str


@dataclass
class IngestionConfig:
    """Configuration for the Slack webhook receiver."""
    verification_token: Optional[str]
    queue_url: Optional[str]


@dataclass
class AppConfig:
    """Main application configuration."""
    log_level: str
    region: str


def require_env(key: str) -> str:
    """Return a required environment variable.

    Args:
        key: Environment variable name

    Returns:
        The non-empty value

    Raises:
        ConfigMissingError: If the variable is unset or empty
    """
    value = os.getenv(key)
    if value is None or not value.strip():
        raise ConfigMissingError(f'Required setting {key} is not set')
    return value


def _require_float(key: str) -> float:
    value = require_env(key)
    try:
        return float(value)
    except ValueError:
        raise ConfigMissingError(f'Setting {key} is not a number: {value!r}')


def load_config() -> AppConfig:
    """Load general configuration from environment variables with defaults."""
    return AppConfig(log_level=os.getenv('LOG_LEVEL', 'INFO'),
                     region=os.getenv('AWS_REGION', 'ap-northeast-1'))


def load_bedrock_config() -> BedrockChatConfig:
    return BedrockChatConfig(region=os.getenv('BEDROCK_AWS_REGION', load_config().region),
                             model_id=require_env(CHAT_MODEL),
                             max_tokens=int(os.getenv('BEDROCK_MAX_TOKENS', '1024')),
                             temperature=float(os.getenv('BEDROCK_TEMPERATURE', '0.0')))


def load_slack_config() -> SlackConfig:
    return SlackConfig(bot_token=require_env(BOT_OAUTH_TOKEN),
                       api_url=os.getenv('SLACK_API_URL', 'https://slack.com/api/'),
                       timeout=int(os.getenv('SLACK_TIMEOUT', '10')))


def load_scoring_config() -> ScoringConfig:
    return ScoringConfig(queue_arn=require_env(QUEUE_ARN),
                         table_name=require_env(TABLE_NAME),
                         alert_threshold=_require_float(IMMEDIATE_WARNING_THRESHOLD))


def load_aggregation_config() -> AggregationConfig:
    return AggregationConfig(table_name=require_env(TABLE_NAME),
                             date_index_name=os.getenv('DATE_INDEX_NAME', 'gsi-date'),
                             result_channel_id=require_env(RESULT_CHANNEL_ID))


def load_export_config() -> ExportConfig:
    return ExportConfig(table_arn=require_env(TABLE_ARN), bucket_name=require_env(BUCKET_NAME))


def load_archival_config() -> ArchivalConfig:
    return ArchivalConfig(bucket_name=require_env(BUCKET_NAME), processed_prefix=require_env(PROCESSED_S3_FOLDER))


def load_ingestion_config() -> IngestionConfig:
    """Load webhook receiver settings.

    Both values are optional here: the receiver must acknowledge every Slack
    delivery, so a missing token fails verification and a missing queue URL
    drops the event instead of aborting the request.
    """
    return IngestionConfig(verification_token=os.getenv(SLACK_VERIFICATION_TOKEN), queue_url=os.getenv(QUEUE_URL))
