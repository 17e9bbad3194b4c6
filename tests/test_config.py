"""
Unit tests for environment configuration loading.
"""

import logging

import pytest

from emotion_monitor.utils.config import (AppConfig, load_aggregation_config, load_archival_config, load_bedrock_config,
                                          load_config, load_ingestion_config, load_scoring_config, require_env)
from emotion_monitor.utils.errors import ConfigMissingError
from emotion_monitor.utils.logging_config import get_logger


@pytest.fixture
def scoring_env(monkeypatch):
    monkeypatch.setenv('QUEUE_ARN', 'arn:aws:sqs:ap-northeast-1:1:queue.fifo')
    monkeypatch.setenv('TABLE_NAME', 'emotion-table')
    monkeypatch.setenv('IMMEDIATE_WARNING_THRESHOLD', '0.6')


@pytest.mark.unit
def test_scoring_config(scoring_env):
    config = load_scoring_config()
    assert config.table_name == 'emotion-table'
    assert config.alert_threshold == 0.6


@pytest.mark.unit
@pytest.mark.parametrize('key', ['QUEUE_ARN', 'TABLE_NAME', 'IMMEDIATE_WARNING_THRESHOLD'])
def test_missing_scoring_setting(scoring_env, monkeypatch, key):
    monkeypatch.delenv(key)
    with pytest.raises(ConfigMissingError, match=key):
        load_scoring_config()


@pytest.mark.unit
def test_non_numeric_threshold(scoring_env, monkeypatch):
    monkeypatch.setenv('IMMEDIATE_WARNING_THRESHOLD', 'high')
    with pytest.raises(ConfigMissingError):
        load_scoring_config()


@pytest.mark.unit
def test_blank_value_counts_as_missing(monkeypatch):
    monkeypatch.setenv('RESULT_CHANNEL_ID', '   ')
    with pytest.raises(ConfigMissingError):
        require_env('RESULT_CHANNEL_ID')


@pytest.mark.unit
def test_aggregation_defaults(monkeypatch):
    monkeypatch.setenv('TABLE_NAME', 'emotion-table')
    monkeypatch.setenv('RESULT_CHANNEL_ID', 'CRESULT')
    monkeypatch.delenv('DATE_INDEX_NAME', raising=False)
    assert load_aggregation_config().date_index_name == 'gsi-date'


@pytest.mark.unit
def test_bedrock_requires_model(monkeypatch):
    monkeypatch.delenv('CHAT_MODEL', raising=False)
    with pytest.raises(ConfigMissingError):
        load_bedrock_config()


@pytest.mark.unit
def test_archival_config(monkeypatch):
    monkeypatch.setenv('BUCKET_NAME', 'bucket')
    monkeypatch.setenv('PROCESSED_S3_FOLDER', 'processed/')
    config = load_archival_config()
    assert (config.bucket_name, config.processed_prefix) == ('bucket', 'processed/')


@pytest.mark.unit
def test_ingestion_settings_are_optional(monkeypatch):
    monkeypatch.delenv('SLACK_VERIFICATION_TOKEN', raising=False)
    monkeypatch.delenv('QUEUE_URL', raising=False)
    config = load_ingestion_config()
    assert config.verification_token is None
    assert config.queue_url is None


@pytest.mark.unit
def test_app_config_defaults(monkeypatch):
    monkeypatch.delenv('LOG_LEVEL', raising=False)
    monkeypatch.delenv('AWS_REGION', raising=False)
    assert load_config() == AppConfig(log_level='INFO', region='ap-northeast-1')


@pytest.mark.unit
def test_logger_level_follows_app_config(monkeypatch):
    assert get_logger('emotion_monitor.test', AppConfig(log_level='debug', region='r')).level == logging.DEBUG

    monkeypatch.setenv('LOG_LEVEL', 'WARNING')
    assert get_logger('emotion_monitor.test').level == logging.WARNING
