"""
Pytest configuration and shared fixtures.

AWS and Slack collaborators are replaced with mocks; nothing here talks to the network.
"""

import os
from unittest.mock import MagicMock

import pytest

# Set testing environment before importing package modules
os.environ.setdefault('LOG_LEVEL', 'ERROR')
os.environ.setdefault('AWS_DEFAULT_REGION', 'ap-northeast-1')

from emotion_monitor.models.core import DailyAdvice  # noqa: E402

from .helpers import make_scores  # noqa: E402


@pytest.fixture
def message_payload():
    """A Slack event callback carrying a plain user message."""
    return {
        'api_app_id': 'A0001',
        'event_id': 'Ev0001',
        'event_time': 1728540000,
        'is_ext_shared_channel': False,
        'token': 'verification-token',
        'type': 'event_callback',
        'event': {
            'channel': 'C0001',
            'channel_type': 'channel',
            'type': 'message',
            'event_ts': '1728540000.000100',
            'text': 'Why is the build broken again?',
            'user': 'U0001',
        },
    }


@pytest.fixture
def mock_extraction():
    mock = MagicMock()
    mock.score_emotion.return_value = make_scores()
    mock.advise_daily.return_value = DailyAdvice(advice='Take a short walk after lunch.', song='Here Comes the Sun')
    return mock


@pytest.fixture
def mock_store():
    mock = MagicMock()
    mock.query_date.return_value = []
    return mock


@pytest.fixture
def mock_slack():
    mock = MagicMock()
    mock.post_message.return_value = '1728600000.000200'
    return mock
