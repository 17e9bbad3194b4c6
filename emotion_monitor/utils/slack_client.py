"""
Slack Web API client for posting threaded messages.
"""

from typing import Any, Dict, List, Optional

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackClientError as SlackSDKError

from .config import SlackConfig
from .errors import ExternalCallError
from .logging_config import get_logger

logger = get_logger(__name__)


class SlackClientError(ExternalCallError):
    """Custom exception for Slack API errors."""
    pass


def text_blocks(text: str) -> List[Dict[str, Any]]:
    """Wrap markdown text in a single section block."""
    return [{'type': 'section', 'text': {'type': 'mrkdwn', 'text': text}}]


class SlackClient:
    """chat.postMessage on top of the Slack SDK WebClient."""

    def __init__(self, config: SlackConfig, client: Optional[WebClient] = None):
        self.config = config
        self.client = client or WebClient(token=config.bot_token,
                                          base_url=config.api_url,
                                          timeout=config.timeout)

    def post_message(self, channel: str, text: str, thread_ts: Optional[str] = None) -> str:
        """
        Post one markdown section to a channel.

        Args:
            channel: Channel id
            text: Markdown text of the single section block
            thread_ts: Timestamp of the parent message to reply under

        Returns:
            The ts of the posted message, usable as a thread_ts

        Raises:
            SlackClientError: If the request fails or Slack reports an error
        """
        try:
            response = self.client.chat_postMessage(channel=channel,
                                                    text=text,
                                                    blocks=text_blocks(text),
                                                    thread_ts=thread_ts)
        except SlackApiError as e:
            logger.error(f"Slack chat.postMessage failed: {e.response.get('error')}")
            raise SlackClientError(f"Slack API error: {e.response.get('error', 'unknown')}")
        except SlackSDKError as e:
            logger.error(f'Slack chat.postMessage request failed: {e}')
            raise SlackClientError(f'Slack request failed: {e}')

        ts = response.get('ts')
        if not ts:
            raise SlackClientError('Slack response has no ts')

        logger.debug(f'Posted message {ts} to {channel}')
        return ts
