"""
Amazon Bedrock Converse client wrapper with error handling.
"""

from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from .config import BedrockChatConfig
from .errors import ExternalCallError
from .logging_config import get_logger

logger = get_logger(__name__)


class BedrockLLMError(ExternalCallError):
    """Custom exception for Bedrock LLM errors."""
    pass


class BedrockLLM:
    """Amazon Bedrock chat client. Calls are made once; failures are not retried."""

    def __init__(self, config: BedrockChatConfig, client: Optional[Any] = None):
        """
        Initialize Bedrock LLM client.

        Args:
            config: BedrockChatConfig instance with connection parameters
            client: Pre-built bedrock-runtime client, created from config if None
        """
        self.config = config
        self.model_id = config.model_id

        # Create Bedrock runtime client with timeout configuration
        self.bedrock_runtime = client or boto3.client('bedrock-runtime',
                                                      region_name=config.region,
                                                      config=BotoConfig(connect_timeout=60,
                                                                        read_timeout=300,
                                                                        retries={'max_attempts': 0}))

        logger.info(f'Initialized Bedrock LLM client with model: {self.model_id}')

    def converse(self,
                 messages: List[Dict[str, Any]],
                 system_prompt: str,
                 tool_config: Optional[Dict[str, Any]] = None,
                 max_tokens: Optional[int] = None,
                 temperature: Optional[float] = None) -> Dict[str, Any]:
        """
        Send one Converse request.

        Args:
            messages: List of message dictionaries in Bedrock format
            system_prompt: System prompt for the conversation
            tool_config: Optional toolConfig restricting the reply to given tools
            max_tokens: Maximum tokens to generate (uses config default if None)
            temperature: Temperature for generation (uses config default if None)

        Returns:
            Raw Converse response dictionary

        Raises:
            BedrockLLMError: If the request fails
        """
        inf_params = {
            'maxTokens': max_tokens or self.config.max_tokens,
            'temperature': self.config.temperature if temperature is None else temperature,
        }
        request = {
            'modelId': self.model_id,
            'messages': messages,
            'system': [{'text': system_prompt}],
            'inferenceConfig': inf_params,
        }
        if tool_config is not None:
            request['toolConfig'] = tool_config

        try:
            logger.debug(f'Bedrock Converse request to {self.model_id}')
            response = self.bedrock_runtime.converse(**request)
            logger.debug(f"Bedrock Converse stop reason: {response.get('stopReason')}")
            return response

        except (ClientError, BotoCoreError) as e:
            logger.error(f'Bedrock Converse request failed: {e}')
            raise BedrockLLMError(f'Bedrock Converse request failed: {e}')
