"""
Structured extraction through forced Bedrock tool use.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence, TypeVar, Union

from ..models.core import DailyAdvice, EmotionScores
from ..models.tools import DAILY_ADVICE_TOOL, EMOTION_SCORES_TOOL, ToolDefinition
from ..utils.bedrock_llm import BedrockLLM
from ..utils.errors import ExtractionFailedError
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class TextBlock:
    text: str


@dataclass(frozen=True)
class ToolUseBlock:
    tool_use_id: str
    name: str
    input: Any


@dataclass(frozen=True)
class OtherBlock:
    kind: str


ContentBlock = Union[TextBlock, ToolUseBlock, OtherBlock]


def parse_content_blocks(response: Dict[str, Any]) -> List[ContentBlock]:
    """Convert the content of a Converse reply into typed blocks.

    Raises:
        ExtractionFailedError: If the reply output is not a message
    """
    message = response.get('output', {}).get('message')
    if not isinstance(message, dict):
        raise ExtractionFailedError(f"Converse output is not a message: {response.get('output')!r}")

    blocks: List[ContentBlock] = []
    for raw in message.get('content') or []:
        if 'toolUse' in raw:
            tool_use = raw['toolUse']
            blocks.append(ToolUseBlock(tool_use_id=tool_use.get('toolUseId', ''),
                                       name=tool_use.get('name', ''),
                                       input=tool_use.get('input')))
        elif 'text' in raw:
            blocks.append(TextBlock(text=raw['text']))
        else:
            blocks.append(OtherBlock(kind=next(iter(raw), 'unknown')))
    return blocks


class ExtractionClient:
    """Get typed data out of the chat model by forcing a single schema-described tool."""

    def __init__(self, llm: BedrockLLM):
        self.llm = llm

    def extract(self, system_prompt: str, tool: ToolDefinition, conversation_text: str, parse: Callable[[Any], T]) -> T:
        """Run one forced-tool conversation and parse the first matching tool input.

        Tool-use blocks for other tools are ignored. A candidate whose input fails
        to parse is skipped and the scan continues with the next block.

        Args:
            system_prompt: System prompt for the model
            tool: Tool the model is forced to call
            conversation_text: Text of the single user message
            parse: Converts a tool input into the target type, raising ValueError on mismatch

        Returns:
            The parsed value of the first valid block

        Raises:
            ExtractionFailedError: If no tool-use block parses
            BedrockLLMError: If the request itself fails
        """
        messages = [{'role': 'user', 'content': [{'text': conversation_text}]}]
        response = self.llm.converse(messages=messages, system_prompt=system_prompt, tool_config=tool.to_tool_config())

        tool_use_count = 0
        for block in parse_content_blocks(response):
            if isinstance(block, ToolUseBlock):
                tool_use_count += 1
                if block.name != tool.name:
                    logger.debug(f'Skipping tool use for unexpected tool: {block.name}')
                    continue
                try:
                    result = parse(block.input)
                except (ValueError, TypeError) as e:
                    logger.warning(f'Tool input for {tool.name} did not match schema: {e}')
                    continue
                logger.debug(f'tool use. name: {tool.name}, input: {result}')
                return result
            elif isinstance(block, TextBlock):
                continue
            elif isinstance(block, OtherBlock):
                logger.debug(f'Skipping {block.kind} block')
                continue

        if tool_use_count == 0:
            raise ExtractionFailedError(f'Reply contained no tool use for {tool.name}')
        raise ExtractionFailedError(f'No tool use for {tool.name} matched the expected schema')

    def score_emotion(self, text: str) -> EmotionScores:
        """Score the emotional content of one chat message."""
        system_prompt = f"""
You will be acting as an AI Empath.
You are an expert at reading emotions within text messages and chats.
The text given will be a message sent to a Slack channel of a company.
The target text will be surrounded by <text></text>.
You have to use {EMOTION_SCORES_TOOL.name} to print out the score for each emotion."""

        return self.extract(system_prompt, EMOTION_SCORES_TOOL, f'<text>{text}</text>', EmotionScores.from_dict)

    def advise_daily(self, scores: Sequence[EmotionScores]) -> DailyAdvice:
        """Ask for one sentence of advice and a song, given a user's scores for a day.

        Args:
            scores: The user's scores ordered earliest first

        Returns:
            DailyAdvice for the user
        """
        system_prompt = f"""
You are a mental health professional.
You give advice to employees based on the emotion scores evaluated for the text messages they sent to Slack throughout the day.
The emotion scores for a single employee in a single day will be given in the following format.

<scores>
{{"anger": 0.6, "contempt": 0.0, "disgust": 0.0, "fear": 0.1, "joy": 0.6, "sad": 0.1, "surprise": 0.0}}
{{"anger": 0.8, "contempt": 0.0, "disgust": 0.0, "fear": 0.1, "joy": 0.0, "sad": 0.1, "surprise": 0.0}}
...
<scores>

Each line represents a set of emotion scores for a single text message.
Lines are in the order of when the text message is sent. Earliest comes first.
Each score is evaluated in the range of 0.0 to 1.0.

Your job is to
- Give a one sentence advice
- Recommend a song to listen to.

You have to use {DAILY_ADVICE_TOOL.name} to print out the advice and the recommended song."""

        lines = '\n'.join(score.to_json() for score in scores)
        conversation_text = f'<scores>\n{lines}\n<scores>'
        logger.debug(f'message sent: {conversation_text}')

        return self.extract(system_prompt, DAILY_ADVICE_TOOL, conversation_text, DailyAdvice.from_dict)
