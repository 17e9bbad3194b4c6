"""
Builders for test data.
"""

from emotion_monitor.models.core import EmotionRecord, EmotionScores

QUEUE_ARN = 'arn:aws:sqs:ap-northeast-1:123456789012:SlackEventQueue.fifo'


def make_scores(**overrides) -> EmotionScores:
    values = {'anger': 0.0, 'contempt': 0.0, 'disgust': 0.0, 'fear': 0.0, 'joy': 0.0, 'sad': 0.0, 'surprise': 0.0}
    values.update(overrides)
    return EmotionScores(**values)


def make_record(event_id: str, user_id: str, text: str, timestamp: int = 1728540000, **scores) -> EmotionRecord:
    return EmotionRecord(event_id=event_id,
                         user_id=user_id,
                         timestamp=timestamp,
                         date='2024-10-10',
                         month='2024-10',
                         channel_id='C0001',
                         channel_type='channel',
                         text=text,
                         scores=make_scores(**scores))


def tool_use_response(*blocks) -> dict:
    """Build a Converse response whose message holds the given content blocks."""
    return {'output': {'message': {'role': 'assistant', 'content': list(blocks)}}, 'stopReason': 'tool_use'}


def tool_use_block(name: str, tool_input, tool_use_id: str = 'tooluse_1') -> dict:
    return {'toolUse': {'toolUseId': tool_use_id, 'name': name, 'input': tool_input}}
