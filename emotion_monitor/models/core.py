"""
Core data models for emotion scoring and daily aggregation.
"""

import json
from dataclasses import asdict, dataclass, fields
from numbers import Real
from typing import Any, Dict, Mapping, Optional

from ..utils.json_utils import from_dynamo_value, to_dynamo_value
from ..utils.timestamp_utils import to_date_month

EVENT_CALLBACK_TYPE = 'event_callback'
MESSAGE_EVENT_TYPE = 'message'
URL_VERIFICATION_TYPE = 'url_verification'


def _require_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return value


def _optional_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class EmotionScores:
    """Scores for the seven tracked emotions, nominally in [0.0, 1.0].

    The range is not enforced; consumers must tolerate values outside it.
    """
    anger: float
    contempt: float
    disgust: float
    fear: float
    joy: float
    sad: float
    surprise: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'EmotionScores':
        """Build scores from a mapping holding all seven numeric fields.

        Raises:
            ValueError: If a field is missing or not a number
        """
        if not isinstance(data, Mapping):
            raise ValueError(f'Expected a mapping, got {type(data).__name__}')

        values = {}
        for field in fields(cls):
            if field.name not in data:
                raise ValueError(f"Missing emotion score '{field.name}'")
            value = data[field.name]
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ValueError(f"Emotion score '{field.name}' is not a number: {value!r}")
            values[field.name] = float(value)
        return cls(**values)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize to a single-line JSON object."""
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class DailyAdvice:
    """One sentence of advice and a song recommendation."""
    advice: str
    song: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'DailyAdvice':
        if not isinstance(data, Mapping):
            raise ValueError(f'Expected a mapping, got {type(data).__name__}')
        return cls(advice=_require_str(data, 'advice'), song=_require_str(data, 'song'))


@dataclass
class EventChallengeRequest:
    """Slack URL verification handshake."""
    challenge: str
    token: str
    type: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'EventChallengeRequest':
        if not isinstance(data, Mapping):
            raise ValueError(f'Expected a mapping, got {type(data).__name__}')
        return cls(challenge=_require_str(data, 'challenge'),
                   token=_require_str(data, 'token'),
                   type=_require_str(data, 'type'))


@dataclass
class MessageEvent:
    """Inner Slack message event."""
    channel: str
    channel_type: str  # channel, im
    type: str  # message
    event_ts: str  # used as thread_ts for replies
    text: str
    user: str
    subtype: Optional[str] = None  # None for user messages
    bot_id: Optional[str] = None  # None for user messages

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'MessageEvent':
        if not isinstance(data, Mapping):
            raise ValueError(f'Expected a mapping, got {type(data).__name__}')
        return cls(channel=_require_str(data, 'channel'),
                   channel_type=_require_str(data, 'channel_type'),
                   type=_require_str(data, 'type'),
                   event_ts=_require_str(data, 'event_ts'),
                   text=_require_str(data, 'text'),
                   user=_require_str(data, 'user'),
                   subtype=_optional_str(data, 'subtype'),
                   bot_id=_optional_str(data, 'bot_id'))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ('subtype', 'bot_id'):
            if data[key] is None:
                del data[key]
        return data


@dataclass
class MessageEventRequest:
    """Slack event callback envelope carrying a message event.

    This is the payload placed on the queue by the webhook receiver.
    """
    api_app_id: str
    event_id: str
    event_time: int
    is_ext_shared_channel: bool
    token: str
    type: str
    event: MessageEvent

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'MessageEventRequest':
        """Parse an event callback payload.

        Raises:
            ValueError: If the payload does not have the expected shape
        """
        if not isinstance(data, Mapping):
            raise ValueError(f'Expected a mapping, got {type(data).__name__}')

        event_time = data.get('event_time')
        if isinstance(event_time, bool) or not isinstance(event_time, int) or event_time < 0:
            raise ValueError(f"Field 'event_time' must be a non-negative integer, got {event_time!r}")
        try:
            to_date_month(event_time)
        except (ValueError, OverflowError, OSError) as e:
            raise ValueError(f"Field 'event_time' has no local date: {e}")

        is_ext_shared_channel = data.get('is_ext_shared_channel')
        if not isinstance(is_ext_shared_channel, bool):
            raise ValueError("Field 'is_ext_shared_channel' must be a boolean")

        return cls(api_app_id=_require_str(data, 'api_app_id'),
                   event_id=_require_str(data, 'event_id'),
                   event_time=event_time,
                   is_ext_shared_channel=is_ext_shared_channel,
                   token=_require_str(data, 'token'),
                   type=_require_str(data, 'type'),
                   event=MessageEvent.from_dict(data.get('event')))

    @classmethod
    def from_json(cls, body: str) -> 'MessageEventRequest':
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise ValueError(f'Message body is not valid JSON: {e}')
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['event'] = self.event.to_dict()
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class EmotionRecord:
    """A scored message as persisted in the emotion table.

    Keyed by event_id, with a secondary index on date.
    """
    event_id: str
    user_id: str
    timestamp: int
    date: str
    month: str
    channel_id: str
    channel_type: str  # channel, im
    text: str
    scores: EmotionScores

    @classmethod
    def from_message(cls, request: MessageEventRequest, scores: EmotionScores) -> 'EmotionRecord':
        date, month = to_date_month(request.event_time)
        return cls(event_id=request.event_id,
                   user_id=request.event.user,
                   timestamp=request.event_time,
                   date=date,
                   month=month,
                   channel_id=request.event.channel,
                   channel_type=request.event.channel_type,
                   text=request.event.text,
                   scores=scores)

    def to_item(self) -> Dict[str, Any]:
        """Flatten into a DynamoDB item, scores stored as top-level attributes."""
        item = {
            'event_id': self.event_id,
            'user_id': self.user_id,
            'timestamp': self.timestamp,
            'date': self.date,
            'month': self.month,
            'channel_id': self.channel_id,
            'channel_type': self.channel_type,
            'text': self.text,
        }
        item.update(self.scores.to_dict())
        return to_dynamo_value(item)

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> 'EmotionRecord':
        """Rebuild a record from a DynamoDB item.

        Raises:
            ValueError: If the item is missing attributes
        """
        data = from_dynamo_value(dict(item))
        timestamp = data.get('timestamp')
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise ValueError(f"Attribute 'timestamp' must be an integer, got {timestamp!r}")

        return cls(event_id=_require_str(data, 'event_id'),
                   user_id=_require_str(data, 'user_id'),
                   timestamp=timestamp,
                   date=_require_str(data, 'date'),
                   month=_require_str(data, 'month'),
                   channel_id=_require_str(data, 'channel_id'),
                   channel_type=_require_str(data, 'channel_type'),
                   text=_require_str(data, 'text'),
                   scores=EmotionScores.from_dict(data))
