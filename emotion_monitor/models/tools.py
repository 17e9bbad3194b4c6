"""
Tool definitions used to force structured replies from the chat model.
"""

from dataclasses import dataclass
from typing import Any, Dict

EMOTION_FIELDS = ('fear', 'anger', 'joy', 'sad', 'contempt', 'disgust', 'surprise')


@dataclass(frozen=True)
class ToolDefinition:
    """A named tool whose input schema is the exact shape of the expected reply."""
    name: str
    description: str
    input_schema: Dict[str, Any]

    def to_tool_spec(self) -> Dict[str, Any]:
        """Render as a Bedrock Converse toolSpec."""
        return {
            'toolSpec': {
                'name': self.name,
                'description': self.description,
                'inputSchema': {
                    'json': self.input_schema
                }
            }
        }

    def to_tool_config(self) -> Dict[str, Any]:
        """Render a toolConfig that offers only this tool and forces its use."""
        return {'tools': [self.to_tool_spec()], 'toolChoice': {'tool': {'name': self.name}}}


EMOTION_SCORES_TOOL = ToolDefinition(
    name='emotion_scores',
    description='Print emotion score of a given text.',
    input_schema={
        'type': 'object',
        'properties': {
            emotion: {
                'type': 'number',
                'description': f'Score for {emotion}, ranging from 0.0 to 1.0.'
            }
            for emotion in EMOTION_FIELDS
        },
        'required': list(EMOTION_FIELDS),
    })

DAILY_ADVICE_TOOL = ToolDefinition(name='advice_recommendation',
                                   description='Print advice and song recommendation.',
                                   input_schema={
                                       'type': 'object',
                                       'properties': {
                                           'advice': {
                                               'type': 'string',
                                               'description': 'The one sentence advice.'
                                           },
                                           'song': {
                                               'type': 'string',
                                               'description': 'The name of the song.'
                                           }
                                       },
                                       'required': ['advice', 'song'],
                                   })
