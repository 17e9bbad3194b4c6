"""
Error taxonomy shared by the pipelines and the client wrappers.
"""


class EmotionMonitorError(Exception):
    """Base exception for all emotion monitor errors."""
    pass


class ConfigMissingError(EmotionMonitorError):
    """A required setting is absent or unusable at invocation start."""
    pass


class ValidationRejectedError(EmotionMonitorError):
    """An inbound item is malformed or excluded by policy."""
    pass


class ExtractionFailedError(EmotionMonitorError):
    """No tool-use block of an LLM reply matched the expected schema."""
    pass


class ExternalCallError(EmotionMonitorError):
    """A transport, storage or API call failed."""
    pass
