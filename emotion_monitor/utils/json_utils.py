"""
Conversion between JSON-like values and DynamoDB attribute values.
"""

from decimal import Decimal
from typing import Any


def to_dynamo_value(value: Any) -> Any:
    """Convert a JSON-like value into the form the DynamoDB resource API accepts.

    DynamoDB rejects Python floats, so every number becomes a Decimal built from
    its shortest repr. Mappings and sequences are converted recursively.

    Args:
        value: None, bool, int, float, str, list or dict

    Returns:
        Converted value

    Raises:
        TypeError: If the value is not JSON-like
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, (list, tuple)):
        return [to_dynamo_value(item) for item in value]
    if isinstance(value, dict):
        return {str(key): to_dynamo_value(item) for key, item in value.items()}
    raise TypeError(f'Unsupported type for DynamoDB conversion: {type(value).__name__}')


def from_dynamo_value(value: Any) -> Any:
    """Convert a value read through the DynamoDB resource API back to JSON-like form.

    Integral Decimals without a fractional exponent become int, other Decimals float.
    """
    if isinstance(value, Decimal):
        if value == value.to_integral_value() and value.as_tuple().exponent >= 0:
            return int(value)
        return float(value)
    if isinstance(value, (list, tuple, set)):
        return [from_dynamo_value(item) for item in value]
    if isinstance(value, dict):
        return {key: from_dynamo_value(item) for key, item in value.items()}
    return value
