"""
Configuration value kinds.

Setup content is parsed from JSON, YAML or Python modules; every value the
template engine walks must be one of the kinds below.
"""

from enum import Enum
from typing import Any

from ..exceptions import UnsupportedValueError


class ValueKind(str, Enum):
    """Tag for a configuration value."""
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def classify(value: Any) -> ValueKind:
    """
    Return the kind of a configuration value.

    Raises:
        UnsupportedValueError: If the value is none of the known kinds
    """
    if value is None:
        return ValueKind.NULL
    # bool before number: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, dict):
        return ValueKind.MAPPING
    raise UnsupportedValueError(value)


def to_text(value: Any) -> str:
    """Text form of a value spliced into a string leaf."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    elif isinstance(value, (int, float)):
        return str(value)
    elif isinstance(value, str):
        return value
    else:
        # Complex types get JSON representation
        import json
        return json.dumps(value)
