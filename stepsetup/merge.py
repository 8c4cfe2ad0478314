"""Deep merge shared by the step mapping and formatter registries."""

import copy
from typing import Any, Dict


def deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge overlay dict into base dict without touching either input.

    Nested dicts merge recursively; any other overlay value (scalars, lists,
    callables) replaces the base value outright.

    Args:
        base: Base dictionary
        overlay: Overlay dictionary (takes precedence)

    Returns:
        Merged dictionary
    """
    result = copy.copy(base)

    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        elif isinstance(value, dict):
            result[key] = deep_merge({}, value)
        else:
            result[key] = value

    return result
