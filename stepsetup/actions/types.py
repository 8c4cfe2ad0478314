"""
Action type definitions.

An action is called as ``action(config, on_success, on_error)`` and must
invoke exactly one of the two continuations, either before returning or
later from another thread.
"""

from typing import Any, Callable, Dict

SuccessCallback = Callable[..., None]
ErrorCallback = Callable[[Any], None]
Action = Callable[[Dict[str, Any], SuccessCallback, ErrorCallback], None]
