"""
Actions: the callables that perform each queued step.
"""

from .registry import ActionRegistry
from .types import Action

__all__ = ["ActionRegistry", "Action"]
