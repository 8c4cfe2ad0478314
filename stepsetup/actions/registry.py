"""
Action registry.

Maps action identifiers from the step mapping to action callables.
"""

import logging
from typing import Dict, List

from ..exceptions import ActionNotFoundError
from .builtin import BUILTIN_ACTIONS
from .types import Action


logger = logging.getLogger(__name__)


class ActionRegistry:
    """
    Registry of actions.

    Registered actions shadow built-ins with the same identifier.
    """

    def __init__(self, include_builtins: bool = True):
        self._actions: Dict[str, Action] = {}
        self._builtin_actions: Dict[str, Action] = dict(BUILTIN_ACTIONS) if include_builtins else {}

    def register(self, name: str, action: Action) -> None:
        """
        Register an action.

        Raises:
            ValueError: If the action is not callable
        """
        if not callable(action):
            raise ValueError(f"Action '{name}' must be callable")
        self._actions[name] = action
        logger.debug(f"Registered action: {name}")

    def get(self, name: str) -> Action:
        """
        Get an action by identifier.

        Raises:
            ActionNotFoundError: If no action is registered under the name
        """
        action = self._actions.get(name) or self._builtin_actions.get(name)
        if action is None:
            raise ActionNotFoundError(name)
        return action

    def exists(self, name: str) -> bool:
        return name in self._actions or name in self._builtin_actions

    def list_actions(self) -> List[str]:
        return sorted(set(self._actions) | set(self._builtin_actions))
