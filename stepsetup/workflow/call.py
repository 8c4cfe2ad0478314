"""
Deferred action calls.

A Call binds an action to its resolved configuration. Starting it returns a
Future that settles when the action fires one of its continuations.
"""

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..actions.types import Action
from ..exceptions import ActionError


logger = logging.getLogger(__name__)


@dataclass
class Call:
    """A queued, fully resolved action invocation."""
    group: str
    step: str
    action_name: str
    action: Action
    config: Any
    logger: logging.Logger = field(default=logger, repr=False)
    _future: Optional[Future] = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def label(self) -> str:
        return f"{self.group}.{self.step}"

    def start(self) -> Future:
        """
        Invoke the action once.

        Returns:
            Future resolved by the success continuation, or failed by the
            error continuation or by an exception raised from the action

        Raises:
            RuntimeError: If the call was already started
        """
        if self._future is not None:
            raise RuntimeError(f"call '{self.label}' was already started")

        future: Future = Future()
        future.set_running_or_notify_cancel()
        self._future = future

        try:
            self.action(self.config, self._on_success, self._on_error)
        except Exception as e:
            self._on_error(e)

        return future

    def _on_success(self, result: Any = None) -> None:
        with self._lock:
            if self._future.done():
                self.logger.warning(f"step '{self.label}' signalled completion more than once")
                return
            self._future.set_result(result)

    def _on_error(self, error: Any) -> None:
        with self._lock:
            if self._future.done():
                self.logger.warning(f"step '{self.label}' reported an error after completing: {error}")
                return
            self.logger.error(f"step '{self.label}' failed: {error}")
            if not isinstance(error, BaseException):
                error = ActionError(str(error))
            self._future.set_exception(error)

    def describe(self) -> Dict[str, Any]:
        """Summary used for dry runs."""
        return {'step': self.label, 'action': self.action_name, 'config': self.config}
