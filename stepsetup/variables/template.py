"""
Template engine for setup configuration blocks.

String leaves support one payload variable and one formatter per string:

- ``${name}`` / ``${name|default}``: replaced by ``payload[name]`` (or the
  default, or the empty string); the result is then decoded as a JSON
  literal when possible, so ``"${port}"`` with ``port="8080"`` becomes 8080.
- ``%[ns.fn]`` / ``%[ns.fn:a, b]``: replaced by the return value of the
  named formatter called with the comma separated, trimmed arguments.

Each stage handles a single token, and when a string holds several tokens
of the same stage only the rightmost one is resolved. Earlier tokens stay
in the output as literal text.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from ..exceptions import FormatterFailedError, StepSetupError
from ..formatters.registry import FormatterRegistry
from .values import ValueKind, classify, to_text


logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not JSON literals
    raise ValueError(f"not a JSON literal: {name}")


class TemplateEngine:
    """
    Resolves configuration trees against a payload and a formatter registry.

    ``resolve`` never mutates its input; it builds a new tree, so the same
    configuration block can back several steps.
    """

    # The leading greedy ``.*`` pins the match to the rightmost token.
    VAR_PATTERN = re.compile(r'.*(\$\{([^|}]+)(?:\|([^}]*))?\})', re.DOTALL)
    FORMATTER_PATTERN = re.compile(r'.*(%\[([^:\]]+)(?::([^\]]*))?\])', re.DOTALL)

    def __init__(self, formatters: FormatterRegistry):
        """
        Initialize the engine.

        Args:
            formatters: Registry used to resolve ``%[...]`` tokens
        """
        self.formatters = formatters

    def resolve(self, value: Any, payload: Optional[Dict[str, Any]] = None) -> Any:
        """
        Resolve a configuration value.

        Args:
            value: Configuration tree (mapping, sequence or scalar)
            payload: Runtime variables for ``${...}`` tokens

        Returns:
            A new, fully resolved value

        Raises:
            FormatterNotFoundError: If a ``%[...]`` token names no formatter
            FormatterFailedError: If a formatter raises
            UnsupportedValueError: If the tree holds a value of unknown kind
        """
        payload = payload or {}
        kind = classify(value)

        if kind is ValueKind.MAPPING:
            return {key: self.resolve(item, payload) for key, item in value.items()}
        elif kind is ValueKind.SEQUENCE:
            return [self.resolve(item, payload) for item in value]
        elif kind is ValueKind.STRING:
            return self.resolve_string(value, payload)
        elif kind in (ValueKind.NULL, ValueKind.BOOLEAN, ValueKind.NUMBER):
            return value
        raise AssertionError(f"unhandled value kind {kind}")

    def resolve_string(self, text: str, payload: Dict[str, Any]) -> Any:
        """Apply variable substitution, then formatter application, to one string."""
        value = self._substitute_variable(text, payload)
        if isinstance(value, str):
            value = self._apply_formatter(value)
        return value

    def _substitute_variable(self, text: str, payload: Dict[str, Any]) -> Any:
        match = self.VAR_PATTERN.match(text)
        if not match:
            return text

        name = match.group(2)
        value = payload.get(name)
        if value is None:
            value = match.group(3) if match.group(3) is not None else ""
            logger.debug(f"Variable '{name}' not in payload, using default {value!r}")

        start, end = match.span(1)
        text = text[:start] + to_text(value) + text[end:]

        try:
            return json.loads(text, parse_constant=_reject_constant)
        except ValueError:
            return text

    def _apply_formatter(self, text: str) -> str:
        match = self.FORMATTER_PATTERN.match(text)
        if not match:
            return text

        path = match.group(2).strip()
        formatter = self.formatters.resolve(path)
        args = self._split_args(match.group(3))

        try:
            value = formatter(*args)
        except StepSetupError:
            raise
        except Exception as e:
            raise FormatterFailedError(path, e) from e
        if value is None:
            return text

        start, end = match.span(1)
        return text[:start] + to_text(value) + text[end:]

    @staticmethod
    def _split_args(raw: Optional[str]) -> List[str]:
        if not raw:
            return []
        return [arg.strip() for arg in raw.split(',')]
