"""
Formatter registry.

Holds the built-in formatters, deep-merged with an optional Python module
that exports a ``FORMATTERS`` mapping.
"""

import importlib.util
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ..exceptions import FormatterNotFoundError
from ..merge import deep_merge
from .builtin import FORMATTERS


logger = logging.getLogger(__name__)


class FormatterRegistry:
    """
    Nested mapping of formatter namespaces to callables.

    Built once at startup and read-only afterwards.
    """

    def __init__(self, formatters: Optional[Dict[str, Any]] = None):
        """
        Initialize the registry.

        Args:
            formatters: Formatter tree (default: the built-in formatters)
        """
        self._formatters: Dict[str, Any] = deep_merge({}, FORMATTERS if formatters is None else formatters)
        self.source: Optional[Path] = None

    @classmethod
    def load(cls, override: Optional[Path] = None) -> 'FormatterRegistry':
        """
        Build a registry from the built-ins and an optional override module.

        An override that cannot be imported, or that exports no mapping, is
        reported as a warning and the built-ins are used unchanged.

        Args:
            override: Path to a Python module exporting ``FORMATTERS``

        Returns:
            Formatter registry
        """
        registry = cls()
        if override is None:
            logger.debug("no additional formatters found")
            return registry

        override = override.resolve()
        try:
            extra = cls._import_formatters(override)
        except Exception as e:
            logger.warning(f"cannot load the formatters at '{override}': {e}")
            return registry

        registry._formatters = deep_merge(registry._formatters, extra)
        registry.source = override
        logger.debug(f"extended formatters from '{override}'")
        return registry

    @staticmethod
    def _import_formatters(path: Path) -> Dict[str, Any]:
        spec = importlib.util.spec_from_file_location(f"stepsetup_formatters_{path.stem}", path)
        if spec is None or spec.loader is None:
            raise ImportError(f"not a Python module: {path}")

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        formatters = getattr(module, 'FORMATTERS', None)
        if not isinstance(formatters, dict):
            raise TypeError("module does not export a FORMATTERS mapping")
        return formatters

    def resolve(self, path: str) -> Callable[..., Any]:
        """
        Resolve a dotted formatter path to its callable.

        Args:
            path: Dotted path such as ``str.upper``

        Returns:
            The formatter callable

        Raises:
            FormatterNotFoundError: If any segment is missing or the leaf is
                not callable
        """
        current: Any = self._formatters
        for part in path.split('.'):
            if not isinstance(current, dict) or part not in current:
                raise FormatterNotFoundError(path)
            current = current[part]

        if not callable(current):
            raise FormatterNotFoundError(path)
        return current

    def names(self) -> list:
        """List every dotted formatter path."""
        found = []

        def walk(node: Dict[str, Any], prefix: str):
            for key, value in node.items():
                name = f"{prefix}{key}"
                if isinstance(value, dict):
                    walk(value, f"{name}.")
                elif callable(value):
                    found.append(name)

        walk(self._formatters, "")
        return sorted(found)
