"""
Step mapping registry.

Resolves step names to the action that runs them and the configuration
block the action receives.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..exceptions import UnknownStepError
from ..merge import deep_merge


logger = logging.getLogger(__name__)

DEFAULT_STEPMAP = Path(__file__).parent / 'stepmap.yaml'


@dataclass(frozen=True)
class StepTarget:
    """What a step resolves to."""
    action: str
    config_key: str


class MappingRegistry:
    """Step name -> ``{action, config}`` lookup, built once per run."""

    def __init__(self, mapping: Optional[Dict[str, Any]] = None):
        if mapping is None:
            mapping = self._read(DEFAULT_STEPMAP)
        self._mapping: Dict[str, Any] = mapping
        self.source: Optional[Path] = None

    @classmethod
    def load(cls, override: Optional[Path] = None) -> 'MappingRegistry':
        """
        Build the registry from the default stepmap and an optional override.

        An override that cannot be parsed, or that is not a mapping, is
        reported as a warning and the default is kept unmodified.

        Args:
            override: Path to a YAML/JSON stepmap

        Returns:
            Mapping registry
        """
        registry = cls()
        if override is None:
            logger.debug("no additional stepmap found")
            return registry

        override = override.resolve()
        try:
            extra = cls._read(override)
        except (OSError, ValueError, yaml.YAMLError, TypeError) as e:
            logger.warning(f"cannot parse the stepmap at '{override}': {e}")
            return registry

        registry._mapping = deep_merge(registry._mapping, extra)
        registry.source = override
        logger.debug(f"extended stepmap from '{override}'")
        return registry

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        with open(path, 'r') as f:
            if path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise TypeError(f"stepmap must be a mapping, got {type(data).__name__}")
        return data

    def resolve(self, step: str) -> StepTarget:
        """
        Resolve a step name.

        Raises:
            UnknownStepError: If the step is absent or its entry is malformed
        """
        entry = self._mapping.get(step)
        if not isinstance(entry, dict) or 'action' not in entry or 'config' not in entry:
            raise UnknownStepError(step)
        return StepTarget(action=str(entry['action']), config_key=str(entry['config']))

    def steps(self) -> list:
        """List known step names."""
        return sorted(self._mapping)

    def as_dict(self) -> Dict[str, Any]:
        return deep_merge({}, self._mapping)
