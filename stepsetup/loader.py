"""Setup content loader and structural validation."""

import importlib.util
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from stepsetup.exceptions import SetupSourceError, SetupValidationError, ValidationError


logger = logging.getLogger(__name__)


class PreservingLoader(yaml.SafeLoader):
    """YAML loader that keeps date-like scalars as strings."""
    pass


# Drop the implicit timestamp resolver so values like 2024-01-01 stay text;
# configuration leaves must be null, bool, number, string, list or mapping.
PreservingLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != 'tag:yaml.org,2002:timestamp']
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def find_override(name: Optional[str], setups_dir: Optional[Path]) -> Optional[Path]:
    """
    Locate an optional override file.

    Tries ``name`` as given, then relative to the setups directory.

    Returns:
        Path to the override, or None if there is none
    """
    if not name:
        return None

    direct = Path(name)
    if direct.is_file():
        return direct.resolve()

    if setups_dir is not None:
        candidate = setups_dir / name
        if candidate.is_file():
            return candidate.resolve()

    return None


class SetupLoader:
    """Finds, reads and validates setup content."""

    SUPPORTED_EXTENSIONS = ('json', 'yaml', 'yml', 'py')
    CANDIDATE_SUFFIXES = ('', '.json', '.yaml', '.yml', '.py')

    def __init__(self, setups_dir: Optional[Path] = None):
        """Initialize loader with the directory holding setups."""
        self.setups_dir = setups_dir.resolve() if setups_dir is not None else None
        self.errors: List[ValidationError] = []

    def find(self, setup: str) -> Path:
        """
        Resolve the setup argument to a file.

        Raises:
            SetupSourceError: If neither the argument nor the setups dir yields a file
        """
        found = self._find_candidate(Path(setup))
        if found is not None:
            return found.resolve()

        if self.setups_dir is None or not self.setups_dir.is_dir():
            raise SetupSourceError(f"setups-dir '{self.setups_dir}' does not exist")

        found = self._find_candidate(self.setups_dir / setup)
        if found is None:
            raise SetupSourceError(f"setup-file '{setup}' does not exist")
        return found.resolve()

    def _find_candidate(self, base: Path) -> Optional[Path]:
        for suffix in self.CANDIDATE_SUFFIXES:
            candidate = Path(f"{base}{suffix}")
            if candidate.is_file():
                return candidate
        return None

    def load(self, setup: str) -> Dict[str, Any]:
        """
        Load and validate setup content.

        Args:
            setup: Setup file path or name under the setups directory

        Returns:
            Mapping of group name to group block

        Raises:
            SetupSourceError: If the file is missing, unsupported or unreadable
            SetupValidationError: If the content is structurally invalid
        """
        path = self.find(setup)
        logger.debug(f"use setup-file at '{path}'")

        extension = path.suffix.lstrip('.').lower()
        if extension not in self.SUPPORTED_EXTENSIONS:
            raise SetupSourceError(f"setup-file extension '{extension}' not supported")
        logger.debug(f"setup-file extension is '{extension}'")

        try:
            if extension == 'py':
                content = self._load_module(path)
            elif extension == 'json':
                with open(path, 'r') as f:
                    content = json.load(f)
            else:
                with open(path, 'r') as f:
                    content = yaml.load(f, Loader=PreservingLoader)
        except SetupSourceError:
            raise
        except Exception as e:
            raise SetupSourceError(f"failed to read setup-file '{path}': {e}") from e

        self.validate(content)
        logger.debug("read setup content")
        return content

    def _load_module(self, path: Path) -> Any:
        spec = importlib.util.spec_from_file_location(f"stepsetup_setup_{path.stem}", path)
        if spec is None or spec.loader is None:
            raise SetupSourceError(f"setup-file '{path}' is not a Python module")

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        if not hasattr(module, 'SETUP'):
            raise SetupSourceError(f"setup module '{path}' does not define SETUP")
        # Round-trip through JSON so module content obeys the same value kinds
        return json.loads(json.dumps(module.SETUP))

    def validate(self, content: Any) -> None:
        """
        Validate setup structure.

        Raises:
            SetupValidationError: With every structural error found
        """
        self.errors = []

        if not isinstance(content, dict):
            self._add_error("setup content must be a mapping of groups")
            self._raise_validation_errors()

        for group, block in content.items():
            if not isinstance(group, str):
                self._add_error(f"group name must be a string, got {type(group).__name__}", str(group))
                continue
            if not isinstance(block, dict):
                self._add_error("group must be a mapping", group)
                continue

            if 'steps' in block:
                steps = block['steps']
                if not isinstance(steps, list):
                    self._add_error("'steps' must be a list", f"{group}.steps")
                else:
                    for i, step in enumerate(steps):
                        if not isinstance(step, str):
                            self._add_error(f"step must be a string, got {type(step).__name__}", f"{group}.steps[{i}]")

        if self.errors:
            self._raise_validation_errors()

    def _add_error(self, message: str, path: str = ""):
        """Add validation error."""
        self.errors.append(ValidationError(message, path))

    def _raise_validation_errors(self):
        """Raise SetupValidationError with accumulated errors."""
        raise SetupValidationError(self.errors)
