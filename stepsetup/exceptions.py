"""Stepsetup exceptions.

Every fatal condition is a ``StepSetupError``. Library code raises; only the
CLI decides the process exit status.
"""

from typing import List
from dataclasses import dataclass


@dataclass
class ValidationError:
    """Single validation error."""
    message: str
    path: str = ""


class StepSetupError(Exception):
    """Base class for fatal errors that terminate a run."""

    exit_code = 1


class SetupSourceError(StepSetupError):
    """The setup content could not be found, read or parsed."""


class SetupValidationError(StepSetupError):
    """Raised when the setup content is structurally invalid.

    Carries every accumulated error so the CLI can report them together.
    """

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors

        messages = []
        for error in errors:
            if error.path:
                messages.append(f"Validation error at '{error.path}': {error.message}")
            else:
                messages.append(f"Validation error: {error.message}")

        super().__init__("\n".join(messages))


class UnknownStepError(StepSetupError):
    """A step name is absent from the merged step mapping."""

    def __init__(self, step: str):
        self.step = step
        super().__init__(f"step '{step}' not found in the step mapping")


class UnknownGroupError(StepSetupError):
    """An explicitly selected group is absent from the setup content."""

    def __init__(self, group: str):
        self.group = group
        super().__init__(f"group '{group}' not found in the setup content")


class MissingConfigError(StepSetupError):
    """A step's config key names no block in its group."""

    def __init__(self, group: str, step: str, config_key: str):
        self.group = group
        self.step = step
        self.config_key = config_key
        super().__init__(
            f"step '{group}.{step}' uses config '{config_key}' which group '{group}' does not define"
        )


class FormatterNotFoundError(StepSetupError):
    """A formatter path does not resolve to a callable."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"formatter '{path}' not found")


class FormatterFailedError(StepSetupError):
    """A formatter raised while producing its replacement text."""

    def __init__(self, path: str, error: BaseException):
        self.path = path
        self.error = error
        super().__init__(f"formatter '{path}' failed: {error}")


class GroupStepMismatchError(StepSetupError):
    """Explicit step selections do not line up with the selected groups."""

    def __init__(self, groups: int, steps: int):
        self.groups = groups
        self.steps = steps
        super().__init__(
            f"steps and groups cannot be matched ({steps} step lists for {groups} groups)"
        )


class ActionNotFoundError(StepSetupError):
    """No action is registered under the requested identifier."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"action '{action}' is not supported")


class UnsupportedValueError(StepSetupError):
    """A configuration value is not one of the supported value kinds."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"unsupported configuration value of type {type(value).__name__}: {value!r}")


class ActionFailedError(StepSetupError):
    """A queued call reported failure; the run stops here."""

    def __init__(self, label: str, error: BaseException):
        self.label = label
        self.error = error
        super().__init__(f"step '{label}' failed: {error}")


class ActionError(Exception):
    """Error reported by an action through its error continuation."""
