"""
Setup orchestrator.

Builds the resolution queue from setup content and runs it strictly in
order, one call in flight at a time, stopping at the first failure.
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, TextIO

from ..actions.registry import ActionRegistry
from ..exceptions import (
    ActionFailedError,
    GroupStepMismatchError,
    MissingConfigError,
    UnknownGroupError,
)
from ..formatters.registry import FormatterRegistry
from ..mapping.registry import MappingRegistry
from ..variables.template import TemplateEngine
from .call import Call

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of a run."""
    confirmed: bool
    executed: List[str] = field(default_factory=list)


def _plural(n: int) -> str:
    return "" if n == 1 else "s"


class Orchestrator:
    """
    Turns groups of steps into an ordered queue of calls and executes it.
    """

    CONFIRM_PROMPT = "\nProcess queue? (y/n)"

    def __init__(
        self,
        mapping: MappingRegistry,
        formatters: FormatterRegistry,
        actions: Optional[ActionRegistry] = None,
        payload: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            mapping: Step name to action/config mapping
            formatters: Formatters for ``%[...]`` tokens
            actions: Action registry (default: built-in actions)
            payload: Runtime variables for ``${...}`` tokens
        """
        self.mapping = mapping
        self.formatters = formatters
        self.actions = actions or ActionRegistry()
        self.payload = dict(payload or {})
        self.engine = TemplateEngine(formatters)

    def select_groups(self, content: Dict[str, Any], groups: Optional[Sequence[str]] = None) -> List[str]:
        """
        Determine the groups to process.

        Without an explicit selection every group is used except those whose
        name starts with an underscore.

        Raises:
            UnknownGroupError: If an explicitly selected group does not exist
        """
        if groups:
            for group in groups:
                if group not in content:
                    raise UnknownGroupError(group)
            return list(groups)

        logger.debug("no group set, use all groups")
        return [group for group in content if not group.startswith('_')]

    def select_steps(
        self,
        content: Dict[str, Any],
        groups: List[str],
        steps: Optional[Sequence[Sequence[str]]] = None,
    ) -> List[List[str]]:
        """
        Determine the steps of each selected group.

        Raises:
            GroupStepMismatchError: If explicit step lists do not pair up with groups
        """
        if steps is not None:
            if len(steps) != len(groups):
                raise GroupStepMismatchError(len(groups), len(steps))
            return [list(group_steps) for group_steps in steps]

        selected = []
        for group in groups:
            block = content[group]
            if 'steps' in block:
                selected.append(list(block['steps']))
            else:
                selected.append(list(block.keys()))
        return selected

    def build_queue(
        self,
        content: Dict[str, Any],
        groups: Optional[Sequence[str]] = None,
        steps: Optional[Sequence[Sequence[str]]] = None,
    ) -> List[Call]:
        """
        Build the ordered resolution queue.

        Args:
            content: Setup content (group name -> group block)
            groups: Explicit group selection, in order
            steps: Explicit step list per selected group

        Returns:
            Calls ordered by group selection, then step order within group

        Raises:
            StepSetupError: On any unknown group, step, config block,
                formatter or action, or mismatched selections
        """
        groups = self.select_groups(content, groups)
        logger.debug(f"{len(groups)} group{_plural(len(groups))} found")

        group_steps = self.select_steps(content, groups, steps)
        total = sum(len(s) for s in group_steps)
        logger.debug(f"{total} step{_plural(total)} found")

        queue: List[Call] = []
        for group, names in zip(groups, group_steps):
            block = content[group]
            for step in names:
                target = self.mapping.resolve(step)
                if target.config_key not in block:
                    raise MissingConfigError(group, step, target.config_key)

                config = self.engine.resolve(block[target.config_key], self.payload)
                action = self.actions.get(target.action)

                queue.append(Call(
                    group=group,
                    step=step,
                    action_name=target.action,
                    action=action,
                    config=config,
                    logger=logger,
                ))
                logger.info(f"queue step '{group}.{step}'")

        return queue

    def execute(self, queue: List[Call]) -> List[str]:
        """
        Run calls one at a time, in queue order.

        Each call is started only after the previous one settled. The first
        failure stops the run; effects of earlier calls are kept.

        Returns:
            Labels of the executed calls

        Raises:
            ActionFailedError: For the first call that fails
        """
        logger.info("Executing ...")
        executed = []
        for call in queue:
            logger.debug(f"start step '{call.label}' ({call.action_name})")
            future = call.start()
            try:
                future.result()
            except Exception as e:
                raise ActionFailedError(call.label, e) from e
            executed.append(call.label)

        logger.info("done")
        return executed

    @classmethod
    def confirm(cls, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> bool:
        """
        Ask whether to process the queue.

        Only the exact line ``y`` proceeds; anything else, including end of
        input, declines.
        """
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout

        print(cls.CONFIRM_PROMPT, file=stdout, flush=True)
        return stdin.readline() == "y\n"

    def run(
        self,
        content: Dict[str, Any],
        groups: Optional[Sequence[str]] = None,
        steps: Optional[Sequence[Sequence[str]]] = None,
        execute: bool = False,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ) -> RunResult:
        """
        Build the queue and execute it, asking for confirmation first unless
        ``execute`` is set.

        Returns:
            RunResult; ``confirmed`` is False when the prompt was declined
        """
        queue = self.build_queue(content, groups, steps)

        if not execute and not self.confirm(stdin, stdout):
            logger.info("queue not processed")
            return RunResult(confirmed=False)

        return RunResult(confirmed=True, executed=self.execute(queue))
