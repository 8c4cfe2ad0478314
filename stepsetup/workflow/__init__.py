"""Queue building and execution."""

from .call import Call
from .orchestrator import Orchestrator, RunResult

__all__ = ['Call', 'Orchestrator', 'RunResult']
