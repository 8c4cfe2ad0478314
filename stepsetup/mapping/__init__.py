"""Step name to action mapping."""

from .registry import MappingRegistry, StepTarget

__all__ = ['MappingRegistry', 'StepTarget']
