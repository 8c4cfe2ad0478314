"""Named formatters applied by ``%[...]`` tokens."""

from .registry import FormatterRegistry

__all__ = ['FormatterRegistry']
