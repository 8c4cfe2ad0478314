"""
Configuration value resolution: payload variables and formatters.
"""

from .template import TemplateEngine
from .values import ValueKind, classify

__all__ = ['TemplateEngine', 'ValueKind', 'classify']
