"""stepsetup: run declarative groups of steps as an ordered queue of actions."""

__version__ = "0.3.0"
