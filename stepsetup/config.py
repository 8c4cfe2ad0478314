"""Run options assembled by the CLI."""

import json
import os
from argparse import Namespace
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


DEFAULT_SETUPS_DIR = 'setups'
DEFAULT_STEPMAP = 'stepmap.yaml'
DEFAULT_FORMATTERS = 'formatters.py'


@dataclass
class RunOptions:
    """Everything a run needs besides the registries."""
    setup: str
    setups_dir: Path = field(default_factory=lambda: Path(os.environ.get('STEPSETUP_SETUPS_DIR', DEFAULT_SETUPS_DIR)))
    stepmap: str = field(default_factory=lambda: os.environ.get('STEPSETUP_STEPMAP', DEFAULT_STEPMAP))
    formatters: str = field(default_factory=lambda: os.environ.get('STEPSETUP_FORMATTERS', DEFAULT_FORMATTERS))
    groups: Optional[List[str]] = None
    steps: Optional[List[List[str]]] = None
    payload: Dict[str, Any] = field(default_factory=dict)
    execute: bool = False
    dry_run: bool = False

    @classmethod
    def from_args(cls, args: Namespace) -> 'RunOptions':
        """Build options from parsed ``run`` arguments."""
        options = cls(setup=args.setup)
        if args.setups_dir:
            options.setups_dir = Path(args.setups_dir)
        if args.stepmap:
            options.stepmap = args.stepmap
        if args.formatters:
            options.formatters = args.formatters

        options.groups = list(args.group) if args.group else None
        options.steps = parse_steps(args.steps) if args.steps else None
        options.payload = parse_payload(args)
        options.execute = bool(args.execute)
        options.dry_run = bool(args.dry_run)
        return options


def parse_steps(values: List[str]) -> List[List[str]]:
    """Turn repeated ``--steps a,b`` options into one step list per group."""
    return [[step.strip() for step in value.split(',') if step.strip()] for value in values]


def parse_payload(args: Namespace) -> Dict[str, Any]:
    """Parse payload variables from command line arguments."""
    payload: Dict[str, Any] = {}

    # File first so explicit KEY=VALUE pairs win
    if args.payload_file:
        payload_file = Path(args.payload_file)
        if not payload_file.exists():
            raise FileNotFoundError(f"Payload file not found: {payload_file}")

        with open(payload_file, 'r') as f:
            if payload_file.suffix.lower() == '.json':
                file_payload = json.load(f)
            else:
                file_payload = yaml.safe_load(f)
        if not isinstance(file_payload, dict):
            raise ValueError(f"Payload file must contain an object, got {type(file_payload).__name__}")

        for key, value in file_payload.items():
            payload[str(key)] = value

    if args.payload:
        for item in args.payload:
            if '=' not in item:
                raise ValueError(f"Invalid payload format: {item}. Expected KEY=VALUE")
            key, value = item.split('=', 1)
            payload[key] = value

    return payload
