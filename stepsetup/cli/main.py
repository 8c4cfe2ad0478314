"""Main CLI entry point for stepsetup."""

import argparse
import sys
from typing import Optional

from .commands import run_setup


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the stepsetup CLI."""
    parser = argparse.ArgumentParser(
        prog='stepsetup',
        description='Run groups of setup steps as an ordered queue of actions'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    run_parser = subparsers.add_parser('run', help='Run a setup')
    run_parser.add_argument(
        'setup',
        type=str,
        help='Setup file (JSON, YAML or Python), or its name under the setups dir'
    )
    run_parser.add_argument(
        '--setups-dir',
        type=str,
        help='Directory holding setups and overrides (default: $STEPSETUP_SETUPS_DIR or ./setups)'
    )
    run_parser.add_argument(
        '--stepmap',
        type=str,
        help='Stepmap override merged onto the default mapping'
    )
    run_parser.add_argument(
        '--formatters',
        type=str,
        help='Python module whose FORMATTERS extend the built-in formatters'
    )
    run_parser.add_argument(
        '-g', '--group',
        action='append',
        metavar='GROUP',
        help='Group to run (can be specified multiple times, in order)'
    )
    run_parser.add_argument(
        '-s', '--steps',
        action='append',
        metavar='STEP[,STEP...]',
        help='Steps for the matching --group (one per group, comma separated)'
    )
    run_parser.add_argument(
        '-p', '--payload',
        action='append',
        metavar='KEY=VALUE',
        help='Payload variables (can be specified multiple times)'
    )
    run_parser.add_argument(
        '--payload-file',
        type=str,
        help='Path to a JSON or YAML file containing payload variables'
    )
    run_parser.add_argument(
        '-y', '--execute',
        action='store_true',
        help='Process the queue without asking for confirmation'
    )
    run_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Build and print the queue without executing it'
    )
    run_parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    run_parser.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress non-error output'
    )
    run_parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    run_parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default='info',
        help='Set log level'
    )

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.command == 'run':
        return run_setup(parsed_args)

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
