"""Run command implementation."""

import json
import logging
from argparse import Namespace

from stepsetup.config import RunOptions
from stepsetup.exceptions import SetupValidationError, StepSetupError
from stepsetup.formatters.registry import FormatterRegistry
from stepsetup.loader import SetupLoader, find_override
from stepsetup.mapping.registry import MappingRegistry
from stepsetup.workflow.orchestrator import Orchestrator


logger = logging.getLogger(__name__)

LOG_LEVELS = {'debug': 'DEBUG', 'info': 'INFO', 'warn': 'WARNING', 'error': 'ERROR'}


def configure_logging(args: Namespace) -> None:
    log_level = getattr(logging, LOG_LEVELS[args.log_level])
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR
    elif args.verbose:
        log_level = logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def run_setup(args: Namespace) -> int:
    """
    Run a setup.

    This is the only place fatal errors become an exit status: 0 on success
    or declined confirmation, the error's exit code otherwise.
    """
    configure_logging(args)

    try:
        options = RunOptions.from_args(args)
        setups_dir = options.setups_dir.resolve()

        mapping = MappingRegistry.load(find_override(options.stepmap, setups_dir))
        formatters = FormatterRegistry.load(find_override(options.formatters, setups_dir))

        content = SetupLoader(setups_dir).load(options.setup)

        orchestrator = Orchestrator(mapping, formatters, payload=options.payload)

        if options.dry_run:
            queue = orchestrator.build_queue(content, options.groups, options.steps)
            for call in queue:
                logger.info(f"[DRY RUN] {json.dumps(call.describe(), default=str)}")
            logger.info(f"[DRY RUN] {len(queue)} call(s) queued")
            return 0

        result = orchestrator.run(content, options.groups, options.steps, execute=options.execute)
        if result.confirmed:
            logger.debug(f"{len(result.executed)} call(s) executed")
        return 0

    except SetupValidationError as e:
        for error in e.errors:
            logger.error(f"Validation error: {error.message}" + (f" ({error.path})" if error.path else ""))
        return e.exit_code
    except StepSetupError as e:
        logger.error(str(e))
        return e.exit_code
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid run parameters: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1
