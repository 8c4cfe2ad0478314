"""Built-in actions."""

import logging
import os
import subprocess
import threading
from pathlib import Path
from typing import Any, Dict

from ..exceptions import ActionError
from .types import ErrorCallback, SuccessCallback


logger = logging.getLogger(__name__)

LOG_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARNING,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}


def _require(config: Dict[str, Any], key: str) -> Any:
    if not isinstance(config, dict) or key not in config:
        raise ActionError(f"missing required config field '{key}'")
    return config[key]


def log_message(config: Dict[str, Any], on_success: SuccessCallback, on_error: ErrorCallback) -> None:
    """Log ``config.message`` at ``config.level`` (default info)."""
    message = _require(config, 'message')
    level = str(config.get('level', 'info')).lower()
    if level not in LOG_LEVELS:
        on_error(ActionError(f"unknown log level '{level}'"))
        return

    logger.log(LOG_LEVELS[level], "%s", message)
    on_success()


def shell_run(config: Dict[str, Any], on_success: SuccessCallback, on_error: ErrorCallback) -> None:
    """
    Run a command.

    Config:
        command: String (run through the shell) or list of arguments
        cwd: Working directory
        env: Variables added to the current environment
        check: Fail on non-zero exit (default true)
    """
    command = _require(config, 'command')
    shell = isinstance(command, str)
    if not shell:
        command = [str(token) for token in command]

    env = None
    if config.get('env'):
        env = os.environ.copy()
        env.update({str(k): str(v) for k, v in config['env'].items()})

    logger.debug(f"Running command: {command}")
    try:
        result = subprocess.run(
            command,
            shell=shell,
            cwd=config.get('cwd'),
            env=env,
            capture_output=True,
            text=True,
        )
    except OSError as e:
        on_error(ActionError(f"cannot run {command!r}: {e}"))
        return

    if result.stdout:
        logger.info(result.stdout.rstrip())
    if result.stderr:
        logger.debug(result.stderr.rstrip())

    if result.returncode != 0 and config.get('check', True):
        on_error(ActionError(f"command {command!r} exited with {result.returncode}"))
        return

    on_success({'exit_code': result.returncode, 'stdout': result.stdout})


def file_write(config: Dict[str, Any], on_success: SuccessCallback, on_error: ErrorCallback) -> None:
    """Write ``config.content`` to ``config.path``."""
    path = Path(_require(config, 'path'))
    content = config.get('content', '')
    if not isinstance(content, str):
        import json
        content = json.dumps(content, indent=2)

    try:
        if config.get('mkdir', True):
            path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'a' if config.get('append') else 'w', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        on_error(ActionError(f"cannot write '{path}': {e}"))
        return

    logger.info(f"Wrote {len(content)} characters to {path}")
    on_success(str(path))


def wait_sleep(config: Dict[str, Any], on_success: SuccessCallback, on_error: ErrorCallback) -> None:
    """Complete after ``config.seconds``, from a timer thread."""
    try:
        seconds = float(_require(config, 'seconds'))
    except (TypeError, ValueError):
        on_error(ActionError(f"invalid seconds value: {config.get('seconds')!r}"))
        return

    timer = threading.Timer(seconds, on_success)
    timer.daemon = True
    timer.start()


BUILTIN_ACTIONS = {
    'log.message': log_message,
    'shell.run': shell_run,
    'file.write': file_write,
    'wait.sleep': wait_sleep,
}
