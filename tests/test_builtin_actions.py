"""Tests for the built-in actions."""

import logging
import sys
from concurrent.futures import Future

import pytest

from stepsetup.actions.builtin import file_write, log_message, shell_run, wait_sleep
from stepsetup.actions.registry import ActionRegistry
from stepsetup.exceptions import ActionError, ActionNotFoundError
from stepsetup.workflow.call import Call


def run_action(action, config, timeout=5):
    """Start an action through a Call and wait for its outcome."""
    future: Future = Call(group="g", step="s", action_name="test", action=action, config=config).start()
    return future.result(timeout=timeout)


class TestLogMessage:

    def test_logs_message_at_level(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="stepsetup.actions.builtin"):
            run_action(log_message, {"message": "hello there", "level": "warn"})

        assert any(r.levelno == logging.WARNING and r.getMessage() == "hello there" for r in caplog.records)

    def test_unknown_level_fails(self):
        with pytest.raises(ActionError, match="unknown log level"):
            run_action(log_message, {"message": "x", "level": "loud"})

    def test_missing_message_fails(self):
        with pytest.raises(ActionError, match="'message'"):
            run_action(log_message, {})


class TestShellRun:

    def test_list_command_succeeds(self):
        result = run_action(shell_run, {"command": [sys.executable, "-c", "print('hi')"]})

        assert result["exit_code"] == 0
        assert result["stdout"].strip() == "hi"

    def test_env_is_passed(self):
        code = "import os; print(os.environ['STEPSETUP_VALUE'])"
        result = run_action(shell_run, {"command": [sys.executable, "-c", code], "env": {"STEPSETUP_VALUE": 7}})

        assert result["stdout"].strip() == "7"

    def test_non_zero_exit_fails(self):
        with pytest.raises(ActionError, match="exited with 3"):
            run_action(shell_run, {"command": [sys.executable, "-c", "import sys; sys.exit(3)"]})

    def test_non_zero_exit_allowed_without_check(self):
        result = run_action(shell_run, {
            "command": [sys.executable, "-c", "import sys; sys.exit(3)"],
            "check": False,
        })

        assert result["exit_code"] == 3

    def test_missing_executable_fails(self):
        with pytest.raises(ActionError, match="cannot run"):
            run_action(shell_run, {"command": ["/nonexistent/stepsetup-binary"]})


class TestFileWrite:

    def test_writes_and_creates_parents(self, tmp_path):
        target = tmp_path / "out" / "file.txt"

        run_action(file_write, {"path": str(target), "content": "line\n"})

        assert target.read_text() == "line\n"

    def test_append(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("a\n")

        run_action(file_write, {"path": str(target), "content": "b\n", "append": True})

        assert target.read_text() == "a\nb\n"

    def test_structured_content_written_as_json(self, tmp_path):
        target = tmp_path / "data.json"

        run_action(file_write, {"path": str(target), "content": {"port": 8080}})

        assert '"port": 8080' in target.read_text()


class TestWaitSleep:

    def test_completes_asynchronously(self):
        assert run_action(wait_sleep, {"seconds": 0.01}) is None

    def test_invalid_seconds_fails(self):
        with pytest.raises(ActionError, match="invalid seconds"):
            run_action(wait_sleep, {"seconds": "soon"})


class TestActionRegistry:

    def test_builtins_listed(self):
        assert ActionRegistry().list_actions() == ["file.write", "log.message", "shell.run", "wait.sleep"]

    def test_registered_action_shadows_builtin(self):
        registry = ActionRegistry()

        def custom(config, on_success, on_error):
            on_success()

        registry.register("shell.run", custom)

        assert registry.get("shell.run") is custom

    def test_unknown_action_raises(self):
        with pytest.raises(ActionNotFoundError):
            ActionRegistry(include_builtins=False).get("shell.run")

    def test_non_callable_rejected(self):
        with pytest.raises(ValueError):
            ActionRegistry().register("bad", "not callable")
