"""Shared test fixtures for Alarm."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from alarm.core.config import AlarmConfig
from alarm.core.errors import CommandError
from alarm.core.types import CommandResult
from alarm.notifications.channels.terminal import TerminalChannel


class FakeRunner:
    """
    Stands in for alarm.shell.runner.run_command.

    `failures` maps an executable to the exception it should raise;
    anything else succeeds. Every call is recorded.
    """

    def __init__(self, failures: dict[str, CommandError] | None = None) -> None:
        self.failures = failures or {}
        self.calls: list[tuple[str, list[str], float]] = []

    async def __call__(self, executable: str, args: list[str], timeout: float) -> CommandResult:
        self.calls.append((executable, list(args), timeout))
        error = self.failures.get(executable)
        if error is not None:
            raise error
        return CommandResult(stdout="", stderr="", exit_code=0)

    @property
    def executables(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def config():
    """Default config without loading from disk."""
    return AlarmConfig()


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def console_output():
    return io.StringIO()


@pytest.fixture
def terminal(console_output):
    """Terminal channel writing into console_output instead of stdout."""
    return TerminalChannel(Console(file=console_output, width=80, color_system=None))
