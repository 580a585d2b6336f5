"""Tests for the external command runner. Runs real processes on Unix."""

import platform
import time

import pytest

from alarm.core.errors import CommandError, CommandNotFoundError, CommandTimeoutError
from alarm.shell.runner import run_command

pytestmark = pytest.mark.skipif(
    platform.system().lower() == "windows", reason="uses POSIX sh"
)


@pytest.mark.asyncio
class TestRunCommand:
    async def test_success(self):
        result = await run_command("sh", ["-c", "echo hello alarm"], timeout=5)
        assert result.exit_code == 0
        assert result.stdout == "hello alarm"
        assert result.duration_ms >= 0

    async def test_arguments_are_not_shell_interpreted(self):
        result = await run_command("echo", ["$HOME; rm -rf /"], timeout=5)
        assert result.stdout == "$HOME; rm -rf /"

    async def test_nonzero_exit_raises(self):
        with pytest.raises(CommandError) as exc:
            await run_command("sh", ["-c", "echo oops >&2; exit 3"], timeout=5)
        assert exc.value.exit_code == 3
        assert "oops" in exc.value.message
        assert not isinstance(exc.value, CommandTimeoutError)

    async def test_missing_executable(self):
        with pytest.raises(CommandNotFoundError):
            await run_command("definitely-not-a-real-binary-xyz", [], timeout=1)

    async def test_timeout_kills_process(self):
        start = time.monotonic()
        with pytest.raises(CommandTimeoutError) as exc:
            await run_command("sleep", ["5"], timeout=0.2)
        assert time.monotonic() - start < 3
        assert exc.value.command == "sleep"

    async def test_timeout_is_a_command_error(self):
        with pytest.raises(CommandError):
            await run_command("sleep", ["5"], timeout=0.1)
