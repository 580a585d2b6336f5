"""
External command runner — the only place Alarm starts processes.

Arguments are passed as a list straight to the executable (no shell), so
notification text can never be interpreted as shell syntax. Timeouts are
hard: the process is killed and reaped before CommandTimeoutError is raised.
"""

from __future__ import annotations

import asyncio
import logging
import time

from alarm.core.errors import CommandError, CommandNotFoundError, CommandTimeoutError
from alarm.core.types import CommandResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 3.0


async def run_command(
    executable: str,
    args: list[str],
    timeout: float = DEFAULT_TIMEOUT,
) -> CommandResult:
    """
    Run a command and wait for it to finish.

    Args:
        executable: Program name or path
        args: Arguments, passed verbatim
        timeout: Seconds before the process is killed

    Returns:
        CommandResult with stdout, stderr and exit code 0

    Raises:
        CommandNotFoundError: executable is missing
        CommandTimeoutError: timeout elapsed
        CommandError: non-zero exit or any other start failure
    """
    start_time = time.time()

    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        raise CommandNotFoundError(
            f"Command not found: {executable}",
            command=executable,
        )
    except OSError as e:
        raise CommandError(f"Failed to start {executable}: {e}", command=executable)

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise CommandTimeoutError(
            f"Command timed out after {timeout}s: {executable}",
            command=executable,
        )
    except asyncio.CancelledError:
        process.kill()
        await process.wait()
        raise

    elapsed = int((time.time() - start_time) * 1000)
    stdout = stdout_bytes.decode("utf-8", errors="replace").strip()
    stderr = stderr_bytes.decode("utf-8", errors="replace").strip()
    exit_code = process.returncode if process.returncode is not None else -1

    logger.debug(f"{executable} exited {exit_code} in {elapsed}ms")

    if exit_code != 0:
        raise CommandError(
            f"Command failed: {executable} (exit {exit_code})\n{stderr}".rstrip(),
            command=executable,
            exit_code=exit_code,
        )

    return CommandResult(
        stdout=stdout,
        stderr=stderr,
        exit_code=exit_code,
        duration_ms=elapsed,
    )
