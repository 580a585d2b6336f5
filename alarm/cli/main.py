"""
Alarm CLI entry point, called from agent hook scripts.

Usage:
    alarm --trigger askUserQuestion
    alarm --trigger permissionRequest --message "Need approval to edit files"
    alarm --trigger taskComplete --cwd /home/user/project

Exit codes: 0 when the notification was delivered, suppressed, or failed
and was reported; 1 for an invalid trigger or a fatal error.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console

from alarm import __version__
from alarm.core.config import AlarmConfig
from alarm.core.dispatcher import Dispatcher
from alarm.core.logging import get_alarm_home, setup_logging
from alarm.core.types import DispatchResult, DispatchStatus, NotificationRequest, TriggerKind
from alarm.system.detect import get_platform_info

app = typer.Typer(
    name="alarm",
    help="Alarm — desktop notifications for long-running coding agents.",
    add_completion=False,
)

console = Console()

TRIGGER_MESSAGES = {
    TriggerKind.ASK_USER_QUESTION: "{app} is waiting for your answer to a question",
    TriggerKind.PERMISSION_REQUEST: "{app} is requesting permission to proceed",
    TriggerKind.TASK_COMPLETE: "{app} has completed a task",
    TriggerKind.ERROR: "{app} encountered an error",
}
FALLBACK_MESSAGE = "{app} is waiting for your input"


def default_message(trigger: TriggerKind, app_name: str) -> str:
    return TRIGGER_MESSAGES.get(trigger, FALLBACK_MESSAGE).format(app=app_name)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"alarm {__version__}")
        raise typer.Exit(0)


@app.command()
def main(
    trigger: str = typer.Option(
        None,
        "--trigger",
        "-t",
        help="askUserQuestion, permissionRequest, taskComplete or error",
    ),
    message: str = typer.Option(None, "--message", "-m", help="Custom notification message"),
    cwd: Path = typer.Option(None, "--cwd", help="Working directory used to identify this instance"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Send a notification for an agent event."""
    kind = TriggerKind.parse(trigger)
    if kind is TriggerKind.UNKNOWN:
        valid = "\n".join(f"  - {t.value}" for t in TriggerKind.known())
        console.print(
            f"[red]Error: --trigger is required and must be one of:[/red]\n{valid}\n\n"
            f"[dim]Use --help for more information[/dim]"
        )
        raise typer.Exit(1)

    setup_logging(
        log_dir=get_alarm_home() / "logs",
        console_level=logging.DEBUG if verbose else logging.WARNING,
    )
    logger = logging.getLogger("alarm")

    if verbose:
        info = get_platform_info()
        console.print(
            f"[dim]platform={info['platform']} display={info['display_server']} "
            f"terminal={info['terminal']}[/dim]"
        )

    try:
        outcome = asyncio.run(_run_notify(kind, message, cwd))
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        console.print(f"[red]Error sending notification: {e}[/red]")
        raise typer.Exit(1)

    if verbose:
        detail = outcome.reason.value if outcome.reason else (outcome.error or "")
        console.print(f"[dim]{outcome.status.value} {detail}[/dim]".rstrip())


async def _run_notify(
    trigger: TriggerKind,
    message: str | None,
    cwd: Path | None,
) -> DispatchResult:
    """Dispatch one notification and stay alive until it has been handled."""
    config = AlarmConfig.load()
    request = NotificationRequest(
        message=message or default_message(trigger, config.app_name),
        trigger=trigger,
        working_directory=str((cwd or Path.cwd()).resolve()),
    )

    dispatcher = Dispatcher()
    try:
        result = await dispatcher.notify(request, config)
        if result.status is DispatchStatus.SCHEDULED and result.delivery is not None:
            return await result.delivery
        return result
    finally:
        await dispatcher.close()
