"""
MacOSChannel — Notification Center via osascript.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from alarm.core.errors import CommandError, DeliveryError
from alarm.core.text import escape_applescript
from alarm.core.types import Alert, PlatformKind
from alarm.notifications.base import CommandRunner, NotificationChannel
from alarm.shell.runner import run_command

if TYPE_CHECKING:
    from alarm.core.config import AlarmConfig

logger = logging.getLogger(__name__)

OSASCRIPT_TIMEOUT = 5.0


def build_applescript(alert: Alert) -> str:
    script = (
        f'display notification "{escape_applescript(alert.message)}" '
        f'with title "{escape_applescript(alert.title)}"'
    )
    if alert.subtitle:
        script += f' subtitle "{escape_applescript(alert.subtitle)}"'
    return script


class MacOSChannel(NotificationChannel):
    def __init__(self, runner: CommandRunner = run_command) -> None:
        self._run = runner

    @property
    def name(self) -> str:
        return "macos"

    @property
    def platform(self) -> PlatformKind | None:
        return PlatformKind.MACOS

    async def deliver(self, alert: Alert, config: AlarmConfig) -> None:
        try:
            await self._run("osascript", ["-e", build_applescript(alert)], OSASCRIPT_TIMEOUT)
        except CommandError as e:
            raise DeliveryError(f"macOS notification failed: {e.message}", backend=self.name) from e
        logger.debug("Delivered via osascript")
