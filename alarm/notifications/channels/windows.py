"""
WindowsChannel — native toast through PowerShell.
"""

from __future__ import annotations

import logging
import shutil
from typing import TYPE_CHECKING

from alarm.core.errors import CommandError, DeliveryError
from alarm.core.types import Alert, PlatformKind
from alarm.notifications.base import CommandRunner, NotificationChannel
from alarm.notifications.channels.toast import build_toast_script
from alarm.shell.runner import run_command

if TYPE_CHECKING:
    from alarm.core.config import AlarmConfig

logger = logging.getLogger(__name__)

POWERSHELL_TIMEOUT = 5.0


class WindowsChannel(NotificationChannel):
    def __init__(self, runner: CommandRunner = run_command) -> None:
        self._run = runner
        self._ps_executable = self._find_powershell()

    @property
    def name(self) -> str:
        return "windows"

    @property
    def platform(self) -> PlatformKind | None:
        return PlatformKind.WINDOWS

    async def deliver(self, alert: Alert, config: AlarmConfig) -> None:
        body = alert.message if not alert.subtitle else f"{alert.subtitle}\n\n{alert.message}"
        script = build_toast_script(alert.title, body, app_id=config.app_name)
        try:
            await self._run(
                self._ps_executable,
                ["-NoLogo", "-NoProfile", "-NonInteractive", "-Command", script],
                POWERSHELL_TIMEOUT,
            )
        except CommandError as e:
            raise DeliveryError(f"Windows notification failed: {e.message}", backend=self.name) from e
        logger.debug(f"Delivered via {self._ps_executable} toast")

    @staticmethod
    def _find_powershell() -> str:
        """Find the best PowerShell executable."""
        # Windows PowerShell 5.1 ships the WinRT toast types; pwsh 7 may not
        if shutil.which("powershell"):
            return "powershell"
        if shutil.which("pwsh"):
            return "pwsh"
        return "powershell.exe"
