"""
LinuxChannel — libnotify via notify-send.

When notify-send is not installed the channel logs how to get it and, if
Linux fallback is enabled, prints the alert to the terminal instead.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from alarm.core.errors import CommandError, CommandNotFoundError, DeliveryError
from alarm.core.types import Alert, PlatformKind
from alarm.notifications.base import CommandRunner, NotificationChannel
from alarm.notifications.channels.terminal import TerminalChannel
from alarm.shell.runner import run_command
from alarm.system.detect import detect_display_server

if TYPE_CHECKING:
    from alarm.core.config import AlarmConfig

logger = logging.getLogger(__name__)

NOTIFY_SEND_TIMEOUT = 5.0
DISPLAY_TIME_MS = 10_000

INSTALL_HINT = (
    "notify-send not found. Please install libnotify:\n"
    "  sudo apt-get install libnotify-bin  (Debian/Ubuntu)\n"
    "  sudo yum install libnotify           (RHEL/CentOS)\n"
    "  sudo pacman -S libnotify             (Arch Linux)"
)


class LinuxChannel(NotificationChannel):
    def __init__(
        self,
        runner: CommandRunner = run_command,
        terminal: TerminalChannel | None = None,
    ) -> None:
        self._run = runner
        self._terminal = terminal or TerminalChannel()

    @property
    def name(self) -> str:
        return "linux"

    @property
    def platform(self) -> PlatformKind | None:
        return PlatformKind.LINUX

    async def deliver(self, alert: Alert, config: AlarmConfig) -> None:
        if detect_display_server() == "unknown":
            logger.warning("Could not detect display server (X11/Wayland)")

        body = alert.message if not alert.subtitle else f"{alert.subtitle}\n\n{alert.message}"
        args = ["-t", str(DISPLAY_TIME_MS), alert.title, body]

        try:
            await self._run("notify-send", args, NOTIFY_SEND_TIMEOUT)
        except CommandNotFoundError as e:
            logger.error(INSTALL_HINT)
            if not config.linux.fallback_enabled:
                raise DeliveryError(f"Linux notification failed: {e.message}", backend=self.name) from e
            self._terminal.show(alert)
            return
        except CommandError as e:
            raise DeliveryError(f"Linux notification failed: {e.message}", backend=self.name) from e

        logger.debug("Delivered via notify-send")
