"""
TerminalChannel — bell plus a bordered block on the controlling terminal.

The last resort of every fallback chain. It has no external dependency,
so it cannot fail.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from alarm.core.types import Alert, PlatformKind
from alarm.notifications.base import NotificationChannel

if TYPE_CHECKING:
    from alarm.core.config import AlarmConfig

logger = logging.getLogger(__name__)

BLOCK_WIDTH = 50


class TerminalChannel(NotificationChannel):
    """Rings the bell and prints the alert."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    @property
    def name(self) -> str:
        return "terminal"

    @property
    def platform(self) -> PlatformKind | None:
        return None

    async def deliver(self, alert: Alert, config: AlarmConfig | None = None) -> None:
        self.show(alert)

    def show(self, alert: Alert) -> None:
        self.bell()
        body = alert.message if not alert.subtitle else f"{alert.subtitle}\n\n{alert.message}"
        self._console.print(
            Panel(
                Text(body),
                title=Text(f"⚠  {alert.title}"),
                title_align="left",
                width=BLOCK_WIDTH,
            )
        )
        logger.debug(f"Alert printed to terminal: {alert.title!r}")

    def bell(self) -> None:
        # Written raw: rich drops control codes when output is not a tty
        self._console.file.write("\a")
        self._console.file.flush()
