"""
BackendRouter — picks the notification channel for a platform.

One channel per PlatformKind. Adding a platform means adding a member to
PlatformKind and registering one channel for it; nothing else branches on
the platform.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from alarm.core.errors import DeliveryError
from alarm.core.types import Alert, PlatformKind
from alarm.notifications.base import CommandRunner, NotificationChannel
from alarm.notifications.channels.linux import LinuxChannel
from alarm.notifications.channels.macos import MacOSChannel
from alarm.notifications.channels.terminal import TerminalChannel
from alarm.notifications.channels.windows import WindowsChannel
from alarm.notifications.channels.wsl import WSLChannel
from alarm.shell.runner import run_command

if TYPE_CHECKING:
    from alarm.core.config import AlarmConfig

logger = logging.getLogger(__name__)


class BackendRouter:
    """
    Maps platforms to channels.

    Usage:
        router = BackendRouter.default()
        await router.deliver(PlatformKind.WSL, alert, config)
    """

    def __init__(self) -> None:
        self._channels: dict[PlatformKind, NotificationChannel] = {}

    @classmethod
    def default(
        cls,
        runner: CommandRunner = run_command,
        terminal: TerminalChannel | None = None,
    ) -> BackendRouter:
        """Router with the built-in channel for every platform."""
        terminal = terminal or TerminalChannel()
        router = cls()
        router.register(MacOSChannel(runner))
        router.register(LinuxChannel(runner, terminal=terminal))
        router.register(WindowsChannel(runner))
        router.register(WSLChannel(runner, terminal=terminal))
        return router

    def register(self, channel: NotificationChannel, platform: PlatformKind | None = None) -> None:
        """Register a channel for its platform, replacing any previous one."""
        target = platform or channel.platform
        if target is None:
            raise ValueError(f"Channel {channel.name!r} serves no platform; pass one explicitly")
        self._channels[target] = channel
        logger.debug(f"Notification channel registered: {channel.name} → {target.value}")

    def select(self, platform: PlatformKind) -> NotificationChannel:
        channel = self._channels.get(platform)
        if channel is None:
            raise DeliveryError(f"No notification channel for platform {platform.value!r}")
        return channel

    @property
    def platforms(self) -> list[PlatformKind]:
        return list(self._channels)

    async def deliver(self, platform: PlatformKind, alert: Alert, config: AlarmConfig) -> str:
        """Deliver through the platform's channel. Returns the channel name."""
        channel = self.select(platform)
        await channel.deliver(alert, config)
        return channel.name
