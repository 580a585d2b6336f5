"""
Notification primitives — the NotificationChannel ABC.

Every delivery mechanism (macOS Notification Center, notify-send, Windows
toast, the WSL tier chain, the terminal) implements NotificationChannel.
The BackendRouter decides which one fires for the detected platform.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Awaitable, Callable

from alarm.core.types import Alert, CommandResult, PlatformKind

if TYPE_CHECKING:
    from alarm.core.config import AlarmConfig

# (executable, args, timeout) -> CommandResult; see alarm.shell.runner
CommandRunner = Callable[[str, list[str], float], Awaitable[CommandResult]]


class NotificationChannel(ABC):
    """
    Abstract delivery target.

    deliver() returns normally when the alert was shown and raises
    DeliveryError when it could not be. Channels never queue.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier, e.g. 'macos', 'wsl', 'terminal'."""
        ...

    @property
    @abstractmethod
    def platform(self) -> PlatformKind | None:
        """The platform this channel serves; None for platform-neutral ones."""
        ...

    @abstractmethod
    async def deliver(self, alert: Alert, config: AlarmConfig) -> None:
        """
        Show the alert.

        Args:
            alert: Sanitized title, message and optional subtitle
            config: Snapshot of the settings for this dispatch; channels
                    read their own preference section from it
        """
        ...
