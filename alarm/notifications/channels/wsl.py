"""
WSLChannel — tiered delivery for Linux running under Windows.

No single mechanism is reliable there, so delivery walks a chain:

    1. wsl-notify-send.exe       lightweight bridge, 3s timeout
    2. powershell.exe toast      heavier scripting host, 5s timeout
    3. terminal bell + text      always succeeds

Which tiers run depends on wsl.preferred_method and wsl.fallback_enabled:

    auto            → 1, then 2, then 3 if fallback is enabled
    wsl-notify-send → 1; on failure 2 and 3 only if fallback is enabled
    powershell      → 2; on failure 3 only if fallback is enabled

With fallback disabled, a failed explicit method, or every attempted tier
failing, raises DeliveryError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from alarm.core.config import WSLMethod
from alarm.core.errors import CommandError, DeliveryError
from alarm.core.text import MESSAGE_MAX_LENGTH, sanitize_text
from alarm.core.types import Alert, PlatformKind
from alarm.notifications.base import CommandRunner, NotificationChannel
from alarm.notifications.channels.terminal import TerminalChannel
from alarm.notifications.channels.toast import build_toast_script
from alarm.shell.runner import run_command

if TYPE_CHECKING:
    from alarm.core.config import AlarmConfig

logger = logging.getLogger(__name__)

BRIDGE_EXECUTABLE = "wsl-notify-send.exe"
BRIDGE_TIMEOUT = 3.0
BRIDGE_PROBE_TIMEOUT = 1.0

POWERSHELL_EXECUTABLE = "powershell.exe"
POWERSHELL_TIMEOUT = 5.0


class WSLChannel(NotificationChannel):
    def __init__(
        self,
        runner: CommandRunner = run_command,
        terminal: TerminalChannel | None = None,
    ) -> None:
        self._run = runner
        self._terminal = terminal or TerminalChannel()

    @property
    def name(self) -> str:
        return "wsl"

    @property
    def platform(self) -> PlatformKind | None:
        return PlatformKind.WSL

    async def deliver(self, alert: Alert, config: AlarmConfig) -> None:
        method = config.wsl.preferred_method
        fallback = config.wsl.fallback_enabled

        # The toast has no subtitle line, so the path goes into the body.
        message = alert.message
        if alert.subtitle:
            message = sanitize_text(f"{alert.subtitle}\n\n{alert.message}", MESSAGE_MAX_LENGTH)
        title = alert.title

        errors: list[str] = []
        bridge_failed = False

        # ── Tier 1: wsl-notify-send.exe ──────────────────────────────────────
        if method in (WSLMethod.AUTO, WSLMethod.WSL_NOTIFY_SEND):
            try:
                await self._notify_via_bridge(title, message)
                return
            except CommandError as e:
                bridge_failed = True
                errors.append(e.message)
                self._on_tier_failed(
                    "wsl-notify-send", e,
                    explicit=method is WSLMethod.WSL_NOTIFY_SEND,
                    fallback=fallback,
                )

        # ── Tier 2: PowerShell toast ──────────────────────────────────────────
        wants_toast = method in (WSLMethod.AUTO, WSLMethod.POWERSHELL) or (bridge_failed and fallback)
        if wants_toast:
            try:
                await self._notify_via_powershell(title, message, app_id=config.app_name)
                return
            except CommandError as e:
                errors.append(e.message)
                self._on_tier_failed(
                    "PowerShell", e,
                    explicit=method is WSLMethod.POWERSHELL,
                    fallback=fallback,
                )

        # ── Tier 3: terminal ──────────────────────────────────────────────────
        if fallback:
            self._terminal.show(Alert(title=title, message=message))
            return

        raise DeliveryError(
            "All WSL notification methods failed",
            backend=self.name,
            details={"errors": errors},
        )

    def _on_tier_failed(self, tier: str, error: CommandError, explicit: bool, fallback: bool) -> None:
        if explicit:
            logger.error(f"{tier} notification failed: {error.message}")
            if not fallback:
                raise DeliveryError(
                    f"{tier} notification failed: {error.message}",
                    backend=self.name,
                ) from error
        else:
            logger.info(f"{tier} unavailable, trying next method: {error.message}")

    async def _notify_via_bridge(self, title: str, message: str) -> None:
        # wsl-notify-send.exe takes notify-send style positional arguments
        await self._run(BRIDGE_EXECUTABLE, [title, message], BRIDGE_TIMEOUT)
        logger.debug("Delivered via wsl-notify-send")

    async def _notify_via_powershell(self, title: str, message: str, app_id: str) -> None:
        script = build_toast_script(title, message, app_id=app_id)
        await self._run(POWERSHELL_EXECUTABLE, ["-NoProfile", "-Command", script], POWERSHELL_TIMEOUT)
        logger.debug("Delivered via PowerShell toast")

    async def is_bridge_available(self) -> bool:
        """Probe whether wsl-notify-send.exe can be run."""
        try:
            await self._run(BRIDGE_EXECUTABLE, ["--version"], BRIDGE_PROBE_TIMEOUT)
        except CommandError:
            return False
        return True
