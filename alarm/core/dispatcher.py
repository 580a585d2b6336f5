"""
Dispatcher — decides whether, when and how a notification is shown.

Decision pipeline for notify(request, config):

    1. config.enabled is false          → SUPPRESSED(disabled)
    2. trigger switched off             → SUPPRESSED(trigger_disabled)
                                          (UNKNOWN is never switched off)
    3. inside the global cooldown       → SUPPRESSED(cooldown)
    4. same (trigger, directory) already pending → cancel it (SUPERSEDED)
    5. schedule delivery after delay_seconds     → SCHEDULED

At fire-time the pending entry is claimed and removed, last_fired_at is
advanced, identity is resolved fresh, text is sanitized, and the channel
for the detected platform delivers the alert. Delivery failures are logged
and reported on the SCHEDULED result's `delivery` future; they never
propagate to the caller.

Cooldown is global across keys and checked only when scheduling, so a
delayed alert still fires even if another one fired in the meantime.
Debounce is per key. Both are intentional.

All state is touched from the event loop thread only: notify() runs on the
loop and timer callbacks are loop callbacks, so they never interleave.
Cancel-versus-fire is settled by PendingEntry.claim().
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Mapping

from alarm.core.config import AlarmConfig
from alarm.core.errors import DeliveryError
from alarm.core.text import (
    MESSAGE_MAX_LENGTH,
    SUBTITLE_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    sanitize_text,
)
from alarm.core.timer import Timer
from alarm.core.types import (
    Alert,
    DispatchResult,
    DispatchStatus,
    DispatcherState,
    NotificationRequest,
    PendingEntry,
    PlatformKind,
    SuppressionReason,
)
from alarm.identity.instance import format_message, resolve_identity
from alarm.notifications.channels.terminal import TerminalChannel
from alarm.notifications.router import BackendRouter
from alarm.system.detect import detect_platform

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Owns the cooldown/debounce state for one process.

    Usage:
        dispatcher = Dispatcher()
        result = await dispatcher.notify(request, AlarmConfig.load())
        if result.delivery is not None:
            outcome = await result.delivery
    """

    def __init__(
        self,
        router: BackendRouter | None = None,
        state: DispatcherState | None = None,
        timer: Timer | None = None,
        clock: Callable[[], float] = time.monotonic,
        detector: Callable[[], PlatformKind] = detect_platform,
        terminal: TerminalChannel | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._terminal = terminal or TerminalChannel()
        self._router = router or BackendRouter.default(terminal=self._terminal)
        self._state = state or DispatcherState()
        self._timer = timer or Timer()
        self._clock = clock
        self._detect = detector
        self._env = env
        self._in_flight: set[asyncio.Task] = set()

    @property
    def state(self) -> DispatcherState:
        return self._state

    @property
    def pending_keys(self) -> list[tuple]:
        return list(self._state.pending)

    # ── Public API ────────────────────────────────────────────────────────────

    async def notify(self, request: NotificationRequest, config: AlarmConfig) -> DispatchResult:
        """Gate, debounce and schedule a notification. Never waits on delivery."""
        if not config.enabled:
            logger.info("Notification skipped - alarm is disabled")
            return DispatchResult.suppressed(SuppressionReason.DISABLED)

        if not config.triggers.is_enabled(request.trigger):
            logger.info(f"Notification skipped - trigger '{request.trigger.value}' is disabled")
            return DispatchResult.suppressed(SuppressionReason.TRIGGER_DISABLED)

        now = self._clock()
        last = self._state.last_fired_at
        if last is not None and now - last < config.cooldown_seconds:
            logger.info("Notification skipped due to cooldown")
            return DispatchResult.suppressed(SuppressionReason.COOLDOWN)

        key = request.key
        self._supersede(key)

        loop = asyncio.get_running_loop()
        entry = PendingEntry(
            key=key,
            request=request,
            scheduled_at=now,
            result=loop.create_future(),
        )
        entry.handle = self._timer.schedule(
            config.delay_seconds,
            lambda: self._on_timer(entry, config),
        )
        self._state.pending[key] = entry
        logger.debug(
            f"Notification scheduled in {config.delay_seconds}s "
            f"for {request.trigger.value} @ {request.working_directory}"
        )

        return DispatchResult(status=DispatchStatus.SCHEDULED, delivery=entry.result)

    async def wait_idle(self) -> None:
        """Wait for every delivery that has already started."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def close(self) -> None:
        """Drop all pending notifications and let running deliveries finish."""
        for key in list(self._state.pending):
            self._supersede(key)
        await self.wait_idle()

    # ── Scheduling ────────────────────────────────────────────────────────────

    def _supersede(self, key: tuple) -> None:
        existing = self._state.pending.pop(key, None)
        if existing is None or not existing.claim():
            return
        if existing.handle is not None:
            existing.handle.cancel()
        existing.resolve(DispatchResult.superseded())
        logger.info(f"Pending notification for {key[0].value} @ {key[1]} superseded")

    def _on_timer(self, entry: PendingEntry, config: AlarmConfig) -> None:
        if self._state.pending.get(entry.key) is entry:
            del self._state.pending[entry.key]
        if not entry.claim():
            return
        # Cooldown starts in the timer callback, not when the delivery task runs
        self._state.mark_fired(self._clock())
        task = asyncio.create_task(self._fire(entry, config), name="alarm-delivery")
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    # ── Fire-time ─────────────────────────────────────────────────────────────

    async def _fire(self, entry: PendingEntry, config: AlarmConfig) -> None:
        try:
            await self._deliver(entry.request, config)
        except asyncio.CancelledError:
            entry.resolve(DispatchResult.failed("delivery cancelled"))
            raise
        except DeliveryError as e:
            logger.error(f"Notification failed: {e.message}")
            entry.resolve(DispatchResult.failed(e.message))
            return
        except Exception as e:
            logger.error(f"Notification failed unexpectedly: {e}")
            entry.resolve(DispatchResult.failed(str(e)))
            return

        entry.resolve(DispatchResult.delivered())

    async def _deliver(self, request: NotificationRequest, config: AlarmConfig) -> None:
        identity = resolve_identity(
            config.instance_identifier,
            request.working_directory,
            env=self._env,
            app_name=config.app_name,
        )
        message = format_message(request.message, identity, config.include_session_info)

        subtitle = None
        if config.show_full_path_in_subtitle and identity.subtitle:
            subtitle = sanitize_text(identity.subtitle, SUBTITLE_MAX_LENGTH)

        alert = Alert(
            title=sanitize_text(identity.title, TITLE_MAX_LENGTH),
            message=sanitize_text(message, MESSAGE_MAX_LENGTH),
            subtitle=subtitle,
        )

        if config.notifications.sound:
            self._terminal.bell()

        if not config.notifications.desktop:
            logger.debug("Desktop notifications disabled, sound only")
            return

        platform = self._detect()
        channel = await self._router.deliver(platform, alert, config)
        logger.info(f"Notification delivered via {channel}: {alert.title!r}")
