"""
Alarm shared types — every data object in the system.

All types are dataclasses or str enums. Frozen where immutability makes sense.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from alarm.core.timer import CancelHandle


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Enums
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class TriggerKind(str, Enum):
    """The agent event that asked for a notification."""

    ASK_USER_QUESTION = "askUserQuestion"
    PERMISSION_REQUEST = "permissionRequest"
    TASK_COMPLETE = "taskComplete"
    ERROR = "error"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> TriggerKind:
        """Map a wire value to a member; anything unrecognised is UNKNOWN."""
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @classmethod
    def known(cls) -> list[TriggerKind]:
        return [t for t in cls if t is not cls.UNKNOWN]


class PlatformKind(str, Enum):
    """Where we are running. WSL is Linux hosted by Windows."""

    MACOS = "macos"
    WINDOWS = "windows"
    LINUX = "linux"
    WSL = "wsl"


class IdentifierMode(str, Enum):
    """How an instance is labelled in the notification."""

    PROJECT_NAME = "projectName"
    FULL_PATH = "fullPath"
    PID = "pid"
    SESSION_ID = "sessionId"


class DispatchStatus(str, Enum):
    """Outcome of a notify() call or of its scheduled delivery."""

    SUPPRESSED = "suppressed"
    SCHEDULED = "scheduled"
    SUPERSEDED = "superseded"
    DELIVERED = "delivered"
    FAILED = "failed"


class SuppressionReason(str, Enum):
    DISABLED = "disabled"
    TRIGGER_DISABLED = "trigger_disabled"
    COOLDOWN = "cooldown"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Requests & Results
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@dataclass(frozen=True, slots=True)
class NotificationRequest:
    """A caller's ask to surface an alert. Never mutated after creation."""

    message: str
    trigger: TriggerKind = TriggerKind.UNKNOWN
    working_directory: str = field(default_factory=lambda: str(Path.cwd()))

    @property
    def key(self) -> tuple[TriggerKind, str]:
        """Debounce key: one pending delivery per (trigger, directory)."""
        return (self.trigger, self.working_directory)


@dataclass(slots=True)
class DispatchResult:
    """
    What the dispatcher decided.

    A SCHEDULED result carries a `delivery` future that resolves to a
    second DispatchResult (DELIVERED, FAILED or SUPERSEDED) once the
    delay has elapsed.
    """

    status: DispatchStatus
    reason: SuppressionReason | None = None
    error: str | None = None
    delivery: asyncio.Future[DispatchResult] | None = None

    @staticmethod
    def suppressed(reason: SuppressionReason) -> DispatchResult:
        return DispatchResult(status=DispatchStatus.SUPPRESSED, reason=reason)

    @staticmethod
    def delivered() -> DispatchResult:
        return DispatchResult(status=DispatchStatus.DELIVERED)

    @staticmethod
    def failed(error: str) -> DispatchResult:
        return DispatchResult(status=DispatchStatus.FAILED, error=error)

    @staticmethod
    def superseded() -> DispatchResult:
        return DispatchResult(status=DispatchStatus.SUPERSEDED)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Dispatcher State
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@dataclass
class PendingEntry:
    """A scheduled-but-not-yet-fired delivery."""

    key: tuple[TriggerKind, str]
    request: NotificationRequest
    scheduled_at: float
    handle: CancelHandle | None = None
    result: asyncio.Future[DispatchResult] | None = None
    claimed: bool = False

    def claim(self) -> bool:
        """
        Take ownership of this entry exactly once.

        Both cancellation and firing call this; whichever gets there first
        wins, the other sees False and does nothing.
        """
        if self.claimed:
            return False
        self.claimed = True
        return True

    def resolve(self, outcome: DispatchResult) -> None:
        if self.result is not None and not self.result.done():
            self.result.set_result(outcome)


@dataclass
class DispatcherState:
    """
    Process-wide cooldown and debounce bookkeeping.

    last_fired_at is global (not per key) and only moves forward.
    At most one PendingEntry exists per key.
    """

    last_fired_at: float | None = None
    pending: dict[tuple[TriggerKind, str], PendingEntry] = field(default_factory=dict)

    def mark_fired(self, now: float) -> None:
        if self.last_fired_at is None or now > self.last_fired_at:
            self.last_fired_at = now


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Identity & Delivery Payloads
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@dataclass(frozen=True, slots=True)
class InstanceIdentity:
    """Labels that tell apart several agents running at once."""

    title: str
    subtitle: str | None = None
    session_info: str | None = None


@dataclass(frozen=True, slots=True)
class Alert:
    """The sanitized payload a notification channel renders."""

    title: str
    message: str
    subtitle: str | None = None


@dataclass(slots=True)
class CommandResult:
    """Output of an external command."""

    stdout: str
    stderr: str
    exit_code: int
    duration_ms: int = 0
