"""
Alarm exception hierarchy.

Every error in the system inherits from AlarmError.
Each subsystem has its own error class for targeted catching.

Usage:
    try:
        await backend.deliver(alert)
    except DeliveryError as e:
        # Every tier failed and fallback was disabled
    except AlarmError as e:
        # Handle any Alarm error

Suppression (disabled, trigger disabled, cooldown) and supersession are
normal dispatch outcomes, not exceptions.
"""


class AlarmError(Exception):
    """Base exception for all Alarm errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


# ━━━ Configuration ━━━


class ConfigError(AlarmError):
    """Settings file is unreadable, malformed, or fails validation."""

    pass


# ━━━ External processes ━━━


class CommandError(AlarmError):
    """An external command exited non-zero or could not be started."""

    def __init__(
        self,
        message: str,
        command: str = "",
        exit_code: int | None = None,
        details: dict | None = None,
    ):
        self.command = command
        self.exit_code = exit_code
        super().__init__(message, details)


class CommandTimeoutError(CommandError):
    """An external command exceeded its timeout and was killed."""

    pass


class CommandNotFoundError(CommandError):
    """The executable is not installed or not on PATH."""

    pass


# ━━━ Delivery ━━━


class DeliveryError(AlarmError):
    """A notification backend could not deliver the alert."""

    def __init__(
        self,
        message: str,
        backend: str = "",
        details: dict | None = None,
    ):
        self.backend = backend
        super().__init__(message, details)
