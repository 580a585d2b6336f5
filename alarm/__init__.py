"""
Alarm — desktop notifications for long-running coding agents.

Public API:
    from alarm import Dispatcher, AlarmConfig, NotificationRequest, TriggerKind
"""

__version__ = "0.1.0"

# Core
from alarm.core.config import AlarmConfig
from alarm.core.dispatcher import Dispatcher
from alarm.core.errors import AlarmError, ConfigError, DeliveryError
from alarm.core.types import (
    DispatchResult,
    DispatchStatus,
    NotificationRequest,
    PlatformKind,
    SuppressionReason,
    TriggerKind,
)

# Platform & identity
from alarm.identity.instance import resolve_identity
from alarm.system.detect import detect_platform

__all__ = [
    # Core
    "AlarmConfig",
    "Dispatcher",
    "AlarmError",
    "ConfigError",
    "DeliveryError",
    "DispatchResult",
    "DispatchStatus",
    "NotificationRequest",
    "PlatformKind",
    "SuppressionReason",
    "TriggerKind",
    # Platform & identity
    "resolve_identity",
    "detect_platform",
]
