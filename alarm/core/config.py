"""
Alarm Configuration — loads and merges config from multiple sources.

Precedence (highest to lowest):
1. Explicit overrides (passed in code)
2. Environment variables (ALARM_*)
3. Agent settings file (~/.claude/settings.json, pluginConfigs section)
4. Defaults (hardcoded)

The settings file uses camelCase keys:

    {
      "pluginConfigs": {
        "plugin-alarm": {
          "delaySeconds": 3,
          "triggers": {"taskComplete": true},
          "wsl": {"preferredMethod": "powershell"}
        }
      }
    }

Loading never raises: a missing or unreadable settings file is logged and
the defaults are used instead. An invalid value only resets its own key.
"""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel, to_snake

from alarm.core.errors import ConfigError
from alarm.core.types import IdentifierMode, TriggerKind

logger = logging.getLogger(__name__)

PLUGIN_KEY = "plugin-alarm"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Config Sub-Models
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class _Section(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WSLMethod(str, Enum):
    AUTO = "auto"
    WSL_NOTIFY_SEND = "wsl-notify-send"
    POWERSHELL = "powershell"


class NotificationsConfig(_Section):
    """Which alert forms to produce."""

    desktop: bool = True
    sound: bool = True


class TriggersConfig(_Section):
    """Per-trigger on/off switches."""

    ask_user_question: bool = True
    permission_request: bool = True
    task_complete: bool = False
    error: bool = False

    def is_enabled(self, trigger: TriggerKind) -> bool:
        """UNKNOWN is never switched off."""
        if trigger is TriggerKind.UNKNOWN:
            return True
        return bool(getattr(self, to_snake(trigger.value)))


class WSLConfig(_Section):
    """Delivery preferences under Windows-hosted Linux."""

    preferred_method: WSLMethod = WSLMethod.AUTO
    fallback_enabled: bool = True


class LinuxConfig(_Section):
    """Fall back to the terminal when notify-send is missing."""

    fallback_enabled: bool = True


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Main Config
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class AlarmConfig(_Section):
    """Root configuration for Alarm. Treated as a read-only snapshot."""

    enabled: bool = True
    delay_seconds: float = Field(default=5.0, ge=0)
    cooldown_seconds: float = Field(default=10.0, ge=0)
    notifications: NotificationsConfig = Field(default_factory=NotificationsConfig)
    triggers: TriggersConfig = Field(default_factory=TriggersConfig)
    instance_identifier: IdentifierMode = IdentifierMode.PROJECT_NAME
    show_full_path_in_subtitle: bool = True
    include_session_info: bool = False
    app_name: str = "Claude Code"
    wsl: WSLConfig = Field(default_factory=WSLConfig)
    linux: LinuxConfig = Field(default_factory=LinuxConfig)

    @staticmethod
    def load(
        overrides: dict[str, Any] | None = None,
        settings_path: Path | None = None,
    ) -> AlarmConfig:
        """
        Load configuration from all sources and merge.

        Precedence: overrides > env vars > settings file > defaults
        """
        merged: dict[str, Any] = {}

        # Layer 1: Agent settings file
        path = settings_path or default_settings_path()
        try:
            _deep_merge(merged, _load_plugin_section(path))
        except ConfigError as e:
            logger.warning(f"{e.message}; using defaults")

        # Layer 2: Environment variables
        _deep_merge(merged, _load_from_env())

        # Layer 3: Explicit overrides
        if overrides:
            _deep_merge(merged, _normalize_keys(overrides))

        # Invalid keys fall back to their defaults; the rest of the layer is kept
        try:
            return AlarmConfig.model_validate(merged)
        except ValidationError as e:
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"])
                logger.warning(f"Ignoring invalid setting {location}: {error['msg']}")
                _drop_key(merged, error["loc"])

        try:
            return AlarmConfig.model_validate(merged)
        except ValidationError as e:
            logger.warning(f"Invalid alarm configuration, using defaults: {e}")
            return AlarmConfig()


def default_settings_path() -> Path:
    return Path.home() / ".claude" / "settings.json"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Internal Helpers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _load_plugin_section(path: Path) -> dict[str, Any]:
    """Read the plugin's section from the settings JSON, snake_cased."""
    try:
        if not path.exists():
            return {}
        with open(path, encoding="utf-8") as f:
            settings = json.load(f)
    except Exception as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    if not isinstance(settings, dict):
        raise ConfigError(f"Settings in {path} are not a JSON object")

    plugin_configs = settings.get("pluginConfigs") or {}
    if not isinstance(plugin_configs, dict):
        raise ConfigError(f"pluginConfigs in {path} is not a JSON object")

    for key, section in plugin_configs.items():
        if key == PLUGIN_KEY or key.startswith(f"{PLUGIN_KEY}@"):
            if not isinstance(section, dict):
                raise ConfigError(f"pluginConfigs[{key!r}] in {path} is not a JSON object")
            return _normalize_keys(section)

    return {}


def _load_from_env() -> dict[str, Any]:
    """Load configuration from ALARM_* environment variables."""
    result: dict[str, Any] = {}

    env_mapping: dict[str, tuple[str, ...]] = {
        "ALARM_ENABLED": ("enabled",),
        "ALARM_DELAY_SECONDS": ("delay_seconds",),
        "ALARM_COOLDOWN_SECONDS": ("cooldown_seconds",),
        "ALARM_INSTANCE_IDENTIFIER": ("instance_identifier",),
        "ALARM_APP_NAME": ("app_name",),
        "ALARM_SOUND": ("notifications", "sound"),
        "ALARM_DESKTOP": ("notifications", "desktop"),
        "ALARM_WSL_METHOD": ("wsl", "preferred_method"),
        "ALARM_WSL_FALLBACK": ("wsl", "fallback_enabled"),
        "ALARM_LINUX_FALLBACK": ("linux", "fallback_enabled"),
    }

    for env_var, path in env_mapping.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        target = result
        for part in path[:-1]:
            target = target.setdefault(part, {})
        target[path[-1]] = _convert_value(value)

    return result


def _convert_value(value: str) -> Any:
    """Convert string value to appropriate type. Numbers win over booleans."""
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False
    return value


def _normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    """camelCase keys → snake_case, recursively, so layers merge cleanly."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            value = _normalize_keys(value)
        result[to_snake(key)] = value
    return result


def _drop_key(data: dict, location: tuple) -> None:
    """Remove the value at a validation error location, if it is there."""
    target = data
    for part in location[:-1]:
        target = target.get(part) if isinstance(target, dict) else None
        if not isinstance(target, dict):
            return
    if location and isinstance(target, dict):
        target.pop(location[-1], None)


def _deep_merge(base: dict, override: dict) -> None:
    """Deep merge override into base (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
