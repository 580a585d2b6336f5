"""Tests for the Config system."""

import json
from pathlib import Path

import pytest

from alarm.core.config import (
    AlarmConfig,
    WSLMethod,
    _convert_value,
    _deep_merge,
    _normalize_keys,
)
from alarm.core.types import IdentifierMode, TriggerKind


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "ALARM_ENABLED",
        "ALARM_DELAY_SECONDS",
        "ALARM_COOLDOWN_SECONDS",
        "ALARM_INSTANCE_IDENTIFIER",
        "ALARM_APP_NAME",
        "ALARM_SOUND",
        "ALARM_DESKTOP",
        "ALARM_WSL_METHOD",
        "ALARM_WSL_FALLBACK",
        "ALARM_LINUX_FALLBACK",
    ):
        monkeypatch.delenv(name, raising=False)


def _write_settings(path, section, key="plugin-alarm"):
    path.write_text(json.dumps({"pluginConfigs": {key: section}}), encoding="utf-8")
    return path


def test_default_config():
    """Default config has sensible values."""
    config = AlarmConfig()

    assert config.enabled is True
    assert config.delay_seconds == 5
    assert config.cooldown_seconds == 10
    assert config.notifications.desktop is True
    assert config.notifications.sound is True
    assert config.triggers.ask_user_question is True
    assert config.triggers.permission_request is True
    assert config.triggers.task_complete is False
    assert config.triggers.error is False
    assert config.instance_identifier is IdentifierMode.PROJECT_NAME
    assert config.show_full_path_in_subtitle is True
    assert config.wsl.preferred_method is WSLMethod.AUTO
    assert config.wsl.fallback_enabled is True
    assert config.linux.fallback_enabled is True


def test_trigger_switches():
    triggers = AlarmConfig().triggers
    assert triggers.is_enabled(TriggerKind.ASK_USER_QUESTION)
    assert triggers.is_enabled(TriggerKind.PERMISSION_REQUEST)
    assert not triggers.is_enabled(TriggerKind.TASK_COMPLETE)
    assert not triggers.is_enabled(TriggerKind.ERROR)


def test_unknown_trigger_always_enabled():
    config = AlarmConfig.load(
        overrides={
            "triggers": {
                "ask_user_question": False,
                "permission_request": False,
                "task_complete": False,
                "error": False,
            }
        }
    )
    assert config.triggers.is_enabled(TriggerKind.UNKNOWN)


def test_load_settings_file_camel_case(tmp_path):
    path = _write_settings(
        tmp_path / "settings.json",
        {
            "delaySeconds": 2,
            "cooldownSeconds": 0,
            "triggers": {"taskComplete": True},
            "instanceIdentifier": "sessionId",
            "showFullPathInSubtitle": False,
            "wsl": {"preferredMethod": "powershell", "fallbackEnabled": False},
        },
    )

    config = AlarmConfig.load(settings_path=path)

    assert config.delay_seconds == 2
    assert config.cooldown_seconds == 0
    assert config.triggers.task_complete is True
    # Unmentioned triggers keep their defaults
    assert config.triggers.ask_user_question is True
    assert config.instance_identifier is IdentifierMode.SESSION_ID
    assert config.show_full_path_in_subtitle is False
    assert config.wsl.preferred_method is WSLMethod.POWERSHELL
    assert config.wsl.fallback_enabled is False


def test_marketplace_suffixed_key_is_found(tmp_path):
    path = _write_settings(
        tmp_path / "settings.json", {"enabled": False}, key="plugin-alarm@my-marketplace"
    )
    assert AlarmConfig.load(settings_path=path).enabled is False


def test_other_plugin_sections_ignored(tmp_path):
    path = _write_settings(tmp_path / "settings.json", {"enabled": False}, key="other-plugin")
    assert AlarmConfig.load(settings_path=path).enabled is True


def test_missing_file_uses_defaults(tmp_path):
    config = AlarmConfig.load(settings_path=tmp_path / "nope.json")
    assert config == AlarmConfig()


def test_malformed_json_uses_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{ not json", encoding="utf-8")
    config = AlarmConfig.load(settings_path=path)
    assert config == AlarmConfig()


def test_invalid_values_use_defaults(tmp_path):
    path = _write_settings(tmp_path / "settings.json", {"delaySeconds": -5})
    config = AlarmConfig.load(settings_path=path)
    assert config.delay_seconds == 5


def test_invalid_value_keeps_other_settings(tmp_path):
    path = _write_settings(
        tmp_path / "settings.json",
        {
            "enabled": False,
            "instanceIdentifier": "hostname",
            "wsl": {"preferredMethod": "carrier-pigeon", "fallbackEnabled": False},
        },
    )
    config = AlarmConfig.load(settings_path=path)

    assert config.enabled is False
    assert config.instance_identifier is IdentifierMode.PROJECT_NAME
    assert config.wsl.preferred_method is WSLMethod.AUTO
    assert config.wsl.fallback_enabled is False


def test_unreadable_settings_location_uses_defaults(tmp_path, monkeypatch):
    def _denied(self, *args, **kwargs):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "exists", _denied)
    config = AlarmConfig.load(settings_path=tmp_path / ".claude" / "settings.json")
    assert config == AlarmConfig()


def test_non_object_section_uses_defaults(tmp_path):
    path = _write_settings(tmp_path / "settings.json", ["not", "a", "dict"])
    assert AlarmConfig.load(settings_path=path) == AlarmConfig()


def test_env_var_loading(monkeypatch, tmp_path):
    """ALARM_* environment variables override the settings file."""
    path = _write_settings(tmp_path / "settings.json", {"delaySeconds": 2})
    monkeypatch.setenv("ALARM_DELAY_SECONDS", "0")
    monkeypatch.setenv("ALARM_WSL_METHOD", "wsl-notify-send")
    monkeypatch.setenv("ALARM_SOUND", "false")

    config = AlarmConfig.load(settings_path=path)

    assert config.delay_seconds == 0
    assert config.wsl.preferred_method is WSLMethod.WSL_NOTIFY_SEND
    assert config.notifications.sound is False


def test_overrides_take_precedence(monkeypatch, tmp_path):
    monkeypatch.setenv("ALARM_COOLDOWN_SECONDS", "30")
    config = AlarmConfig.load(
        overrides={"cooldownSeconds": 1, "notifications": {"desktop": False}},
        settings_path=tmp_path / "missing.json",
    )
    assert config.cooldown_seconds == 1
    assert config.notifications.desktop is False
    assert config.notifications.sound is True


def test_deep_merge():
    base = {"a": 1, "b": {"c": 2, "d": 3}, "e": 5}
    override = {"b": {"c": 20, "f": 6}, "g": 7}

    _deep_merge(base, override)

    assert base == {"a": 1, "b": {"c": 20, "d": 3, "f": 6}, "e": 5, "g": 7}


def test_normalize_keys():
    assert _normalize_keys({"delaySeconds": 1, "wsl": {"fallbackEnabled": True}}) == {
        "delay_seconds": 1,
        "wsl": {"fallback_enabled": True},
    }


def test_convert_value():
    assert _convert_value("true") is True
    assert _convert_value("no") is False
    assert _convert_value("0") == 0
    assert _convert_value("42") == 42
    assert _convert_value("2.5") == 2.5
    assert _convert_value("sessionId") == "sessionId"
