"""Tests for alarm/notifications/router.py."""
from __future__ import annotations

import pytest

from alarm.core.config import AlarmConfig
from alarm.core.errors import DeliveryError
from alarm.core.types import Alert, PlatformKind
from alarm.notifications.base import NotificationChannel
from alarm.notifications.router import BackendRouter

from conftest import FakeRunner


# ── Helpers ──────────────────────────────────────────────────────────────────

class FakeChannel(NotificationChannel):
    def __init__(self, name: str, platform: PlatformKind | None) -> None:
        self._name = name
        self._platform = platform
        self.delivered: list[Alert] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def platform(self) -> PlatformKind | None:
        return self._platform

    async def deliver(self, alert: Alert, config: AlarmConfig) -> None:
        self.delivered.append(alert)


ALERT = Alert(title="Claude Code - api", message="Ready")


# ── BackendRouter ────────────────────────────────────────────────────────────

class TestRegistration:
    def test_default_covers_every_platform(self):
        router = BackendRouter.default(runner=FakeRunner())
        assert set(router.platforms) == set(PlatformKind)

    def test_default_channel_names(self):
        router = BackendRouter.default(runner=FakeRunner())
        names = {p: router.select(p).name for p in PlatformKind}
        assert names == {
            PlatformKind.MACOS: "macos",
            PlatformKind.WINDOWS: "windows",
            PlatformKind.LINUX: "linux",
            PlatformKind.WSL: "wsl",
        }

    def test_register_replaces_existing(self):
        router = BackendRouter()
        first = FakeChannel("first", PlatformKind.LINUX)
        second = FakeChannel("second", PlatformKind.LINUX)
        router.register(first)
        router.register(second)
        assert router.select(PlatformKind.LINUX) is second

    def test_register_with_explicit_platform(self):
        router = BackendRouter()
        neutral = FakeChannel("neutral", None)
        router.register(neutral, platform=PlatformKind.MACOS)
        assert router.select(PlatformKind.MACOS) is neutral

    def test_platformless_channel_needs_explicit_platform(self):
        with pytest.raises(ValueError):
            BackendRouter().register(FakeChannel("neutral", None))

    def test_select_unknown_platform_raises(self):
        with pytest.raises(DeliveryError):
            BackendRouter().select(PlatformKind.WSL)


@pytest.mark.asyncio
class TestDelivery:
    async def test_routes_to_platform_channel(self, config):
        router = BackendRouter()
        mac = FakeChannel("mac", PlatformKind.MACOS)
        linux = FakeChannel("linux", PlatformKind.LINUX)
        router.register(mac)
        router.register(linux)

        name = await router.deliver(PlatformKind.LINUX, ALERT, config)

        assert name == "linux"
        assert linux.delivered == [ALERT]
        assert mac.delivered == []

    async def test_default_linux_runs_notify_send(self, config):
        runner = FakeRunner()
        router = BackendRouter.default(runner=runner)
        await router.deliver(PlatformKind.LINUX, ALERT, config)
        assert runner.executables == ["notify-send"]

    async def test_default_macos_runs_osascript(self, config):
        runner = FakeRunner()
        router = BackendRouter.default(runner=runner)
        await router.deliver(PlatformKind.MACOS, ALERT, config)
        assert runner.executables == ["osascript"]
