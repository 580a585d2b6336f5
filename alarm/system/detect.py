"""
Platform auto-detection — classifies the host so the right channel is used.

Never raises: anything unrecognised is treated as plain Linux.
"""

from __future__ import annotations

import logging
import os
import platform
from pathlib import Path
from typing import Mapping

from alarm.core.types import PlatformKind

logger = logging.getLogger(__name__)

PROC_VERSION = Path("/proc/version")

# Substrings of /proc/version that mean "Linux hosted by Windows".
WSL_MARKERS = ("Microsoft", "WSL")


def detect_platform(
    system: str | None = None,
    version_path: Path = PROC_VERSION,
) -> PlatformKind:
    """
    Detect the platform for this process.

    Args:
        system: Kernel name as reported by platform.system(); looked up
                when None.
        version_path: Kernel version file inspected on Linux.

    Returns:
        A PlatformKind. Unknown kernels map to LINUX.
    """
    system = (system if system is not None else platform.system()).lower()

    if system == "darwin":
        return PlatformKind.MACOS
    if system == "windows":
        return PlatformKind.WINDOWS
    if system == "linux":
        if _is_wsl(version_path):
            logger.debug("Detected Linux under Windows (WSL)")
            return PlatformKind.WSL
        return PlatformKind.LINUX

    logger.debug(f"Unrecognised system {system!r}, assuming Linux")
    return PlatformKind.LINUX


def _is_wsl(version_path: Path) -> bool:
    try:
        version = version_path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False
    return any(marker in version for marker in WSL_MARKERS)


def detect_display_server(env: Mapping[str, str] | None = None) -> str:
    """Return 'wayland', 'x11' or 'unknown'."""
    env = os.environ if env is None else env
    session_type = env.get("XDG_SESSION_TYPE", "")

    if session_type == "wayland" or env.get("WAYLAND_DISPLAY"):
        return "wayland"
    if session_type == "x11" or env.get("DISPLAY"):
        return "x11"
    return "unknown"


def detect_terminal(env: Mapping[str, str] | None = None) -> str:
    """Best-effort name of the terminal application, or 'unknown'."""
    env = os.environ if env is None else env
    term = env.get("TERM_PROGRAM") or env.get("TERM") or "unknown"

    known = (
        ("iTerm", "iTerm"),
        ("Apple_Terminal", "Terminal"),
        ("vscode", "VSCode"),
        ("hyper", "Hyper"),
    )
    for needle, name in known:
        if needle in term:
            return name

    terminal = env.get("TERMINAL", "")
    for needle, name in (("gnome", "GNOME Terminal"), ("konsole", "Konsole"), ("xterm", "xterm")):
        if needle in terminal:
            return name

    return "unknown"


def get_platform_info() -> dict[str, str]:
    """Snapshot of the detected environment, for diagnostics."""
    return {
        "platform": detect_platform().value,
        "display_server": detect_display_server(),
        "terminal": detect_terminal(),
        "system": platform.platform(),
    }
