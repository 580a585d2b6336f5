"""
Instance identity — labels notifications so several agents running at
once (different projects, tmux panes, screen sessions) can be told apart.

Resolved at fire-time, so it reflects the environment when the alert is
shown rather than when it was scheduled.
"""

from __future__ import annotations

import os
from pathlib import PurePath
from typing import Mapping

from alarm.core.types import IdentifierMode, InstanceIdentity

DEFAULT_APP_NAME = "Claude Code"


def resolve_identity(
    mode: IdentifierMode = IdentifierMode.PROJECT_NAME,
    working_directory: str | None = None,
    env: Mapping[str, str] | None = None,
    pid: int | None = None,
    app_name: str = DEFAULT_APP_NAME,
) -> InstanceIdentity:
    """
    Build the title/subtitle/session label for this instance.

    PROJECT_NAME and FULL_PATH produce the same labels today; they stay
    separate modes so the settings file keeps its meaning.
    """
    working_dir = working_directory or os.getcwd()
    env = os.environ if env is None else env
    pid = os.getpid() if pid is None else pid

    title = f"{app_name} - {_project_name(working_dir)}"

    if mode is IdentifierMode.PID:
        return InstanceIdentity(title=title, subtitle=working_dir, session_info=f"PID: {pid}")

    if mode is IdentifierMode.SESSION_ID:
        return InstanceIdentity(
            title=title,
            subtitle=working_dir,
            session_info=_session_info(env, pid),
        )

    return InstanceIdentity(title=title, subtitle=working_dir)


def _project_name(working_dir: str) -> str:
    # Trailing separators would otherwise give an empty basename.
    return PurePath(working_dir).name or working_dir


def _session_info(env: Mapping[str, str], pid: int) -> str:
    tmux_pane = env.get("TMUX_PANE")
    if tmux_pane:
        return f"tmux:{tmux_pane}"
    screen_session = env.get("STY")
    if screen_session:
        return f"screen:{screen_session}"
    return f"PID: {pid}"


def format_message(
    message: str,
    identity: InstanceIdentity,
    include_session_info: bool = False,
) -> str:
    """Append the session label to the message body when asked to."""
    if include_session_info and identity.session_info:
        return f"{message}\n\n{identity.session_info}"
    return message
