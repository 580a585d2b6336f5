"""
Pure text transforms applied to anything that ends up in a notification.
"""

from __future__ import annotations

import re

TITLE_MAX_LENGTH = 100
SUBTITLE_MAX_LENGTH = 150
MESSAGE_MAX_LENGTH = 200

ELLIPSIS = "..."

# Control characters except tab, newline and carriage return.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

# PowerShell treats the typographic single quotes as delimiters too.
_PS_SINGLE_QUOTES = re.compile("['\u2018\u2019\u201a\u201b]")

# Order matters: "&" must go first or the other entities get double-escaped.
_XML_ENTITIES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def sanitize_text(text: str, max_length: int = MESSAGE_MAX_LENGTH) -> str:
    """
    Strip control characters and cap the length.

    Truncated output ends with "..." and is exactly max_length long.
    """
    sanitized = _CONTROL_CHARS.sub("", text)
    if len(sanitized) <= max_length:
        return sanitized
    if max_length <= len(ELLIPSIS):
        return sanitized[:max_length]
    return sanitized[: max_length - len(ELLIPSIS)] + ELLIPSIS


def escape_xml(text: str) -> str:
    """Escape the five XML special characters."""
    for raw, entity in _XML_ENTITIES:
        text = text.replace(raw, entity)
    return text


def escape_powershell_single_quoted(text: str) -> str:
    """Make text safe inside a PowerShell '...' literal."""
    return _PS_SINGLE_QUOTES.sub(lambda m: m.group() * 2, text)


def escape_applescript(text: str) -> str:
    """Make text safe inside an AppleScript "..." literal."""
    return text.replace("\\", "\\\\").replace('"', '\\"')
