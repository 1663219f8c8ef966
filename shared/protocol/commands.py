from __future__ import annotations

from enum import StrEnum


class MsgType(StrEnum):
    """
    Values of the `type` discriminant carried by every inbound envelope.
    WARN and BANNED come from the server's spam guard.
    """

    ASSIGN = "assign"
    MSG = "msg"
    UPLOAD = "upload"
    SYSTEM = "system"
    HELP = "help"
    WHISPER = "whisper"
    BLOCKED = "blocked"
    WARN = "warn"
    BANNED = "banned"


class RenderKind(StrEnum):
    """Entry kinds handed to the rendering collaborator."""

    SYSTEM = "system"
    HELP = "help"
    UPLOAD = "upload"
    WHISPER = "whisper"
    PLAIN = "plain"
    BLOCKED_NOTICE = "blocked-notice"
    ERROR = "error"


def is_command(value: str) -> bool:
    """Check if `value` is a known envelope type."""
    try:
        MsgType(value)
        return True
    except ValueError:
        return False


__all__ = [
    "MsgType",
    "RenderKind",
    "is_command",
]
