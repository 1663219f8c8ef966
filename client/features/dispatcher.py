from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from client.core.session import IdentityState
from client.ui.base import Renderer
from shared.protocol import framing, validator
from shared.protocol.commands import RenderKind
from shared.protocol.constants import (
    ALARM_COLOR,
    HELP_ACTOR,
    HELP_COLOR,
    SYSTEM_ACTOR,
    SYSTEM_COLOR,
    UNKNOWN_FILE_SIZE,
)
from shared.protocol.errors import ProtocolError
from shared.protocol.messages import (
    AssignMsg,
    BannedMsg,
    BaseMsg,
    BlockedMsg,
    ChatMsg,
    HelpMsg,
    SystemMsg,
    UnknownMsg,
    UploadMsg,
    WarnMsg,
    WhisperMsg,
    parse_envelope,
)

logger = logging.getLogger(__name__)

WELCOME_TEMPLATE = "Welcome! Your ID is {user_id}."
HELP_HINT = "Type /help for a list of commands"
HELP_TITLE = "Available commands:"
BLOCKED_TEMPLATE = "Blocked a message from {sender}"
BANNED_TEMPLATE = "You have been banned: {reason}"


class MessageDispatcher:
    """Turns each raw inbound payload into zero or one timeline entry."""

    def __init__(self, identity: IdentityState, renderer: Renderer) -> None:
        self.identity = identity
        self.renderer = renderer

    async def handle_payload(self, payload: Union[str, bytes]) -> None:
        """Message handler hook for ConnectionManager."""
        self.dispatch(payload)

    def dispatch(self, payload: Union[str, bytes]) -> Optional[BaseMsg]:
        """
        Decode, validate and route one payload.

        Malformed payloads are logged and dropped; nothing raised here reaches
        the connection. Returns the decoded message, or None when discarded.
        """
        try:
            raw = framing.decode_msg(payload)
            validator.validate_msg(raw)
            msg = parse_envelope(raw)
        except ProtocolError as exc:
            logger.warning("Discarding inbound payload: %s", exc)
            return None
        self.route(msg)
        return msg

    def route(self, msg: BaseMsg) -> None:
        match msg:
            case AssignMsg():
                self.identity.assign(msg.id, msg.color)
                self._system(WELCOME_TEMPLATE.format(user_id=msg.id))
                self._system(HELP_HINT)
            case ChatMsg():
                self._emit(RenderKind.PLAIN, {"from": msg.sender, "text": msg.text, "color": msg.color})
            case UploadMsg():
                self._emit(
                    RenderKind.UPLOAD,
                    {
                        "from": msg.sender,
                        "color": msg.color,
                        "url": msg.url,
                        "filename": msg.filename,
                        "size": UNKNOWN_FILE_SIZE,
                    },
                )
            case SystemMsg():
                self._system(msg.text)
            case HelpMsg():
                self._emit(
                    RenderKind.HELP,
                    {"from": HELP_ACTOR, "text": HELP_TITLE, "color": HELP_COLOR, "commands": list(msg.commands)},
                )
            case WhisperMsg():
                self._emit(RenderKind.WHISPER, {"from": msg.sender, "text": msg.text, "color": msg.color})
            case BlockedMsg():
                self._emit(
                    RenderKind.BLOCKED_NOTICE,
                    {"from": msg.sender, "text": BLOCKED_TEMPLATE.format(sender=msg.sender), "color": ALARM_COLOR},
                )
            case WarnMsg():
                self._error(msg.text)
            case BannedMsg():
                self._error(BANNED_TEMPLATE.format(reason=msg.reason))
            case UnknownMsg():
                logger.debug("Ignoring unknown message type %r", msg.type)

    def _system(self, text: str) -> None:
        self._emit(RenderKind.SYSTEM, {"from": SYSTEM_ACTOR, "text": text, "color": SYSTEM_COLOR})

    def _error(self, text: str) -> None:
        self._emit(RenderKind.ERROR, {"from": SYSTEM_ACTOR, "text": text, "color": ALARM_COLOR})

    def _emit(self, kind: RenderKind, payload: Dict[str, Any]) -> None:
        try:
            self.renderer.render(kind, payload)
        except Exception as exc:
            logger.exception("Renderer failed for %s: %s", kind, exc)
