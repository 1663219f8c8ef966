from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .commands import is_command
from .constants import DEFAULT_COLOR
from .errors import ErrorCode, ProtocolError, StatusCode


class BaseMsg(BaseModel):
    """Base envelope shared by every inbound variant."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    type: str = Field(..., description="Variant discriminant")


class AssignMsg(BaseMsg):
    type: Literal["assign"] = "assign"
    id: str
    color: str


class ChatMsg(BaseMsg):
    type: Literal["msg"] = "msg"
    sender: str = Field(alias="from")
    text: str
    color: str
    to: Optional[str] = None


class UploadMsg(BaseMsg):
    """File announcement; the server never sends a size."""

    type: Literal["upload"] = "upload"
    sender: str = Field(alias="from")
    url: str
    filename: str
    color: str = DEFAULT_COLOR
    to: Optional[str] = None


class SystemMsg(BaseMsg):
    type: Literal["system"] = "system"
    text: str


class HelpMsg(BaseMsg):
    type: Literal["help"] = "help"
    commands: List[str] = Field(default_factory=list)


class WhisperMsg(BaseMsg):
    type: Literal["whisper"] = "whisper"
    sender: str = Field(alias="from")
    text: str
    color: str
    to: Optional[str] = None


class BlockedMsg(BaseMsg):
    type: Literal["blocked"] = "blocked"
    sender: str = Field(alias="from")


class WarnMsg(BaseMsg):
    type: Literal["warn"] = "warn"
    text: str


class BannedMsg(BaseMsg):
    type: Literal["banned"] = "banned"
    reason: str


class UnknownMsg(BaseMsg):
    """Envelope whose `type` this client does not understand."""


InboundMsg = Annotated[
    Union[AssignMsg, ChatMsg, UploadMsg, SystemMsg, HelpMsg, WhisperMsg, BlockedMsg, WarnMsg, BannedMsg],
    Field(discriminator="type"),
]

_INBOUND_ADAPTER: TypeAdapter = TypeAdapter(InboundMsg)


def parse_envelope(data: Dict[str, Any]) -> BaseMsg:
    """
    Build the typed variant for a decoded envelope.

    Unrecognized `type` values map to UnknownMsg instead of failing, so newer
    servers can add kinds without breaking older clients. A missing type, or
    a recognized type with bad fields, raises ProtocolError.
    """
    msg_type = data.get("type")
    if not isinstance(msg_type, str) or not msg_type:
        raise ProtocolError(StatusCode.BAD_REQUEST, ErrorCode.ENVELOPE_INVALID, "Envelope has no type")
    try:
        if not is_command(msg_type):
            return UnknownMsg.model_validate(data)
        return _INBOUND_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise ProtocolError(
            StatusCode.BAD_REQUEST, ErrorCode.PARAM_MISSING, f"Message validation failed: {exc}"
        ) from exc


__all__ = [
    "BaseMsg",
    "AssignMsg",
    "ChatMsg",
    "UploadMsg",
    "SystemMsg",
    "HelpMsg",
    "WhisperMsg",
    "BlockedMsg",
    "WarnMsg",
    "BannedMsg",
    "UnknownMsg",
    "InboundMsg",
    "parse_envelope",
]
