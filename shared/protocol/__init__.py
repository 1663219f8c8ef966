"""
Shared protocol package that centralizes envelope types, message models, framing
helpers, and validation utilities for the chat client core.
"""

from .commands import MsgType, RenderKind, is_command
from .constants import (
    ALARM_COLOR,
    DEFAULT_COLOR,
    ENCODING,
    HELP_ACTOR,
    HELP_COLOR,
    MAX_UPLOAD_SIZE,
    SYSTEM_ACTOR,
    SYSTEM_COLOR,
    UNKNOWN_FILE_SIZE,
    UPLOAD_FIELD,
    UPLOAD_PATH,
    WS_PATH,
)
from .errors import ErrorCode, ProtocolError, StatusCode
from .framing import decode_msg, encode_text
from .messages import (
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
from .validator import load_schema, validate_envelope, validate_msg

__all__ = [
    "MsgType",
    "RenderKind",
    "is_command",
    "ALARM_COLOR",
    "DEFAULT_COLOR",
    "ENCODING",
    "HELP_ACTOR",
    "HELP_COLOR",
    "MAX_UPLOAD_SIZE",
    "SYSTEM_ACTOR",
    "SYSTEM_COLOR",
    "UNKNOWN_FILE_SIZE",
    "UPLOAD_FIELD",
    "UPLOAD_PATH",
    "WS_PATH",
    "ErrorCode",
    "ProtocolError",
    "StatusCode",
    "decode_msg",
    "encode_text",
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
    "parse_envelope",
    "load_schema",
    "validate_envelope",
    "validate_msg",
]
