from __future__ import annotations

from enum import IntEnum
from typing import Optional


class StatusCode(IntEnum):
    """HTTP-like status codes used across the client core."""

    BAD_REQUEST = 400
    INTERNAL_ERROR = 500
    BAD_GATEWAY = 502


class ErrorCode(IntEnum):
    """Domain specific error codes."""

    DECODE_FAILED = 1001
    ENVELOPE_INVALID = 1002
    PARAM_MISSING = 1004
    UPLOAD_REJECTED = 1008
    UPLOAD_TRANSPORT = 1009


class ProtocolError(Exception):
    """Structured protocol exception carrying status + code + message."""

    def __init__(self, status: StatusCode, code: Optional[ErrorCode] = None, message: str = "") -> None:
        self.status = status
        self.code = code
        self.message = message
        super().__init__(f"{status.name} ({int(status)}): {message} (code={code.name if code else 'n/a'})")


__all__ = ["StatusCode", "ErrorCode", "ProtocolError"]
