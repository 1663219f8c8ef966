from __future__ import annotations

import json
from typing import Any, Dict, Optional, Union

from .constants import ENCODING
from .errors import ErrorCode, ProtocolError, StatusCode


def decode_msg(data: Union[str, bytes]) -> Dict[str, Any]:
    """Decode one text (or UTF-8 binary) frame into a dictionary."""
    try:
        text = data.decode(ENCODING) if isinstance(data, (bytes, bytearray)) else data
        decoded = json.loads(text)
    except (ValueError, RecursionError, TypeError) as exc:
        raise ProtocolError(StatusCode.BAD_REQUEST, ErrorCode.DECODE_FAILED, f"Decode failed: {exc}") from exc
    if not isinstance(decoded, dict):
        raise ProtocolError(
            StatusCode.BAD_REQUEST,
            ErrorCode.ENVELOPE_INVALID,
            f"Envelope must be a JSON object, got {type(decoded).__name__}",
        )
    return decoded


def encode_text(text: str) -> Optional[str]:
    """
    Prepare an outbound chat line. The wire format is the plain line itself;
    blank input yields None and must not be written.
    """
    line = text.strip()
    return line or None


__all__ = ["decode_msg", "encode_text"]
