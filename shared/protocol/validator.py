from __future__ import annotations

from typing import Any, Dict, Optional

import jsonschema

from .commands import MsgType
from .errors import ErrorCode, ProtocolError, StatusCode

ENVELOPE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["type"],
    "properties": {"type": {"type": "string", "minLength": 1}},
}

# Per-variant required fields; extra keys are tolerated for forward compatibility.
SCHEMA_REGISTRY: Dict[str, Dict[str, Any]] = {
    MsgType.ASSIGN.value: {
        "type": "object",
        "required": ["id", "color"],
        "properties": {"id": {"type": "string"}, "color": {"type": "string"}},
    },
    MsgType.MSG.value: {
        "type": "object",
        "required": ["from", "text", "color"],
        "properties": {"from": {"type": "string"}, "text": {"type": "string"}, "color": {"type": "string"}},
    },
    MsgType.UPLOAD.value: {
        "type": "object",
        "required": ["from", "url", "filename"],
        "properties": {"from": {"type": "string"}, "url": {"type": "string"}, "filename": {"type": "string"}},
    },
    MsgType.SYSTEM.value: {
        "type": "object",
        "required": ["text"],
        "properties": {"text": {"type": "string"}},
    },
    MsgType.HELP.value: {
        "type": "object",
        "properties": {"commands": {"type": "array", "items": {"type": "string"}}},
    },
    MsgType.WHISPER.value: {
        "type": "object",
        "required": ["from", "text", "color"],
        "properties": {"from": {"type": "string"}, "text": {"type": "string"}, "color": {"type": "string"}},
    },
    MsgType.BLOCKED.value: {
        "type": "object",
        "required": ["from"],
        "properties": {"from": {"type": "string"}},
    },
    MsgType.WARN.value: {
        "type": "object",
        "required": ["text"],
        "properties": {"text": {"type": "string"}},
    },
    MsgType.BANNED.value: {
        "type": "object",
        "required": ["reason"],
        "properties": {"reason": {"type": "string"}},
    },
}


def load_schema(msg_type: str) -> Optional[dict]:
    """Return the JSON schema for a variant, or None for unknown types."""
    return SCHEMA_REGISTRY.get(msg_type)


def validate_envelope(msg: Dict[str, Any]) -> None:
    """Ensure the envelope is an object with a non-empty string discriminant."""
    try:
        jsonschema.validate(instance=msg, schema=ENVELOPE_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise ProtocolError(
            StatusCode.BAD_REQUEST, ErrorCode.ENVELOPE_INVALID, f"Envelope validation failed: {exc.message}"
        ) from exc


def validate_msg(msg: Dict[str, Any], schema: Optional[dict] = None) -> None:
    """Run envelope validation plus the variant schema when one is registered."""
    validate_envelope(msg)
    if not schema:
        schema = load_schema(msg["type"])
    if schema:
        try:
            jsonschema.validate(instance=msg, schema=schema)
        except jsonschema.ValidationError as exc:
            raise ProtocolError(
                StatusCode.BAD_REQUEST, ErrorCode.PARAM_MISSING, f"Schema validation failed: {exc.message}"
            ) from exc


__all__ = ["ENVELOPE_SCHEMA", "SCHEMA_REGISTRY", "load_schema", "validate_envelope", "validate_msg"]
