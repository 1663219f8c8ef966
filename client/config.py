from __future__ import annotations

import logging
import os
from typing import Any, Dict
from urllib.parse import urlsplit

from dotenv import load_dotenv

from shared.protocol.constants import MAX_UPLOAD_SIZE, UPLOAD_FIELD, UPLOAD_PATH, WS_PATH

DEFAULT_CONFIG: Dict[str, Any] = {
    "server_origin": "http://127.0.0.1:10000",
    "ws_path": WS_PATH,
    "upload_path": UPLOAD_PATH,
    "upload_field": UPLOAD_FIELD,
    "max_upload_size": MAX_UPLOAD_SIZE,
    "log_level": "INFO",
    "debug_mode": False,
}

CLIENT_CONFIG: Dict[str, Any] = DEFAULT_CONFIG.copy()


class ConfigError(Exception):
    """Raised when configuration values are invalid."""

    pass


def load_config(env_path: str = ".env") -> Dict[str, Any]:
    """Load client configuration from env file/environment variables."""
    if os.path.exists(env_path):
        load_dotenv(env_path)

    for key, default_value in DEFAULT_CONFIG.items():
        env_key = f"CLIENT_{key.upper()}"
        value = os.getenv(env_key, default_value)
        CLIENT_CONFIG[key] = _coerce_type(value, type(default_value))

    _validate_config()
    if CLIENT_CONFIG["debug_mode"]:
        CLIENT_CONFIG["log_level"] = "DEBUG"
    logging.getLogger().setLevel(CLIENT_CONFIG["log_level"])
    return CLIENT_CONFIG


def _coerce_type(value: Any, target_type: type) -> Any:
    if isinstance(value, target_type):
        return value
    try:
        if target_type is bool:
            return str(value).lower() in ("1", "true", "yes", "on")
        return target_type(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Cannot convert {value} to {target_type}") from exc


def _validate_config() -> None:
    origin = urlsplit(CLIENT_CONFIG["server_origin"])
    if origin.scheme not in ("http", "https") or not origin.netloc:
        raise ConfigError("server_origin must be an http(s) origin such as http://host:port")
    for key in ("ws_path", "upload_path"):
        if not str(CLIENT_CONFIG[key]).startswith("/"):
            raise ConfigError(f"{key} must start with '/'")
    if CLIENT_CONFIG["max_upload_size"] <= 0:
        raise ConfigError("max_upload_size must be positive")
    if not CLIENT_CONFIG["upload_field"]:
        raise ConfigError("upload_field must not be empty")


def get(key: str, default: Any = None) -> Any:
    return CLIENT_CONFIG.get(key, default)


__all__ = ["CLIENT_CONFIG", "DEFAULT_CONFIG", "ConfigError", "get", "load_config"]
