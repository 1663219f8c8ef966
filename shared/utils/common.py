from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit


def websocket_url(origin: str, path: str) -> str:
    """Derive the WebSocket endpoint for an HTTP origin (https -> wss, else ws)."""
    parts = urlsplit(origin)
    scheme = "wss" if parts.scheme == "https" else "ws"
    return urlunsplit((scheme, parts.netloc, path, "", ""))


def http_url(origin: str, path: str) -> str:
    """Join an HTTP origin with an absolute endpoint path."""
    parts = urlsplit(origin)
    return urlunsplit((parts.scheme or "http", parts.netloc, path, "", ""))


__all__ = ["websocket_url", "http_url"]
