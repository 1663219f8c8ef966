from .common import http_url, websocket_url

__all__ = ["http_url", "websocket_url"]
