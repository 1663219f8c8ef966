"""Protocol-wide constants shared by the connection, dispatcher and uploads."""

ENCODING = "utf-8"
WS_PATH = "/ws"
UPLOAD_PATH = "/upload"
UPLOAD_FIELD = "file"
MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10 MiB, enforced before any network call

# Fixed actors/colors for locally rendered entries
SYSTEM_ACTOR = "system"
HELP_ACTOR = "help"
DEFAULT_COLOR = "#888"
SYSTEM_COLOR = "#34d399"
HELP_COLOR = "#8b5cf6"
ALARM_COLOR = "#ef4444"

UNKNOWN_FILE_SIZE = 0

__all__ = [
    "ENCODING",
    "WS_PATH",
    "UPLOAD_PATH",
    "UPLOAD_FIELD",
    "MAX_UPLOAD_SIZE",
    "SYSTEM_ACTOR",
    "HELP_ACTOR",
    "DEFAULT_COLOR",
    "SYSTEM_COLOR",
    "HELP_COLOR",
    "ALARM_COLOR",
    "UNKNOWN_FILE_SIZE",
]
