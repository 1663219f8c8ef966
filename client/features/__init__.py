from .dispatcher import MessageDispatcher
from .uploads import UploadCoordinator, UploadError, UploadFile, UploadProgress, UploadState, UploadTask

__all__ = [
    "MessageDispatcher",
    "UploadCoordinator",
    "UploadError",
    "UploadFile",
    "UploadProgress",
    "UploadState",
    "UploadTask",
]
