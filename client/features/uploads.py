from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Union

import httpx

from client.config import CLIENT_CONFIG
from client.ui.base import Renderer
from shared.protocol.commands import RenderKind
from shared.protocol.constants import ALARM_COLOR, SYSTEM_ACTOR
from shared.protocol.errors import ErrorCode, ProtocolError, StatusCode
from shared.utils.common import http_url

logger = logging.getLogger(__name__)

TOO_LARGE_TEMPLATE = "File too large: {name} exceeds the {limit_mb} MB limit"
REJECTED_TEMPLATE = "Upload of {name} was rejected by the server ({status})"
TRANSPORT_TEMPLATE = "Transport error while uploading {name}"
UNREADABLE_TEMPLATE = "Could not read {name} for upload"


class UploadError(ProtocolError):
    """A transfer that did not end in a success response."""

    pass


class UploadState(StrEnum):
    PENDING = "pending"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(eq=False)
class UploadFile:
    """A candidate file: name, byte size and either bytes or a path to read."""

    name: str
    size: int
    content: Union[bytes, Path]

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "UploadFile":
        path = Path(path)
        return cls(name=path.name, size=path.stat().st_size, content=path)

    def read_bytes(self) -> bytes:
        if isinstance(self.content, Path):
            return self.content.read_bytes()
        return self.content


@dataclass(eq=False)
class UploadTask:
    file: UploadFile
    state: UploadState = UploadState.PENDING
    status_code: Optional[int] = None
    error: Optional[str] = None


class UploadProgress:
    """Outstanding-transfer counter; the indicator is visible while it is above zero."""

    def __init__(self) -> None:
        self.outstanding = 0
        self._listeners: List[Callable[[bool], None]] = []

    @property
    def visible(self) -> bool:
        return self.outstanding > 0

    def add_listener(self, listener: Callable[[bool], None]) -> None:
        self._listeners.append(listener)

    def begin(self) -> None:
        self.outstanding += 1
        if self.outstanding == 1:
            self._notify(True)

    def end(self) -> None:
        self.outstanding = max(0, self.outstanding - 1)
        if self.outstanding == 0:
            self._notify(False)

    def _notify(self, visible: bool) -> None:
        for listener in list(self._listeners):
            try:
                listener(visible)
            except Exception as exc:
                logger.exception("Progress listener error: %s", exc)


class UploadCoordinator:
    """Validates a batch of files and runs one independent HTTP transfer per accepted file."""

    def __init__(
        self,
        renderer: Renderer,
        config: Optional[Dict[str, Any]] = None,
        progress: Optional[UploadProgress] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.renderer = renderer
        self.config = config or CLIENT_CONFIG
        self.progress = progress or UploadProgress()
        self.upload_url: str = http_url(self.config["server_origin"], self.config["upload_path"])
        self.field: str = self.config["upload_field"]
        self.max_size: int = int(self.config["max_upload_size"])
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._tasks: Set[asyncio.Task] = set()

    def submit(self, files: Iterable[UploadFile]) -> List[asyncio.Task]:
        """
        Schedule every file of one user selection. Oversized files are rejected
        up front; the rest start concurrently and are not awaited here.
        """
        loop = asyncio.get_running_loop()
        scheduled: List[asyncio.Task] = []
        for upload_file in files:
            if upload_file.size > self.max_size:
                logger.info("Rejected %s (%s bytes): over size limit", upload_file.name, upload_file.size)
                self._error(TOO_LARGE_TEMPLATE.format(name=upload_file.name, limit_mb=self.max_size // (1024 * 1024)))
                continue
            task = loop.create_task(self._run(UploadTask(upload_file)), name=f"upload-{upload_file.name}")
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            scheduled.append(task)
        return scheduled

    @property
    def outstanding(self) -> int:
        return len(self._tasks)

    async def wait(self) -> None:
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        await self.wait()
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _run(self, task: UploadTask) -> UploadTask:
        self.progress.begin()
        task.state = UploadState.UPLOADING
        try:
            task.status_code = await self._transfer(task.file)
            task.state = UploadState.SUCCEEDED
            logger.info("Uploaded %s (%s bytes)", task.file.name, task.file.size)
        except UploadError as exc:
            task.state = UploadState.FAILED
            task.error = exc.message
            logger.warning("Upload of %s failed: %s", task.file.name, exc)
            self._error(exc.message)
        except Exception:
            task.state = UploadState.FAILED
            task.error = TRANSPORT_TEMPLATE.format(name=task.file.name)
            logger.exception("Unexpected failure uploading %s", task.file.name)
            self._error(task.error)
        finally:
            self.progress.end()
        return task

    async def _transfer(self, upload_file: UploadFile) -> int:
        try:
            content = upload_file.read_bytes()
        except OSError as exc:
            raise UploadError(
                StatusCode.INTERNAL_ERROR,
                ErrorCode.UPLOAD_TRANSPORT,
                UNREADABLE_TEMPLATE.format(name=upload_file.name),
            ) from exc
        try:
            response = await self._get_client().post(
                self.upload_url, files={self.field: (upload_file.name, content)}
            )
        except httpx.HTTPError as exc:
            raise UploadError(
                StatusCode.INTERNAL_ERROR,
                ErrorCode.UPLOAD_TRANSPORT,
                TRANSPORT_TEMPLATE.format(name=upload_file.name),
            ) from exc
        if not response.is_success:
            raise UploadError(
                StatusCode.BAD_GATEWAY,
                ErrorCode.UPLOAD_REJECTED,
                REJECTED_TEMPLATE.format(name=upload_file.name, status=response.status_code),
            )
        return response.status_code

    def _get_client(self) -> httpx.AsyncClient:
        # No timeout: a hung transfer only holds up its own task.
        if self._client is None:
            self._client = httpx.AsyncClient(transport=self._transport, timeout=None)
        return self._client

    def _error(self, text: str) -> None:
        try:
            self.renderer.render(RenderKind.ERROR, {"from": SYSTEM_ACTOR, "text": text, "color": ALARM_COLOR})
        except Exception as exc:
            logger.exception("Renderer failed for upload notice: %s", exc)
