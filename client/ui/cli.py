from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional, TextIO

from client.core.network import ConnectionManager, ConnectionState
from client.features.uploads import UploadCoordinator, UploadFile
from shared.protocol.commands import RenderKind
from shared.protocol.constants import ALARM_COLOR, SYSTEM_ACTOR

logger = logging.getLogger(__name__)

KIND_LABELS: Dict[RenderKind, str] = {
    RenderKind.SYSTEM: "[system]",
    RenderKind.HELP: "[help]",
    RenderKind.UPLOAD: "[file]",
    RenderKind.WHISPER: "[whisper]",
    RenderKind.PLAIN: "",
    RenderKind.BLOCKED_NOTICE: "[blocked]",
    RenderKind.ERROR: "[error]",
}


class ConsoleRenderer:
    """Prints one line per timeline entry."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdout

    def render(self, kind: RenderKind, payload: Dict[str, Any]) -> None:
        label = KIND_LABELS.get(kind, f"[{kind}]")
        sender = payload.get("from", "")
        if kind is RenderKind.UPLOAD:
            line = f"{sender} shared a file: {payload.get('filename')} <{payload.get('url')}>"
        elif kind is RenderKind.PLAIN:
            line = f"{sender}: {payload.get('text', '')}"
        elif kind is RenderKind.WHISPER:
            line = f"{sender} (whisper): {payload.get('text', '')}"
        else:
            line = payload.get("text", "")
        print(f"{label} {line}".strip(), file=self.stream)
        for command in payload.get("commands") or []:
            print(f"    {command}", file=self.stream)

    def show_upload_progress(self, visible: bool) -> None:
        print("[upload] in progress..." if visible else "[upload] idle", file=self.stream)

    def show_connection_state(self, state: ConnectionState) -> None:
        text = {ConnectionState.OPEN: "online", ConnectionState.CLOSED: "disconnected"}.get(state, str(state))
        print(f"[connection] {text}", file=self.stream)


class ChatCLI:
    """Async stdin loop: chat lines go to the connection, /upload to the coordinator."""

    def __init__(
        self,
        connection: ConnectionManager,
        uploads: UploadCoordinator,
        renderer: ConsoleRenderer,
    ) -> None:
        self.connection = connection
        self.uploads = uploads
        self.renderer = renderer

    async def run(self) -> None:
        logger.info("CLI ready. Type /help for server commands, /upload <path> to share files, /quit to exit.")
        loop = asyncio.get_running_loop()
        while True:
            try:
                line = await loop.run_in_executor(None, input)
            except EOFError:
                break
            if not await self.handle_line(line):
                break

    async def handle_line(self, line: str) -> bool:
        """Process one input line; returns False when the user asked to quit."""
        stripped = line.strip()
        if not stripped:
            return True
        if stripped == "/quit":
            return False
        if stripped.startswith("/upload "):
            self._handle_upload(stripped.split()[1:])
            return True
        if self.connection.state is ConnectionState.OPEN:
            await self.connection.send(stripped)
        else:
            logger.debug("Not connected; input dropped")
        return True

    def _handle_upload(self, paths: List[str]) -> None:
        files: List[UploadFile] = []
        for raw_path in paths:
            try:
                files.append(UploadFile.from_path(raw_path))
            except OSError as exc:
                logger.warning("Cannot upload %s: %s", raw_path, exc)
                self.renderer.render(
                    RenderKind.ERROR, {"from": SYSTEM_ACTOR, "text": f"Cannot open {raw_path}", "color": ALARM_COLOR}
                )
        if files:
            self.uploads.submit(files)

    async def shutdown(self) -> None:
        await self.uploads.aclose()
        await self.connection.close()
