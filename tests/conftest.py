from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List, Tuple

import pytest

from client.config import DEFAULT_CONFIG
from shared.protocol.commands import RenderKind


class RecordingRenderer:
    def __init__(self) -> None:
        self.calls: List[Tuple[RenderKind, Dict[str, Any]]] = []

    def render(self, kind: RenderKind, payload: Dict[str, Any]) -> None:
        self.calls.append((kind, payload))

    @property
    def kinds(self) -> List[RenderKind]:
        return [kind for kind, _ in self.calls]


_END = object()


class FakeWebSocket:
    """Async iterable fake websocket whose inbound frames are fed by the test."""

    def __init__(self) -> None:
        self._in: asyncio.Queue = asyncio.Queue()
        self.sent: List[str] = []
        self.closed = False
        self.send_error: Exception | None = None

    def feed(self, message: Any) -> None:
        self._in.put_nowait(message if isinstance(message, (str, bytes)) else json.dumps(message))

    def finish(self) -> None:
        self._in.put_nowait(_END)

    def fail(self, exc: Exception) -> None:
        self._in.put_nowait(exc)

    async def send(self, data: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(data)

    async def close(self, *args, **kwargs) -> None:
        self.closed = True
        self._in.put_nowait(_END)

    def __aiter__(self):
        return self

    async def __anext__(self):
        item = await self._in.get()
        if item is _END:
            raise StopAsyncIteration
        if isinstance(item, Exception):
            raise item
        return item


async def wait_for_condition(predicate, attempts: int = 50) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def config() -> Dict[str, Any]:
    return {**DEFAULT_CONFIG, "server_origin": "http://chat.test:10000"}
