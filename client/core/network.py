from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any, Dict, List, Optional, Union

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from client.config import CLIENT_CONFIG
from shared.protocol.framing import encode_text
from shared.utils.common import websocket_url

logger = logging.getLogger(__name__)

Payload = Union[str, bytes]
MessageHandler = Callable[[Payload], Awaitable[None]]
StateListener = Callable[["ConnectionState"], None]
ConnectFactory = Callable[[str], Awaitable[Any]]


class ConnectionState(StrEnum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class ConnectionManager:
    """
    Owns the single WebSocket connection of a client session.

    Connecting starts on construction (inside a running event loop). A graceful
    close and a transport error both end in CLOSED; nothing reconnects.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        connect_factory: Optional[ConnectFactory] = None,
        autostart: bool = True,
    ) -> None:
        self.config = config or CLIENT_CONFIG
        self.url: str = websocket_url(self.config["server_origin"], self.config["ws_path"])
        self._connect: ConnectFactory = connect_factory or websockets.connect
        self._ws: Any = None
        self._state = ConnectionState.CONNECTING
        self._task: Optional[asyncio.Task] = None
        self._message_handlers: List[MessageHandler] = []
        self._state_listeners: List[StateListener] = []
        if autostart:
            self.start()

    @property
    def state(self) -> ConnectionState:
        return self._state

    def is_open(self) -> bool:
        return self._state is ConnectionState.OPEN

    def add_message_handler(self, handler: MessageHandler) -> None:
        self._message_handlers.append(handler)

    def add_state_listener(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._run(), name="client-ws-loop")
        return self._task

    async def wait_closed(self) -> None:
        if self._task:
            await self._task

    async def send(self, text: str) -> bool:
        """Write one chat line. Blank lines and writes while not OPEN are dropped."""
        line = encode_text(text)
        if line is None:
            return False
        if not self.is_open() or self._ws is None:
            logger.debug("Dropped outbound line while %s", self._state)
            return False
        try:
            await self._ws.send(line)
            return True
        except (ConnectionClosed, WebSocketException, OSError) as exc:
            logger.warning("Connection lost during send: %s", exc)
            await self._teardown()
            return False

    async def close(self) -> None:
        if self._ws is not None:
            try:
                await self._ws.close()
            except (WebSocketException, OSError) as exc:
                logger.debug("Close raised: %s", exc)
        self._set_state(ConnectionState.CLOSED)
        if self._task and not self._task.done() and self._task is not asyncio.current_task():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        logger.info("Connection manager closed")

    async def _run(self) -> None:
        try:
            self._ws = await self._connect(self.url)
        except asyncio.CancelledError:
            self._set_state(ConnectionState.CLOSED)
            raise
        except (WebSocketException, OSError, asyncio.TimeoutError) as exc:
            logger.warning("Connect to %s failed: %s", self.url, exc)
            self._set_state(ConnectionState.CLOSED)
            return
        logger.info("Connected to %s", self.url)
        self._set_state(ConnectionState.OPEN)
        await self._receive_loop()

    async def _receive_loop(self) -> None:
        try:
            async for payload in self._ws:
                await self._dispatch(payload)
            logger.info("Server closed connection")
        except asyncio.CancelledError:
            raise
        except ConnectionClosed as exc:
            logger.warning("Receive loop terminated: %s", exc)
        except (WebSocketException, OSError) as exc:
            logger.error("Transport error: %s", exc)
        finally:
            self._set_state(ConnectionState.CLOSED)

    async def _dispatch(self, payload: Payload) -> None:
        for handler in list(self._message_handlers):
            try:
                await handler(payload)
            except Exception as exc:
                logger.exception("Message handler error: %s", exc)

    async def _teardown(self) -> None:
        self._set_state(ConnectionState.CLOSED)
        if self._ws is not None:
            try:
                await self._ws.close()
            except (WebSocketException, OSError):
                logger.debug("Close after failure raised", exc_info=True)

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        if self._state is ConnectionState.CLOSED:
            return
        logger.debug("Connection state %s -> %s", self._state, state)
        self._state = state
        for listener in list(self._state_listeners):
            try:
                listener(state)
            except Exception as exc:
                logger.exception("State listener error: %s", exc)
