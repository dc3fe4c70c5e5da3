"""WebSocket client for the NMEA byte relay."""

from __future__ import annotations

import asyncio
from typing import Optional

import aiohttp

from ...core.logging_utils import get_module_logger
from ..constants import DEFAULT_RELAY_URL
from ..errors import EnvelopeError
from .base_transport import BaseTransport
from .envelope import RelayMessage

logger = get_module_logger("WebSocketRelayTransport")


class WebSocketRelayTransport(BaseTransport):
    """Receives JSON envelopes from the relay over a WebSocket.

    Malformed frames are logged and skipped. Close, error and EOF frames end
    the stream: ``read_message`` returns None and ``last_error`` says why.

    Example:
        transport = WebSocketRelayTransport("ws://localhost:8080")
        async with transport:
            while (message := await transport.read_message()) is not None:
                print(message)
    """

    def __init__(
        self,
        url: str = DEFAULT_RELAY_URL,
        connect_timeout: float = 10.0,
        heartbeat: Optional[float] = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        super().__init__()
        self.url = url
        self.connect_timeout = connect_timeout
        self.heartbeat = heartbeat
        self._session = session
        self._owns_session = session is None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None

    @property
    def endpoint(self) -> str:
        return self.url

    @property
    def is_connected(self) -> bool:
        return self._connected and self._ws is not None and not self._ws.closed

    async def connect(self) -> bool:
        if self.is_connected:
            logger.debug("Already connected to %s", self.url)
            return True

        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True

        try:
            self._ws = await asyncio.wait_for(
                self._session.ws_connect(self.url, heartbeat=self.heartbeat),
                timeout=self.connect_timeout,
            )
        except asyncio.CancelledError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            self._last_error = f"Connection failed: {exc}" if str(exc) else "Connection failed"
            self._connected = False
            logger.warning("Could not connect to relay %s: %s", self.url, exc)
            await self._close_session()
            return False

        self._connected = True
        self._last_error = None
        logger.info("Connected to relay %s", self.url)
        return True

    async def disconnect(self) -> None:
        ws = self._ws
        self._ws = None
        self._connected = False
        if ws is not None and not ws.closed:
            try:
                await asyncio.wait_for(ws.close(), timeout=1.0)
            except asyncio.TimeoutError:
                logger.debug("Timeout closing WebSocket to %s", self.url)
        await self._close_session()
        if ws is not None:
            logger.info("Disconnected from relay %s", self.url)

    async def read_message(self) -> Optional[RelayMessage]:
        while self._ws is not None:
            msg = await self._ws.receive()

            if msg.type == aiohttp.WSMsgType.TEXT:
                try:
                    return RelayMessage.from_json(msg.data)
                except EnvelopeError as exc:
                    logger.warning("Malformed message from relay: %s", exc)
                    continue

            if msg.type == aiohttp.WSMsgType.BINARY:
                logger.debug("Ignoring %d-byte binary frame", len(msg.data))
                continue

            if msg.type == aiohttp.WSMsgType.ERROR:
                self._last_error = f"WebSocket error: {self._ws.exception()}"
            else:
                self._last_error = "WebSocket connection closed"
            self._connected = False
            return None

        return None

    async def _close_session(self) -> None:
        if self._owns_session and self._session is not None:
            session = self._session
            self._session = None
            await session.close()


__all__ = ["WebSocketRelayTransport"]
