"""Transport session: connectivity supervision and line delivery.

State machine::

    Connecting -> Connected -> Disconnected(reason) -> (delay) -> Connecting ...

A manual disconnect is terminal: it cancels the pending reconnect timer
before the channel is released and no retry is scheduled afterwards.

The retry interval is a flat delay (no exponential backoff, no jitter).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.logging_utils import get_module_logger
from .constants import DEFAULT_RECONNECT_DELAY
from .errors import TransportError
from .observers import ObserverList
from .transports.base_transport import BaseTransport
from .transports.envelope import MessageKind, RelayMessage

logger = get_module_logger("TransportSession")

MANUAL_DISCONNECT_REASON = "Disconnected by operator"


class SessionState(Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class StatusSource(Enum):
    SESSION = "session"
    RELAY = "relay"


@dataclass(frozen=True, slots=True)
class ConnectionStatus:
    """Connectivity notification delivered to status observers.

    ``source`` is RELAY when the relay reported the state of its own link
    to the receiver, SESSION for transitions of this session's channel.
    """

    connected: bool
    error: Optional[str] = None
    source: StatusSource = StatusSource.SESSION


def _task_exception_handler(task: asyncio.Task) -> None:
    """Log exceptions from fire-and-forget tasks."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Unhandled exception in session task %s: %r", task.get_name(), exc)


class TransportSession:
    """Owns one logical connection to the byte source.

    Every inbound ``nmea`` frame is split on line breaks and each non-empty
    line is passed, in order, to ``line_observers``. Connectivity changes go
    to ``status_observers``.

    Example:
        session = TransportSession(WebSocketRelayTransport(url))
        session.line_observers.add(aggregator.on_line)
        session.status_observers.add(print)
        await session.connect()
        ...
        await session.disconnect()
    """

    def __init__(
        self,
        transport: BaseTransport,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
    ):
        self.transport = transport
        self.reconnect_delay = reconnect_delay

        self._state = SessionState.DISCONNECTED
        self._reason: Optional[str] = None
        self._manual_disconnect = False
        self._reconnect_handle: Optional[asyncio.TimerHandle] = None
        self._connect_task: Optional[asyncio.Task] = None
        self._read_task: Optional[asyncio.Task] = None
        self._last_failure: Optional[TransportError] = None

        self.reconnect_attempts = 0
        self.frames_received = 0
        self.status_observers: ObserverList[ConnectionStatus] = ObserverList("status")
        self.line_observers: ObserverList[str] = ObserverList("lines")

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def reason(self) -> Optional[str]:
        """Why the session is disconnected (None while connecting/connected)."""
        return self._reason

    @property
    def is_connected(self) -> bool:
        return self._state is SessionState.CONNECTED

    @property
    def last_failure(self) -> Optional[TransportError]:
        """The most recent unplanned closure or failed open, if any."""
        return self._last_failure

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_handle is not None

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    async def connect(self) -> bool:
        """Open the channel. Clears a previous manual disconnect.

        An in-flight automatic retry is cancelled first. Returns False when
        another ``connect()`` call is still opening the channel.
        """
        self._manual_disconnect = False
        self._cancel_reconnect()
        if await self._cancel_tasks(self._connect_task):
            await self.transport.disconnect()
        self._connect_task = None
        return await self._open()

    async def disconnect(self) -> None:
        """Manual disconnect: cancel any retry, close the channel, no auto-retry."""
        self._manual_disconnect = True
        self._cancel_reconnect()

        await self._cancel_tasks(self._connect_task, self._read_task)
        self._connect_task = None
        self._read_task = None

        await self.transport.disconnect()

        was_connected = self._state is not SessionState.DISCONNECTED
        self._state = SessionState.DISCONNECTED
        self._reason = MANUAL_DISCONNECT_REASON
        if was_connected:
            logger.info("Disconnected from %s", self.transport.endpoint)
        self.status_observers.notify(ConnectionStatus(connected=False))

    def feed(self, frame: str) -> int:
        """Deliver each non-empty line of ``frame`` in order; return the count."""
        delivered = 0
        for line in frame.splitlines():
            line = line.strip()
            if not line:
                continue
            self.line_observers.notify(line)
            delivered += 1
        return delivered

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _cancel_tasks(self, *tasks: Optional[asyncio.Task]) -> bool:
        """Cancel and await the unfinished tasks; return True if any were live."""
        current = asyncio.current_task()
        live = [
            task for task in tasks
            if task is not None and not task.done() and task is not current
        ]
        for task in live:
            task.cancel()
        # gather re-raises a cancellation aimed at the caller
        await asyncio.gather(*live, return_exceptions=True)
        return bool(live)

    async def _open(self) -> bool:
        if self._state is SessionState.CONNECTED:
            return True
        if self._state is SessionState.CONNECTING:
            logger.debug("Connect to %s already in progress", self.transport.endpoint)
            return False

        self._state = SessionState.CONNECTING
        self._reason = None
        logger.info("Connecting to %s", self.transport.endpoint)

        try:
            ok = await self.transport.connect()
        except asyncio.CancelledError:
            if self._state is SessionState.CONNECTING:
                self._state = SessionState.DISCONNECTED
            raise

        if self._manual_disconnect:
            await self.transport.disconnect()
            return False

        if self._state is not SessionState.CONNECTING or self._read_task is not None:
            return self._state is SessionState.CONNECTED

        if not ok:
            self._on_closed(self.transport.last_error or "Connection failed")
            return False

        self._state = SessionState.CONNECTED
        logger.info("Connected to %s", self.transport.endpoint)
        self.status_observers.notify(ConnectionStatus(connected=True))

        self._read_task = asyncio.create_task(self._read_loop(), name="transport-session-read")
        self._read_task.add_done_callback(_task_exception_handler)
        return True

    async def _read_loop(self) -> None:
        reason = "Connection closed"
        try:
            while True:
                message = await self.transport.read_message()
                if message is None:
                    reason = self.transport.last_error or reason
                    break
                self._dispatch(message)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Transport read failed on %s", self.transport.endpoint)
            reason = f"Transport error: {exc}"

        self._read_task = None
        await self.transport.disconnect()
        self._on_closed(reason)

    def _dispatch(self, message: RelayMessage) -> None:
        if message.kind is MessageKind.NMEA:
            self.frames_received += 1
            self.feed(message.data)
        elif message.kind is MessageKind.STATUS:
            if message.error:
                logger.warning("Relay reports receiver link down: %s", message.error)
            self.status_observers.notify(
                ConnectionStatus(
                    connected=message.connected,
                    error=message.error,
                    source=StatusSource.RELAY,
                )
            )

    def _on_closed(self, reason: str) -> None:
        if self._manual_disconnect:
            return
        self._state = SessionState.DISCONNECTED
        self._reason = reason
        self._last_failure = TransportError(reason, endpoint=self.transport.endpoint)
        logger.warning("Connection to %s lost: %s", self.transport.endpoint, reason)
        self.status_observers.notify(ConnectionStatus(connected=False, error=reason))
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        if self._manual_disconnect:
            return
        self._cancel_reconnect()
        loop = asyncio.get_running_loop()
        self._reconnect_handle = loop.call_later(self.reconnect_delay, self._on_reconnect_timer)
        logger.info("Reconnecting to %s in %.1fs", self.transport.endpoint, self.reconnect_delay)

    def _cancel_reconnect(self) -> None:
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

    def _on_reconnect_timer(self) -> None:
        self._reconnect_handle = None
        if self._manual_disconnect:
            return
        self.reconnect_attempts += 1
        self._connect_task = asyncio.create_task(self._open(), name="transport-session-reconnect")
        self._connect_task.add_done_callback(_task_exception_handler)


__all__ = [
    "ConnectionStatus",
    "MANUAL_DISCONNECT_REASON",
    "SessionState",
    "StatusSource",
    "TransportSession",
]
