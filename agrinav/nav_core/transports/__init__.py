"""Transports delivering relay envelopes to the session."""

from .base_transport import BaseTransport
from .envelope import MessageKind, RelayMessage
from .serial_transport import SerialTransport
from .websocket_transport import WebSocketRelayTransport

__all__ = [
    "BaseTransport",
    "MessageKind",
    "RelayMessage",
    "SerialTransport",
    "WebSocketRelayTransport",
]
