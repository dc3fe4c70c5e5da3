"""Abstract receive-only transport."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .envelope import RelayMessage


class BaseTransport(ABC):
    """Receive-only channel delivering relay envelopes.

    ``connect`` returns False (and sets ``last_error``) instead of raising;
    ``read_message`` returns None once the channel has closed.
    """

    def __init__(self) -> None:
        self._connected = False
        self._last_error: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Human-readable description of the source (URL, port)."""

    @abstractmethod
    async def connect(self) -> bool:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        ...

    @abstractmethod
    async def read_message(self) -> Optional[RelayMessage]:
        """Wait for the next envelope; None when the channel is closed."""

    async def __aenter__(self) -> "BaseTransport":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()


__all__ = ["BaseTransport"]
