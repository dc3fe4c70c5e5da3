"""Serial UART transport for receivers wired directly to the host.

Reads NMEA lines with serial_asyncio and wraps each one in an ``nmea``
envelope, so the session treats a local receiver exactly like the relay.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Optional

import serial
import serial_asyncio

from ...core.logging_utils import get_module_logger
from ..constants import DEFAULT_BAUD_RATE, DEFAULT_SERIAL_PORT
from .base_transport import BaseTransport
from .envelope import RelayMessage

logger = get_module_logger("SerialTransport")


class SerialTransport(BaseTransport):
    """Serial UART transport.

    Example:
        transport = SerialTransport("/dev/ttyUSB0", 115200)
        async with transport:
            message = await transport.read_message()
    """

    def __init__(
        self,
        port: str = DEFAULT_SERIAL_PORT,
        baudrate: int = DEFAULT_BAUD_RATE,
    ):
        """Initialize the serial transport.

        Args:
            port: Serial port path (e.g. '/dev/serial0' or '/dev/ttyUSB0')
            baudrate: Serial baudrate (9600 for most receivers)
        """
        super().__init__()
        self.port = port
        self.baudrate = baudrate

        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None

    @property
    def endpoint(self) -> str:
        return f"{self.port}@{self.baudrate}"

    @property
    def is_connected(self) -> bool:
        return self._connected and self._reader is not None

    async def connect(self) -> bool:
        if self.is_connected:
            logger.debug("Already connected to %s", self.port)
            return True

        try:
            self._reader, self._writer = await serial_asyncio.open_serial_connection(
                url=self.port,
                baudrate=self.baudrate,
            )
        except asyncio.CancelledError:
            raise
        except (serial.SerialException, OSError) as exc:
            self._last_error = str(exc)
            self._connected = False
            logger.warning("Could not open %s at %d baud: %s", self.port, self.baudrate, exc)
            return False

        self._connected = True
        self._last_error = None
        logger.info("Connected to receiver on %s at %d baud", self.port, self.baudrate)
        return True

    async def disconnect(self) -> None:
        if self._writer is None:
            self._connected = False
            return

        writer = self._writer
        self._writer = None
        self._reader = None
        self._connected = False

        with contextlib.suppress(Exception):
            writer.close()

        try:
            await asyncio.wait_for(writer.wait_closed(), timeout=1.0)
        except asyncio.TimeoutError:
            logger.debug("Timeout waiting for serial close on %s", self.port)
        except (serial.SerialException, OSError) as exc:
            logger.debug("Error closing serial on %s: %s", self.port, exc)

        logger.info("Disconnected from receiver on %s", self.port)

    async def read_message(self) -> Optional[RelayMessage]:
        while self._reader is not None:
            try:
                line = await self._reader.readline()
            except asyncio.CancelledError:
                raise
            except (serial.SerialException, OSError) as exc:
                self._last_error = f"Read error: {exc}"
                self._connected = False
                logger.warning("Read error on %s: %s", self.port, exc)
                return None

            if not line:
                self._last_error = "Stream ended (EOF)"
                self._connected = False
                logger.warning("Serial stream ended on %s (EOF)", self.port)
                return None

            decoded = line.decode("ascii", errors="ignore").strip()
            if decoded:
                return RelayMessage.nmea(decoded)

        return None


__all__ = ["SerialTransport"]
