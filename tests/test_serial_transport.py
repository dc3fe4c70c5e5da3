"""Unit tests for the serial UART transport."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import serial

from agrinav.nav_core.transports.base_transport import BaseTransport
from agrinav.nav_core.transports.envelope import MessageKind
from agrinav.nav_core.transports.serial_transport import SerialTransport

SERIAL_ASYNCIO = "agrinav.nav_core.transports.serial_transport.serial_asyncio"


def make_streams(lines):
    reader = AsyncMock()
    reader.readline = AsyncMock(side_effect=lines)
    writer = MagicMock()
    writer.wait_closed = AsyncMock()
    return reader, writer


class TestBaseTransport:
    def test_interface_defined(self):
        """Test BaseTransport defines the transport interface."""
        for name in ("connect", "disconnect", "read_message", "is_connected", "last_error", "endpoint"):
            assert hasattr(BaseTransport, name)

    def test_cannot_instantiate_abstract(self):
        """Test BaseTransport cannot be instantiated."""
        with pytest.raises(TypeError):
            BaseTransport()


class TestSerialTransport:
    def test_initialization(self):
        """Test transport initialization."""
        transport = SerialTransport("/dev/ttyUSB0", 115200)
        assert transport.port == "/dev/ttyUSB0"
        assert transport.baudrate == 115200
        assert transport.endpoint == "/dev/ttyUSB0@115200"
        assert transport.is_connected is False
        assert transport.last_error is None

    def test_defaults(self):
        """Test default serial settings."""
        transport = SerialTransport()
        assert transport.port == "/dev/serial0"
        assert transport.baudrate == 9600

    @pytest.mark.asyncio
    async def test_connect_success(self):
        """Test successful connection."""
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(return_value=make_streams([]))

            transport = SerialTransport("/dev/serial0", 9600)
            assert await transport.connect() is True

            assert transport.is_connected is True
            mock_serial.open_serial_connection.assert_called_once_with(
                url="/dev/serial0",
                baudrate=9600,
            )

    @pytest.mark.asyncio
    async def test_connect_failure(self):
        """Test connection failure."""
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(side_effect=OSError("Device not found"))

            transport = SerialTransport("/dev/serial0", 9600)
            assert await transport.connect() is False

            assert transport.is_connected is False
            assert "Device not found" in transport.last_error

    @pytest.mark.asyncio
    async def test_read_lines_as_nmea_messages(self):
        """Test serial lines are read as NMEA messages."""
        reader, writer = make_streams([
            b"$GPGGA,123519,4807.038,N*47\r\n",
            b"\r\n",
            b"$GPRMC,123519,A\r\n",
            b"",
        ])
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(return_value=(reader, writer))
            transport = SerialTransport()
            await transport.connect()

            first = await transport.read_message()
            second = await transport.read_message()
            end = await transport.read_message()

        assert first.kind is MessageKind.NMEA
        assert first.data == "$GPGGA,123519,4807.038,N*47"
        assert second.data == "$GPRMC,123519,A"
        assert end is None
        assert transport.last_error == "Stream ended (EOF)"
        assert transport.is_connected is False

    @pytest.mark.asyncio
    async def test_read_error(self):
        """Test a read error closes the transport."""
        reader, writer = make_streams([serial.SerialException("device reports readiness")])
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(return_value=(reader, writer))
            transport = SerialTransport()
            await transport.connect()

            assert await transport.read_message() is None

        assert transport.last_error.startswith("Read error:")

    @pytest.mark.asyncio
    async def test_read_when_disconnected(self):
        """Test reading when disconnected."""
        assert await SerialTransport().read_message() is None

    @pytest.mark.asyncio
    async def test_disconnect_closes_writer(self):
        """Test disconnect closes the writer."""
        reader, writer = make_streams([])
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(return_value=(reader, writer))
            transport = SerialTransport()
            await transport.connect()
            await transport.disconnect()

        writer.close.assert_called_once()
        writer.wait_closed.assert_awaited_once()
        assert transport.is_connected is False

    @pytest.mark.asyncio
    async def test_async_context_manager(self):
        """Test async context manager usage."""
        reader, writer = make_streams([])
        with patch(SERIAL_ASYNCIO) as mock_serial:
            mock_serial.open_serial_connection = AsyncMock(return_value=(reader, writer))
            async with SerialTransport() as transport:
                assert transport.is_connected
        assert not transport.is_connected

    @pytest.mark.hardware
    @pytest.mark.asyncio
    async def test_real_receiver(self):
        """Test reading from a real receiver."""
        async with SerialTransport() as transport:
            message = await transport.read_message()
        assert message is not None
        assert message.data.startswith("$")
