"""Tests for the relay WebSocket transport against a local aiohttp server."""

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from agrinav.nav_core.transports.envelope import MessageKind, RelayMessage
from agrinav.nav_core.transports.websocket_transport import WebSocketRelayTransport


def relay_app(frames):
    """A relay that sends ``frames`` (str or bytes) then closes."""

    async def handler(request):
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        for frame in frames:
            if isinstance(frame, bytes):
                await ws.send_bytes(frame)
            else:
                await ws.send_str(frame)
        await ws.close()
        return ws

    app = web.Application()
    app.router.add_get("/", handler)
    return app


async def start_relay(frames):
    server = TestServer(relay_app(frames))
    await server.start_server()
    return server, str(server.make_url("/").with_scheme("ws"))


@pytest.mark.asyncio
async def test_reads_envelopes_until_close():
    """Test envelopes are read until the server closes."""
    server, url = await start_relay([
        RelayMessage.nmea("$GPGGA,1\r\n$GPRMC,2").to_json(),
        "not json",
        b"\x00\x01",
        RelayMessage.status(False, "ECONNREFUSED").to_json(),
    ])
    transport = WebSocketRelayTransport(url)
    try:
        assert await transport.connect() is True
        assert transport.is_connected
        assert transport.endpoint == url

        first = await transport.read_message()
        second = await transport.read_message()
        end = await transport.read_message()
    finally:
        await transport.disconnect()
        await server.close()

    assert first.kind is MessageKind.NMEA
    assert first.data == "$GPGGA,1\r\n$GPRMC,2"
    assert second.kind is MessageKind.STATUS
    assert second.error == "ECONNREFUSED"
    assert end is None
    assert transport.last_error == "WebSocket connection closed"
    assert transport.is_connected is False


@pytest.mark.asyncio
async def test_connect_failure_sets_last_error(unused_tcp_port):
    """Test connection failure sets last_error."""
    transport = WebSocketRelayTransport(f"ws://127.0.0.1:{unused_tcp_port}", connect_timeout=2.0)

    assert await transport.connect() is False
    assert transport.is_connected is False
    assert transport.last_error.startswith("Connection failed")

    await transport.disconnect()


@pytest.mark.asyncio
async def test_read_when_not_connected():
    """Test reading when not connected."""
    transport = WebSocketRelayTransport()
    assert transport.endpoint == "ws://localhost:8080"
    assert await transport.read_message() is None
