"""Unit tests for the relay message envelope."""

import json

import pytest

from agrinav.nav_core.errors import EnvelopeError
from agrinav.nav_core.transports.envelope import MessageKind, RelayMessage


class TestFromJson:
    def test_nmea_frame(self):
        """Test parsing an NMEA envelope."""
        message = RelayMessage.from_json('{"type": "nmea", "data": "$GPGGA,1\\r\\n$GPRMC,2"}')
        assert message.kind is MessageKind.NMEA
        assert message.data == "$GPGGA,1\r\n$GPRMC,2"

    def test_status_frame(self):
        """Test parsing a status envelope."""
        message = RelayMessage.from_json('{"type": "status", "connected": false, "error": "ECONNREFUSED"}')
        assert message.kind is MessageKind.STATUS
        assert message.connected is False
        assert message.error == "ECONNREFUSED"

    def test_status_without_error(self):
        """Test a status envelope without an error."""
        message = RelayMessage.from_json('{"type": "status", "connected": true}')
        assert message.connected is True
        assert message.error is None

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[1, 2]",
            '{"type": "position"}',
            '{"data": "$GPGGA"}',
            '{"type": "nmea"}',
            '{"type": "nmea", "data": 5}',
            '{"type": "status"}',
            '{"type": "status", "connected": "yes"}',
        ],
    )
    def test_malformed_frames(self, payload):
        """Test malformed frames raise EnvelopeError."""
        with pytest.raises(EnvelopeError):
            RelayMessage.from_json(payload)


class TestToJson:
    def test_nmea(self):
        """Test encoding an NMEA envelope."""
        assert json.loads(RelayMessage.nmea("$GPGGA").to_json()) == {"type": "nmea", "data": "$GPGGA"}

    def test_status(self):
        """Test encoding a status envelope."""
        body = json.loads(RelayMessage.status(False, "timeout").to_json())
        assert body == {"type": "status", "connected": False, "error": "timeout"}
        assert "error" not in RelayMessage.status(True).to_dict()
