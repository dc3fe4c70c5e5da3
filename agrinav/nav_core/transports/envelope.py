"""Relay message envelope.

The byte relay wraps receiver output as JSON text frames::

    {"type": "nmea", "data": "$GPGGA,...\\r\\n$GPRMC,..."}
    {"type": "status", "connected": false, "error": "ECONNREFUSED"}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..errors import EnvelopeError


class MessageKind(Enum):
    NMEA = "nmea"
    STATUS = "status"


@dataclass(frozen=True, slots=True)
class RelayMessage:
    kind: MessageKind
    data: str = ""
    connected: bool = False
    error: Optional[str] = None

    @classmethod
    def nmea(cls, data: str) -> "RelayMessage":
        return cls(kind=MessageKind.NMEA, data=data)

    @classmethod
    def status(cls, connected: bool, error: Optional[str] = None) -> "RelayMessage":
        return cls(kind=MessageKind.STATUS, connected=connected, error=error)

    @classmethod
    def from_json(cls, payload: str) -> "RelayMessage":
        """Parse one relay frame.

        Raises:
            EnvelopeError: not JSON, not an object, or an unknown/ill-typed
                ``type``/``data``/``connected`` field.
        """
        try:
            raw = json.loads(payload)
        except (TypeError, ValueError) as exc:
            raise EnvelopeError(f"Frame is not JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise EnvelopeError("Frame is not a JSON object")
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "RelayMessage":
        kind = raw.get("type")
        if kind == MessageKind.NMEA.value:
            data = raw.get("data")
            if not isinstance(data, str):
                raise EnvelopeError("nmea frame without string 'data'")
            return cls.nmea(data)
        if kind == MessageKind.STATUS.value:
            connected = raw.get("connected")
            if not isinstance(connected, bool):
                raise EnvelopeError("status frame without boolean 'connected'")
            error = raw.get("error")
            return cls.status(connected, str(error) if error is not None else None)
        raise EnvelopeError(f"Unknown frame type {kind!r}")

    def to_dict(self) -> Dict[str, Any]:
        if self.kind is MessageKind.NMEA:
            return {"type": self.kind.value, "data": self.data}
        body: Dict[str, Any] = {"type": self.kind.value, "connected": self.connected}
        if self.error is not None:
            body["error"] = self.error
        return body

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


__all__ = ["MessageKind", "RelayMessage"]
