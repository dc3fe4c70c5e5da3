"""NMEA 0183 sentence decoding.

Decodes one raw line at a time into a typed report. The decoder is
deliberately permissive about field contents: numbers that fail to parse
become zero (and are listed in the report's ``defaulted_fields``). Only a
checksum mismatch or an unrecognized sentence identifier rejects a line.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Iterable, List, Optional, Set

from ..constants import MPS_PER_KNOT
from ..errors import ChecksumError, DecodeError, UnknownSentenceError
from .nmea_types import (
    FixReport,
    PositionReport,
    SatelliteInfo,
    SatelliteReport,
    VelocityReport,
)

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")
_LEADING_FLOAT = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

SATELLITES_PER_GSV = 4


def _parse_int(value: Optional[str]) -> Optional[int]:
    """Parse the leading integer of ``value`` ("08" -> 8, "12.5" -> 12)."""
    if not value:
        return None
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group())


def _parse_float(value: Optional[str]) -> Optional[float]:
    """Parse the leading decimal number of ``value``, None on failure."""
    if not value:
        return None
    match = _LEADING_FLOAT.match(value)
    if match is None:
        return None
    return float(match.group())


def _parse_latlon(value: Optional[str], direction: Optional[str], *, is_lat: bool) -> Optional[float]:
    """Convert packed ``DDMM.MMMM`` / ``DDDMM.MMMM`` to signed decimal degrees."""
    if not value or len(value) < 4:
        return None
    deg_len = 2 if is_lat else 3
    degrees = _parse_int(value[:deg_len])
    minutes = _parse_float(value[deg_len:])
    if degrees is None or minutes is None:
        return None
    decimal = degrees + minutes / 60.0
    if (direction or "").strip().upper() in {"S", "W"}:
        decimal = -decimal
    return decimal


def compute_checksum(sentence: str) -> str:
    """XOR of the bytes between ``$`` and ``*`` as two uppercase hex digits.

    ``sentence`` may be a full sentence or just its body; a leading ``$``
    and anything from ``*`` onwards are ignored.
    """
    body = sentence[1:] if sentence.startswith("$") else sentence
    body = body.split("*", 1)[0]
    checksum = 0
    for byte in body.encode("ascii", errors="replace"):
        checksum ^= byte
    return f"{checksum:02X}"


def validate_checksum(sentence: str) -> bool:
    """True if the sentence carries a ``*HH`` suffix that matches its body."""
    star = sentence.find("*")
    if star == -1:
        return False
    return sentence[star + 1:star + 3] == compute_checksum(sentence[:star])


class _FieldReader:
    """Positional field access that records every zero fallback."""

    def __init__(self, fields: List[str]):
        self._fields = fields
        self.defaulted: Set[str] = set()

    def __len__(self) -> int:
        return len(self._fields)

    def text(self, index: int) -> str:
        if index < len(self._fields):
            return self._fields[index].strip()
        return ""

    def integer(self, index: int, name: str) -> int:
        value = _parse_int(self.text(index))
        if value is None:
            self.defaulted.add(name)
            return 0
        return value

    def number(self, index: int, name: str) -> float:
        value = _parse_float(self.text(index))
        if value is None:
            self.defaulted.add(name)
            return 0.0
        return value

    def coordinate(self, index: int, name: str, *, is_lat: bool) -> float:
        value = _parse_latlon(self.text(index), self.text(index + 1), is_lat=is_lat)
        if value is None:
            self.defaulted.add(name)
            return 0.0
        return value


class SentenceDecoder:
    """Stateless NMEA sentence decoder.

    Supports:
    - GGA - position, fix quality, satellites, HDOP, altitude
    - RMC - speed and course over ground
    - GSV - satellites in view

    The sentence identifier is taken from the last three letters of the
    address field, so any talker (GP, GN, GL, GA, ...) is accepted.

    Example:
        decoder = SentenceDecoder()
        report = decoder.decode("$GPGGA,123519,4807.038,N,...*47")
    """

    def __init__(self, enabled_sentences: Optional[Iterable[str]] = None):
        self._enabled: Optional[Set[str]] = (
            {s.upper() for s in enabled_sentences} if enabled_sentences is not None else None
        )

    @property
    def supported_sentences(self) -> Set[str]:
        return {name[len("_decode_"):].upper() for name in dir(self) if name.startswith("_decode_")}

    def decode(self, line: str) -> FixReport:
        """Decode one raw line.

        Raises:
            ChecksumError: the ``*HH`` suffix does not match.
            UnknownSentenceError: not a ``$`` sentence, or an identifier
                this decoder does not handle (or has disabled).
        """
        sentence = line.strip()

        if "*" in sentence and not validate_checksum(sentence):
            star = sentence.find("*")
            raise ChecksumError(
                expected=compute_checksum(sentence[:star]),
                actual=sentence[star + 1:star + 3],
                line=sentence,
            )

        payload = sentence.split("*", 1)[0]
        parts = payload.split(",")
        header = parts[0]
        if not header.startswith("$") or len(header) < 4:
            raise UnknownSentenceError(header, line=sentence)

        sentence_id = header[-3:].upper()
        if self._enabled is not None and sentence_id not in self._enabled:
            raise UnknownSentenceError(sentence_id, line=sentence)

        handler: Optional[Callable[[_FieldReader], FixReport]] = getattr(
            self, f"_decode_{sentence_id.lower()}", None
        )
        if handler is None:
            raise UnknownSentenceError(sentence_id, line=sentence)

        return handler(_FieldReader(parts[1:]))

    # ------------------------------------------------------------------
    # Sentence-specific decoders
    # ------------------------------------------------------------------

    def _decode_gga(self, fields: _FieldReader) -> PositionReport:
        """$--GGA: time, lat, N/S, lon, E/W, quality, satellites, HDOP, altitude."""
        return PositionReport(
            time=fields.text(0),
            latitude=fields.coordinate(1, "latitude", is_lat=True),
            longitude=fields.coordinate(3, "longitude", is_lat=False),
            fix_quality=fields.integer(5, "fix_quality"),
            satellite_count=fields.integer(6, "satellite_count"),
            hdop=fields.number(7, "hdop"),
            altitude_m=fields.number(8, "altitude_m"),
            defaulted_fields=frozenset(fields.defaulted),
        )

    def _decode_rmc(self, fields: _FieldReader) -> VelocityReport:
        """$--RMC: time, status, lat, N/S, lon, E/W, speed (knots), course, date."""
        speed_knots = fields.number(6, "speed_knots")
        return VelocityReport(
            time=fields.text(0),
            status=fields.text(1),
            latitude=fields.coordinate(2, "latitude", is_lat=True),
            longitude=fields.coordinate(4, "longitude", is_lat=False),
            speed_knots=speed_knots,
            speed_mps=speed_knots * MPS_PER_KNOT,
            course_deg=fields.number(7, "course_deg"),
            date=fields.text(8),
            defaulted_fields=frozenset(fields.defaulted),
        )

    def _decode_gsv(self, fields: _FieldReader) -> SatelliteReport:
        """$--GSV: message count, index, satellites in view, then 4 x (id, el, az, SNR)."""
        total_messages = fields.integer(0, "total_messages")
        message_index = fields.integer(1, "message_index")
        total_satellites = fields.integer(2, "total_satellites")

        satellites = []
        for slot in range(SATELLITES_PER_GSV):
            base = 3 + slot * 4
            if base + 3 >= len(fields):
                break
            sat_id = _parse_int(fields.text(base))
            if not sat_id:
                continue
            prefix = f"satellites[{slot}]"
            satellites.append(
                SatelliteInfo(
                    id=sat_id,
                    elevation=fields.integer(base + 1, f"{prefix}.elevation"),
                    azimuth=fields.integer(base + 2, f"{prefix}.azimuth"),
                    snr=fields.integer(base + 3, f"{prefix}.snr"),
                )
            )

        return SatelliteReport(
            total_messages=total_messages,
            message_index=message_index,
            total_satellites=total_satellites,
            satellites=tuple(satellites),
            defaulted_fields=frozenset(fields.defaulted),
        )


_default_decoder = SentenceDecoder()


def decode(line: str) -> FixReport:
    """Decode ``line`` with a decoder that accepts every supported sentence."""
    return _default_decoder.decode(line)


__all__ = [
    "SentenceDecoder",
    "decode",
    "compute_checksum",
    "validate_checksum",
    "DecodeError",
]
