"""NMEA decoding components."""

from .nmea_types import (
    FixReport,
    PositionReport,
    SatelliteInfo,
    SatelliteReport,
    VelocityReport,
)
from .nmea_parser import SentenceDecoder, compute_checksum, decode, validate_checksum

__all__ = [
    "FixReport",
    "PositionReport",
    "SatelliteInfo",
    "SatelliteReport",
    "VelocityReport",
    "SentenceDecoder",
    "compute_checksum",
    "decode",
    "validate_checksum",
]
