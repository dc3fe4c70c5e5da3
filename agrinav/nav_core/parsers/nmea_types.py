"""Typed fix reports produced by the sentence decoder.

Numeric fields that cannot be parsed fall back to zero instead of failing
the whole sentence. Every report records which fields took that fallback in
``defaulted_fields`` so consumers can tell a measured zero from a missing
value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Tuple, Union


@dataclass(frozen=True, slots=True)
class PositionReport:
    """GGA: position, fix quality and precision."""

    time: str
    latitude: float
    longitude: float
    fix_quality: int
    satellite_count: int
    hdop: float
    altitude_m: float
    sentence_id: str = "GGA"
    defaulted_fields: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_valid(self) -> bool:
        # Zero coordinates mean the receiver sent empty fields, not the origin
        return self.fix_quality > 0 and self.latitude != 0 and self.longitude != 0


@dataclass(frozen=True, slots=True)
class VelocityReport:
    """RMC: speed and course over ground (plus the fields it repeats)."""

    time: str
    status: str
    latitude: float
    longitude: float
    speed_knots: float
    speed_mps: float
    course_deg: float
    date: str
    sentence_id: str = "RMC"
    defaulted_fields: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_active(self) -> bool:
        """Receiver status ``A`` (active) as opposed to ``V`` (void)."""
        return self.status.upper() == "A"


@dataclass(frozen=True, slots=True)
class SatelliteInfo:
    """One satellite entry of a GSV sentence."""

    id: int
    elevation: int
    azimuth: int
    snr: int

    @property
    def used(self) -> bool:
        # Approximation: a tracked signal is treated as used in the solution
        return self.snr > 0


@dataclass(frozen=True, slots=True)
class SatelliteReport:
    """GSV: one page of the satellites-in-view table."""

    total_messages: int
    message_index: int
    total_satellites: int
    satellites: Tuple[SatelliteInfo, ...] = ()
    sentence_id: str = "GSV"
    defaulted_fields: FrozenSet[str] = field(default_factory=frozenset)


FixReport = Union[PositionReport, VelocityReport, SatelliteReport]


__all__ = [
    "PositionReport",
    "VelocityReport",
    "SatelliteInfo",
    "SatelliteReport",
    "FixReport",
]
