"""Immutable snapshots passed between the guidance components."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True, slots=True)
class VehiclePosition:
    """Fused vehicle state: one valid position plus the cached velocity.

    ``timestamp`` is a ``time.monotonic()`` capture instant.
    """

    latitude: float
    longitude: float
    timestamp: float = 0.0
    altitude: Optional[float] = None
    speed: Optional[float] = None
    heading: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "altitude": self.altitude,
            "speed": self.speed,
            "heading": self.heading,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class ReferenceLine:
    """Operator-defined A/B line."""

    id: str
    name: str
    point_a: VehiclePosition
    point_b: VehiclePosition
    created: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "point_a": self.point_a.to_dict(),
            "point_b": self.point_b.to_dict(),
            "created": self.created,
        }


@dataclass(frozen=True, slots=True)
class GuidanceResult:
    """Steering signal relative to the line being followed.

    ``cross_track_error`` is positive when the vehicle sits on the side
    reached by turning the line bearing +90 degrees. ``pass_index`` is the
    swath the guidance refers to (0 for the operator's own line).
    """

    cross_track_error: float
    distance_to_ab: float
    heading_error: float
    on_track: bool
    line_bearing: float = 0.0
    pass_index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cross_track_error": self.cross_track_error,
            "distance_to_ab": self.distance_to_ab,
            "heading_error": self.heading_error,
            "on_track": self.on_track,
            "line_bearing": self.line_bearing,
            "pass_index": self.pass_index,
        }


@dataclass(frozen=True, slots=True)
class PathPoint:
    """One recorded position in the coverage history."""

    position: VehiclePosition
    treated: bool
    timestamp: float


__all__ = [
    "VehiclePosition",
    "ReferenceLine",
    "GuidanceResult",
    "PathPoint",
]
