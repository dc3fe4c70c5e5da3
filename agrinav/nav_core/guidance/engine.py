"""Cross-track guidance against an A/B line and its parallel passes."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterator, Optional

from ..constants import (
    DEFAULT_MACHINE_WIDTH_M,
    DEFAULT_PARALLEL_SEARCH_RANGE,
    DEFAULT_TOLERANCE_M,
)
from ..models import GuidanceResult, ReferenceLine, VehiclePosition
from .geodesy import haversine_distance, initial_bearing, normalize_angle, offset_position


@dataclass(frozen=True, slots=True)
class ParallelMatch:
    """Closest swath found by :func:`find_closest_parallel_line`."""

    line: ReferenceLine
    pass_index: int
    distance: float


def cross_track(
    position: VehiclePosition,
    line: ReferenceLine,
    tolerance: float = DEFAULT_TOLERANCE_M,
) -> GuidanceResult:
    """Signed lateral offset and heading error of ``position`` relative to ``line``."""
    line_bearing = initial_bearing(line.point_a, line.point_b)
    dist_ap = haversine_distance(line.point_a, position)
    bearing_ap = initial_bearing(line.point_a, position)

    bearing_diff = (bearing_ap - line_bearing + 360.0) % 360.0
    cte = dist_ap * math.sin(math.radians(bearing_diff))

    heading = position.heading or 0.0
    heading_error = normalize_angle(heading - line_bearing)

    return GuidanceResult(
        cross_track_error=cte,
        distance_to_ab=abs(cte),
        heading_error=heading_error,
        on_track=abs(cte) < tolerance,
        line_bearing=line_bearing,
    )


def distance_to_line(position: VehiclePosition, line: ReferenceLine) -> float:
    return cross_track(position, line).distance_to_ab


def offset_line(line: ReferenceLine, offset_m: float, pass_index: int = 0) -> ReferenceLine:
    """Shift both endpoints perpendicular (bearing + 90) by ``offset_m`` meters."""
    perpendicular = (initial_bearing(line.point_a, line.point_b) + 90.0) % 360.0
    ref_lat = line.point_a.latitude
    return replace(
        line,
        id=f"{line.id}_parallel_{pass_index}",
        name=f"{line.name} +{offset_m:g}m",
        point_a=offset_position(line.point_a, perpendicular, offset_m, reference_latitude=ref_lat),
        point_b=offset_position(line.point_b, perpendicular, offset_m, reference_latitude=ref_lat),
    )


def _candidate_indices(search_range: int) -> Iterator[int]:
    # Pass 0 first, then outward; strict "<" keeps the smallest |i| on ties
    yield 0
    for step in range(1, search_range + 1):
        yield -step
        yield step


def find_closest_parallel_line(
    position: VehiclePosition,
    line: ReferenceLine,
    machine_width: float,
    search_range: int = DEFAULT_PARALLEL_SEARCH_RANGE,
) -> ParallelMatch:
    """Pick the swath (the line itself or an offset of ``i * machine_width``)
    with the smallest absolute cross-track error.

    Ties keep the candidate with the smallest ``|i|``; between ``-i`` and
    ``+i`` the negative side wins.
    """
    best = ParallelMatch(line=line, pass_index=0, distance=distance_to_line(position, line))
    if machine_width <= 0:
        return best

    for index in _candidate_indices(search_range):
        if index == 0:
            continue
        candidate = offset_line(line, index * machine_width, index)
        distance = distance_to_line(position, candidate)
        if distance < best.distance:
            best = ParallelMatch(line=candidate, pass_index=index, distance=distance)
    return best


def compute_guidance(
    position: VehiclePosition,
    line: ReferenceLine,
    machine_width: float = DEFAULT_MACHINE_WIDTH_M,
    *,
    tolerance: float = DEFAULT_TOLERANCE_M,
    search_range: int = DEFAULT_PARALLEL_SEARCH_RANGE,
) -> GuidanceResult:
    """Guidance against whichever pass of ``line`` the vehicle is closest to."""
    match = find_closest_parallel_line(position, line, machine_width, search_range)
    result = cross_track(position, match.line, tolerance)
    return replace(result, pass_index=match.pass_index)


class GuidanceEngine:
    """Holds the guidance tunables and computes results on demand.

    Stateless apart from its settings: every call is a pure function of the
    position and line passed in.
    """

    def __init__(
        self,
        machine_width: float = DEFAULT_MACHINE_WIDTH_M,
        tolerance: float = DEFAULT_TOLERANCE_M,
        search_range: int = DEFAULT_PARALLEL_SEARCH_RANGE,
    ):
        self.machine_width = machine_width
        self.tolerance = tolerance
        self.search_range = search_range

    def compute(
        self,
        position: Optional[VehiclePosition],
        line: Optional[ReferenceLine],
    ) -> Optional[GuidanceResult]:
        """Return guidance, or None when there is no position or no line."""
        if position is None or line is None:
            return None
        return compute_guidance(
            position,
            line,
            self.machine_width,
            tolerance=self.tolerance,
            search_range=self.search_range,
        )


__all__ = [
    "ParallelMatch",
    "GuidanceEngine",
    "compute_guidance",
    "cross_track",
    "distance_to_line",
    "find_closest_parallel_line",
    "offset_line",
]
