"""Guidance engine: geodesy, cross-track error, parallel passes, lines."""

from .engine import (
    GuidanceEngine,
    ParallelMatch,
    compute_guidance,
    cross_track,
    distance_to_line,
    find_closest_parallel_line,
    offset_line,
)
from .geodesy import haversine_distance, initial_bearing, normalize_angle, offset_position
from .lines import LineRegistry

__all__ = [
    "GuidanceEngine",
    "ParallelMatch",
    "compute_guidance",
    "cross_track",
    "distance_to_line",
    "find_closest_parallel_line",
    "offset_line",
    "haversine_distance",
    "initial_bearing",
    "normalize_angle",
    "offset_position",
    "LineRegistry",
]
