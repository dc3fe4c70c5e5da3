"""Human-readable formatting for coordinates and distances."""

from __future__ import annotations

import math


def format_coordinate(coord: float, is_latitude: bool) -> str:
    """Degrees and decimal minutes with hemisphere, e.g. ``48°7.0380'N``."""
    value = abs(coord)
    degrees = math.floor(value)
    minutes = (value - degrees) * 60
    if coord >= 0:
        direction = "N" if is_latitude else "E"
    else:
        direction = "S" if is_latitude else "W"
    return f"{degrees}°{minutes:.4f}'{direction}"


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{meters:.1f}m"
    return f"{meters / 1000:.2f}km"


__all__ = ["format_coordinate", "format_distance"]
