"""Local-scale geodesy helpers.

Distances use the haversine formula on a spherical earth and offsets use an
equirectangular approximation. Both are accurate over a few hundred meters
and degrade near the poles or over long offsets.
"""

from __future__ import annotations

import math

from ..constants import EARTH_RADIUS_M, METERS_PER_DEGREE_LAT
from ..models import VehiclePosition


def haversine_distance(a: VehiclePosition, b: VehiclePosition) -> float:
    """Great-circle distance in meters."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def initial_bearing(a: VehiclePosition, b: VehiclePosition) -> float:
    """Forward azimuth from ``a`` to ``b`` in degrees, normalized to [0, 360)."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    x = math.sin(d_lon) * math.cos(lat2)
    y = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon)
    return (math.degrees(math.atan2(x, y)) + 360.0) % 360.0


def normalize_angle(degrees: float) -> float:
    """Map an angle difference onto (-180, 180]."""
    wrapped = (degrees + 360.0) % 360.0
    return wrapped - 360.0 if wrapped > 180.0 else wrapped


def offset_position(
    position: VehiclePosition,
    bearing_deg: float,
    meters: float,
    *,
    reference_latitude: float,
) -> VehiclePosition:
    """Translate ``position`` by ``meters`` along ``bearing_deg``.

    The longitude scale is taken at ``reference_latitude`` so that both
    endpoints of a line shift by the same angular amount.
    """
    theta = math.radians(bearing_deg)
    d_lat = meters * math.cos(theta) / METERS_PER_DEGREE_LAT
    d_lon = meters * math.sin(theta) / (
        METERS_PER_DEGREE_LAT * math.cos(math.radians(reference_latitude))
    )
    return VehiclePosition(
        latitude=position.latitude + d_lat,
        longitude=position.longitude + d_lon,
        timestamp=position.timestamp,
        altitude=position.altitude,
    )


__all__ = [
    "haversine_distance",
    "initial_bearing",
    "normalize_angle",
    "offset_position",
]
