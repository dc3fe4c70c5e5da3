"""Fix aggregation: merges position and velocity reports into one state."""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from ..core.logging_utils import get_module_logger
from .errors import DecodeError
from .models import VehiclePosition
from .observers import ObserverList
from .parsers.nmea_parser import SentenceDecoder
from .parsers.nmea_types import (
    FixReport,
    PositionReport,
    SatelliteInfo,
    SatelliteReport,
    VelocityReport,
)

logger = get_module_logger("FixAggregator")


@dataclass(frozen=True, slots=True)
class CachedVelocity:
    """Last decoded speed/course and the monotonic instant it arrived."""

    speed: float
    heading: float
    updated_at: float


class FixAggregator:
    """Combines GGA positions with the most recent RMC velocity.

    Velocity and position arrive in separate sentences, so the emitted
    speed and heading can lag the position by up to one reporting cycle.
    ``velocity_age_s`` reports that lag for the last emitted position.

    Example:
        aggregator = FixAggregator()
        aggregator.position_observers.add(print)
        for line in frame.splitlines():
            aggregator.on_line(line)
    """

    def __init__(
        self,
        decoder: Optional[SentenceDecoder] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._decoder = decoder or SentenceDecoder()
        self._clock = clock

        self._last_velocity: Optional[CachedVelocity] = None
        self._last_report: Optional[PositionReport] = None
        self._current: Optional[VehiclePosition] = None
        self._velocity_age_s: Optional[float] = None
        self._satellites: Dict[int, SatelliteInfo] = {}
        self._satellites_in_view = 0

        self.decode_errors: Counter = Counter()
        self.invalid_fixes = 0
        self.position_observers: ObserverList[VehiclePosition] = ObserverList("positions")

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def current_position(self) -> Optional[VehiclePosition]:
        return self._current

    @property
    def last_velocity(self) -> Optional[CachedVelocity]:
        return self._last_velocity

    @property
    def velocity_age_s(self) -> Optional[float]:
        """Seconds between the cached velocity and the last emitted position."""
        return self._velocity_age_s

    @property
    def fix_quality(self) -> int:
        return self._last_report.fix_quality if self._last_report else 0

    @property
    def satellite_count(self) -> int:
        return self._last_report.satellite_count if self._last_report else 0

    @property
    def hdop(self) -> float:
        return self._last_report.hdop if self._last_report else 0.0

    @property
    def satellites(self) -> Tuple[SatelliteInfo, ...]:
        return tuple(sorted(self._satellites.values(), key=lambda sat: sat.id))

    @property
    def satellites_in_view(self) -> int:
        return self._satellites_in_view

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def on_line(self, line: str) -> Optional[VehiclePosition]:
        """Decode one raw line; return a new VehiclePosition if one was produced."""
        try:
            report = self._decoder.decode(line)
        except DecodeError as exc:
            self.decode_errors[type(exc).__name__] += 1
            logger.debug("Dropped sentence: %s (%s)", exc, exc.line)
            return None
        return self.on_report(report)

    def on_report(self, report: FixReport) -> Optional[VehiclePosition]:
        if isinstance(report, VelocityReport):
            self._last_velocity = CachedVelocity(
                speed=report.speed_mps,
                heading=report.course_deg,
                updated_at=self._clock(),
            )
            return None

        if isinstance(report, SatelliteReport):
            self._merge_satellites(report)
            return None

        if isinstance(report, PositionReport):
            return self._on_position(report)

        return None

    def reset(self) -> None:
        """Forget every cached report."""
        self._last_velocity = None
        self._last_report = None
        self._current = None
        self._velocity_age_s = None
        self._satellites.clear()
        self._satellites_in_view = 0
        self.decode_errors.clear()
        self.invalid_fixes = 0

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _on_position(self, report: PositionReport) -> Optional[VehiclePosition]:
        if not report.is_valid:
            self.invalid_fixes += 1
            logger.debug(
                "Invalid fix (quality=%d, lat=%.6f, lon=%.6f)",
                report.fix_quality, report.latitude, report.longitude,
            )
            return None

        now = self._clock()
        velocity = self._last_velocity
        if velocity is None:
            speed, heading = 0.0, 0.0
            self._velocity_age_s = None
        else:
            speed, heading = velocity.speed, velocity.heading
            self._velocity_age_s = max(0.0, now - velocity.updated_at)

        if self._current is None:
            logger.info(
                "First valid fix: lat=%.6f, lon=%.6f, satellites=%d",
                report.latitude, report.longitude, report.satellite_count,
            )

        position = VehiclePosition(
            latitude=report.latitude,
            longitude=report.longitude,
            altitude=report.altitude_m,
            speed=speed,
            heading=heading,
            timestamp=now,
        )
        self._last_report = report
        self._current = position
        self.position_observers.notify(position)
        return position

    def _merge_satellites(self, report: SatelliteReport) -> None:
        # Page 1 starts a new satellites-in-view cycle
        if report.message_index <= 1:
            self._satellites.clear()
        for sat in report.satellites:
            self._satellites[sat.id] = sat
        self._satellites_in_view = report.total_satellites


__all__ = ["CachedVelocity", "FixAggregator"]
