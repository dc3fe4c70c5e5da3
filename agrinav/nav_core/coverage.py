"""Coverage tracking: the path driven so far and its summary statistics."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..core.logging_utils import get_module_logger
from .constants import APPROX_METERS_PER_PATH_POINT, KMH_PER_MPS
from .guidance.geodesy import haversine_distance
from .models import PathPoint, VehiclePosition

logger = get_module_logger("CoverageTracker")


def always_engaged() -> bool:
    """Default implement-engagement source: every recorded point is treated."""
    return True


@dataclass(frozen=True, slots=True)
class CoverageStats:
    treated_count: int
    total_count: int
    coverage_percentage: float
    approximate_distance_m: float
    measured_distance_m: float
    session_duration_s: float
    average_speed_kmh: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "treated_count": self.treated_count,
            "total_count": self.total_count,
            "coverage_percentage": self.coverage_percentage,
            "approximate_distance_m": self.approximate_distance_m,
            "measured_distance_m": self.measured_distance_m,
            "session_duration_s": self.session_duration_s,
            "average_speed_kmh": self.average_speed_kmh,
        }


class CoverageTracker:
    """Appends path points for connected, fixed positions.

    Whether a point counts as treated comes from ``implement_engaged``, a
    capability supplied by whatever knows the implement state. Without one,
    every point is treated.

    ``approximate_distance_m`` keeps the fixed two-meters-per-point
    heuristic; ``measured_distance_m`` sums the actual point-to-point
    distances.
    """

    def __init__(
        self,
        implement_engaged: Callable[[], bool] = always_engaged,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._implement_engaged = implement_engaged
        self._clock = clock
        self._path: List[PathPoint] = []
        self._started_at = clock()

    @property
    def path(self) -> List[PathPoint]:
        return list(self._path)

    @property
    def started_at(self) -> float:
        return self._started_at

    def __len__(self) -> int:
        return len(self._path)

    def on_position(
        self,
        position: VehiclePosition,
        connected: bool,
        fix_quality: int,
    ) -> Optional[PathPoint]:
        """Record ``position`` if the link is up and the fix is usable."""
        if not connected or fix_quality <= 0:
            return None
        point = PathPoint(
            position=position,
            treated=bool(self._implement_engaged()),
            timestamp=self._clock(),
        )
        self._path.append(point)
        return point

    def clear(self) -> None:
        """Drop the whole path. The session clock keeps running."""
        logger.info("Cleared %d path points", len(self._path))
        self._path.clear()

    def measured_distance(self) -> float:
        return sum(
            haversine_distance(prev.position, cur.position)
            for prev, cur in zip(self._path, self._path[1:])
        )

    def stats(self) -> CoverageStats:
        total = len(self._path)
        treated = sum(1 for point in self._path if point.treated)
        coverage = (treated / total) * 100.0 if total > 0 else 0.0

        approximate = total * APPROX_METERS_PER_PATH_POINT
        duration = max(0.0, self._clock() - self._started_at)
        average_kmh = (approximate / duration) * KMH_PER_MPS if duration > 0 else 0.0

        return CoverageStats(
            treated_count=treated,
            total_count=total,
            coverage_percentage=coverage,
            approximate_distance_m=approximate,
            measured_distance_m=self.measured_distance(),
            session_duration_s=duration,
            average_speed_kmh=average_kmh,
        )


__all__ = ["CoverageStats", "CoverageTracker", "always_engaged"]
