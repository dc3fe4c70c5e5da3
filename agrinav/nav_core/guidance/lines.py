"""Reference-line registry.

In-memory stand-in for the line-management collaborator: lines are created
from two captured positions, at most one is active at a time, and deleting
the active line clears the activation.
"""

from __future__ import annotations

import time
import uuid
from typing import Callable, Dict, List, Optional

from ...core.logging_utils import get_module_logger
from ..errors import LineError, LineNotFoundError
from ..models import ReferenceLine, VehiclePosition

logger = get_module_logger("LineRegistry")


class LineRegistry:
    def __init__(self, clock: Callable[[], float] = time.time):
        self._lines: Dict[str, ReferenceLine] = {}
        self._active_id: Optional[str] = None
        self._clock = clock

    @property
    def lines(self) -> List[ReferenceLine]:
        """All lines in creation order."""
        return list(self._lines.values())

    @property
    def active(self) -> Optional[ReferenceLine]:
        if self._active_id is None:
            return None
        return self._lines.get(self._active_id)

    @property
    def active_id(self) -> Optional[str]:
        return self._active_id

    def get(self, line_id: str) -> ReferenceLine:
        try:
            return self._lines[line_id]
        except KeyError:
            raise LineNotFoundError(line_id) from None

    def create(self, point_a: VehiclePosition, point_b: VehiclePosition, name: str) -> ReferenceLine:
        """Create a line from two captured points.

        Raises:
            LineError: if A and B are the same location.
        """
        if (point_a.latitude, point_a.longitude) == (point_b.latitude, point_b.longitude):
            raise LineError("Point A and point B must differ")

        line = ReferenceLine(
            id=uuid.uuid4().hex,
            name=name.strip() or f"Line {len(self._lines) + 1}",
            point_a=point_a,
            point_b=point_b,
            created=self._clock(),
        )
        self._lines[line.id] = line
        logger.info("Created line %s (%s)", line.name, line.id)
        return line

    def activate(self, line_id: str) -> ReferenceLine:
        line = self.get(line_id)
        self._active_id = line.id
        logger.info("Activated line %s", line.name)
        return line

    def deactivate(self) -> None:
        if self._active_id is not None:
            logger.info("Deactivated line %s", self._active_id)
        self._active_id = None

    def delete(self, line_id: str) -> None:
        line = self.get(line_id)
        del self._lines[line_id]
        if self._active_id == line_id:
            self._active_id = None
        logger.info("Deleted line %s", line.name)


__all__ = ["LineRegistry"]
