"""Wiring of session, aggregator, guidance engine and coverage tracker."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from ..core.logging_utils import get_module_logger
from .aggregator import FixAggregator
from .constants import FIX_QUALITY_DESCRIPTIONS
from .coverage import CoverageTracker
from .guidance.engine import GuidanceEngine
from .guidance.lines import LineRegistry
from .models import GuidanceResult, VehiclePosition
from .observers import ObserverList
from .session import ConnectionStatus, TransportSession
from .transports.base_transport import BaseTransport

logger = get_module_logger("GuidanceSystem")


class GuidanceSystem:
    """Runs the full pipeline for one vehicle.

    raw line -> FixAggregator -> VehiclePosition -> GuidanceEngine (when a
    line is active) and CoverageTracker. Connectivity reported by the
    session (or forwarded from the relay) gates coverage recording.
    """

    def __init__(
        self,
        transport: BaseTransport,
        *,
        engine: Optional[GuidanceEngine] = None,
        lines: Optional[LineRegistry] = None,
        aggregator: Optional[FixAggregator] = None,
        coverage: Optional[CoverageTracker] = None,
        reconnect_delay: Optional[float] = None,
        implement_engaged: Optional[Callable[[], bool]] = None,
    ):
        session_kwargs = {} if reconnect_delay is None else {"reconnect_delay": reconnect_delay}
        self.session = TransportSession(transport, **session_kwargs)
        self.engine = engine or GuidanceEngine()
        self.lines = lines or LineRegistry()
        self.aggregator = aggregator or FixAggregator()
        if coverage is None:
            coverage = CoverageTracker(implement_engaged) if implement_engaged else CoverageTracker()
        self.coverage = coverage

        self._connected = False
        self._error: Optional[str] = None
        self._guidance: Optional[GuidanceResult] = None

        self.guidance_observers: ObserverList[Optional[GuidanceResult]] = ObserverList("guidance")

        self.session.line_observers.add(self.aggregator.on_line)
        self.session.status_observers.add(self._on_status)
        self.aggregator.position_observers.add(self._on_position)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> bool:
        logger.info("Starting guidance system on %s", self.session.transport.endpoint)
        return await self.session.connect()

    async def stop(self) -> None:
        await self.session.disconnect()
        logger.info("Guidance system stopped")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def current_position(self) -> Optional[VehiclePosition]:
        return self.aggregator.current_position

    @property
    def guidance(self) -> Optional[GuidanceResult]:
        return self._guidance

    def refresh_guidance(self) -> Optional[GuidanceResult]:
        """Recompute guidance, e.g. after the active line or width changed."""
        self._guidance = self.engine.compute(self.current_position, self.lines.active)
        self.guidance_observers.notify(self._guidance)
        return self._guidance

    def clear_path(self) -> None:
        self.coverage.clear()

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the current state."""
        position = self.current_position
        active = self.lines.active
        quality = self.aggregator.fix_quality
        return {
            "connected": self._connected,
            "error": self._error,
            "session_state": self.session.state.value,
            "reconnect_pending": self.session.reconnect_pending,
            "position": position.to_dict() if position else None,
            "velocity_age_s": self.aggregator.velocity_age_s,
            "fix_quality": quality,
            "fix_description": FIX_QUALITY_DESCRIPTIONS.get(quality, "Unknown"),
            "satellite_count": self.aggregator.satellite_count,
            "satellites_in_view": self.aggregator.satellites_in_view,
            "hdop": self.aggregator.hdop,
            "active_line_id": active.id if active else None,
            "guidance": self._guidance.to_dict() if self._guidance else None,
            "decode_errors": dict(self.aggregator.decode_errors),
        }

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def _on_status(self, status: ConnectionStatus) -> None:
        self._connected = status.connected
        self._error = status.error

    def _on_position(self, position: VehiclePosition) -> None:
        guidance = self.refresh_guidance()
        if guidance is not None:
            logger.debug(
                "XTE=%+.2fm heading_err=%+.1f pass=%d on_track=%s",
                guidance.cross_track_error,
                guidance.heading_error,
                guidance.pass_index,
                guidance.on_track,
            )
        self.coverage.on_position(position, self._connected, self.aggregator.fix_quality)


__all__ = ["GuidanceSystem"]
