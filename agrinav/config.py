"""Typed configuration for the guidance runtime."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional

from .core.config_loader import ConfigLoader
from .core.logging_utils import get_module_logger
from .nav_core.constants import (
    DEFAULT_BAUD_RATE,
    DEFAULT_MACHINE_WIDTH_M,
    DEFAULT_PARALLEL_SEARCH_RANGE,
    DEFAULT_RECONNECT_DELAY,
    DEFAULT_RELAY_URL,
    DEFAULT_SERIAL_PORT,
    DEFAULT_TOLERANCE_M,
)

logger = get_module_logger("GuidanceConfig")

TRANSPORTS = ("websocket", "serial")


@dataclass(slots=True)
class GuidanceConfig:
    """Typed configuration for the guidance runtime."""

    # Guidance
    tolerance: float = DEFAULT_TOLERANCE_M
    machine_width: float = DEFAULT_MACHINE_WIDTH_M
    parallel_search_range: int = DEFAULT_PARALLEL_SEARCH_RANGE

    # Transport
    transport: str = "websocket"
    relay_url: str = DEFAULT_RELAY_URL
    serial_port: str = DEFAULT_SERIAL_PORT
    baud_rate: int = DEFAULT_BAUD_RATE
    reconnect_delay: float = DEFAULT_RECONNECT_DELAY

    # Logging
    log_level: str = "info"
    log_file: str = ""

    # Status API
    api_enabled: bool = True
    api_host: str = "127.0.0.1"
    api_port: int = 8090

    @classmethod
    def from_file(cls, config_path: Optional[Path] = None, args: Any = None) -> "GuidanceConfig":
        """Build config from a ``key = value`` file with optional CLI overrides."""
        defaults = cls().to_dict()
        values = defaults
        if config_path is not None:
            values = ConfigLoader.load(Path(config_path), defaults=defaults, strict=True)

        config = cls(**{key: values[key] for key in defaults})
        if args is not None:
            config = config._apply_args_override(args)
        config.validate()
        return config

    def _apply_args_override(self, args: Any) -> "GuidanceConfig":
        """Apply argparse values that were explicitly given (not None)."""
        values = asdict(self)
        for field_info in fields(self):
            val = getattr(args, field_info.name, None)
            if val is not None:
                values[field_info.name] = val
        return GuidanceConfig(**values)

    def validate(self) -> None:
        """Reject values the guidance math cannot work with.

        Raises:
            ValueError: on a non-positive tolerance or width, a negative
                search range or reconnect delay, or an unknown transport.
        """
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")
        if self.machine_width <= 0:
            raise ValueError(f"machine_width must be positive, got {self.machine_width}")
        if self.parallel_search_range < 0:
            raise ValueError(f"parallel_search_range must be >= 0, got {self.parallel_search_range}")
        if self.reconnect_delay < 0:
            raise ValueError(f"reconnect_delay must be >= 0, got {self.reconnect_delay}")
        if self.transport not in TRANSPORTS:
            raise ValueError(f"transport must be one of {TRANSPORTS}, got {self.transport!r}")

    def to_dict(self) -> dict[str, Any]:
        """Export config values as dictionary."""
        return asdict(self)


__all__ = ["GuidanceConfig", "TRANSPORTS"]
