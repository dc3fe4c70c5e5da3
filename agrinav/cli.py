"""Command-line entry point: ``python -m agrinav`` / ``agrinav``."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import signal
import sys
from pathlib import Path
from typing import Optional

from .config import TRANSPORTS, GuidanceConfig
from .core.logging_config import configure_logging
from .core.logging_utils import get_module_logger
from .nav_core.formatting import format_coordinate, format_distance
from .nav_core.guidance import GuidanceEngine
from .nav_core.guidance_system import GuidanceSystem
from .nav_core.transports import BaseTransport, SerialTransport, WebSocketRelayTransport

logger = get_module_logger("Main")

STATUS_INTERVAL_S = 10.0


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Every override defaults to None so that only options given on the
    command line replace values from the config file.
    """
    parser = argparse.ArgumentParser(description="AB-line guidance for GNSS-equipped vehicles")
    parser.add_argument("--config", dest="config_path", type=Path, default=None,
                        help="Path to a key = value config file.")
    parser.add_argument("--transport", choices=TRANSPORTS, default=None,
                        help="Byte source: relay websocket or a local serial port.")
    parser.add_argument("--url", dest="relay_url", default=None,
                        help="Relay websocket URL.")
    parser.add_argument("--serial-port", dest="serial_port", default=None,
                        help="Serial device when --transport=serial.")
    parser.add_argument("--baud-rate", dest="baud_rate", type=int, default=None)
    parser.add_argument("--machine-width", dest="machine_width", type=float, default=None,
                        help="Implement working width in metres.")
    parser.add_argument("--tolerance", type=float, default=None,
                        help="On-track tolerance in metres.")
    parser.add_argument("--reconnect-delay", dest="reconnect_delay", type=float, default=None)
    parser.add_argument("--log-level", dest="log_level", default=None,
                        choices=["debug", "info", "warning", "error"])
    parser.add_argument("--log-file", dest="log_file", default=None)
    parser.add_argument("--api-port", dest="api_port", type=int, default=None)
    parser.add_argument("--no-api", dest="api_enabled", action="store_const", const=False, default=None,
                        help="Do not start the REST status API.")
    return parser.parse_args(argv)


def build_transport(config: GuidanceConfig) -> BaseTransport:
    if config.transport == "serial":
        return SerialTransport(config.serial_port, config.baud_rate)
    return WebSocketRelayTransport(config.relay_url)


def log_status(system: GuidanceSystem) -> None:
    position = system.current_position
    if position is None:
        logger.info("Waiting for fix (connected=%s)", system.connected)
        return

    stats = system.coverage.stats()
    guidance = system.guidance
    xte = f"{guidance.cross_track_error:+.2f}m" if guidance else "n/a"
    logger.info(
        "%s %s | XTE %s | covered %s (%.0f%% treated)",
        format_coordinate(position.latitude, True),
        format_coordinate(position.longitude, False),
        xte,
        format_distance(stats.measured_distance_m),
        stats.coverage_percentage,
    )


def install_signal_handlers(shutdown_event: asyncio.Event, loop: asyncio.AbstractEventLoop) -> None:
    """Register SIGINT/SIGTERM handlers that set the shutdown event."""
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, shutdown_event.set)


async def run(config: GuidanceConfig) -> None:
    engine = GuidanceEngine(
        machine_width=config.machine_width,
        tolerance=config.tolerance,
        search_range=config.parallel_search_range,
    )
    system = GuidanceSystem(
        build_transport(config),
        engine=engine,
        reconnect_delay=config.reconnect_delay,
    )

    api_server = None
    if config.api_enabled:
        from .api import APIServer

        api_server = APIServer(system, host=config.api_host, port=config.api_port)

    shutdown_event = asyncio.Event()
    install_signal_handlers(shutdown_event, asyncio.get_running_loop())

    # A failed first connect is retried by the session; keep running.
    await system.start()
    if api_server is not None:
        await api_server.start()

    try:
        while not shutdown_event.is_set():
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(shutdown_event.wait(), timeout=STATUS_INTERVAL_S)
            if not shutdown_event.is_set():
                log_status(system)
    finally:
        logger.info("Shutting down")
        if api_server is not None:
            await api_server.stop()
        await system.stop()


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = GuidanceConfig.from_file(args.config_path, args)
    except (OSError, ValueError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    configure_logging(config.log_level, log_file=config.log_file or None)
    logger.info("Configuration: %s", config.to_dict())

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        pass
    return 0


__all__ = ["build_transport", "main", "parse_args", "run"]
