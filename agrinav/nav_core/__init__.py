"""Guidance core: decoding, fix aggregation, guidance, coverage, transport."""

from .aggregator import CachedVelocity, FixAggregator
from .coverage import CoverageStats, CoverageTracker
from .errors import (
    ChecksumError,
    DecodeError,
    EnvelopeError,
    LineError,
    LineNotFoundError,
    NavError,
    TransportError,
    UnknownSentenceError,
)
from .guidance import GuidanceEngine, LineRegistry, compute_guidance
from .guidance_system import GuidanceSystem
from .models import GuidanceResult, PathPoint, ReferenceLine, VehiclePosition
from .observers import ObserverList
from .parsers import SentenceDecoder, decode
from .session import ConnectionStatus, SessionState, StatusSource, TransportSession
from .transports import BaseTransport, RelayMessage, SerialTransport, WebSocketRelayTransport

__all__ = [
    # Models
    "VehiclePosition",
    "ReferenceLine",
    "GuidanceResult",
    "PathPoint",
    # Errors
    "NavError",
    "DecodeError",
    "ChecksumError",
    "UnknownSentenceError",
    "EnvelopeError",
    "TransportError",
    "LineError",
    "LineNotFoundError",
    # Decoding and aggregation
    "SentenceDecoder",
    "decode",
    "FixAggregator",
    "CachedVelocity",
    # Guidance
    "GuidanceEngine",
    "LineRegistry",
    "compute_guidance",
    # Coverage
    "CoverageTracker",
    "CoverageStats",
    # Transport
    "BaseTransport",
    "RelayMessage",
    "SerialTransport",
    "WebSocketRelayTransport",
    "TransportSession",
    "SessionState",
    "StatusSource",
    "ConnectionStatus",
    "ObserverList",
    # Orchestration
    "GuidanceSystem",
]
