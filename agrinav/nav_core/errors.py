"""Exception hierarchy for the guidance core."""

from __future__ import annotations

from typing import Optional


class NavError(Exception):
    """Base exception for all agrinav errors."""


class DecodeError(NavError):
    """A sentence could not be turned into a fix report.

    Always recoverable: the offending line is dropped and processing
    continues with the next one.
    """

    def __init__(self, message: str, *, line: str = "") -> None:
        self.line = line
        super().__init__(message)


class ChecksumError(DecodeError):
    """The ``*HH`` suffix does not match the XOR of the sentence body."""

    def __init__(self, *, expected: str, actual: str, line: str = "") -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum mismatch: expected {expected}, got {actual!r}",
            line=line,
        )


class UnknownSentenceError(DecodeError):
    """The sentence identifier is not one the decoder handles."""

    def __init__(self, sentence_id: str, *, line: str = "") -> None:
        self.sentence_id = sentence_id
        super().__init__(f"Unrecognized sentence {sentence_id!r}", line=line)


class EnvelopeError(NavError):
    """A relay frame is not a valid ``nmea``/``status`` envelope."""


class TransportError(NavError):
    """Connection failure or closure of the byte source."""

    def __init__(self, message: str, *, endpoint: Optional[str] = None) -> None:
        self.endpoint = endpoint
        super().__init__(message)


class LineError(NavError):
    """Misuse of the reference-line registry (unknown id, degenerate line)."""


class LineNotFoundError(LineError):
    """No line with the requested id exists."""

    def __init__(self, line_id: str) -> None:
        self.line_id = line_id
        super().__init__(f"Unknown line {line_id!r}")


__all__ = [
    "NavError",
    "DecodeError",
    "ChecksumError",
    "UnknownSentenceError",
    "EnvelopeError",
    "TransportError",
    "LineError",
    "LineNotFoundError",
]
