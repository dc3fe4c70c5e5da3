"""Component-scoped logger helpers for AgriNav."""

from __future__ import annotations

import logging
from typing import Optional

LOGGER_NAMESPACE = "agrinav"
DEFAULT_COMPONENT = "Core"


def _qualified_name(name: Optional[str]) -> str:
    if not name:
        return LOGGER_NAMESPACE
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return name
    return f"{LOGGER_NAMESPACE}.{name}"


def _component_for(name: str) -> str:
    suffix = name[len(LOGGER_NAMESPACE):].lstrip(".")
    if not suffix:
        return DEFAULT_COMPONENT
    # Dotted module paths collapse to their last segment
    return suffix.rsplit(".", 1)[-1]


class StructuredLogger:
    """Wraps a stdlib logger and tags each message with ``[Component]``.

    All attribute access that is not part of the logging API falls through
    to the wrapped :class:`logging.Logger`, so handlers and levels are
    managed in the usual way.
    """

    __slots__ = ("_logger", "_component")

    def __init__(self, logger: logging.Logger, component: Optional[str] = None) -> None:
        self._logger = logger
        self._component = component or _component_for(logger.name)

    def __getattr__(self, item):
        return getattr(self._logger, item)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"StructuredLogger({self._logger.name!r}, component={self._component!r})"

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def component(self) -> str:
        return self._component

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _tag(self, message: object) -> str:
        text = str(message)
        prefix = f"[{self._component}]"
        if text.startswith(prefix):
            return text
        return f"{prefix} {text}"

    def log(self, level: int, message: object, *args, **kwargs) -> None:
        self._logger.log(level, self._tag(message), *args, **kwargs)

    def debug(self, message: object, *args, **kwargs) -> None:
        self._logger.debug(self._tag(message), *args, **kwargs)

    def info(self, message: object, *args, **kwargs) -> None:
        self._logger.info(self._tag(message), *args, **kwargs)

    def warning(self, message: object, *args, **kwargs) -> None:
        self._logger.warning(self._tag(message), *args, **kwargs)

    def error(self, message: object, *args, **kwargs) -> None:
        self._logger.error(self._tag(message), *args, **kwargs)

    def exception(self, message: object, *args, **kwargs) -> None:
        kwargs.setdefault("exc_info", True)
        self._logger.error(self._tag(message), *args, **kwargs)

    def getChild(self, suffix: str) -> "StructuredLogger":
        return StructuredLogger(
            self._logger.getChild(suffix),
            component=f"{self._component}.{suffix}",
        )


def get_module_logger(name: Optional[str] = None) -> StructuredLogger:
    """Return a structured logger inside the ``agrinav`` namespace.

    ``name`` may be a short component name ("TransportSession") or a module
    ``__name__``; both end up under ``agrinav.``.
    """
    return StructuredLogger(logging.getLogger(_qualified_name(name)))


__all__ = [
    "LOGGER_NAMESPACE",
    "StructuredLogger",
    "get_module_logger",
]
