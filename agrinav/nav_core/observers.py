"""Observer lists used for status and data delivery."""

from __future__ import annotations

from typing import Callable, Generic, List, TypeVar

from ..core.logging_utils import get_module_logger

logger = get_module_logger("Observers")

T = TypeVar("T")


class ObserverList(Generic[T]):
    """Ordered set of callbacks receiving one value each.

    A failing observer is logged and skipped; it never prevents the
    remaining observers (or the producer) from running.
    """

    def __init__(self, name: str = "observers"):
        self._name = name
        self._callbacks: List[Callable[[T], None]] = []

    def __len__(self) -> int:
        return len(self._callbacks)

    def add(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register ``callback`` and return a function that unregisters it."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)
        return lambda: self.remove(callback)

    def remove(self, callback: Callable[[T], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def clear(self) -> None:
        self._callbacks.clear()

    def notify(self, value: T) -> None:
        for callback in list(self._callbacks):
            try:
                callback(value)
            except Exception:
                logger.exception("Observer %r in %s failed", callback, self._name)


__all__ = ["ObserverList"]
