"""Synchronous change notification.

A Signal is an ordered list of callbacks. Emitting calls each callback in
subscription order and returns once all of them have run; nothing is queued
or deferred.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any


class Signal:
    """Ordered observer list.

    Example:
        >>> changed = Signal("data_changed")
        >>> seen = []
        >>> changed.connect(lambda: seen.append(1))
        >>> changed.emit()
        >>> seen
        [1]
    """

    def __init__(self, name: str = "signal") -> None:
        self.name = name
        self._callbacks: list[Callable[..., Any]] = []

    def connect(self, callback: Callable[..., Any]) -> None:
        """Subscribe callback. Connecting the same callback twice is a no-op."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def disconnect(self, callback: Callable[..., Any]) -> bool:
        """Unsubscribe callback.

        Returns:
            False if the callback was not connected.
        """
        try:
            self._callbacks.remove(callback)
        except ValueError:
            return False
        return True

    def disconnect_all(self) -> None:
        self._callbacks.clear()

    def emit(self, *args: Any) -> None:
        """Call every subscriber with args, in subscription order."""
        # Snapshot so listeners may (dis)connect while being notified.
        for callback in list(self._callbacks):
            callback(*args)

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, listeners={len(self._callbacks)})"
