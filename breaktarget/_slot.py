"""Write-once, take-once payload cell shared by a target and its escape."""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

from breaktarget.errors import PayloadSlotError

T = TypeVar("T")

_EMPTY = object()


class PayloadSlot(Generic[T]):
    """Holds the value an escape delivers to its deployment.

    The slot is filled by ``break_with`` before the escape signal is raised and
    emptied by the matching ``deploy`` frame after it catches the signal. A
    normal return leaves it untouched.
    """

    __slots__ = ("_lock", "_value")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: object = _EMPTY

    @property
    def is_filled(self) -> bool:
        with self._lock:
            return self._value is not _EMPTY

    def put(self, value: T) -> None:
        with self._lock:
            if self._value is not _EMPTY:
                raise PayloadSlotError("payload slot already holds a value")
            self._value = value

    def take(self) -> T:
        with self._lock:
            value = self._value
            if value is _EMPTY:
                raise PayloadSlotError("payload slot is empty")
            self._value = _EMPTY
        return value  # type: ignore[return-value]

    def clear(self) -> bool:
        """Drop any stored value. Returns whether a value was dropped."""
        with self._lock:
            dropped = self._value is not _EMPTY
            self._value = _EMPTY
        return dropped

    def __repr__(self) -> str:
        return f"PayloadSlot(filled={self.is_filled})"
