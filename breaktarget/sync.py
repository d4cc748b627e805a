"""Locks that remember being abandoned mid-update.

Python releases a lock held in a ``with`` block when an exception (or an escape
to a break target) unwinds through it, and nothing records that the guarded
data may have been left half-written. ``PoisonLock`` records it: leaving the
block by an exception poisons the lock, and later acquisitions fail with
``PoisonError`` until ``clear_poison`` is called.
"""

from __future__ import annotations

import logging
import threading
from types import TracebackType
from typing import Any

from breaktarget._signal import EscapeSignal
from breaktarget.errors import PoisonError

logger = logging.getLogger(__name__)


def _describe_cause(exc: BaseException | None, exc_type: type[BaseException]) -> str:
    if isinstance(exc, EscapeSignal):
        return f"escape to target #{exc.marker.id}"
    return exc_type.__name__


class PoisonLock:
    """Context-manager lock that is poisoned when its block exits abnormally.

    Example:
        >>> from breaktarget import BreakTarget
        >>> lock = PoisonLock()
        >>> def update(target):
        ...     with lock:
        ...         target.break_with("early")
        >>> BreakTarget.deploy(update)
        'early'
        >>> lock.is_poisoned
        True
    """

    __slots__ = ("_cause", "_lock", "_poisoned")

    def __init__(self, lock: Any = None) -> None:
        self._lock = threading.Lock() if lock is None else lock
        self._poisoned = False
        self._cause: str | None = None

    @property
    def is_poisoned(self) -> bool:
        return self._poisoned

    @property
    def poisoned_by(self) -> str | None:
        return self._cause

    def acquire(self, blocking: bool = True, timeout: float = -1, *, ignore_poison: bool = False) -> bool:
        """Acquire the underlying lock.

        Raises:
            PoisonError: The lock is poisoned and ``ignore_poison`` is false.
                The lock is not held when this is raised.
        """
        acquired = self._lock.acquire(blocking, timeout)
        if acquired and self._poisoned and not ignore_poison:
            self._lock.release()
            raise PoisonError(self, self._cause)
        return acquired

    def release(self) -> None:
        self._lock.release()

    def locked(self) -> bool:
        return self._lock.locked()

    def clear_poison(self) -> None:
        self._poisoned = False
        self._cause = None

    def __enter__(self) -> PoisonLock:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            self._poisoned = True
            self._cause = _describe_cause(exc, exc_type)
            logger.debug("Lock poisoned by %s", self._cause)
        self._lock.release()

    def __repr__(self) -> str:
        state = f"poisoned by {self._cause}" if self._poisoned else "ok"
        return f"<PoisonLock {state}>"


__all__ = ["PoisonLock"]
