"""Error types raised by misuse of break targets."""

from __future__ import annotations


class BreakTargetError(RuntimeError):
    """Base class for errors raised by the breaktarget library itself."""


class StaleTargetError(BreakTargetError):
    """Raised when ``break_with`` is called on a target whose deployment has ended.

    A target is only valid while its ``deploy`` call is on the stack. Once
    ``deploy`` returns (by value, by escape, or by propagating a failure) the
    handle may still be reachable from a closure, but escaping to it is
    impossible.

    Attributes:
        target_id: Id of the stale target.
    """

    def __init__(self, target_id: int) -> None:
        self.target_id = target_id
        super().__init__(
            f"BreakTarget #{target_id} is no longer deployed; "
            "break_with can only be called while its deploy call is running"
        )


class CrossThreadEscapeError(BreakTargetError):
    """Raised when ``break_with`` is called from a thread or task that does not own the target."""

    def __init__(self, target_id: int, owner: str, caller: str) -> None:
        self.target_id = target_id
        self.owner = owner
        self.caller = caller
        super().__init__(
            f"BreakTarget #{target_id} is owned by {owner}; "
            f"cannot break to it from {caller}"
        )


class PayloadSlotError(BreakTargetError):
    """Raised when a payload slot is written twice or read while empty."""


class PoisonError(BreakTargetError):
    """Raised when acquiring a ``PoisonLock`` that was abandoned by an exception or escape.

    Attributes:
        lock: The poisoned lock. Call ``lock.clear_poison()`` once the guarded
            state has been checked or repaired.
        cause: Name of the exception type that unwound through the lock.
    """

    def __init__(self, lock: object, cause: str | None) -> None:
        self.lock = lock
        self.cause = cause
        detail = f" by {cause}" if cause else ""
        super().__init__(f"lock was poisoned{detail} while held")


__all__ = [
    "BreakTargetError",
    "CrossThreadEscapeError",
    "PayloadSlotError",
    "PoisonError",
    "StaleTargetError",
]
