"""
Break targets: scoped, escape-only non-local exits.

``BreakTarget.deploy`` calls a function with a fresh target. Anywhere below that
call, ``target.break_with(value)`` abandons the remaining frames and makes
``deploy`` return ``value``. If the function returns normally its result is
returned instead.

The escape is carried by an ``EscapeSignal`` exception. Intervening frames run
their ``finally`` blocks and ``__exit__`` methods in reverse order, as for any
other exception. Locks released this way may guard half-updated state; see
``breaktarget.sync.PoisonLock``.

Example:
    >>> def find_negative(target, rows):
    ...     for row in rows:
    ...         for x in row:
    ...             if x < 0:
    ...                 target.break_with(x)
    ...     return None
    >>> BreakTarget.deploy(lambda t: find_negative(t, [[1, 2], [3, -4]]))
    -4
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from collections.abc import Awaitable, Callable
from typing import Generic, NoReturn, TypeVar

from breaktarget._signal import EscapeSignal, Marker, activated
from breaktarget._slot import PayloadSlot
from breaktarget.config import get_settings
from breaktarget.errors import CrossThreadEscapeError, StaleTargetError

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


def _describe_thread(ident: int) -> str:
    for thread in threading.enumerate():
        if thread.ident == ident:
            return f"thread {thread.name!r}"
    return f"thread {ident}"


def _describe_task(task: asyncio.Task | None) -> str:
    if task is None:
        return "no task"
    return f"task {task.get_name()!r}"


class BreakTarget(Generic[T]):
    """The return point of one ``deploy`` call.

    Instances are created by ``deploy``/``deploy_async`` only and are valid
    while that call runs. Escaping to a target after its deployment has ended
    raises ``StaleTargetError``.
    """

    __slots__ = ("_active", "_marker", "_owner_task", "_owner_thread", "_slot")

    def __init__(self, *, owner_task: asyncio.Task | None = None) -> None:
        self._marker = Marker.new()
        self._slot: PayloadSlot[T] = PayloadSlot()
        self._active = True
        self._owner_thread = threading.get_ident()
        self._owner_task = owner_task

    @property
    def id(self) -> int:
        return self._marker.id

    @property
    def is_active(self) -> bool:
        """Whether the owning ``deploy`` call is still running."""
        return self._active

    @classmethod
    def deploy(cls, body: Callable[[BreakTarget[T]], T]) -> T:
        """
        Run ``body`` with a new target and return its result or escaped value.

        Args:
            body: Called exactly once with the new target.

        Returns:
            The value ``body`` returned, or the value passed to
            ``break_with`` on this target.

        Raises:
            Whatever ``body`` raises, unchanged, including escapes aimed at
            enclosing targets.
        """
        if not callable(body):
            raise TypeError(f"body must be callable, got {type(body).__name__}")

        target: BreakTarget[T] = cls()
        target._trace("deploying")
        try:
            with activated(target._marker):
                value = body(target)
        except EscapeSignal as signal:
            if not signal.targets(target._marker):
                target._trace("passing escape for target #%d upward", signal.marker.id)
                raise
            target._trace("caught own escape")
            return target._slot.take()
        finally:
            target._active = False
        return target._returned(value)

    @classmethod
    async def deploy_async(cls, body: Callable[[BreakTarget[T]], Awaitable[T]]) -> T:
        """Coroutine form of ``deploy``; ``body`` returns an awaitable.

        The target is pinned to the calling task as well as its thread.
        """
        if not callable(body):
            raise TypeError(f"body must be callable, got {type(body).__name__}")

        target: BreakTarget[T] = cls(owner_task=_current_task())
        target._trace("deploying in %s", _describe_task(target._owner_task))
        try:
            with activated(target._marker):
                value = await body(target)
        except EscapeSignal as signal:
            if not signal.targets(target._marker):
                target._trace("passing escape for target #%d upward", signal.marker.id)
                raise
            target._trace("caught own escape")
            return target._slot.take()
        finally:
            target._active = False
        return target._returned(value)

    def break_with(self, value: T) -> NoReturn:
        """
        Abandon the current computation and make this target's ``deploy`` return ``value``.

        Never returns. Frames between here and the deployment are unwound as
        if by an exception.

        Raises:
            StaleTargetError: The deployment has already finished.
            CrossThreadEscapeError: Called outside the owning thread or task.
            PayloadSlotError: An earlier escape to this target was swallowed
                by an intervening frame, or this is a second ``break_with``
                issued from a ``finally`` block while the first escape to the
                same target is still unwinding. The in-flight escape is lost
                and this error propagates instead.
        """
        if not self._active:
            raise StaleTargetError(self.id)
        self._check_owner()

        if get_settings().unwind_policy == "abort":
            logger.critical(
                "break_with on target #%d with unwinding disabled; aborting", self.id
            )
            os.abort()

        self._slot.put(value)
        self._trace("escaping")
        raise EscapeSignal(self._marker)

    def _check_owner(self) -> None:
        ident = threading.get_ident()
        if ident != self._owner_thread:
            raise CrossThreadEscapeError(
                self.id, _describe_thread(self._owner_thread), _describe_thread(ident)
            )
        if self._owner_task is not None:
            task = _current_task()
            if task is not self._owner_task:
                raise CrossThreadEscapeError(
                    self.id, _describe_task(self._owner_task), _describe_task(task)
                )

    def _returned(self, value: T) -> T:
        if self._slot.clear():
            logger.warning(
                "Escape to target #%d was swallowed by an intervening frame; "
                "using the value returned by the body",
                self.id,
            )
        self._trace("returned normally")
        return value

    def _trace(self, message: str, *args: object) -> None:
        if get_settings().debug:
            logger.debug("BreakTarget #%d: " + message, self.id, *args)

    def __repr__(self) -> str:
        state = "active" if self._active else "stale"
        return f"<BreakTarget #{self.id} {state}>"


deploy = BreakTarget.deploy
deploy_async = BreakTarget.deploy_async


__all__ = ["BreakTarget", "deploy", "deploy_async"]
