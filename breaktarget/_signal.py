"""Escape signal and target identity markers.

An escape travels up the stack as an ``EscapeSignal`` exception that carries
only the marker of the target it is aimed at. The payload stays in the target's
slot, so the signal type is the same for every target regardless of ``T``.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from itertools import count

_TARGET_ID_COUNTER = count(1)


@dataclass(frozen=True, slots=True, eq=False)
class Marker:
    """Identity token of one deployment.

    ``eq=False`` keeps comparison on object identity: two markers are the same
    only if they are the same object, whatever their ids look like.
    """

    id: int

    @classmethod
    def new(cls) -> Marker:
        return cls(next(_TARGET_ID_COUNTER))


class EscapeSignal(BaseException):
    """Raised by ``break_with`` and consumed by the matching ``deploy`` frame.

    Derives from ``BaseException`` so that ``except Exception`` blocks in the
    frames being unwound let it through.
    """

    def __init__(self, marker: Marker) -> None:
        super().__init__(marker.id)
        self.marker = marker

    def targets(self, marker: Marker) -> bool:
        return self.marker is marker

    def __str__(self) -> str:
        return (
            f"escape signal for target #{self.marker.id} "
            "was not caught by its deployment"
        )

    def __repr__(self) -> str:
        return f"EscapeSignal(target={self.marker.id})"


# Per-task stack of (target id, owning thread ident), outermost first.
# Context copies can reach worker threads, so readers filter by thread.
_active: ContextVar[tuple[tuple[int, int], ...]] = ContextVar("breaktarget_active", default=())


@contextmanager
def activated(marker: Marker) -> Iterator[None]:
    token = _active.set(_active.get() + ((marker.id, threading.get_ident()),))
    try:
        yield
    finally:
        _active.reset(token)


def active_targets() -> tuple[int, ...]:
    """Return ids of the targets deployed on the calling thread and task, outermost first."""
    ident = threading.get_ident()
    return tuple(target_id for target_id, owner in _active.get() if owner == ident)


__all__ = ["EscapeSignal", "Marker", "activated", "active_targets"]
