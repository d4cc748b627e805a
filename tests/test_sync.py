"""PoisonLock records locks abandoned by unwinding."""

from __future__ import annotations

import doctest
import threading

import pytest

import breaktarget.sync as sync_module
from breaktarget import BreakTarget, PoisonError, PoisonLock, deploy


def test_clean_exit_does_not_poison() -> None:
    lock = PoisonLock()
    with lock:
        assert lock.locked()
    assert not lock.locked()
    assert not lock.is_poisoned


def test_escape_through_lock_poisons_it() -> None:
    lock = PoisonLock()
    state = {"a": 0, "b": 0}

    def body(target: BreakTarget[str]) -> str:
        with lock:
            state["a"] = 1
            target.break_with("early")
            state["b"] = 1
        return "late"

    assert deploy(body) == "early"
    assert not lock.locked()
    assert lock.is_poisoned
    assert lock.poisoned_by is not None
    assert lock.poisoned_by.startswith("escape to target #")
    assert state == {"a": 1, "b": 0}


def test_poisoned_lock_refuses_acquisition() -> None:
    lock = PoisonLock()
    with pytest.raises(ZeroDivisionError):
        with lock:
            1 / 0

    with pytest.raises(PoisonError) as excinfo:
        with lock:
            pass
    assert excinfo.value.lock is lock
    assert excinfo.value.cause == "ZeroDivisionError"
    assert not lock.locked()


def test_clear_poison_restores_lock() -> None:
    lock = PoisonLock()
    deploy(lambda t: _hold_and_escape(lock, t))
    assert lock.is_poisoned

    lock.clear_poison()
    with lock:
        pass
    assert not lock.is_poisoned
    assert lock.poisoned_by is None


def test_ignore_poison() -> None:
    lock = PoisonLock()
    deploy(lambda t: _hold_and_escape(lock, t))
    assert lock.acquire(ignore_poison=True)
    lock.release()


def test_wraps_existing_lock() -> None:
    inner = threading.RLock()
    lock = PoisonLock(inner)
    with lock:
        with lock:
            pass
    assert "ok" in repr(lock)


def _hold_and_escape(lock: PoisonLock, target: BreakTarget[None]) -> None:
    with lock:
        target.break_with(None)


def test_docstring_example_runs() -> None:
    failures, attempted = doctest.testmod(sync_module)
    assert attempted > 0
    assert failures == 0
