"""Convenience wrappers around ``deploy``."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from breaktarget.result import Err, Ok, Result
from breaktarget.target import BreakTarget, deploy, deploy_async

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])


def breakable(func: F) -> F:
    """Deploy a fresh target on every call of ``func``.

    The target is passed as the first positional argument; the remaining
    arguments are forwarded. ``async def`` functions are deployed with
    ``deploy_async``.

    Example::

        @breakable
        def first_even(target, numbers):
            for n in numbers:
                if n % 2 == 0:
                    target.break_with(n)
            return None

        assert first_even([1, 3, 4, 5]) == 4
    """

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            return await deploy_async(lambda target: func(target, *args, **kwargs))

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return deploy(lambda target: func(target, *args, **kwargs))

    return wrapper  # type: ignore[return-value]


def try_deploy(body: Callable[[BreakTarget[T]], T]) -> Result[T]:
    """Deploy ``body`` and capture the outcome as a ``Result``.

    Returns ``Ok`` for a normal return or an escape to this target, and ``Err``
    for any ``Exception`` raised by ``body``. Escapes aimed at enclosing
    targets are not exceptions in this sense and keep propagating, as do
    other ``BaseException`` subclasses such as ``KeyboardInterrupt``.
    """

    returned = False

    def run(target: BreakTarget[T]) -> T:
        nonlocal returned
        value = body(target)
        returned = True
        return value

    try:
        value = deploy(run)
    except Exception as exc:
        return Err(exc)
    return Ok(value, escaped=not returned)


async def try_deploy_async(body: Callable[[BreakTarget[T]], Awaitable[T]]) -> Result[T]:
    """Coroutine form of ``try_deploy``."""

    returned = False

    async def run(target: BreakTarget[T]) -> T:
        nonlocal returned
        value = await body(target)
        returned = True
        return value

    try:
        value = await deploy_async(run)
    except Exception as exc:
        return Err(exc)
    return Ok(value, escaped=not returned)


__all__ = ["breakable", "try_deploy", "try_deploy_async"]
