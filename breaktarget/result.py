"""Minimal ``Result`` sum type returned by ``try_deploy``."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, cast

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)
U = TypeVar("U")


class Result(Generic[T_co]):
    """Either a value (``Ok``) or the exception that prevented one (``Err``)."""

    __slots__ = ()

    def is_ok(self) -> bool:
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        return isinstance(self, Err)

    def ok(self) -> T_co | None:
        """Return the contained value, or ``None`` if this is an error."""

        if isinstance(self, Ok):
            return self.value
        return None

    def err(self) -> Exception | None:
        """Return the contained error, or ``None`` if this is a success."""

        if isinstance(self, Err):
            return self.error
        return None

    def unwrap(self) -> T_co:
        """Return the value or raise the stored error."""

        if isinstance(self, Ok):
            return self.value
        raise cast(Err, self).error

    def unwrap_or(self, default: U) -> T_co | U:
        if isinstance(self, Ok):
            return self.value
        return default

    def map(self, f: Callable[[T_co], U]) -> Result[U]:
        """Apply ``f`` to the contained value if this is a success."""

        if isinstance(self, Ok):
            return Ok(f(self.value), escaped=self.escaped)
        return cast(Result[U], self)


@dataclass(frozen=True)
class Ok(Result[T], Generic[T]):
    """Success result.

    ``escaped`` is ``True`` when the value was delivered by ``break_with``
    rather than returned by the body.
    """

    value: T
    escaped: bool = False


@dataclass(frozen=True)
class Err(Result[NoReturn]):
    """Error result."""

    error: Exception


__all__ = ["Err", "Ok", "Result"]
