"""
Runtime settings for breaktarget.

Settings are read from the environment once and cached:

    BREAKTARGET_DEBUG   ``1``/``true``/``yes`` enables debug tracing of every
                        deploy, escape and re-propagation.
    BREAKTARGET_UNWIND  ``unwind`` (default) or ``abort``. Under ``abort``,
                        ``break_with`` terminates the process instead of
                        unwinding, matching hosts that run with unwinding
                        disabled.

Example:
    >>> from breaktarget.config import override_settings
    >>> with override_settings(debug=True):
    ...     ...
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Literal

UnwindPolicy = Literal["unwind", "abort"]

DEBUG_ENV = "BREAKTARGET_DEBUG"
UNWIND_ENV = "BREAKTARGET_UNWIND"

_TRUTHY = ("1", "true", "yes")
_POLICIES: tuple[UnwindPolicy, ...] = ("unwind", "abort")


@dataclass(frozen=True, slots=True)
class Settings:
    """
    Immutable snapshot of library settings.

    Attributes:
        debug: Emit DEBUG log records for deploy/escape/consume events.
        unwind_policy: How ``break_with`` transfers control.
    """

    debug: bool = False
    unwind_policy: UnwindPolicy = "unwind"

    def __post_init__(self) -> None:
        if self.unwind_policy not in _POLICIES:
            raise ValueError(
                f"unwind_policy must be one of {_POLICIES}, got {self.unwind_policy!r}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        debug = env.get(DEBUG_ENV, "").lower() in _TRUTHY
        policy = env.get(UNWIND_ENV, "unwind").strip().lower() or "unwind"
        return cls(debug=debug, unwind_policy=policy)  # type: ignore[arg-type]


_lock = threading.Lock()
_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the cached settings, reading the environment on first use."""
    global _settings
    current = _settings
    if current is None:
        with _lock:
            if _settings is None:
                _settings = Settings.from_env()
            current = _settings
    return current


def reload_settings() -> Settings:
    """Discard cached settings and read the environment again."""
    global _settings
    with _lock:
        _settings = Settings.from_env()
        return _settings


@contextmanager
def override_settings(**changes: Any) -> Iterator[Settings]:
    """Temporarily replace fields of the active settings."""
    global _settings
    previous = get_settings()
    updated = replace(previous, **changes)
    with _lock:
        _settings = updated
    try:
        yield updated
    finally:
        with _lock:
            _settings = previous


__all__ = [
    "DEBUG_ENV",
    "UNWIND_ENV",
    "Settings",
    "UnwindPolicy",
    "get_settings",
    "override_settings",
    "reload_settings",
]
