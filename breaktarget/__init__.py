"""
breaktarget - scoped escape-only non-local exits for Python.

``BreakTarget.deploy`` runs a function with a target handle. Any code below it
on the stack can call ``target.break_with(value)`` to abandon the remaining
frames and make ``deploy`` return ``value``. Escapes are matched by target
identity, so nested deployments never steal each other's escapes, and ordinary
exceptions pass through untouched.

Example:
    >>> from breaktarget import BreakTarget
    >>>
    >>> def check(target, n):
    ...     if n > 10:
    ...         target.break_with("too big")
    ...     return "ok"
    >>>
    >>> BreakTarget.deploy(lambda t: check(t, 3))
    'ok'
    >>> BreakTarget.deploy(lambda t: check(t, 30))
    'too big'
"""

from breaktarget._signal import active_targets
from breaktarget.config import Settings, get_settings, override_settings, reload_settings
from breaktarget.decorators import breakable, try_deploy, try_deploy_async
from breaktarget.errors import (
    BreakTargetError,
    CrossThreadEscapeError,
    PayloadSlotError,
    PoisonError,
    StaleTargetError,
)
from breaktarget.result import Err, Ok, Result
from breaktarget.sync import PoisonLock
from breaktarget.target import BreakTarget, deploy, deploy_async

__version__ = "0.1.0"

__all__ = [
    "BreakTarget",
    "BreakTargetError",
    "CrossThreadEscapeError",
    "Err",
    "Ok",
    "PayloadSlotError",
    "PoisonError",
    "PoisonLock",
    "Result",
    "Settings",
    "StaleTargetError",
    "active_targets",
    "breakable",
    "deploy",
    "deploy_async",
    "get_settings",
    "override_settings",
    "reload_settings",
    "try_deploy",
    "try_deploy_async",
]
