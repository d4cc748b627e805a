"""Shared fixtures for breaktarget tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from breaktarget.config import Settings, override_settings


@pytest.fixture(autouse=True)
def default_settings() -> Iterator[Settings]:
    """Isolate tests from BREAKTARGET_* variables in the developer's environment."""
    with override_settings(debug=False, unwind_policy="unwind") as settings:
        yield settings


@pytest.fixture
def debug_settings() -> Iterator[Settings]:
    with override_settings(debug=True) as settings:
        yield settings
