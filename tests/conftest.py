"""Shared fixtures for softcheck tests."""

from __future__ import annotations

import sys
from contextvars import ContextVar
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from softcheck import FailureCounter, reset_config, set_config
from softcheck import counter as counter_mod


@pytest.fixture(autouse=True)
def plain_config():
    """Default config with color off, restored after each test."""
    reset_config()
    set_config(color="never")
    yield
    reset_config()


@pytest.fixture(autouse=True)
def isolated_registry(monkeypatch):
    """Keep entered counters and the process-wide counter per test."""
    monkeypatch.setattr(counter_mod, "_active", ContextVar("softcheck_active", default=()))
    monkeypatch.setattr(counter_mod, "_default", None)
    monkeypatch.setattr(counter_mod, "_scoped_reported", False)
    monkeypatch.setattr(counter_mod.atexit, "register", lambda fn: fn)


@pytest.fixture()
def counter() -> FailureCounter:
    """A counter that never ends the test process."""
    return FailureCounter(exit_on_failure=False, name="test")


@pytest.fixture(scope="session")
def project_root() -> Path:
    return Path(__file__).resolve().parent.parent
