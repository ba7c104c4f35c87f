"""Pytest configuration and fixtures.

Provides environment isolation and logging configuration. All fixtures here
are autouse unless noted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from typing import Any

import pytest

from resultflow import reset_config

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class Recorder:
    """Callback double that records every ``(payload, extra)`` it receives."""

    calls: list[tuple[Any, Any]] = field(default_factory=list)

    def __call__(self, payload: Any, extra: Any) -> None:
        self.calls.append((payload, extra))

    @property
    def called(self) -> bool:
        return bool(self.calls)


def _explode(*_args: Any) -> Any:
    raise AssertionError("callback should not have been invoked")


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def explode():
    """Callback that must never run."""
    return _explode


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    monkeypatch.setattr(
        "resultflow.config.load_dotenv", lambda *_args, **_kwargs: False
    )


@pytest.fixture(autouse=True)
def isolate_resultflow_env(monkeypatch):
    """Clear RESULTFLOW_* variables and the cached config around each test."""
    for key in list(os.environ.keys()):
        if key.startswith("RESULTFLOW_"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def resultflow_debug_logging():
    """Let caplog observe DEBUG records from the library."""
    logging.getLogger("resultflow").setLevel(logging.DEBUG)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "allow_dotenv: let python-dotenv read a .env file"
    )
