"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import os

import pytest

_ENV_PREFIX = "PIXELHOOK_"


@pytest.fixture(autouse=True)
def _isolate_pixelhook_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove Pixelhook settings inherited from the host environment."""
    for name in list(os.environ):
        if name.startswith(_ENV_PREFIX):
            monkeypatch.delenv(name)
