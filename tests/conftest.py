"""Shared fixtures for the pathkit test suite."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

from pathkit.config import configure
from pathkit.path import SystemPath

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX semantics")
linux_only = pytest.mark.skipif(not sys.platform.startswith("linux"), reason="ELF libraries")


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Reset installed configuration and library overrides around every test."""
    monkeypatch.delenv("PATHKIT_LIB_SEARCH_PATH", raising=False)
    configure(None)
    yield
    configure(None)


def system_path(path: Path) -> SystemPath:
    """Return a SystemPath for a pathlib path created by a test."""
    return SystemPath(str(path))
