"""Root pytest configuration for all tests."""

from __future__ import annotations

import stat
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from mdselclaude.config import reset_config
from mdselclaude.logging import reset_logging

# Configure pytest-asyncio to use auto mode
# This is redundant with pyproject.toml but ensures it's set
pytest_plugins = ("pytest_asyncio",)

_ENV_VARS = ("MDSEL_PATH", "MDSEL_TIMEOUT", "MDSEL_MIN_WORDS", "MDSEL_LOG")


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep the developer's mdsel settings and config files out of tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    reset_config()
    reset_logging()
    yield
    reset_config()
    reset_logging()


@pytest.fixture
def fake_mdsel(tmp_path: Path) -> Callable[[str], str]:
    """Factory writing an executable shell script that stands in for mdsel.

    Returns the absolute path of the script.
    """
    if sys.platform == "win32":
        pytest.skip("fake mdsel scripts need a POSIX shell")

    counter = 0

    def make(body: str) -> str:
        nonlocal counter
        counter += 1
        script = tmp_path / "bin" / f"mdsel-{counter}"
        script.parent.mkdir(exist_ok=True)
        script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return make
