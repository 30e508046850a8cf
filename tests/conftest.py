"""Pytest configuration for test isolation.

Settings and the log level are read from ``STATEMENT_IMPORT_*`` environment
variables, and the CLI also loads a ``.env`` from the working directory. A
developer's shell or a stray ``.env`` would otherwise leak into assertions
about defaults, so every test runs with those variables cleared and with the
working directory set to its own temporary directory.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("STATEMENT_IMPORT_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
