# tests/conftest.py

"""Shared pytest fixtures for the price_compare test suite."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_logs_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Point per-run log files at a temporary ``logs/`` directory."""
    logs_dir = tmp_path / "logs"
    with patch.object(Settings, "LOGS_DIR", logs_dir):
        yield logs_dir


@pytest.fixture(autouse=True)
def no_render_waits() -> Generator[None, None, None]:
    """Zero the fixed browser waits so page tests run instantly."""
    with patch.object(Settings, "RENDER_SETTLE_MS", 0), patch.object(
        Settings, "LAZY_LOAD_WAIT_MS", 0
    ):
        yield
