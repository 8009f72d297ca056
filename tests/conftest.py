"""
Pytest configuration and shared fixtures for gup tests.
"""

import logging
from pathlib import Path

import pytest

# Import test fixtures to make them available to all tests
# ruff: noqa: F401
from tests.fixtures.archives import (
    go_archive_bytes,
    go_archive,
    extracted_tree,
)

from gup.config.parser import UpdaterConfig


@pytest.fixture
def test_config() -> UpdaterConfig:
    """Config pointing at test-only endpoints."""
    return UpdaterConfig(
        latest_url="https://example.com/VERSION",
        download_url="https://example.com/dl/",
    )


@pytest.fixture
def scratch_root(tmp_path: Path, monkeypatch) -> Path:
    """Redirect the system temp directory so scratch dirs land in tmp_path."""
    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr("tempfile.tempdir", str(root))
    return root


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo CLI logging configuration between tests."""
    yield
    logging.getLogger().handlers.clear()
