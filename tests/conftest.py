"""Shared pytest fixtures for kclcat tests."""

import json
from pathlib import Path

import pytest

from kclcat.config import Configuration


@pytest.fixture
def config() -> Configuration:
    """Return a valid configuration for a fake repository."""
    return Configuration(token="ghp_test", repo="acme/parts")


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Return an empty data directory inside tmp_path."""
    return tmp_path / ".kclcat"


@pytest.fixture
def configured_data_dir(data_dir: Path) -> Path:
    """Return a data directory containing a saved configuration."""
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "config.json").write_text(json.dumps({"token": "ghp_test", "repo": "acme/parts"}))
    return data_dir

