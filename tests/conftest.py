"""Pytest fixtures for mittorch tests."""

from pathlib import Path

import pytest

from mittorch.supervisor.config import Config


@pytest.fixture
def config() -> Config:
    """Config with a start and no stop command, tracking octocat/hello@main."""
    return Config(
        account="octocat",
        repository="hello",
        branch="main",
        interval=1,
        start_command="./serve",
    )


@pytest.fixture
def checkout(tmp_path: Path) -> Path:
    """Fake git checkout at tmp_path/.data/hello. Returns the data dir."""
    data_dir = tmp_path / ".data"
    (data_dir / "hello" / ".git").mkdir(parents=True)
    return data_dir
