"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from setup_my_mac.core.config.loader import ConfigBundle
from setup_my_mac.core.models.config import Config
from tests.helpers import RecordingProgress, make_config


@pytest.fixture
def minimal_config() -> Config:
    """Config with only the required system identity."""
    return make_config()


@pytest.fixture
def bundle(tmp_path: Path, minimal_config: Config) -> ConfigBundle:
    """A loaded-config bundle rooted in a temp directory."""
    return ConfigBundle(config=minimal_config, path=tmp_path / "config.toml", root=tmp_path)


@pytest.fixture
def progress() -> RecordingProgress:
    return RecordingProgress()


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``~`` at a temporary directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir
