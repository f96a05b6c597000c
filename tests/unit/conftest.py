"""Shared fixtures for the unit tests."""

from pathlib import Path

import pytest

from hooks_common.config import load_config

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def config_path():
    """Path to the sample configuration used across tests."""
    return FIXTURES_DIR / "config.toml"


@pytest.fixture
def relay_config(config_path):
    """Loaded sample configuration."""
    return load_config(config_path)
