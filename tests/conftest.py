"""Pytest hooks and fixtures."""

import os

import pytest

from designmcp.config.access import clear_config_cache
from designmcp.config.schema import Config


def pytest_collection_modifyitems(config, items):
    """Skip timer-driven tests when DESIGNMCP_SKIP_SLOW is set."""
    if os.environ.get("DESIGNMCP_SKIP_SLOW") != "true":
        return
    skip = pytest.mark.skip(reason="Timer-driven test (DESIGNMCP_SKIP_SLOW=true)")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path, monkeypatch):
    """Keep config files and log sinks out of the real home directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    clear_config_cache()
    yield home
    clear_config_cache()


@pytest.fixture
def config() -> Config:
    return Config()
