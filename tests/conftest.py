"""
Pytest configuration and shared fixtures for rzup tests.
"""

from pathlib import Path

import pytest

# Import test fixtures to make them available to all tests
# ruff: noqa: F401
from tests.fixtures.archives import cpp_archive, rust_archive
from tests.fixtures.releases import API_BASE

from rzup.config.parser import RzupConfig
from rzup.core.directory import HOME_ENV_VAR
from rzup.core.platform import clear_platform_cache


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep the real rzup home and GitHub token out of every test."""
    monkeypatch.delenv(HOME_ENV_VAR, raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def rzup_home(tmp_path) -> Path:
    """Empty rzup home directory."""
    home = tmp_path / ".rzup"
    home.mkdir()
    return home


@pytest.fixture
def rzup_config(rzup_home) -> RzupConfig:
    """Configuration pointing at the test home and a fake API host."""
    return RzupConfig(home=rzup_home, api_base_url=API_BASE, lock_timeout=5)
