"""
Tests for the rzup home layout.
"""

from pathlib import Path

from rzup.core.directory import (
    HOME_ENV_VAR,
    get_config_path,
    get_lock_path,
    get_rzup_home,
    get_toolchains_dir,
)


class TestGetRzupHome:
    """Test home directory resolution order."""

    def test_default_is_under_user_home(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_rzup_home() == tmp_path / ".rzup"

    def test_environment_variable(self, tmp_path, monkeypatch):
        monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path / "data"))
        assert get_rzup_home() == tmp_path / "data"

    def test_empty_environment_variable_is_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv(HOME_ENV_VAR, "")
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_rzup_home() == tmp_path / ".rzup"

    def test_override_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path / "data"))
        assert get_rzup_home(tmp_path / "explicit") == tmp_path / "explicit"


class TestLayout:
    """Test paths inside the home."""

    def test_paths(self, rzup_home):
        assert get_toolchains_dir(rzup_home) == rzup_home / "toolchains"
        assert get_lock_path(rzup_home) == rzup_home / "rzup.lock"
        assert get_config_path(rzup_home) == rzup_home / "config.yaml"
