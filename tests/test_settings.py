# tests/test_settings.py
"""
Tests for the settings management in tgzpack/settings.py.
"""

import json

import pytest

from tgzpack import config
from tgzpack import settings as app_settings


@pytest.fixture(autouse=True)
def restore_settings(mocker):
    """Keeps in-memory settings changes from leaking between tests."""
    mocker.patch.dict(app_settings.settings, app_settings._get_default_settings())


class TestSettings:
    """Test suite for settings management."""

    def test_defaults(self):
        defaults = app_settings._get_default_settings()
        assert defaults["install_script_name"] == "INSTALL.sh"
        assert defaults["compression"] == "gzip"

    def test_save_setting_compression(self, fake_fs):
        app_settings.save_setting("compression", "none")
        with open(config.SETTINGS_FILE) as f:
            data = json.load(f)
        assert data["compression"] == "none"
        assert app_settings.settings["compression"] == "none"

    def test_save_setting_invalid_compression(self, fake_fs, capsys):
        app_settings.save_setting("compression", "xz")
        captured = capsys.readouterr()
        assert "Invalid compression" in captured.out
        assert not config.SETTINGS_FILE.exists()

    def test_save_setting_invalid_source_archive_name(self, fake_fs, capsys):
        app_settings.save_setting("source_archive_name", "../source.tar")
        captured = capsys.readouterr()
        assert "Invalid archive name" in captured.out
        assert app_settings.settings["source_archive_name"] == "source.tgz"
        assert not config.SETTINGS_FILE.exists()

    def test_save_setting_log_level_is_uppercased(self, fake_fs):
        app_settings.save_setting("log_level", "debug")
        assert app_settings.settings["log_level"] == "DEBUG"

    def test_save_setting_unknown_key(self, capsys):
        app_settings.save_setting("non_existent_key", "some_value")
        captured = capsys.readouterr()
        assert "Unknown setting" in captured.out

    def test_load_merges_user_file_over_defaults(self, fake_fs):
        fake_fs.create_file(
            config.SETTINGS_FILE, contents=json.dumps({"install_script_name": "setup.sh"})
        )
        loaded = app_settings._load_settings()
        assert loaded["install_script_name"] == "setup.sh"
        assert loaded["compression"] == "gzip"

    def test_corrupt_file_falls_back_to_defaults(self, fake_fs):
        fake_fs.create_file(config.SETTINGS_FILE, contents="{not json")
        assert app_settings._load_settings() == app_settings._get_default_settings()
