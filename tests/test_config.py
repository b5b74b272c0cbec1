"""Tests for stored preferences."""

import json

import pytest

from privacyprep.config import (
    CONFIG_DIR_ENV, Preferences, clear_preferences, config_dir, default_prefs_path,
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path / 'cfg'))
    return tmp_path / 'cfg'


class TestLocation:
    def test_env_override(self, isolated_config):
        assert config_dir() == isolated_config
        assert default_prefs_path() == isolated_config / 'prefs.json'

    def test_xdg_namespace(self, tmp_path, monkeypatch):
        monkeypatch.delenv(CONFIG_DIR_ENV)
        monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path / 'xdg'))
        assert config_dir() == tmp_path / 'xdg' / 'privacy-prep'


class TestPreferences:
    def test_defaults_when_missing(self):
        prefs = Preferences.load()
        assert prefs == Preferences()
        assert prefs.quality == 92
        assert prefs.output_format == 'same'

    def test_save_requires_remember(self):
        assert Preferences(quality=80).save() is None
        assert not default_prefs_path().exists()

    def test_save_and_load(self):
        prefs = Preferences(quality=80, output_format='png', include_report=True,
                            remember=True, strip_map={'primary:Make': False})
        path = prefs.save()
        assert path == default_prefs_path()
        assert Preferences.load() == prefs

    def test_from_json_ignores_unknown_keys(self, tmp_path):
        path = tmp_path / 'p.json'
        path.write_text(json.dumps({'quality': 75, 'theme': 'dark'}))
        prefs = Preferences.from_json(path)
        assert prefs.quality == 75
        assert prefs.strip_map == {}

    @pytest.mark.parametrize('content', ['not json', '[1, 2]', '{"quality": "high"}'])
    def test_malformed_file_falls_back(self, tmp_path, content):
        path = tmp_path / 'p.json'
        path.write_text(content)
        assert Preferences.load(path) == Preferences()

    def test_clear(self):
        Preferences(remember=True).save()
        assert clear_preferences()
        assert not clear_preferences()
