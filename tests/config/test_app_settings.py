"""Tests for the settings file, API key store and recent projects."""

import json

import pytest

from config.app_settings import (
    SETTINGS_FILE_NAME,
    ApiKeyStore,
    AppSettings,
    RecentProjects,
    default_settings_path,
)


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "data" / SETTINGS_FILE_NAME


class TestAppSettings:
    """Tests for AppSettings persistence."""

    def test_missing_file_yields_defaults(self, settings_path):
        settings = AppSettings(settings_path)

        assert settings.get("apiKey") is None
        assert not settings_path.exists()

    def test_set_persists_json(self, settings_path):
        settings = AppSettings(settings_path)

        settings.set("apiKey", "sk-live")

        assert json.loads(settings_path.read_text()) == {"apiKey": "sk-live"}
        assert AppSettings(settings_path).get("apiKey") == "sk-live"

    def test_corrupt_file_falls_back_to_defaults(self, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text("{not json")

        settings = AppSettings(settings_path)

        assert settings.get("apiKey") is None

    def test_non_object_json_is_ignored(self, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text("[1, 2, 3]")

        assert AppSettings(settings_path).get("recentProjects") is None

    def test_save_failure_propagates(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        settings = AppSettings(blocker / SETTINGS_FILE_NAME)

        with pytest.raises(OSError):
            settings.set("apiKey", "sk")

    def test_default_path_uses_data_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SDD_DATA_DIR", str(tmp_path))

        assert default_settings_path() == tmp_path / SETTINGS_FILE_NAME


class TestApiKeyStore:
    """Tests for the credential collaborator."""

    def test_round_trip(self, settings_path):
        keys = ApiKeyStore(AppSettings(settings_path))

        keys.set("sk-abc")

        assert keys.get() == "sk-abc"
        assert keys.has() is True

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_key_is_not_configured(self, settings_path, value):
        keys = ApiKeyStore(AppSettings(settings_path))

        keys.set(value)

        assert keys.has() is False

    def test_unset_key(self, settings_path):
        keys = ApiKeyStore(AppSettings(settings_path))

        assert keys.get() is None
        assert keys.has() is False


class TestRecentProjects:
    """Tests for the recent projects list."""

    def test_add_moves_entry_to_front(self, settings_path, tmp_path):
        recent = RecentProjects(AppSettings(settings_path))
        a, b = tmp_path / "a", tmp_path / "b"

        recent.add(a)
        recent.add(b)
        recent.add(a)

        assert recent.paths() == [a.absolute(), b.absolute()]

    def test_add_caps_length(self, settings_path, tmp_path):
        recent = RecentProjects(AppSettings(settings_path), max_entries=3)

        for i in range(5):
            recent.add(tmp_path / f"p{i}")

        assert recent.paths() == [(tmp_path / f"p{i}").absolute() for i in (4, 3, 2)]

    def test_remove(self, settings_path, tmp_path):
        recent = RecentProjects(AppSettings(settings_path))
        recent.add(tmp_path / "a")
        recent.add(tmp_path / "b")

        recent.remove(tmp_path / "a")

        assert recent.paths() == [(tmp_path / "b").absolute()]

    def test_list_projects_skips_invalid_entries(self, settings_path, tmp_path, store):
        recent = RecentProjects(AppSettings(settings_path))
        valid = tmp_path / "Valid"
        store.create(valid)
        recent.add(tmp_path / "Gone")
        recent.add(valid)

        summaries = recent.list_projects(store)

        assert [s.name for s in summaries] == ["Valid"]

    def test_list_projects_does_not_open_anything(self, settings_path, tmp_path, store):
        recent = RecentProjects(AppSettings(settings_path))
        store.create(tmp_path / "Valid")
        recent.add(tmp_path / "Valid")

        recent.list_projects(store)

        assert store.current() is None
