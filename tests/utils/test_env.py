"""Tests for environment helper utilities."""

import importlib
import pytest


class TestIsDevMode:
    """Tests for is_dev_mode function."""

    def test_returns_false_when_no_env_vars(self, monkeypatch):
        """Should return False when no environment variables are set."""
        monkeypatch.delenv("SDD_ENV", raising=False)
        monkeypatch.delenv("SDD_DEV_MODE", raising=False)

        # Reload module to clear lru_cache
        import utils.env
        importlib.reload(utils.env)

        assert utils.env.is_dev_mode() is False

    @pytest.mark.parametrize("value", ["dev", "development", "1", "true", "yes"])
    def test_returns_true_for_dev_values_rps_env(self, monkeypatch, value):
        """Should return True for various dev values in SDD_ENV."""
        monkeypatch.setenv("SDD_ENV", value)
        monkeypatch.delenv("SDD_DEV_MODE", raising=False)

        import utils.env
        importlib.reload(utils.env)

        assert utils.env.is_dev_mode() is True

    @pytest.mark.parametrize("value", ["dev", "development", "1", "true", "yes"])
    def test_returns_true_for_dev_values_rps_dev_mode(self, monkeypatch, value):
        """Should return True for various dev values in SDD_DEV_MODE."""
        monkeypatch.delenv("SDD_ENV", raising=False)
        monkeypatch.setenv("SDD_DEV_MODE", value)

        import utils.env
        importlib.reload(utils.env)

        assert utils.env.is_dev_mode() is True

    @pytest.mark.parametrize("value", ["DEV", "Development", "TRUE", "Yes"])
    def test_case_insensitive(self, monkeypatch, value):
        """Should be case-insensitive."""
        monkeypatch.setenv("SDD_ENV", value)
        monkeypatch.delenv("SDD_DEV_MODE", raising=False)

        import utils.env
        importlib.reload(utils.env)

        assert utils.env.is_dev_mode() is True

    @pytest.mark.parametrize("value", ["prod", "production", "0", "false", "no", "staging"])
    def test_returns_false_for_non_dev_values(self, monkeypatch, value):
        """Should return False for non-dev values."""
        monkeypatch.setenv("SDD_ENV", value)
        monkeypatch.delenv("SDD_DEV_MODE", raising=False)

        import utils.env
        importlib.reload(utils.env)

        assert utils.env.is_dev_mode() is False

    def test_rps_env_takes_precedence(self, monkeypatch):
        """SDD_ENV should be checked first."""
        monkeypatch.setenv("SDD_ENV", "dev")
        monkeypatch.setenv("SDD_DEV_MODE", "false")  # Would return False if checked

        import utils.env
        importlib.reload(utils.env)

        # SDD_ENV is "dev" so should return True
        assert utils.env.is_dev_mode() is True

    def test_handles_whitespace(self, monkeypatch):
        """Should handle values with whitespace."""
        monkeypatch.setenv("SDD_ENV", "  dev  ")
        monkeypatch.delenv("SDD_DEV_MODE", raising=False)

        import utils.env
        importlib.reload(utils.env)

        assert utils.env.is_dev_mode() is True

    def test_empty_string_returns_false(self, monkeypatch):
        """Should return False for empty string."""
        monkeypatch.setenv("SDD_ENV", "")
        monkeypatch.delenv("SDD_DEV_MODE", raising=False)

        import utils.env
        importlib.reload(utils.env)

        assert utils.env.is_dev_mode() is False


class TestDataDir:
    """Tests for get_data_dir."""

    def test_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SDD_DATA_DIR", str(tmp_path))

        from utils.env import get_data_dir

        assert get_data_dir() == tmp_path

    def test_default_under_home(self, monkeypatch):
        monkeypatch.delenv("SDD_DATA_DIR", raising=False)

        from pathlib import Path
        from utils.env import get_data_dir

        assert get_data_dir() == Path.home() / ".stable-diffusion-desktop"


class TestHttpSettings:
    """Tests for API URL and timeout helpers."""

    def test_api_url_default(self, monkeypatch):
        monkeypatch.delenv("SDD_STABILITY_API_URL", raising=False)

        from utils.env import get_api_url

        assert get_api_url() == "https://api.stability.ai/v2beta/stable-image/generate/sd3"

    @pytest.mark.parametrize("value,expected", [("45", 45.0), ("abc", 120.0), ("-3", 120.0), ("", 120.0)])
    def test_http_timeout(self, monkeypatch, value, expected):
        monkeypatch.setenv("SDD_HTTP_TIMEOUT", value)

        from utils.env import get_http_timeout

        assert get_http_timeout() == expected
