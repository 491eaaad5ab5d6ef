"""
Tests for settings loading.
"""

from unittest.mock import patch

from legal_profile.core.config import Settings, get_settings, is_production, is_testing


class TestSettings:
    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.theme_name == "nicaragua"
        assert settings.default_locale == "es"
        assert settings.database_url.startswith("sqlite+aiosqlite://")
        assert settings.environment == "development"

    def test_environment_overrides(self):
        with patch.dict("os.environ", {"THEME_NAME": "alaveteli-ni", "DEBUG": "true"}):
            settings = Settings(_env_file=None)

        assert settings.theme_name == "alaveteli-ni"
        assert settings.debug is True

    def test_extra_env_vars_ignored(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("THEME_NAME=from-file\nUNRELATED_SETTING=1\n")

        with patch.dict("os.environ", {}, clear=True):
            settings = Settings(_env_file=env_file)

        assert settings.theme_name == "from-file"
        assert not hasattr(settings, "unrelated_setting")


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_test_environment(self):
        # conftest sets ENVIRONMENT=test
        assert is_testing() is True
        assert is_production() is False
