"""Tests for the i18n translation lookup."""

import pytest
import yaml

from legal_profile.core.i18n import (
    SUPPORTED_LOCALES,
    _translations,
    load_translations,
    normalize_locale,
    t,
)


@pytest.fixture(autouse=True)
def reset_i18n_state():
    """Reset module-level state before each test."""
    _translations.clear()
    SUPPORTED_LOCALES.clear()
    yield
    _translations.clear()
    SUPPORTED_LOCALES.clear()


@pytest.fixture
def locales_dir(tmp_path):
    """Create a temp locales directory with test translations."""
    en_data = {
        "validation": {
            "user": {"terms": "Please accept the Terms and Conditions"},
            "with_vars": "Hello, {name}!",
        },
        "censor_rule": {"replacement": "REDACTED"},
    }
    es_data = {
        "validation": {"user": {"terms": "Por favor acepte los Términos y Condiciones"}},
    }
    (tmp_path / "en.yaml").write_text(yaml.dump(en_data), encoding="utf-8")
    (tmp_path / "es.yaml").write_text(
        yaml.dump(es_data, allow_unicode=True), encoding="utf-8"
    )
    return tmp_path


class TestLoadTranslations:
    def test_loads_all_locales(self, locales_dir):
        load_translations(locales_dir)
        assert SUPPORTED_LOCALES == {"en", "es"}

    def test_invalid_yaml_is_skipped(self, locales_dir):
        (locales_dir / "fr.yaml").write_text("key: [unclosed", encoding="utf-8")
        load_translations(locales_dir)
        assert "fr" not in SUPPORTED_LOCALES
        assert "en" in SUPPORTED_LOCALES

    def test_project_locales(self):
        load_translations()
        assert {"en", "es"} <= SUPPORTED_LOCALES


class TestTranslate:
    def test_requested_locale(self, locales_dir):
        load_translations(locales_dir)
        assert t("validation.user.terms", "es") == "Por favor acepte los Términos y Condiciones"

    def test_falls_back_to_english(self, locales_dir):
        load_translations(locales_dir)
        assert t("censor_rule.replacement", "es") == "REDACTED"

    def test_missing_key_returns_key(self, locales_dir):
        load_translations(locales_dir)
        assert t("no.such.key", "en") == "no.such.key"

    def test_non_leaf_key_returns_key(self, locales_dir):
        load_translations(locales_dir)
        assert t("validation.user", "en") == "validation.user"

    def test_interpolation(self, locales_dir):
        load_translations(locales_dir)
        assert t("validation.with_vars", "en", name="Rob") == "Hello, Rob!"

    def test_missing_interpolation_variable_keeps_template(self, locales_dir):
        load_translations(locales_dir)
        assert t("validation.with_vars", "en", other="x") == "Hello, {name}!"

    def test_loads_project_locales_lazily(self):
        assert t("censor_rule.replacement", "en") == "REDACTED"
        assert t("censor_rule.comment", "en") == "Updated automatically after_save"


class TestNormalizeLocale:
    @pytest.mark.parametrize(
        "raw,expected",
        [("es-NI", "es"), ("es_NI", "es"), ("EN", "en"), (None, "en"), ("", "en"), ("xx", "en")],
    )
    def test_normalize(self, locales_dir, raw, expected):
        load_translations(locales_dir)
        assert normalize_locale(raw) == expected
