"""Unit tests for infrastructure.configuration.settings module."""

import pytest

from infrastructure.configuration import LexiconSettings, Settings, settings

pytestmark = pytest.mark.unit


class TestSettings:
    def test_singleton_has_lexicon_section(self):
        """The settings singleton exposes the lexicon section."""
        assert isinstance(settings.lexicon, LexiconSettings)

    def test_lexicon_section_is_instantiated_automatically(self, monkeypatch, tmp_path):
        """Settings builds the lexicon section from the environment."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LEXICON_TABLE_NAME", "Strings")

        assert Settings().lexicon.table_name == "Strings"

    def test_explicit_lexicon_section(self, tmp_path):
        """An explicit lexicon section is used as given."""
        lexicon = LexiconSettings(storage_dir=tmp_path)
        assert Settings(lexicon=lexicon).lexicon.storage_dir == tmp_path

    def test_is_production_without_prefix(self, monkeypatch, tmp_path):
        """An empty PREFIX means production."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("PREFIX", raising=False)
        assert Settings().is_production is True

    def test_is_not_production_with_prefix(self, monkeypatch, tmp_path):
        """A PREFIX marks a non-production deployment."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("PREFIX", "dev-")
        assert Settings().is_production is False

    def test_log_level_from_environment(self, monkeypatch, tmp_path):
        """LOG_LEVEL is read from the environment."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert Settings().LOG_LEVEL == "DEBUG"
