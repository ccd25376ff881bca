"""Tests for modules.lexicon.resources module."""

import pytest

from modules.lexicon import MappingResourceCatalog, YAMLResourceCatalog

pytestmark = pytest.mark.unit


@pytest.fixture
def resources_dir(tmp_path):
    """Directory with YAML resource files for en and se."""
    directory = tmp_path / "resources"
    directory.mkdir()
    (directory / "menu.en-US.yml").write_text(
        "menu:\n  open: Open\n  close: Close\ntitle: Dictionary\n", encoding="utf-8"
    )
    (directory / "errors.en.yml").write_text(
        "errors:\n  missing: Not found\n", encoding="utf-8"
    )
    (directory / "se.yml").write_text("title: Ordbok\n", encoding="utf-8")
    return directory


class TestMappingResourceCatalog:
    def test_lookup_hit_and_miss(self):
        """lookup() returns the value or the default."""
        catalog = MappingResourceCatalog({"en": {"a": "1"}})
        assert catalog.lookup("a", "en", "miss") == "1"
        assert catalog.lookup("b", "en", "miss") == "miss"
        assert catalog.lookup("a", "se", "miss") == "miss"

    def test_languages(self):
        """languages() lists every language with resources."""
        assert MappingResourceCatalog({"en": {}, "se": {}}).languages() == ["en", "se"]

    def test_empty_catalog(self):
        """An empty catalog returns the default."""
        assert MappingResourceCatalog().lookup("a", "en", "miss") == "miss"


class TestYAMLResourceCatalog:
    def test_missing_directory_raises(self, tmp_path):
        """A missing resources directory raises ValueError."""
        with pytest.raises(ValueError, match="Resources directory not found"):
            YAMLResourceCatalog(tmp_path / "missing")

    def test_loads_and_flattens_all_files_for_language(self, resources_dir):
        """All files of a language are merged into dotted keys."""
        catalog = YAMLResourceCatalog(resources_dir)
        assert catalog.load("en") == {
            "menu.open": "Open",
            "menu.close": "Close",
            "title": "Dictionary",
            "errors.missing": "Not found",
        }

    def test_lookup(self, resources_dir):
        """lookup() returns the resource or the default."""
        catalog = YAMLResourceCatalog(resources_dir)
        assert catalog.lookup("title", "se", "miss") == "Ordbok"
        assert catalog.lookup("menu.open", "se", "miss") == "miss"

    def test_languages(self, resources_dir):
        """languages() lists every language with resources."""
        assert YAMLResourceCatalog(resources_dir).languages() == ["en", "se"]

    def test_results_are_cached(self, resources_dir):
        """Loaded languages are cached until clear_cache()."""
        catalog = YAMLResourceCatalog(resources_dir)
        catalog.load("se")
        (resources_dir / "se.yml").write_text("title: Changed\n", encoding="utf-8")

        assert catalog.lookup("title", "se", "miss") == "Ordbok"

        catalog.clear_cache()
        assert catalog.lookup("title", "se", "miss") == "Changed"

    def test_cache_disabled_reads_every_time(self, resources_dir):
        """With caching off, every lookup reads the files again."""
        catalog = YAMLResourceCatalog(resources_dir, use_cache=False)
        catalog.load("se")
        (resources_dir / "se.yml").write_text("title: Changed\n", encoding="utf-8")

        assert catalog.lookup("title", "se", "miss") == "Changed"
        assert catalog.cache == {}

    def test_invalid_yaml_raises(self, resources_dir):
        """Unparsable YAML raises ValueError."""
        (resources_dir / "broken.fr.yml").write_text("a: [unclosed\n", encoding="utf-8")
        catalog = YAMLResourceCatalog(resources_dir)

        with pytest.raises(ValueError, match="Failed to parse"):
            catalog.load("fr")

    def test_non_mapping_file_is_skipped(self, resources_dir):
        """A YAML file that is not a mapping is skipped."""
        (resources_dir / "list.fr.yml").write_text("- a\n- b\n", encoding="utf-8")
        assert YAMLResourceCatalog(resources_dir).load("fr") == {}

    def test_non_string_values_are_stringified(self, resources_dir):
        """Scalar values become strings and nulls are dropped."""
        (resources_dir / "numbers.fr.yml").write_text("count: 3\nnone:\n", encoding="utf-8")
        assert YAMLResourceCatalog(resources_dir).load("fr") == {"count": "3"}
