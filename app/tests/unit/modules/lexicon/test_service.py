"""Tests for modules.lexicon.service and modules.lexicon.factory modules."""

from unittest.mock import MagicMock

import pytest

from modules.lexicon import (
    JsonFilePointerStore,
    LexiconDisabledError,
    LexiconService,
    MappingResourceCatalog,
    NoTranslationServiceError,
    StaticTranslationProvider,
    YAMLResourceCatalog,
    create_lexicon,
)
from tests.factories.lexicon import make_lexicon_settings, make_translation_table

pytestmark = pytest.mark.unit

TIMEOUT = 5


@pytest.fixture
def lexicon_settings(tmp_path):
    return make_lexicon_settings(tmp_path / "lexicon", locale="se-SE")


@pytest.fixture
def provider():
    return StaticTranslationProvider({"en": {"hej": "hello"}, "se": {"hello": "hej"}})


@pytest.fixture
def lexicon(lexicon_settings, provider):
    service = create_lexicon(lexicon_settings, provider=provider)
    yield service
    service.shutdown()


class TestCreateLexicon:
    def test_builds_service_from_settings(self, lexicon, lexicon_settings):
        """create_lexicon wires a service from the given settings."""
        assert isinstance(lexicon, LexiconService)
        assert lexicon.supported_languages == ["se", "en"]
        assert lexicon.locale == "se-SE"
        assert lexicon.language == "se"
        assert lexicon.store.table_name == "Localizable"
        assert lexicon.store.current_root.parent == lexicon_settings.storage_dir

    def test_pointer_file_is_written(self, lexicon, lexicon_settings):
        """The pointer file names the current bundle."""
        pointer = JsonFilePointerStore(lexicon_settings.pointer_path)
        assert pointer.get() == lexicon.store.current_root.name

    def test_translations_survive_restart(self, lexicon_settings, provider):
        """A new service over the same settings sees stored translations."""
        first = create_lexicon(lexicon_settings, provider=provider)
        try:
            first.translate(["hello"], "en", ["se"]).result(timeout=TIMEOUT)
            root = first.store.current_root
        finally:
            first.shutdown()

        second = create_lexicon(lexicon_settings)
        try:
            assert second.store.current_root == root
            assert second.string("hello", "se") == "hej"
        finally:
            second.shutdown()

    def test_disabled_setting(self, tmp_path, provider):
        """LEXICON_DISABLED disables the created service."""
        service = create_lexicon(
            make_lexicon_settings(tmp_path / "lexicon", disabled=True), provider=provider
        )
        try:
            assert service.disabled is True
            with pytest.raises(LexiconDisabledError):
                service.translate(["hello"], "en").result(timeout=0)
        finally:
            service.shutdown()

    def test_resources_dir_setting_uses_yaml_catalog(self, tmp_path):
        """LEXICON_RESOURCES_DIR enables the YAML catalog."""
        resources_dir = tmp_path / "resources"
        resources_dir.mkdir()
        (resources_dir / "app.en.yml").write_text("title: Dictionary\n", encoding="utf-8")
        service = create_lexicon(
            make_lexicon_settings(tmp_path / "lexicon", resources_dir=resources_dir)
        )
        try:
            assert isinstance(service.resolver.resources, YAMLResourceCatalog)
            assert service.string("title", "en") == "Dictionary"
        finally:
            service.shutdown()

    def test_missing_resources_dir_raises(self, tmp_path):
        """A configured but missing resources directory raises ValueError."""
        with pytest.raises(ValueError):
            create_lexicon(
                make_lexicon_settings(
                    tmp_path / "lexicon", resources_dir=tmp_path / "missing"
                )
            )


class TestLexiconService:
    def test_translate_then_lookup(self, lexicon):
        """Translated entries resolve through the service."""
        changed = MagicMock()
        lexicon.changed.subscribe(changed)

        lexicon.translate(["hello"], "en").result(timeout=TIMEOUT)

        changed.assert_called_once_with()
        assert lexicon.string("hello") == "hej"
        assert lexicon.string("hello", "en") == "hello"
        assert lexicon.is_translated("hello", ["se"]) is True
        assert lexicon.is_translated("hello") is False

    def test_without_provider_reports_failure(self, lexicon):
        """Clearing the provider makes translations fail."""
        failed = MagicMock()
        lexicon.failed.subscribe(failed)
        lexicon.provider = None

        future = lexicon.translate(["hello"], "en")

        with pytest.raises(NoTranslationServiceError):
            future.result(timeout=TIMEOUT)
        failed.assert_called_once()

    def test_disabled_toggle(self, lexicon):
        """The disabled flag can be switched at runtime."""
        lexicon.disabled = True
        with pytest.raises(LexiconDisabledError):
            lexicon.write(make_translation_table()).result(timeout=0)

        lexicon.disabled = False
        lexicon.write(make_translation_table()).result(timeout=TIMEOUT)
        assert lexicon.translations().db == make_translation_table().db

    def test_locale_setter_changes_default_language(self, lexicon):
        """Changing the locale changes the default lookup language."""
        lexicon.write(make_translation_table()).result(timeout=TIMEOUT)

        lexicon.locale = "en_GB"

        assert lexicon.language == "en"
        assert lexicon.string("bye") == "goodbye"

    def test_invalid_locale_is_rejected(self, lexicon):
        """An empty locale is rejected and the old one kept."""
        with pytest.raises(ValueError):
            lexicon.locale = ""
        assert lexicon.locale == "se-SE"

    def test_string_for_locale(self, lexicon):
        """string_for_locale() resolves by the locale's language."""
        lexicon.write(make_translation_table()).result(timeout=TIMEOUT)
        assert lexicon.string_for_locale("bye", "se-FI") == "hej då"
        assert lexicon.string_for_locale("nope", "en-US", default="-") == "-"

    def test_remove(self, lexicon):
        """remove() deletes keys from the stored translations."""
        lexicon.write(make_translation_table()).result(timeout=TIMEOUT)

        lexicon.remove(["bye"]).result(timeout=TIMEOUT)

        assert lexicon.translations(["en"]).db == {"en": {"hello": "hello"}}

    def test_resources_take_precedence(self, lexicon_settings):
        """Resources passed to create_lexicon win over stored entries."""
        service = create_lexicon(
            lexicon_settings,
            resources=MappingResourceCatalog({"se": {"hello": "tjena"}}),
        )
        try:
            service.write(make_translation_table()).result(timeout=TIMEOUT)
            assert service.string("hello") == "tjena"
        finally:
            service.shutdown()

    def test_clean_emits_and_falls_back_to_key(self, lexicon):
        """clean() emits cleaned and lookups echo the key afterwards."""
        cleaned = MagicMock()
        lexicon.cleaned.subscribe(cleaned)
        lexicon.write(make_translation_table()).result(timeout=TIMEOUT)

        assert lexicon.clean() is True

        cleaned.assert_called_once_with()
        assert lexicon.string("bye") == "bye"

    def test_purge_stale_counts_removed_bundles(self, lexicon, lexicon_settings):
        """purge_stale() returns the number of removed bundles."""
        leftover = lexicon_settings.storage_dir / "leftover.bundle"
        leftover.mkdir()

        assert lexicon.purge_stale() == 1
        assert not leftover.exists()


class TestWatch:
    def test_delivers_current_value_immediately(self, lexicon):
        """watch() delivers the current value right away."""
        callback = MagicMock()
        lexicon.watch("hello", callback)
        callback.assert_called_once_with("hello")

    def test_delivers_after_every_change(self, lexicon):
        """The watcher receives the new value after a committed write."""
        callback = MagicMock()
        lexicon.watch("hello", callback)

        lexicon.translate(["hello"], "en").result(timeout=TIMEOUT)

        assert callback.call_args_list[-1].args == ("hej",)
        assert callback.call_count == 2

    def test_explicit_language(self, lexicon):
        """An explicit language overrides the current locale."""
        lexicon.write(make_translation_table()).result(timeout=TIMEOUT)
        callback = MagicMock()
        lexicon.watch("bye", callback, language="en")
        callback.assert_called_once_with("goodbye")

    def test_cancelled_watch_stops_delivery(self, lexicon):
        """A cancelled watch receives no further values."""
        callback = MagicMock()
        subscription = lexicon.watch("hello", callback)
        subscription.cancel()

        lexicon.write(make_translation_table()).result(timeout=TIMEOUT)

        callback.assert_called_once_with("hello")
