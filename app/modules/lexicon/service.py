"""Lexicon service facade.

Ties the bundle store, the translation coordinator and the lookup resolver
together behind one object holding the current locale.

Usage:
    from modules.lexicon import create_lexicon

    lexicon = create_lexicon(provider=my_provider)
    lexicon.translate(["Hello"], source="en", targets=["sv"]).result()
    lexicon.string("Hello", language="sv")
"""

from concurrent.futures import Future
from typing import Callable, Iterable, List, Optional, Sequence

from infrastructure.events import EventStream, Subscription
from infrastructure.logging import get_module_logger
from modules.lexicon.bundle_store import BundleStore
from modules.lexicon.coordinator import TranslationCoordinator
from modules.lexicon.events import LexiconEvents
from modules.lexicon.languages import language_code
from modules.lexicon.provider import TranslationProvider
from modules.lexicon.resolver import LookupResolver
from modules.lexicon.table import TranslationTable

logger = get_module_logger()


class LexiconService:
    """Localization string store.

    Attributes:
        store: BundleStore persisting the tables.
        coordinator: TranslationCoordinator running mutating requests.
        resolver: LookupResolver serving lookups.
        events: The ``changed``, ``failed`` and ``cleaned`` streams.
    """

    def __init__(
        self,
        store: BundleStore,
        coordinator: TranslationCoordinator,
        resolver: LookupResolver,
        locale: str = "en-US",
    ):
        self.store = store
        self.coordinator = coordinator
        self.resolver = resolver
        self.events: LexiconEvents = store.events
        self._locale = locale
        self._language = language_code(locale)

    @property
    def changed(self) -> EventStream:
        return self.events.changed

    @property
    def failed(self) -> EventStream:
        return self.events.failed

    @property
    def cleaned(self) -> EventStream:
        return self.events.cleaned

    @property
    def supported_languages(self) -> List[str]:
        return list(self.store.languages)

    @property
    def disabled(self) -> bool:
        return self.coordinator.disabled

    @disabled.setter
    def disabled(self, value: bool) -> None:
        self.coordinator.disabled = value
        logger.info("lexicon_disabled_changed", disabled=value)

    @property
    def provider(self) -> Optional[TranslationProvider]:
        return self.coordinator.provider

    @provider.setter
    def provider(self, value: Optional[TranslationProvider]) -> None:
        self.coordinator.provider = value

    @property
    def locale(self) -> str:
        return self._locale

    @locale.setter
    def locale(self, value: str) -> None:
        self._language = language_code(value)
        self._locale = value
        logger.info("lexicon_locale_changed", locale=value, language=self._language)

    @property
    def language(self) -> str:
        """Language code of the current locale."""
        return self._language

    def translate(
        self,
        texts: Iterable[str],
        source: str,
        targets: Optional[Sequence[str]] = None,
    ) -> "Future[None]":
        """Translate ``texts`` and store the results.

        Args:
            texts: Keys to translate.
            source: Source language code.
            targets: Target languages; defaults to every supported language
                except ``source``.

        Returns:
            Future resolving once the merged table is written. It raises
            LexiconDisabledError, NoTranslationServiceError, provider errors,
            LexiconIOError or LexiconSerializationError on failure.
        """
        return self.coordinator.translate(texts, source, targets)

    def write(self, table: TranslationTable) -> "Future[None]":
        """Replace the stored translations with ``table``."""
        return self.coordinator.write(table)

    def remove(
        self, keys: Iterable[str], languages: Optional[Iterable[str]] = None
    ) -> "Future[None]":
        """Delete ``keys`` from the stored translations."""
        return self.coordinator.remove(keys, languages)

    def translations(self, languages: Optional[Iterable[str]] = None) -> TranslationTable:
        """Read the stored table (default: every supported language)."""
        return self.store.load(languages)

    def clean(self) -> bool:
        """Delete the current bundle; see ``BundleStore.clean``."""
        return self.store.clean()

    def purge_stale(self) -> int:
        """Delete leftover bundles and return how many were removed."""
        return len(self.store.purge_stale())

    def string(
        self,
        key: str,
        language: Optional[str] = None,
        default: Optional[str] = None,
    ) -> str:
        """Resolve ``key`` in ``language`` (default: the current locale's language)."""
        return self.resolver.resolve(key, language or self._language, default)

    def string_for_locale(
        self, key: str, locale: str, default: Optional[str] = None
    ) -> str:
        """Resolve ``key`` for the language of ``locale`` (e.g. 'en-GB')."""
        return self.resolver.resolve(key, language_code(locale), default)

    def is_translated(self, text: str, languages: Optional[Iterable[str]] = None) -> bool:
        """True if ``text`` resolves in every language (default: all supported)."""
        return self.resolver.is_translated(
            text, languages if languages is not None else self.store.languages
        )

    def watch(
        self,
        key: str,
        callback: Callable[[str], None],
        language: Optional[str] = None,
    ) -> Subscription:
        """Call ``callback`` with the resolved value now and after every change.

        When ``language`` is omitted the current locale's language is used at
        each call, so locale changes are picked up on the next change event.
        """
        def _deliver() -> None:
            callback(self.string(key, language))

        subscription = self.events.changed.subscribe(_deliver)
        _deliver()
        return subscription

    def shutdown(self, wait: bool = True) -> None:
        """Stop background workers."""
        self.coordinator.shutdown(wait=wait)
