"""Translation provider contract.

A provider translates a batch of texts from a source language into target
languages asynchronously. It receives a copy of the current table as a seed
and resolves its future with a filled ``TranslationTable`` (or an
exception). Implementations must not mutate shared state of the store.
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Dict, Mapping, Optional, Sequence

from modules.lexicon.table import TranslationTable


class TranslationProvider(ABC):
    """Abstract base for machine-translation providers."""

    @abstractmethod
    def translate(
        self,
        texts: Sequence[str],
        source: str,
        targets: Sequence[str],
        table: TranslationTable,
    ) -> "Future[TranslationTable]":
        """Translate ``texts`` from ``source`` into every language of ``targets``.

        Args:
            texts: Keys to translate (usually the source text itself).
            source: Source language code.
            targets: Target language codes.
            table: Seed table scoped to the request languages; providers may
                fill and return it.

        Returns:
            Future resolving to the translated table. Failures are reported
            through the future and surfaced to callers unchanged.
        """
        raise NotImplementedError()


class StaticTranslationProvider(TranslationProvider):
    """Dictionary-backed provider, resolved immediately.

    Useful offline and in tests. Texts without a known translation are
    either skipped or filled with ``missing_template`` (formatted with
    ``text`` and ``language``).

    Attributes:
        translations: ``{language: {text: translation}}`` lookup data.
        missing_template: Optional template used for unknown texts.
    """

    def __init__(
        self,
        translations: Mapping[str, Mapping[str, str]],
        missing_template: Optional[str] = None,
    ):
        self.translations: Dict[str, Dict[str, str]] = {
            language: dict(values) for language, values in translations.items()
        }
        self.missing_template = missing_template

    def translate(
        self,
        texts: Sequence[str],
        source: str,
        targets: Sequence[str],
        table: TranslationTable,
    ) -> "Future[TranslationTable]":
        result = table.copy()
        for language in targets:
            known = self.translations.get(language, {})
            for text in texts:
                if text in known:
                    result.set(language, text, known[text])
                elif self.missing_template is not None:
                    result.set(
                        language,
                        text,
                        self.missing_template.format(text=text, language=language),
                    )
        future: "Future[TranslationTable]" = Future()
        future.set_result(result)
        return future
