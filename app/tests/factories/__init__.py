"""Test data factories for deterministic test data generation."""

from tests.factories.lexicon import (
    DeferredTranslationProvider,
    FailingTranslationProvider,
    ImmediateExecutor,
    make_lexicon_settings,
    make_translation_table,
)

__all__ = [
    "DeferredTranslationProvider",
    "FailingTranslationProvider",
    "ImmediateExecutor",
    "make_lexicon_settings",
    "make_translation_table",
]
