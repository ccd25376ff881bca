"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.lexicon import LexiconSettings

__all__ = [
    "LexiconSettings",
]
