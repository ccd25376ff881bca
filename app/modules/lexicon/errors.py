"""Custom exceptions for the lexicon string store.

All failures reported by the store, coordinator and resolver derive from
``LexiconError`` so callers can handle them uniformly.
"""

from pathlib import Path
from typing import Optional


class LexiconError(Exception):
    """Base exception for all lexicon errors.

    Example:
        future = service.translate(["hello"], source="en")
        try:
            future.result()
        except LexiconError as e:
            logger.error("lexicon_error", error=str(e))
    """

    pass


class LexiconDisabledError(LexiconError):
    """Raised when a mutating operation is requested while the store is disabled."""

    def __init__(self, message: str = "Lexicon is disabled"):
        super().__init__(message)


class NoTranslationServiceError(LexiconError):
    """Raised when a translation is requested but no provider is configured."""

    def __init__(self, message: str = "No translation provider is configured"):
        super().__init__(message)


class LexiconIOError(LexiconError):
    """Raised when a directory or file operation on a bundle fails.

    Attributes:
        cause: The underlying OS-level exception, if any.
        path: The path the failed operation was acting on, if known.
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        path: Optional[Path] = None,
    ):
        super().__init__(message)
        self.cause = cause
        self.path = path


class LexiconSerializationError(LexiconError):
    """Raised when a table cannot be encoded to the string table file format.

    Attributes:
        language: Language whose entries failed to encode, if known.
    """

    def __init__(self, message: str, language: Optional[str] = None):
        super().__init__(message)
        self.language = language
