"""Lexicon - localization string store.

Persists per-language translation tables as bundle directories, merges
machine translations into them, and resolves display strings with an
app resource -> stored translation -> key fallback.

Main components:
- table: TranslationTable nested mapping with merge/remove
- strings_file: string table file codec
- bundle_store: BundleStore with atomic replace-on-write
- coordinator: TranslationCoordinator running asynchronous requests
- resolver: LookupResolver fallback chain
- service: LexiconService facade
- factory: create_lexicon
"""

from modules.lexicon.bundle_store import BundleStore
from modules.lexicon.coordinator import (
    RequestKind,
    RequestState,
    TranslationCoordinator,
    TranslationRequest,
)
from modules.lexicon.errors import (
    LexiconDisabledError,
    LexiconError,
    LexiconIOError,
    LexiconSerializationError,
    NoTranslationServiceError,
)
from modules.lexicon.events import LexiconEvents
from modules.lexicon.factory import create_lexicon
from modules.lexicon.pointer import JsonFilePointerStore, MemoryPointerStore, PointerStore
from modules.lexicon.provider import StaticTranslationProvider, TranslationProvider
from modules.lexicon.resolver import LookupResolver
from modules.lexicon.resources import (
    MappingResourceCatalog,
    ResourceCatalog,
    YAMLResourceCatalog,
)
from modules.lexicon.service import LexiconService
from modules.lexicon.table import TranslationTable

__all__ = [
    "BundleStore",
    "JsonFilePointerStore",
    "LexiconDisabledError",
    "LexiconError",
    "LexiconEvents",
    "LexiconIOError",
    "LexiconSerializationError",
    "LexiconService",
    "LookupResolver",
    "MappingResourceCatalog",
    "MemoryPointerStore",
    "NoTranslationServiceError",
    "PointerStore",
    "RequestKind",
    "RequestState",
    "ResourceCatalog",
    "StaticTranslationProvider",
    "TranslationCoordinator",
    "TranslationProvider",
    "TranslationRequest",
    "TranslationTable",
    "YAMLResourceCatalog",
    "create_lexicon",
]
