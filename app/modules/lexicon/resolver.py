"""String lookup with fallback.

Resolution order for ``(key, language)``:

1. the app-bundled resource for the language,
2. the entry stored in the current bundle,
3. the caller-supplied default, or the key itself.

Misses in step 1 are detected by passing a sentinel default containing a
random token, so no real resource value can be mistaken for a miss.
"""

from pathlib import Path
from threading import Lock
from typing import Dict, Iterable, Optional, Tuple
from uuid import uuid4

from infrastructure.logging import get_module_logger
from modules.lexicon.bundle_store import BundleStore
from modules.lexicon.resources import MappingResourceCatalog, ResourceCatalog

logger = get_module_logger()


class LookupResolver:
    """Resolves display strings through the fallback chain.

    Stored entries are read from the store's current bundle and cached per
    bundle; a new current bundle invalidates the cache implicitly.

    Attributes:
        store: BundleStore providing stored translations.
        resources: App-bundled resources consulted first.
    """

    def __init__(
        self,
        store: BundleStore,
        resources: Optional[ResourceCatalog] = None,
    ):
        self.store = store
        self.resources = resources or MappingResourceCatalog()
        self._sentinel = f"## missing translation {uuid4().hex} ##"
        self._cache: Dict[Tuple[Path, str], Dict[str, str]] = {}
        self._lock = Lock()
        self._cleaned_subscription = store.events.cleaned.subscribe(self.invalidate)

    def _stored_entries(self, language: str) -> Dict[str, str]:
        root = self.store.current_root
        cache_key = (root, language)
        with self._lock:
            entries = self._cache.get(cache_key)
        if entries is not None:
            return entries

        entries = self.store.read_language(language, root=root)
        latest = self.store.current_root
        if latest != root:
            # Replaced (and possibly deleted) during the read.
            root, cache_key = latest, (latest, language)
            entries = self.store.read_language(language, root=root)
        with self._lock:
            for stale in [k for k in self._cache if k[0] != root]:
                del self._cache[stale]
            self._cache[cache_key] = entries
        return entries

    def _lookup(self, key: str, language: str) -> Optional[str]:
        value = self.resources.lookup(key, language, self._sentinel)
        if value != self._sentinel:
            return value
        return self._stored_entries(language).get(key)

    def resolve(self, key: str, language: str, default: Optional[str] = None) -> str:
        """Resolve ``key`` for ``language``.

        Args:
            key: Translation key (usually the source text).
            language: Language code.
            default: Value returned when neither resources nor the store have
                an entry; the key itself when omitted.
        """
        value = self._lookup(key, language)
        if value is not None:
            return value
        logger.debug("translation_missing", key=key, language=language)
        return key if default is None else default

    def is_translated(self, text: str, languages: Iterable[str]) -> bool:
        """True only if every language has a resource or stored entry for ``text``."""
        return all(self._lookup(text, language) is not None for language in languages)

    def invalidate(self) -> None:
        """Drop cached stored entries."""
        with self._lock:
            self._cache.clear()
