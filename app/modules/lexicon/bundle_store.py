"""On-disk persistence of translation tables.

A bundle is a directory ``<storage_dir>/<uuid>.bundle/`` holding one
``<language>.lang/`` folder per language, each containing a single
``<table_name>.table`` string table file. Bundles are never modified in
place: every write produces a new bundle which replaces the current one only
after all of its files have been written.
"""

import shutil
from pathlib import Path
from threading import Lock
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple
from uuid import uuid4

from infrastructure.logging import get_module_logger
from modules.lexicon import strings_file
from modules.lexicon.errors import LexiconIOError, LexiconSerializationError
from modules.lexicon.events import LexiconEvents
from modules.lexicon.languages import unique_languages
from modules.lexicon.pointer import PointerStore
from modules.lexicon.table import TranslationTable

logger = get_module_logger()

BUNDLE_SUFFIX = ".bundle"
LANGUAGE_SUFFIX = ".lang"
TABLE_SUFFIX = ".table"


def _is_plain_name(name: str) -> bool:
    return bool(name) and name not in (".", "..") and "/" not in name and "\\" not in name


class BundleStore:
    """Manages bundle directories and the pointer to the current one.

    The current root is the only shared mutable state. It is swapped under a
    lock, after the replacement bundle is fully written and the pointer has
    been persisted, so readers observe either the old or the new bundle.

    Attributes:
        storage_dir: Parent directory of all bundles.
        table_name: String table file name (without extension).
        languages: Ordered supported language codes.
        pointer: Persistent slot holding the current bundle directory name.
        events: Streams used to report non-fatal failures and cleanups.
    """

    def __init__(
        self,
        storage_dir: Path,
        table_name: str,
        languages: Sequence[str],
        pointer: PointerStore,
        events: Optional[LexiconEvents] = None,
    ):
        """Initialize the store, restoring the current bundle from the pointer.

        A fresh bundle is created when the pointer is empty or names a
        directory that no longer exists.

        Raises:
            ValueError: If the table name or a language code is not a plain name.
            LexiconIOError: If a fresh bundle cannot be created.
        """
        if not _is_plain_name(table_name):
            raise ValueError(f"Invalid table name: {table_name!r}")
        self.languages = unique_languages(languages)
        if not self.languages:
            raise ValueError("At least one supported language is required")
        for language in self.languages:
            if not _is_plain_name(language):
                raise ValueError(f"Invalid language code: {language!r}")

        self.storage_dir = Path(storage_dir)
        self.table_name = table_name
        self.pointer = pointer
        self.events = events or LexiconEvents()
        self._lock = Lock()
        self._pending_roots: Set[Path] = set()
        self._current_root = self._restore_root()

    @property
    def current_root(self) -> Path:
        with self._lock:
            return self._current_root

    def _restore_root(self) -> Path:
        name = self.pointer.get()
        if name:
            root = self.storage_dir / name
            if _is_plain_name(name) and root.is_dir():
                logger.info("bundle_restored", bundle=name)
                return root
            logger.warning("bundle_pointer_stale", bundle=name)

        root = self._new_root_path()
        self.create_layout(root, self.table_name, self.languages)
        self.pointer.set(root.name)
        logger.info("bundle_created", bundle=root.name, languages=list(self.languages))
        return root

    def _new_root_path(self) -> Path:
        return self.storage_dir / f"{uuid4().hex}{BUNDLE_SUFFIX}"

    @staticmethod
    def language_dir(root: Path, language: str) -> Path:
        return root / f"{language}{LANGUAGE_SUFFIX}"

    @classmethod
    def table_file(cls, root: Path, table_name: str, language: str) -> Path:
        return cls.language_dir(root, language) / f"{table_name}{TABLE_SUFFIX}"

    def table_path(self, language: str, root: Optional[Path] = None) -> Path:
        """Path of the table file for ``language`` in ``root`` (default: current)."""
        return self.table_file(root or self.current_root, self.table_name, language)

    @classmethod
    def create_layout(
        cls, root: Path, table_name: str, languages: Iterable[str]
    ) -> Path:
        """Ensure ``root`` and an empty table file per language exist.

        Existing directories and files are left untouched.

        Raises:
            LexiconIOError: If a directory or file cannot be created.
        """
        try:
            root.mkdir(parents=True, exist_ok=True)
            for language in languages:
                cls.language_dir(root, language).mkdir(exist_ok=True)
                cls.table_file(root, table_name, language).touch(exist_ok=True)
        except OSError as e:
            logger.error("bundle_layout_failed", root=str(root), error=str(e))
            raise LexiconIOError(
                f"Unable to create bundle layout in {root}", cause=e, path=root
            ) from e
        return root

    def _read_entries(self, root: Path, language: str) -> Dict[str, str]:
        path = self.table_file(root, self.table_name, language)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning(
                "table_file_unreadable", language=language, path=str(path), error=str(e)
            )
            return {}
        try:
            return strings_file.decode(data)
        except UnicodeDecodeError as e:
            logger.warning(
                "table_file_unparsable", language=language, path=str(path), error=str(e)
            )
            return {}

    def read_language(self, language: str, root: Optional[Path] = None) -> Dict[str, str]:
        """Read the entries of one language from ``root`` (default: current).

        Missing or unreadable files yield an empty dictionary.
        """
        return self._read_entries(root or self.current_root, language)

    def stored_languages(self, root: Optional[Path] = None) -> Tuple[str, ...]:
        """Language codes that have a folder in ``root`` (default: current), sorted.

        A missing or unreadable bundle has no stored languages.
        """
        root = root or self.current_root
        try:
            folders = sorted(root.glob(f"*{LANGUAGE_SUFFIX}"))
        except OSError as e:
            logger.warning("bundle_unreadable", bundle=root.name, error=str(e))
            return ()
        return tuple(
            folder.name[: -len(LANGUAGE_SUFFIX)] for folder in folders if folder.is_dir()
        )

    def load(
        self,
        languages: Optional[Iterable[str]] = None,
        root: Optional[Path] = None,
    ) -> TranslationTable:
        """Read a table for ``languages`` (default: all supported languages).

        Every requested language is present in the result; a missing or
        corrupt file only empties its own language.
        """
        root = root or self.current_root
        if languages is None:
            languages = self.languages
        table = TranslationTable()
        for language in unique_languages(languages):
            table.ensure_language(language)
            table.db[language].update(self._read_entries(root, language))
        return table

    def _write_table_file(self, path: Path, data: bytes) -> None:
        path.write_bytes(data)

    def write_atomic(
        self, table: TranslationTable, languages: Optional[Iterable[str]] = None
    ) -> Path:
        """Persist ``table`` as a new bundle and make it current.

        The new bundle gets a layout for ``languages`` (default: all supported
        languages) plus every language present in ``table``. The pointer and
        the current root are only updated after every file was written; the
        previous bundle is deleted afterwards. On failure the previous bundle
        stays current and the partial bundle is left for ``purge_stale``.

        Returns:
            Path of the new current bundle.

        Raises:
            LexiconSerializationError: If an entry cannot be encoded.
            LexiconIOError: If a directory, file or the pointer cannot be written.
        """
        if languages is None:
            languages = self.languages
        layout = unique_languages([*languages, *table.languages()])
        new_root = self._new_root_path()
        log = logger.bind(bundle=new_root.name)

        with self._lock:
            self._pending_roots.add(new_root)
        try:
            for language in layout:
                if not _is_plain_name(language):
                    raise LexiconSerializationError(
                        f"Invalid language code: {language!r}", language=language
                    )
            self.create_layout(new_root, self.table_name, layout)
            for language, entries in table.db.items():
                data = strings_file.encode(entries, language=language)
                path = self.table_file(new_root, self.table_name, language)
                try:
                    self._write_table_file(path, data)
                except OSError as e:
                    raise LexiconIOError(
                        f"Unable to write table file {path}", cause=e, path=path
                    ) from e

            with self._lock:
                previous = self._current_root
                self.pointer.set(new_root.name)
                self._current_root = new_root
        except (LexiconIOError, LexiconSerializationError) as e:
            log.error("bundle_write_failed", error=str(e))
            raise
        finally:
            with self._lock:
                self._pending_roots.discard(new_root)

        log.info(
            "bundle_written",
            previous=previous.name,
            languages=list(layout),
            entries=table.entry_count(),
        )
        if previous != new_root:
            self.delete(previous)
        return new_root

    def delete(self, root: Path) -> bool:
        """Remove a bundle directory tree.

        Failures are reported on ``events.failed`` and logged; they never
        raise, and the store keeps using its current root.

        Returns:
            True if the directory is gone, False if removal failed.
        """
        if not root.exists():
            return True
        try:
            shutil.rmtree(root)
        except OSError as e:
            logger.warning("bundle_delete_failed", bundle=root.name, error=str(e))
            self.events.failed.emit(
                LexiconIOError(f"Unable to delete bundle {root}", cause=e, path=root)
            )
            return False
        logger.info("bundle_deleted", bundle=root.name)
        return True

    def clean(self) -> bool:
        """Delete the current bundle and emit ``cleaned`` on success.

        Lookups fall back to app resources afterwards, and the next write
        creates a fresh bundle.
        """
        if self.delete(self.current_root):
            self.events.cleaned.emit()
            return True
        return False

    def purge_stale(self) -> List[Path]:
        """Delete bundles that are neither current nor being written.

        Returns:
            The bundle directories that were removed.
        """
        if not self.storage_dir.is_dir():
            return []
        with self._lock:
            keep = {self._current_root, *self._pending_roots}
        removed = []
        for root in sorted(self.storage_dir.glob(f"*{BUNDLE_SUFFIX}")):
            if root in keep or not root.is_dir():
                continue
            if self.delete(root):
                removed.append(root)
        logger.info("stale_bundles_purged", count=len(removed))
        return removed
