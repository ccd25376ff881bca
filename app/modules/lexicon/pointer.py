"""Persistent "current bundle" pointer storage.

The bundle store keeps the name of its current bundle directory in a single
string slot so that the same bundle is picked up after a restart.
"""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Optional

from infrastructure.logging import get_module_logger
from modules.lexicon.errors import LexiconIOError

logger = get_module_logger()


class PointerStore(ABC):
    """Abstract single-slot string storage."""

    @abstractmethod
    def get(self) -> Optional[str]:
        """Return the stored value, or None if nothing is stored."""
        pass

    @abstractmethod
    def set(self, value: str) -> None:
        """Store ``value``, replacing any previous value.

        Raises:
            LexiconIOError: If the value cannot be persisted.
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Forget the stored value."""
        pass


class MemoryPointerStore(PointerStore):
    """Process-local pointer storage (testing, ephemeral stores)."""

    def __init__(self, value: Optional[str] = None):
        self._value = value

    def get(self) -> Optional[str]:
        return self._value

    def set(self, value: str) -> None:
        self._value = value

    def clear(self) -> None:
        self._value = None


class JsonFilePointerStore(PointerStore):
    """Pointer storage backed by a small JSON document.

    The document is rewritten through a temporary file and ``os.replace``
    so readers never see a partially written file.

    Attributes:
        path: Location of the JSON document.
        key: Name of the slot inside the document.
    """

    def __init__(self, path: Path, key: str = "current_bundle"):
        self.path = Path(path)
        self.key = key
        self._lock = Lock()

    def _read_document(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(
                "pointer_file_unreadable", path=str(self.path), error=str(e)
            )
            return {}
        if not isinstance(data, dict):
            logger.warning("pointer_file_invalid_format", path=str(self.path))
            return {}
        return data

    def _write_document(self, data: dict) -> None:
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise LexiconIOError(
                f"Unable to write pointer file {self.path}", cause=e, path=self.path
            ) from e

    def get(self) -> Optional[str]:
        with self._lock:
            value = self._read_document().get(self.key)
        return value if isinstance(value, str) and value else None

    def set(self, value: str) -> None:
        with self._lock:
            data = self._read_document()
            data[self.key] = value
            self._write_document(data)
        logger.debug("pointer_updated", path=str(self.path), value=value)

    def clear(self) -> None:
        with self._lock:
            data = self._read_document()
            if data.pop(self.key, None) is not None:
                self._write_document(data)
