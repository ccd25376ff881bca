"""App-bundled string resources.

Resources are strings shipped with the application. They take precedence
over translations stored in bundles. Lookups follow ``lookup(key, language,
default)`` semantics: the caller supplies the value returned for a missing
entry, which lets the resolver detect misses with a sentinel.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Mapping, Optional

import yaml

from infrastructure.logging import get_module_logger
from modules.lexicon.languages import language_code

logger = get_module_logger()


class ResourceCatalog(ABC):
    """Abstract source of app-bundled strings."""

    @abstractmethod
    def lookup(self, key: str, language: str, default: str) -> str:
        """Return the bundled string for ``key`` in ``language``, or ``default``."""
        pass

    @abstractmethod
    def languages(self) -> List[str]:
        """Languages for which at least one resource exists."""
        pass


class MappingResourceCatalog(ResourceCatalog):
    """Resources held in memory as ``{language: {key: value}}``."""

    def __init__(self, messages: Optional[Mapping[str, Mapping[str, str]]] = None):
        self.messages: Dict[str, Dict[str, str]] = {
            language: dict(values) for language, values in (messages or {}).items()
        }

    def lookup(self, key: str, language: str, default: str) -> str:
        return self.messages.get(language, {}).get(key, default)

    def languages(self) -> List[str]:
        return list(self.messages.keys())


def _flatten(data: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    flat: Dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, prefix=f"{full_key}."))
        elif value is not None:
            flat[full_key] = str(value)
    return flat


class YAMLResourceCatalog(ResourceCatalog):
    """Resources loaded from YAML files.

    Expects files named ``<language>.yml`` or ``<domain>.<locale>.yml`` in
    ``resources_dir``; locales match by language code, so
    ``errors.en-US.yml`` serves ``en``. Nested mappings are flattened into
    dotted keys (``{"menu": {"open": "Open"}}`` gives ``menu.open``).

    Attributes:
        resources_dir: Directory containing the YAML files.
        use_cache: Whether parsed languages are kept in memory.
    """

    def __init__(self, resources_dir: Path, use_cache: bool = True):
        """Initialize the catalog.

        Raises:
            ValueError: If ``resources_dir`` does not exist.
        """
        self.resources_dir = Path(resources_dir)
        self.use_cache = use_cache
        self.cache: Dict[str, Dict[str, str]] = {}
        self._lock = Lock()

        if not self.resources_dir.is_dir():
            raise ValueError(f"Resources directory not found: {self.resources_dir}")

        logger.info(
            "initialized_yaml_resources",
            resources_dir=str(self.resources_dir),
            use_cache=use_cache,
        )

    def _files_for(self, language: str) -> List[Path]:
        files = []
        for yaml_file in sorted(self.resources_dir.glob("*.yml")):
            locale = yaml_file.stem.split(".")[-1]
            try:
                if language_code(locale) == language:
                    files.append(yaml_file)
            except ValueError:
                continue
        return files

    def load(self, language: str) -> Dict[str, str]:
        """Load and flatten every resource file for ``language``.

        Raises:
            ValueError: If a YAML file cannot be parsed.
        """
        with self._lock:
            if self.use_cache and language in self.cache:
                return self.cache[language]

        messages: Dict[str, str] = {}
        yaml_files = self._files_for(language)
        for yaml_file in yaml_files:
            try:
                with open(yaml_file, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                logger.error("yaml_parse_error", file=str(yaml_file), error=str(e))
                raise ValueError(f"Failed to parse {yaml_file}: {e}") from e
            if data is None:
                continue
            if not isinstance(data, dict):
                logger.warning(
                    "invalid_yaml_format", file=str(yaml_file), expected="dict"
                )
                continue
            messages.update(_flatten(data))

        logger.info(
            "loaded_resources",
            language=language,
            file_count=len(yaml_files),
            message_count=len(messages),
        )
        if self.use_cache:
            with self._lock:
                self.cache[language] = messages
        return messages

    def lookup(self, key: str, language: str, default: str) -> str:
        return self.load(language).get(key, default)

    def languages(self) -> List[str]:
        found = []
        for yaml_file in sorted(self.resources_dir.glob("*.yml")):
            try:
                language = language_code(yaml_file.stem.split(".")[-1])
            except ValueError:
                continue
            if language not in found:
                found.append(language)
        return found

    def clear_cache(self) -> None:
        """Clear all cached resources."""
        with self._lock:
            self.cache.clear()
        logger.info("cleared_resource_cache")
