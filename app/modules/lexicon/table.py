"""In-memory translation table.

A ``TranslationTable`` maps language codes to ``{key: translated value}``
dictionaries. Tables are short-lived: they are read from disk for a single
operation, changed in memory and written back as a new bundle.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

LanguageKey = str
TranslationKey = str
TranslatedValue = str


@dataclass
class TranslationTable:
    """Nested mapping ``{language: {key: value}}``.

    Attributes:
        db: The underlying nested dictionary. Reading a missing language or
            key through the accessors returns None rather than raising.
    """

    db: Dict[LanguageKey, Dict[TranslationKey, TranslatedValue]] = field(
        default_factory=dict
    )

    @classmethod
    def from_mapping(
        cls, data: Mapping[LanguageKey, Mapping[TranslationKey, TranslatedValue]]
    ) -> "TranslationTable":
        """Build a table from any nested mapping, copying the inner maps."""
        return cls(db={lang: dict(values) for lang, values in data.items()})

    def get(
        self, language: LanguageKey, key: TranslationKey
    ) -> Optional[TranslatedValue]:
        return self.db.get(language, {}).get(key)

    def set(
        self, language: LanguageKey, key: TranslationKey, value: TranslatedValue
    ) -> None:
        self.db.setdefault(language, {})[key] = value

    def __getitem__(
        self, item: Tuple[LanguageKey, TranslationKey]
    ) -> Optional[TranslatedValue]:
        language, key = item
        return self.get(language, key)

    def __setitem__(
        self, item: Tuple[LanguageKey, TranslationKey], value: TranslatedValue
    ) -> None:
        language, key = item
        self.set(language, key, value)

    def language(self, language: LanguageKey) -> Dict[TranslationKey, TranslatedValue]:
        """Return a copy of the entries for one language (empty if absent)."""
        return dict(self.db.get(language, {}))

    def languages(self) -> List[LanguageKey]:
        return list(self.db.keys())

    def ensure_language(self, language: LanguageKey) -> None:
        self.db.setdefault(language, {})

    def merge(self, other: "TranslationTable") -> None:
        """Merge another table into this one.

        Every entry of ``other`` overwrites the entry with the same language
        and key in this table; missing language maps are created.

        Args:
            other: TranslationTable to merge.
        """
        for language, values in other.db.items():
            self.db.setdefault(language, {}).update(values)

    def remove(
        self,
        keys: Iterable[TranslationKey],
        languages: Optional[Iterable[LanguageKey]] = None,
    ) -> int:
        """Delete ``keys`` from every language map (or only from ``languages``).

        Absent keys are ignored.

        Returns:
            Number of entries removed.
        """
        keys = set(keys)
        scope = set(languages) if languages is not None else None
        removed = 0
        for language, values in self.db.items():
            if scope is not None and language not in scope:
                continue
            for key in keys & values.keys():
                del values[key]
                removed += 1
        return removed

    def copy(self) -> "TranslationTable":
        return TranslationTable.from_mapping(self.db)

    def entry_count(self) -> int:
        return sum(len(values) for values in self.db.values())

