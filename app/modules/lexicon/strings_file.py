"""Codec for string table files.

A string table file holds one entry per line::

    "greeting" = "Hello \\"friend\\"";

Keys and values are wrapped in double quotes. Backslashes, double quotes and
line breaks inside them are escaped. Blank lines and lines that do not match
the entry pattern are ignored when parsing.
"""

import re
from typing import Dict, Mapping, Optional

from modules.lexicon.errors import LexiconSerializationError

ENCODING = "utf-8"

ENTRY_PATTERN = re.compile(
    r'^\s*"(?P<key>(?:[^"\\]|\\.)*)"\s*=\s*"(?P<value>(?:[^"\\]|\\.)*)"\s*;\s*$'
)

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}
_UNESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}
_ESCAPE_SEQUENCE = re.compile(r"\\(.)", re.DOTALL)


def escape(text: str) -> str:
    """Escape ``text`` for use between double quotes in a table file."""
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def unescape(text: str) -> str:
    """Reverse ``escape``. Unknown escape sequences keep the escaped character."""
    return _ESCAPE_SEQUENCE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(1)), text)


def parse(text: str) -> Dict[str, str]:
    """Parse table file content into a flat ``{key: value}`` dictionary.

    Later duplicates of a key overwrite earlier ones.
    """
    entries: Dict[str, str] = {}
    for line in text.split("\n"):
        match = ENTRY_PATTERN.match(line)
        if match is None:
            continue
        entries[unescape(match.group("key"))] = unescape(match.group("value"))
    return entries


def dumps(entries: Mapping[str, str], language: Optional[str] = None) -> str:
    """Serialize ``entries`` to table file content, one sorted line per key.

    Raises:
        LexiconSerializationError: If a key or value is not a string.
    """
    lines = []
    for key in sorted(entries, key=str):
        value = entries[key]
        if not isinstance(key, str) or not isinstance(value, str):
            raise LexiconSerializationError(
                f"Table entries must be strings, got {type(key).__name__}: "
                f"{type(value).__name__} for key {key!r}",
                language=language,
            )
        lines.append(f'"{escape(key)}" = "{escape(value)}";\n')
    return "".join(lines)


def encode(entries: Mapping[str, str], language: Optional[str] = None) -> bytes:
    """Serialize ``entries`` to UTF-8 bytes.

    Raises:
        LexiconSerializationError: If the entries cannot be serialized or encoded.
    """
    content = dumps(entries, language=language)
    try:
        return content.encode(ENCODING)
    except UnicodeEncodeError as e:
        raise LexiconSerializationError(
            f"Unable to encode string table: {e}", language=language
        ) from e


def decode(data: bytes) -> Dict[str, str]:
    """Decode and parse raw table file bytes (a leading BOM is tolerated).

    Raises:
        UnicodeDecodeError: If the data is not valid UTF-8.
    """
    return parse(data.decode("utf-8-sig"))
