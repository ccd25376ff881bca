"""Language code helpers.

Locales are matched by language code only: ``"en-US"``, ``"en_GB"`` and
``"EN"`` all select the ``"en"`` tables.
"""

from typing import Iterable, List, Optional, Sequence, Tuple


def language_code(locale: str) -> str:
    """Return the lowercase language part of a locale identifier.

    Args:
        locale: Locale or language identifier (e.g., "se-SV", "en_US", "fr").

    Returns:
        Language code (e.g., "se", "en", "fr").

    Raises:
        ValueError: If no language code can be extracted.
    """
    code = locale.strip().replace("_", "-").split("-")[0].lower()
    if not code:
        raise ValueError(f"Invalid locale identifier: {locale!r}")
    return code


def unique_languages(languages: Iterable[str]) -> Tuple[str, ...]:
    """De-duplicate ``languages`` keeping the first occurrence order."""
    seen: List[str] = []
    for language in languages:
        if language not in seen:
            seen.append(language)
    return tuple(seen)


def resolve_targets(
    source: str,
    targets: Optional[Sequence[str]],
    supported: Sequence[str],
) -> Tuple[str, ...]:
    """Pick the target languages of a translation request.

    An explicit ``targets`` list is used as given (de-duplicated); otherwise
    every supported language except ``source`` is targeted.
    """
    if targets is not None:
        return unique_languages(targets)
    return tuple(language for language in supported if language != source)


def request_languages(source: str, targets: Sequence[str]) -> Tuple[str, ...]:
    """All languages touched by a request: targets followed by the source."""
    return unique_languages([*targets, source])
