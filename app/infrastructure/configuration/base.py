"""Shared base classes and utilities for settings modules."""

import json
from typing import Any, List

from pydantic_settings import BaseSettings, SettingsConfigDict


class FeatureSettings(BaseSettings):
    """Base class for feature module settings.

    Every feature reads the same ``.env`` file with case-sensitive variable
    names; unknown variables are ignored.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


def parse_list_value(value: Any, env_name: str) -> Any:
    """Parse a list-typed environment value.

    Accepts a JSON array (``'["se", "en"]'``), a comma separated string
    (``"se,en"``) or an already parsed sequence. Items are not stripped.

    Raises:
        ValueError: If the value looks like a JSON array but does not parse.
    """
    if value is None:
        return []
    if not isinstance(value, str):
        return value
    s = value.strip()
    if s.startswith("["):
        try:
            parsed: List[Any] = json.loads(s)
        except ValueError as e:
            raise ValueError(f"Invalid {env_name} JSON: {e} (value: {s[:80]})") from e
        return parsed
    return s.split(",")
