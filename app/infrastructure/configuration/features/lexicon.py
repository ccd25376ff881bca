"""Lexicon string store feature settings."""

from pathlib import Path
from typing import Annotated, Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import NoDecode, SettingsConfigDict
import structlog

from infrastructure.configuration.base import FeatureSettings, parse_list_value

logger = structlog.stdlib.get_logger().bind(component="config.lexicon")


class LexiconSettings(FeatureSettings):
    """Configuration for the on-disk translation table store.

    Environment Variables:
        LEXICON_STORAGE_DIR: Directory holding bundle directories and the pointer file
        LEXICON_TABLE_NAME: Name of the string table file in each language folder
        LEXICON_SUPPORTED_LANGUAGES: JSON array or comma separated language codes
        LEXICON_LOCALE: Initial locale used for lookups (e.g. 'en-US')
        LEXICON_DISABLED: Reject all mutating operations when true
        LEXICON_POINTER_FILE: File (relative to storage dir) persisting the current bundle name
        LEXICON_RESOURCES_DIR: Optional directory of app-bundled YAML string files
        LEXICON_IO_WORKERS: Worker threads used for background disk reads

    Example:
        ```python
        from infrastructure.configuration import settings

        languages = settings.lexicon.supported_languages
        bundle_parent = settings.lexicon.storage_dir
        ```
    """

    model_config = SettingsConfigDict(populate_by_name=True)

    storage_dir: Path = Field(
        default_factory=lambda: Path.home() / ".lexicon",
        alias="LEXICON_STORAGE_DIR",
        description="Directory holding bundle directories and the pointer file",
    )
    table_name: str = Field(
        default="Localizable",
        alias="LEXICON_TABLE_NAME",
        description="String table file name (without extension)",
    )
    supported_languages: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["en"],
        alias="LEXICON_SUPPORTED_LANGUAGES",
        description="Ordered language codes managed by the store",
    )
    locale: str = Field(
        default="en-US",
        alias="LEXICON_LOCALE",
        description="Initial locale used for lookups",
    )
    disabled: bool = Field(
        default=False,
        alias="LEXICON_DISABLED",
        description="Reject translate/write/remove requests",
    )
    pointer_file: str = Field(
        default="lexicon-state.json",
        alias="LEXICON_POINTER_FILE",
        description="Pointer file name, relative to the storage directory",
    )
    resources_dir: Optional[Path] = Field(
        default=None,
        alias="LEXICON_RESOURCES_DIR",
        description="Directory of app-bundled YAML string files",
    )
    io_workers: int = Field(
        default=4,
        ge=1,
        alias="LEXICON_IO_WORKERS",
        description="Worker threads used for background disk reads",
    )

    @field_validator("supported_languages", mode="before")
    @classmethod
    def _parse_supported_languages(cls, v: Optional[Any]) -> Any:
        return parse_list_value(v, "LEXICON_SUPPORTED_LANGUAGES")

    @field_validator("supported_languages", mode="after")
    @classmethod
    def _normalize_supported_languages(cls, v: list[str]) -> list[str]:
        languages: list[str] = []
        for language in v:
            code = str(language).strip()
            if not code:
                continue
            if code in languages:
                logger.warning("duplicate_supported_language_ignored", language=code)
                continue
            languages.append(code)
        if not languages:
            raise ValueError("LEXICON_SUPPORTED_LANGUAGES must name at least one language")
        return languages

    @field_validator("table_name", mode="after")
    @classmethod
    def _validate_table_name(cls, v: str) -> str:
        name = v.strip()
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise ValueError(f"LEXICON_TABLE_NAME must be a plain file name: {v!r}")
        return name

    @field_validator("storage_dir", "resources_dir", mode="after")
    @classmethod
    def _expand_user(cls, v: Optional[Path]) -> Optional[Path]:
        if v is None:
            return None
        return Path(v).expanduser()

    @property
    def pointer_path(self) -> Path:
        """Absolute path of the pointer file."""
        return self.storage_dir / self.pointer_file
