"""Infrastructure configuration module - public API.

Centralized configuration management using Pydantic BaseSettings with
domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    LexiconSettings: String store settings class

Example:
    ```python
    from infrastructure.configuration import settings

    table_name = settings.lexicon.table_name
    if settings.is_production:
        # Production-specific logic...
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.features.lexicon import LexiconSettings

__all__ = ["Settings", "settings", "LexiconSettings"]
