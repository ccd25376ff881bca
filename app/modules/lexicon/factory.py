"""Factory functions for creating lexicon components.

Builds a ready-to-use ``LexiconService`` from ``LexiconSettings``.
"""

from typing import Optional

from infrastructure.configuration import LexiconSettings, settings
from infrastructure.logging import get_module_logger
from modules.lexicon.bundle_store import BundleStore
from modules.lexicon.coordinator import TranslationCoordinator
from modules.lexicon.events import LexiconEvents
from modules.lexicon.pointer import JsonFilePointerStore, PointerStore
from modules.lexicon.provider import TranslationProvider
from modules.lexicon.resolver import LookupResolver
from modules.lexicon.resources import ResourceCatalog, YAMLResourceCatalog
from modules.lexicon.service import LexiconService

logger = get_module_logger()


def create_lexicon(
    lexicon_settings: Optional[LexiconSettings] = None,
    provider: Optional[TranslationProvider] = None,
    pointer: Optional[PointerStore] = None,
    resources: Optional[ResourceCatalog] = None,
) -> LexiconService:
    """Create and wire a LexiconService.

    Args:
        lexicon_settings: Settings to use (default: ``settings.lexicon``).
        provider: Translation provider; translate requests fail with
            NoTranslationServiceError until one is set.
        pointer: Current-bundle pointer storage (default: JSON file at
            ``lexicon_settings.pointer_path``).
        resources: App-bundled resources (default: YAML files from
            ``lexicon_settings.resources_dir`` when configured).

    Returns:
        LexiconService: Configured service instance

    Raises:
        LexiconIOError: If the storage directory or initial bundle cannot be created.
        ValueError: If the configured resources directory does not exist.

    Usage:
        # Defaults from environment
        lexicon = create_lexicon(provider=my_provider)

        # Explicit settings
        lexicon = create_lexicon(
            LexiconSettings(storage_dir=tmp_dir, supported_languages=["se", "en"])
        )
    """
    config = lexicon_settings or settings.lexicon
    events = LexiconEvents()

    if pointer is None:
        pointer = JsonFilePointerStore(config.pointer_path)
    if resources is None and config.resources_dir is not None:
        resources = YAMLResourceCatalog(config.resources_dir)

    store = BundleStore(
        storage_dir=config.storage_dir,
        table_name=config.table_name,
        languages=config.supported_languages,
        pointer=pointer,
        events=events,
    )
    coordinator = TranslationCoordinator(
        store,
        provider=provider,
        events=events,
        disabled=config.disabled,
        io_workers=config.io_workers,
    )
    resolver = LookupResolver(store, resources=resources)
    service = LexiconService(store, coordinator, resolver, locale=config.locale)

    logger.info(
        "lexicon_created",
        storage_dir=str(config.storage_dir),
        table_name=config.table_name,
        languages=list(store.languages),
        bundle=store.current_root.name,
        provider=type(provider).__name__ if provider else None,
    )
    return service
