import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `modules.lexicon`) works during pytest collection regardless
# of the directory pytest is invoked from.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest
from unittest.mock import MagicMock

from modules.lexicon import (
    BundleStore,
    LexiconEvents,
    MemoryPointerStore,
    StaticTranslationProvider,
    TranslationCoordinator,
)

SUPPORTED_LANGUAGES = ["se", "en"]


@pytest.fixture
def storage_dir(tmp_path):
    """Directory that holds bundle directories."""
    return tmp_path / "bundles"


@pytest.fixture
def pointer():
    return MemoryPointerStore()


@pytest.fixture
def lexicon_events():
    return LexiconEvents()


@pytest.fixture
def event_recorder(lexicon_events):
    """Mocks subscribed to the changed, failed and cleaned streams."""
    recorder = MagicMock()
    lexicon_events.changed.subscribe(recorder.changed)
    lexicon_events.failed.subscribe(recorder.failed)
    lexicon_events.cleaned.subscribe(recorder.cleaned)
    return recorder


@pytest.fixture
def store(storage_dir, pointer, lexicon_events):
    """BundleStore over a temporary directory with languages se/en."""
    return BundleStore(
        storage_dir=storage_dir,
        table_name="Localizable",
        languages=SUPPORTED_LANGUAGES,
        pointer=pointer,
        events=lexicon_events,
    )


@pytest.fixture
def static_provider():
    """Provider translating 'hello' into 'hej' for every target."""
    return StaticTranslationProvider(
        {"en": {"hello": "hej"}, "se": {"hello": "hej"}},
        missing_template="unknown key {text}",
    )


@pytest.fixture
def coordinator(store, static_provider):
    coordinator = TranslationCoordinator(store, provider=static_provider, io_workers=2)
    yield coordinator
    coordinator.shutdown(wait=True)
