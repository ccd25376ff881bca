"""Asynchronous translation requests against the bundle store.

Every public operation returns a ``concurrent.futures.Future`` right away.
Disk reads run on an I/O thread pool; merging, writing, event emission and
future resolution run on a single-threaded completion executor. A translate
request moves through::

    IDLE -> READING -> TRANSLATING -> MERGING -> WRITING -> COMPLETED | FAILED

Requests do not lock each other out: two requests touching the same
languages both write, and the last write to land wins.
"""

from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from threading import Lock
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple
from uuid import uuid4

from infrastructure.logging import get_module_logger
from modules.lexicon.bundle_store import BundleStore
from modules.lexicon.errors import (
    LexiconDisabledError,
    LexiconSerializationError,
    NoTranslationServiceError,
)
from modules.lexicon.events import LexiconEvents
from modules.lexicon.languages import request_languages, resolve_targets, unique_languages
from modules.lexicon.provider import TranslationProvider
from modules.lexicon.table import TranslationTable

logger = get_module_logger()


class RequestState(Enum):
    """Lifecycle states of a request."""

    IDLE = "idle"
    READING = "reading"
    TRANSLATING = "translating"
    MERGING = "merging"
    WRITING = "writing"
    COMPLETED = "completed"
    FAILED = "failed"


class RequestKind(str, Enum):
    TRANSLATE = "translate"
    WRITE = "write"
    REMOVE = "remove"


@dataclass
class TranslationRequest:
    """One in-flight operation and the inputs it owns.

    The request carries its own copy of texts and languages, so completion
    handlers never reach back into caller state.

    Attributes:
        kind: Operation type.
        languages: Languages read and written by the request.
        texts: Texts to translate (translate requests only).
        source: Source language (translate requests only).
        targets: Target languages (translate requests only).
        request_id: Identifier bound to every log entry of the request.
        state: Current lifecycle state.
        history: Every state the request has entered, in order.
        error: Failure cause once the request has failed.
        future: Resolved with None on success or the failure cause.
    """

    kind: RequestKind
    languages: Tuple[str, ...]
    texts: Tuple[str, ...] = ()
    source: Optional[str] = None
    targets: Tuple[str, ...] = ()
    request_id: str = field(default_factory=lambda: uuid4().hex)
    state: RequestState = RequestState.IDLE
    history: List[RequestState] = field(default_factory=lambda: [RequestState.IDLE])
    error: Optional[BaseException] = None
    future: "Future[None]" = field(default_factory=Future, repr=False, compare=False)
    _completion_claimed: bool = field(default=False, init=False, repr=False)
    _lock: Lock = field(default_factory=Lock, init=False, repr=False, compare=False)

    @property
    def done(self) -> bool:
        return self.state in (RequestState.COMPLETED, RequestState.FAILED)

    def advance(self, state: RequestState) -> None:
        self.state = state
        self.history.append(state)

    def claim_completion(self) -> bool:
        """Return True for the first provider completion only."""
        with self._lock:
            if self._completion_claimed:
                return False
            self._completion_claimed = True
            return True


class TranslationCoordinator:
    """Drives translate, write and remove requests to completion.

    Each request finishes exactly once: on success ``events.changed`` is
    emitted and the future resolves to None; on failure ``events.failed``
    receives the cause and the future raises it. Requests rejected because
    the coordinator is disabled fail immediately without emitting.

    Attributes:
        store: BundleStore holding the current bundle.
        events: Streams receiving change and failure notifications.
        provider: Translation provider, or None when not configured.
        disabled: When True, every mutating request is rejected.
    """

    def __init__(
        self,
        store: BundleStore,
        provider: Optional[TranslationProvider] = None,
        events: Optional[LexiconEvents] = None,
        disabled: bool = False,
        io_workers: int = 4,
        io_executor: Optional[ThreadPoolExecutor] = None,
        completion_executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.store = store
        self.provider = provider
        self.events = events or store.events
        self.disabled = disabled
        self._owned_executors: List[ThreadPoolExecutor] = []
        if io_executor is None:
            io_executor = ThreadPoolExecutor(
                max_workers=io_workers, thread_name_prefix="lexicon-io"
            )
            self._owned_executors.append(io_executor)
        if completion_executor is None:
            completion_executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="lexicon-completion"
            )
            self._owned_executors.append(completion_executor)
        self._io_executor = io_executor
        self._completion_executor = completion_executor

    def _log(self, request: TranslationRequest):
        return logger.bind(request_id=request.request_id, kind=request.kind.value)

    def _reject_if_disabled(self, request: TranslationRequest) -> bool:
        if not self.disabled:
            return False
        error = LexiconDisabledError()
        request.error = error
        request.advance(RequestState.FAILED)
        request.future.set_exception(error)
        self._log(request).info("request_rejected_disabled")
        return True

    def translate_request(
        self,
        texts: Iterable[str],
        source: str,
        targets: Optional[Sequence[str]] = None,
    ) -> TranslationRequest:
        """Start translating ``texts`` and return the request handle.

        Args:
            texts: Keys to translate.
            source: Source language code.
            targets: Target languages; defaults to every supported language
                except ``source``.

        Returns:
            TranslationRequest whose ``future`` completes after the merged
            table was written (or the request failed).
        """
        target_languages = resolve_targets(source, targets, self.store.languages)
        request = TranslationRequest(
            kind=RequestKind.TRANSLATE,
            languages=request_languages(source, target_languages),
            texts=tuple(texts),
            source=source,
            targets=target_languages,
        )
        if self._reject_if_disabled(request):
            return request

        self._log(request).info(
            "translation_requested",
            source=source,
            targets=list(target_languages),
            text_count=len(request.texts),
        )
        self._submit(self._io_executor, self._start_translation, request)
        return request

    def translate(
        self,
        texts: Iterable[str],
        source: str,
        targets: Optional[Sequence[str]] = None,
    ) -> "Future[None]":
        """Translate ``texts`` and persist the result; see ``translate_request``."""
        return self.translate_request(texts, source, targets).future

    def write(self, table: TranslationTable) -> "Future[None]":
        """Replace the stored table with ``table``."""
        request = TranslationRequest(
            kind=RequestKind.WRITE,
            languages=unique_languages([*self.store.languages, *table.languages()]),
        )
        if self._reject_if_disabled(request):
            return request.future
        self._submit(self._completion_executor, self._persist, request, table.copy())
        return request.future

    def remove(
        self, keys: Iterable[str], languages: Optional[Iterable[str]] = None
    ) -> "Future[None]":
        """Delete ``keys`` from ``languages`` (default: every stored language)."""
        scope = tuple(languages) if languages is not None else None
        request = TranslationRequest(
            kind=RequestKind.REMOVE,
            languages=unique_languages([*self.store.languages, *(scope or ())]),
            texts=tuple(keys),
        )
        if self._reject_if_disabled(request):
            return request.future
        self._submit(self._completion_executor, self._remove_keys, request, scope)
        return request.future

    def _submit(
        self,
        executor: ThreadPoolExecutor,
        stage: Callable[..., None],
        request: TranslationRequest,
        *args: Any,
    ) -> None:
        try:
            executor.submit(self._run_stage, stage, request, *args)
        except RuntimeError:
            # Executor already shut down; finish on the calling thread.
            self._run_stage(stage, request, *args)

    def _run_stage(
        self, stage: Callable[..., None], request: TranslationRequest, *args: Any
    ) -> None:
        try:
            stage(request, *args)
        except Exception as e:
            self._log(request).exception(
                "request_stage_failed", state=request.state.value, error=str(e)
            )
            self._complete(request, e)

    def _start_translation(self, request: TranslationRequest) -> None:
        log = self._log(request)
        request.advance(RequestState.READING)
        snapshot = self.store.load(request.languages)

        provider = self.provider
        if provider is None:
            self._complete(request, NoTranslationServiceError())
            return

        request.advance(RequestState.TRANSLATING)
        log.debug("translation_dispatched", provider=type(provider).__name__)
        pending = provider.translate(
            list(request.texts), request.source, list(request.targets), snapshot
        )
        if not isinstance(pending, Future):
            done: "Future[Any]" = Future()
            done.set_result(pending)
            pending = done
        pending.add_done_callback(
            lambda completed: self._on_translated(request, completed)
        )

    def _on_translated(self, request: TranslationRequest, completed: Future) -> None:
        if not request.claim_completion():
            self._log(request).warning("duplicate_translation_completion_ignored")
            return
        if completed.cancelled():
            self._complete(request, CancelledError("Translation was cancelled"))
            return
        error = completed.exception()
        if error is not None:
            self._complete(request, error)
            return
        self._submit(
            self._completion_executor,
            self._commit_translation,
            request,
            completed.result(),
        )

    def _commit_translation(self, request: TranslationRequest, translated: Any) -> None:
        if isinstance(translated, Mapping):
            translated = TranslationTable.from_mapping(translated)
        if not isinstance(translated, TranslationTable):
            self._finish(
                request,
                LexiconSerializationError(
                    f"Provider returned {type(translated).__name__}, expected a table"
                ),
            )
            return

        request.advance(RequestState.MERGING)
        # Re-read: the bundle may have been replaced while the provider ran.
        current = self.store.load(self._read_scope(request))
        current.merge(translated)
        self._persist(request, current)

    def _remove_keys(
        self, request: TranslationRequest, scope: Optional[Tuple[str, ...]]
    ) -> None:
        request.advance(RequestState.READING)
        current = self.store.load(self._read_scope(request))
        removed = current.remove(request.texts, scope)
        self._log(request).info("keys_removed", removed=removed)
        self._persist(request, current)

    def _read_scope(self, request: TranslationRequest) -> Tuple[str, ...]:
        """Every supported, stored and requested language.

        The written bundle replaces the current one entirely, so each stored
        language must be carried over.
        """
        return unique_languages(
            [*self.store.languages, *self.store.stored_languages(), *request.languages]
        )

    def _persist(self, request: TranslationRequest, table: TranslationTable) -> None:
        request.advance(RequestState.WRITING)
        self.store.write_atomic(table)
        self._finish(request, None)

    def _complete(
        self, request: TranslationRequest, error: Optional[BaseException]
    ) -> None:
        """Finish ``request`` on the completion executor."""
        try:
            self._completion_executor.submit(self._finish, request, error)
        except RuntimeError:
            self._finish(request, error)

    def _finish(
        self, request: TranslationRequest, error: Optional[BaseException]
    ) -> None:
        if request.done:
            return
        log = self._log(request)
        if error is None:
            request.advance(RequestState.COMPLETED)
            log.info("request_completed", history=[s.value for s in request.history])
            self.events.changed.emit()
            request.future.set_result(None)
        else:
            request.error = error
            request.advance(RequestState.FAILED)
            log.error(
                "request_failed",
                error=str(error),
                error_type=type(error).__name__,
                history=[s.value for s in request.history],
            )
            self.events.failed.emit(error)
            request.future.set_exception(error)

    def shutdown(self, wait: bool = True) -> None:
        """Shut down the executors created by this coordinator.

        In-flight writes run to completion when ``wait`` is True.
        """
        for executor in self._owned_executors:
            executor.shutdown(wait=wait)
        logger.debug("coordinator_shut_down", wait=wait)
