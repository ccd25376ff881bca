"""Event streams published by the lexicon store."""

from dataclasses import dataclass, field

from infrastructure.events import EventStream


@dataclass
class LexiconEvents:
    """The three multicast streams of a lexicon instance.

    Attributes:
        changed: Emitted with no arguments after every committed write.
        failed: Emitted with the exception of every unrecovered failure.
        cleaned: Emitted with no arguments after the current bundle is deleted.
    """

    changed: EventStream = field(default_factory=lambda: EventStream("lexicon.changed"))
    failed: EventStream = field(default_factory=lambda: EventStream("lexicon.failed"))
    cleaned: EventStream = field(default_factory=lambda: EventStream("lexicon.cleaned"))
