"""Infrastructure event system - multicast event streams.

Usage:

    from infrastructure.events import EventStream

    changed = EventStream("lexicon.changed")

    subscription = changed.subscribe(lambda: print("table changed"))
    changed.emit()
    subscription.cancel()
"""

from infrastructure.events.stream import EventStream, Subscription

__all__ = [
    "EventStream",
    "Subscription",
]
