"""Notification center — synchronous publish/subscribe for compile events.

The compiler publishes lifecycle events by name; listeners subscribe under an
identity key (usually the listener itself).  Subscribing again under the same
``(event, key)`` pair replaces the earlier callback instead of adding a
second one.

Dispatch is synchronous, on the publishing thread, in registration order.
A callback that raises aborts the publish and the exception reaches the
publisher: callers that need isolation must catch inside the callback.

Thread Safety:
    Registry mutation is protected by a ``threading.Lock``.  ``publish``
    snapshots the callbacks under the lock and invokes them with the lock
    released, so callbacks may subscribe or unsubscribe freely.

"""

from __future__ import annotations

import threading
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from whisker._types import EventCallback, EventName, SubscriberKey


class Event(StrEnum):
    """Events published during a compile pass, with their payloads."""

    COMPILATION_STARTED = "compilation_started"  # (rep)
    COMPILATION_ENDED = "compilation_ended"  # (rep)
    COMPILATION_FAILED = "compilation_failed"  # (rep, error)
    CACHED_CONTENT_USED = "cached_content_used"  # (rep)
    FILTERING_STARTED = "filtering_started"  # (rep, filter_name)
    FILTERING_ENDED = "filtering_ended"  # (rep, filter_name)
    DEPENDENCY_CREATED = "dependency_created"  # (dependent, dependency)
    WILL_WRITE_REP = "will_write_rep"  # (rep, path)
    REP_WRITTEN = "rep_written"  # (rep, path, created, modified)


class NotificationCenter:
    """Event-name keyed registry of callbacks.

    Each event maps to an insertion-ordered dict of ``key -> callback``.
    Replacing a key keeps its position; removing and re-adding moves it to
    the end.

    """

    __slots__ = ("_lock", "_subscribers")

    def __init__(self) -> None:
        self._subscribers: dict[EventName, dict[SubscriberKey, EventCallback]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event: EventName, key: SubscriberKey, callback: EventCallback) -> None:
        """Register *callback* for *event* under *key*, replacing any previous one."""
        with self._lock:
            self._subscribers.setdefault(str(event), {})[key] = callback

    def unsubscribe(self, event: EventName, key: SubscriberKey) -> None:
        """Remove the callback registered for *event* under *key*, if any."""
        with self._lock:
            callbacks = self._subscribers.get(str(event))
            if callbacks is None:
                return
            callbacks.pop(key, None)
            if not callbacks:
                del self._subscribers[str(event)]

    def unsubscribe_all(self, key: SubscriberKey) -> None:
        """Remove every callback registered under *key*, across all events."""
        with self._lock:
            for event in list(self._subscribers):
                callbacks = self._subscribers[event]
                callbacks.pop(key, None)
                if not callbacks:
                    del self._subscribers[event]

    def publish(self, event: EventName, *args: Any) -> None:
        """Invoke every callback registered for *event* with *args*.

        Exceptions raised by a callback propagate; later callbacks for the
        same publish are not invoked.

        """
        with self._lock:
            callbacks = tuple(self._subscribers.get(str(event), {}).values())
        for callback in callbacks:
            callback(*args)

    def subscriber_count(self, event: EventName) -> int:
        """Number of callbacks currently registered for *event*."""
        with self._lock:
            return len(self._subscribers.get(str(event), {}))

    def events(self) -> frozenset[str]:
        """Names of all events with at least one subscriber."""
        with self._lock:
            return frozenset(self._subscribers)


# ---------------------------------------------------------------------------
# Process-wide default — set once, shared by compiler and listeners
# ---------------------------------------------------------------------------

_default_center = NotificationCenter()


def default_center() -> NotificationCenter:
    """Return the process-wide notification center.

    Components take the center as an argument; this is only the fallback
    when none is passed.

    """
    return _default_center
