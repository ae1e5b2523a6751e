"""Listener contract — observers bracketed around a compile pass.

A listener decides from the run context whether it applies, subscribes to
notification-center events in ``start``, and cleans up in ``stop``.  The
session only ever calls ``start_safely`` / ``stop_safely``, which guarantee
that ``stop`` runs once, and only for a listener whose ``start`` returned.
A ``start`` that raises leaves no subscriptions behind.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from whisker.notifications import default_center

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from typing import Any

    from whisker._types import EventName
    from whisker.config import RunContext
    from whisker.model import Rep
    from whisker.notifications import NotificationCenter


class Listener(ABC):
    """Base class for compilation listeners.

    Every listener is constructed with the same shared references; subclasses
    keep what they need.

    Args:
        center: Notification center the compile pass publishes to.
        reps: Every representation planned for this pass.
        context: Flags the run was started with.

    """

    def __init__(
        self,
        *,
        center: NotificationCenter | None = None,
        reps: Sequence[Rep] = (),
        context: RunContext | None = None,
    ) -> None:
        self.center = center if center is not None else default_center()
        self.reps = reps
        self.context = context
        self._started = False

    @classmethod
    def is_applicable(cls, context: RunContext) -> bool:
        """Return True if this listener should run for *context*."""
        return True

    @abstractmethod
    def start(self) -> None:
        """Subscribe to events and set up any state.  May raise."""

    def stop(self) -> None:
        """Tear down.  Removes every subscription this listener holds."""
        self.center.unsubscribe_all(self)

    @property
    def started(self) -> bool:
        return self._started

    def start_safely(self) -> None:
        """Run ``start``; on failure, drop any subscriptions it already made."""
        try:
            self.start()
        except BaseException:
            self.center.unsubscribe_all(self)
            raise
        self._started = True

    def stop_safely(self) -> None:
        if self._started:
            try:
                self.stop()
            finally:
                self._started = False

    def on(self, event: EventName, callback: Callable[..., Any]) -> None:
        """Subscribe *callback* to *event* under this listener's identity."""
        self.center.subscribe(event, self, callback)

    def __repr__(self) -> str:
        state = "started" if self._started else "stopped"
        return f"<{type(self).__name__} {state}>"
