"""Garbage collection batching — collect once every 20 compiled reps.

Automatic collection is switched off for the duration of the pass and a full
collection runs on the first ``compilation_started`` and every 20th after it.
Collection returns to normal when the listener stops.  Not used on CI
(see ``RunContext.is_ci``).
"""

from __future__ import annotations

import gc
from typing import TYPE_CHECKING, Any

from whisker.listeners.base import Listener
from whisker.notifications import Event

if TYPE_CHECKING:
    from whisker.config import RunContext
    from whisker.model import Rep

COLLECT_EVERY = 20


class GCController(Listener):
    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.gc_count = 0

    @classmethod
    def is_applicable(cls, context: RunContext) -> bool:
        return not context.is_ci

    def start(self) -> None:
        self.on(Event.COMPILATION_STARTED, self._on_compilation_started)

    def stop(self) -> None:
        super().stop()
        gc.enable()

    def _on_compilation_started(self, rep: Rep) -> None:
        if self.gc_count % COLLECT_EVERY == 0:
            gc.enable()
            gc.collect()
            gc.disable()
        self.gc_count += 1
