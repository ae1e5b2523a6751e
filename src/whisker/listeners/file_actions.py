"""File actions — reports what happened to each output file.

Every write is reported as ``create``, ``update`` or ``identical``.  When
the pass ends, every output path of a rep that was never compiled is
reported as ``skip``.  Created and updated files are high importance;
identical and skipped files only show at the ``low`` logger level.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from whisker.listeners.base import Listener
from whisker.log import FileLogger
from whisker.notifications import Event

if TYPE_CHECKING:
    from collections.abc import Callable

    from whisker._types import FileAction, LogLevel
    from whisker.model import Rep


def classify(created: bool, modified: bool) -> tuple[FileAction, LogLevel]:
    """Map the write flags of ``rep_written`` to an action and its importance."""
    if created:
        return "create", "high"
    if modified:
        return "update", "high"
    return "identical", "low"


class FileActionPrinter(Listener):
    """Logs one line per written or skipped output file.

    Args:
        logger: Where lines go.  Defaults to a stdout logger at ``low`` level
            in verbose runs and ``high`` otherwise.
        clock: Returns the current time in seconds.

    """

    def __init__(
        self,
        *,
        logger: FileLogger | None = None,
        clock: Callable[[], float] = time.monotonic,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        if logger is None:
            verbose = self.context is not None and self.context.verbose
            logger = FileLogger("low" if verbose else "high")
        self.logger = logger
        self._clock = clock
        self._start_times: dict[str, float] = {}

    def start(self) -> None:
        self.on(Event.COMPILATION_STARTED, self._on_compilation_started)
        self.on(Event.REP_WRITTEN, self._on_rep_written)

    def stop(self) -> None:
        super().stop()
        for rep in self.reps:
            if rep.compiled:
                continue
            for raw_path in rep.raw_paths.values():
                self.logger.file("low", "skip", raw_path, None)

    def _on_compilation_started(self, rep: Rep) -> None:
        if rep.raw_path is not None:
            self._start_times[rep.raw_path] = self._clock()

    def _on_rep_written(self, rep: Rep, path: str, created: bool, modified: bool) -> None:
        started_at = self._start_times.get(path)
        duration = self._clock() - started_at if started_at is not None else None
        action, level = classify(created, modified)
        self.logger.file(level, action, path, duration)
