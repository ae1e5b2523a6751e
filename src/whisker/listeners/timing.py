"""Filter timing — per-filter duration statistics, printed after the pass.

Enabled in verbose mode.  Each ``filtering_started`` opens a sample for the
filter name and each ``filtering_ended`` closes the most recently opened
sample for that name that is still open.  Runs of one filter nest (an erb
item rendering another erb item) but must not interleave.
Samples still open when the pass ends are ignored.
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from whisker.listeners.base import Listener
from whisker.log import warn
from whisker.notifications import Event

if TYPE_CHECKING:
    from collections.abc import Callable

    from whisker.config import RunContext
    from whisker.model import Rep


@dataclass(slots=True)
class TimingSample:
    """One run of a filter.  ``stop`` is None while the filter is running."""

    start: float
    stop: float | None = None

    @property
    def duration(self) -> float | None:
        if self.stop is None:
            return None
        return self.stop - self.start


@dataclass(frozen=True, slots=True)
class FilterStats:
    """Aggregate timing for one filter, in seconds."""

    filter_name: str
    count: int
    min: float
    avg: float
    max: float
    total: float


class TimingRecorder(Listener):
    """Records how long each filter ran and prints a summary table.

    Args:
        clock: Returns the current time in seconds.  Defaults to
            ``time.perf_counter``.

    """

    def __init__(self, *, clock: Callable[[], float] = time.perf_counter, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._clock = clock
        self._times: dict[str, list[TimingSample]] = {}

    @classmethod
    def is_applicable(cls, context: RunContext) -> bool:
        return context.verbose

    def start(self) -> None:
        self.on(Event.FILTERING_STARTED, self._on_filtering_started)
        self.on(Event.FILTERING_ENDED, self._on_filtering_ended)

    def stop(self) -> None:
        self.print_profiling_feedback()
        super().stop()

    def _on_filtering_started(self, rep: Rep, filter_name: str) -> None:
        self._times.setdefault(filter_name, []).append(TimingSample(start=self._clock()))

    def _on_filtering_ended(self, rep: Rep, filter_name: str) -> None:
        for sample in reversed(self._times.get(filter_name, ())):
            if sample.stop is None:
                sample.stop = self._clock()
                return

    # ----- Statistics -----

    def durations_per_filter(self) -> dict[str, list[float]]:
        """Durations of finished samples, per filter that has at least one."""
        result: dict[str, list[float]] = {}
        for filter_name, samples in self._times.items():
            durations = [s.duration for s in samples if s.duration is not None]
            if durations:
                result[filter_name] = durations
        return result

    def stats(self) -> list[FilterStats]:
        """Per-filter statistics, sorted by total time, smallest first."""
        rows = []
        for filter_name, durations in self.durations_per_filter().items():
            total = sum(durations)
            rows.append(FilterStats(
                filter_name=filter_name,
                count=len(durations),
                min=min(durations),
                avg=total / len(durations),
                max=max(durations),
                total=total,
            ))
        rows.sort(key=lambda r: r.total)
        return rows

    # ----- Output -----

    def print_profiling_feedback(self) -> None:
        """Print the timing table to stdout.  Prints nothing without samples."""
        rows = self.stats()
        if not rows:
            return

        if any(not rep.compiled for rep in self.reps):
            print(file=sys.stderr)
            warn(
                "profiling information may not be accurate because "
                "some items were not compiled."
            )

        width = max(len(r.filter_name) for r in rows)
        print()
        print(" " * width + " | count    min    avg    max     tot")
        print("-" * width + "-+-----------------------------------")
        for row in rows:
            print(format_row(row, width))


def format_row(row: FilterStats, width: int) -> str:
    """Format one table row, right-aligning the filter name to *width*."""
    return (
        f"{row.filter_name:>{width}} |  {row.count:4d}  {row.min:4.2f}s  "
        f"{row.avg:4.2f}s  {row.max:4.2f}s  {row.total:5.2f}s"
    )
