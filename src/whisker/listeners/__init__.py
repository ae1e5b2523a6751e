"""Compilation listeners — observers bracketed around a compile pass.

Listeners subscribe to notification-center events while a pass runs:

- **DiffGenerator**: unified diff of changed output files (``enable_output_diff``)
- **DebugPrinter**: traces lifecycle events (``debug``)
- **TimingRecorder**: per-filter timing table (``verbose``)
- **GCController**: batches garbage collection (not on CI)
- **FileActionPrinter**: created / updated / identical / skipped files (always)
- **Profiler**: cProfile dump (``profile``, ``profiler`` feature only)

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from whisker import features
from whisker.listeners.base import Listener
from whisker.listeners.debug import DebugPrinter
from whisker.listeners.diff import DiffGenerator
from whisker.listeners.file_actions import FileActionPrinter
from whisker.listeners.gc_control import GCController
from whisker.listeners.profiler import Profiler
from whisker.listeners.timing import TimingRecorder

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "DebugPrinter",
    "DiffGenerator",
    "FileActionPrinter",
    "GCController",
    "Listener",
    "Profiler",
    "TimingRecorder",
    "default_listener_classes",
]


def default_listener_classes(environ: Mapping[str, str] | None = None) -> list[type[Listener]]:
    """Listener classes a compile run considers, in start order."""
    classes: list[type[Listener]] = [
        DiffGenerator,
        DebugPrinter,
        TimingRecorder,
        GCController,
        FileActionPrinter,
    ]
    if features.enabled(features.PROFILER, environ):
        classes.append(Profiler)
    return classes
