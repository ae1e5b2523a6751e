"""Debug tracing — one stdout line per compilation lifecycle event."""

from __future__ import annotations

from typing import TYPE_CHECKING

from whisker.listeners.base import Listener
from whisker.notifications import Event

if TYPE_CHECKING:
    from whisker.config import RunContext
    from whisker.model import ContentRef, Rep


class DebugPrinter(Listener):
    """Prints compilation, filtering and dependency events as they happen."""

    @classmethod
    def is_applicable(cls, context: RunContext) -> bool:
        return context.debug

    def start(self) -> None:
        self.on(Event.COMPILATION_STARTED, self._on_compilation_started)
        self.on(Event.COMPILATION_ENDED, self._on_compilation_ended)
        self.on(Event.COMPILATION_FAILED, self._on_compilation_failed)
        self.on(Event.CACHED_CONTENT_USED, self._on_cached_content_used)
        self.on(Event.FILTERING_STARTED, self._on_filtering_started)
        self.on(Event.FILTERING_ENDED, self._on_filtering_ended)
        self.on(Event.DEPENDENCY_CREATED, self._on_dependency_created)

    def _on_compilation_started(self, rep: Rep) -> None:
        print(f"*** Started compilation of {rep!r}")

    def _on_compilation_ended(self, rep: Rep) -> None:
        print(f"*** Ended compilation of {rep!r}")
        print()

    def _on_compilation_failed(self, rep: Rep, error: BaseException) -> None:
        print(f"*** Suspended compilation of {rep!r}: {error}")

    def _on_cached_content_used(self, rep: Rep) -> None:
        print(f"*** Used cached compiled content for {rep!r} instead of recompiling")

    def _on_filtering_started(self, rep: Rep, filter_name: str) -> None:
        print(f"*** Started filtering {rep!r} with {filter_name}")

    def _on_filtering_ended(self, rep: Rep, filter_name: str) -> None:
        print(f"*** Ended filtering {rep!r} with {filter_name}")

    def _on_dependency_created(self, src: ContentRef, dst: ContentRef) -> None:
        print(f"*** Dependency created from {src!r} onto {dst!r}")
