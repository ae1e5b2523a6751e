"""Compile session — listeners bracketed around one compile pass.

The session picks the listeners that apply to the run context, starts them
in declaration order, runs the compile pass, and stops every started
listener in the same order on every exit path:

    session = CompileSession(context, reps=reps, center=center)
    session.run(compiler.compile)

Failure handling:
    - An error from the compile pass propagates unchanged, after teardown.
    - If a listener fails to start, the listeners started before it are
      stopped and the start error propagates.
    - A listener failing to stop does not keep the others from stopping.
      Its error is raised once all have stopped, unless the pass itself
      failed; then it is attached to the pass error as a note.

"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from whisker.listeners import default_listener_classes
from whisker.notifications import default_center

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from whisker._types import CompilePass
    from whisker.config import RunContext
    from whisker.listeners.base import Listener
    from whisker.model import Rep
    from whisker.notifications import NotificationCenter


class CompileSession:
    """Owns the listeners for one compile pass.

    Args:
        context: Flags the run was started with.
        reps: Every representation planned for the pass.
        center: Notification center the pass publishes to.
        listener_classes: Listener classes to consider, in start order.
            Defaults to ``default_listener_classes()``.

    """

    def __init__(
        self,
        context: RunContext,
        *,
        reps: Sequence[Rep] = (),
        center: NotificationCenter | None = None,
        listener_classes: Iterable[type[Listener]] | None = None,
    ) -> None:
        self.context = context
        self.reps = reps
        self.center = center if center is not None else default_center()
        if listener_classes is None:
            listener_classes = default_listener_classes(context.environ)
        self.listener_classes: list[type[Listener]] = list(listener_classes)
        self._listeners: list[Listener] = []

    @property
    def listeners(self) -> tuple[Listener, ...]:
        """Listeners started by this session and not yet stopped."""
        return tuple(self._listeners)

    def select(self) -> list[Listener]:
        """Instantiate every listener class that applies to the context."""
        return [
            cls(center=self.center, reps=self.reps, context=self.context)
            for cls in self.listener_classes
            if cls.is_applicable(self.context)
        ]

    def start(self) -> None:
        """Start every applicable listener, in declaration order."""
        self._listeners = []
        for listener in self.select():
            try:
                listener.start_safely()
            except BaseException as exc:
                self._stop_after(exc)
                raise
            self._listeners.append(listener)

    def stop(self) -> None:
        """Stop every started listener, in start order."""
        listeners, self._listeners = self._listeners, []
        first_error: Exception | None = None
        for listener in listeners:
            try:
                listener.stop_safely()
            except Exception as exc:
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def _stop_after(self, exc: BaseException) -> None:
        """Tear down after *exc*, which stays the error that propagates."""
        try:
            self.stop()
        except Exception as stop_exc:
            exc.add_note(f"listener teardown also failed: {stop_exc!r}")

    @contextmanager
    def running(self) -> Iterator[CompileSession]:
        """Keep the listeners started for the duration of the block."""
        self.start()
        try:
            yield self
        except BaseException as exc:
            self._stop_after(exc)
            raise
        self.stop()

    def run(self, body: CompilePass) -> Any:
        """Run *body* with all applicable listeners started.

        Returns whatever *body* returns.

        """
        with self.running():
            return body()
