"""Dependency tracking — turns nested compilation into dependency edges.

While an item is being compiled, anything it reads (another item's content,
a layout) is *entered* on top of it.  Every enter with a non-empty stack
records the edge ``(top of stack, entered object)``: compiling the top
required the entered object.

    tracker = DependencyTracker(store, center=center)
    with tracker.enter(Item("/about/")):         # stack: [about]
        with tracker.enter(Layout("/default/")):  # edge about -> default
            ...
        tracker.bounce(Item("/team/"))           # edge about -> team

The tracker does no deduplication and no cycle detection.  Entering an
object on top of itself records a self-loop; the store or whatever reads
the graph decides what to do with it.

The stack belongs to one compile pass on one thread.  The edge store is the
only part that may be shared.

"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Protocol

from whisker._errors import DependencyTrackingError, InvalidContentRefError
from whisker.model import CONTENT_REF_TYPES
from whisker.notifications import Event, default_center

if TYPE_CHECKING:
    from types import TracebackType

    from whisker.model import ContentRef
    from whisker.notifications import NotificationCenter


class DependencyStore(Protocol):
    """Receives dependency edges as they are discovered."""

    def record_dependency(self, dependent: ContentRef, dependency: ContentRef) -> None: ...


class MemoryDependencyStore:
    """Edge list kept in memory, in discovery order.

    Duplicate edges are kept.  Persisting or merging the graph across passes
    is left to the caller.

    """

    __slots__ = ("_edges", "_lock")

    def __init__(self) -> None:
        self._edges: list[tuple[ContentRef, ContentRef]] = []
        self._lock = threading.Lock()

    def record_dependency(self, dependent: ContentRef, dependency: ContentRef) -> None:
        """Record that compiling *dependent* read *dependency*."""
        with self._lock:
            self._edges.append((dependent, dependency))

    @property
    def edges(self) -> tuple[tuple[ContentRef, ContentRef], ...]:
        """All recorded edges, oldest first."""
        with self._lock:
            return tuple(self._edges)

    def dependencies_of(self, obj: ContentRef) -> list[ContentRef]:
        """Objects *obj* depends on, in first-recorded order, without repeats."""
        with self._lock:
            return list(dict.fromkeys(dst for src, dst in self._edges if src == obj))

    def dependents_of(self, obj: ContentRef) -> list[ContentRef]:
        """Objects that depend on *obj*, in first-recorded order, without repeats."""
        with self._lock:
            return list(dict.fromkeys(src for src, dst in self._edges if dst == obj))

    def __len__(self) -> int:
        with self._lock:
            return len(self._edges)


def _check_ref(obj: object) -> None:
    if not isinstance(obj, CONTENT_REF_TYPES):
        msg = f"expected an Item or a Layout, got {type(obj).__name__}: {obj!r}"
        raise InvalidContentRefError(msg)


class TrackingScope:
    """Handle returned by ``enter``; releasing it exits the compilation.

    Usable as a context manager.  Release is idempotent and checks that the
    scope's object is still on top of the stack; an out-of-order release
    raises ``DependencyTrackingError``.

    """

    __slots__ = ("_obj", "_released", "_tracker")

    def __init__(self, tracker: DependencyTracker | None, obj: ContentRef) -> None:
        self._tracker = tracker
        self._obj = obj
        self._released = tracker is None

    @property
    def obj(self) -> ContentRef:
        return self._obj

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Exit the compilation context this scope opened."""
        if self._released or self._tracker is None:
            return
        top = self._tracker.top
        if top is not self._obj:
            msg = f"cannot release {self._obj!r}: top of compilation stack is {top!r}"
            raise DependencyTrackingError(msg)
        self._tracker.exit(self._obj)
        self._released = True

    def __enter__(self) -> TrackingScope:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


class DependencyTracker:
    """Records dependency edges from a stack of objects being compiled.

    Args:
        store: Receives ``(dependent, dependency)`` edges.
        center: Where ``dependency_created`` is published.  Defaults to the
            process-wide center.

    """

    __slots__ = ("_center", "_stack", "_store")

    def __init__(
        self,
        store: DependencyStore,
        *,
        center: NotificationCenter | None = None,
    ) -> None:
        self._store = store
        self._center = center if center is not None else default_center()
        self._stack: list[ContentRef] = []

    @property
    def stack(self) -> tuple[ContentRef, ...]:
        """Current compilation stack, outermost first."""
        return tuple(self._stack)

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def top(self) -> ContentRef | None:
        """Object currently being compiled, or None outside any compilation."""
        return self._stack[-1] if self._stack else None

    def enter(self, obj: ContentRef) -> TrackingScope:
        """Start compiling (or reading) *obj* inside the current context.

        Records an edge from the current top of the stack onto *obj*, then
        makes *obj* the new top.

        Raises:
            InvalidContentRefError: If *obj* is not an Item or a Layout.

        """
        _check_ref(obj)
        if self._stack:
            top = self._stack[-1]
            self._center.publish(Event.DEPENDENCY_CREATED, top, obj)
            self._store.record_dependency(top, obj)
        self._stack.append(obj)
        return TrackingScope(self, obj)

    def exit(self, obj: ContentRef) -> None:
        """Leave the innermost compilation context.

        The popped object is not compared with *obj*; use the scope returned
        by ``enter`` for a checked exit.

        Raises:
            InvalidContentRefError: If *obj* is not an Item or a Layout.
            DependencyTrackingError: If the stack is empty.

        """
        _check_ref(obj)
        if not self._stack:
            msg = f"exit({obj!r}) called with an empty compilation stack"
            raise DependencyTrackingError(msg)
        self._stack.pop()

    def bounce(self, obj: ContentRef) -> None:
        """Record a dependency onto *obj* without compiling inside it."""
        self.enter(obj)
        self.exit(obj)


class NullDependencyTracker:
    """Tracker that records nothing, for runs without dependency tracking."""

    __slots__ = ()

    @property
    def stack(self) -> tuple[ContentRef, ...]:
        return ()

    @property
    def depth(self) -> int:
        return 0

    @property
    def top(self) -> ContentRef | None:
        return None

    def enter(self, obj: ContentRef) -> TrackingScope:
        return TrackingScope(None, obj)

    def exit(self, obj: ContentRef) -> None:
        pass

    def bounce(self, obj: ContentRef) -> None:
        pass
