"""Compile command — runs one compile pass with its listeners.

    whisker.compile_site(compiler.compile, context=context, reps=compiler.reps)

Prints a start line, runs the pass inside a ``CompileSession``, and prints
the elapsed time once every listener has stopped.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from whisker.session import CompileSession

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from whisker._types import CompilePass
    from whisker.config import RunContext
    from whisker.listeners.base import Listener
    from whisker.model import Rep
    from whisker.notifications import NotificationCenter


def compile_site(
    compile_pass: CompilePass,
    *,
    context: RunContext,
    reps: Sequence[Rep] = (),
    center: NotificationCenter | None = None,
    listener_classes: Iterable[type[Listener]] | None = None,
) -> float:
    """Compile the site and report how long it took.

    Args:
        compile_pass: Runs the compiler; publishes lifecycle events to
            *center* as it goes.
        context: Flags the run was started with.
        reps: Every representation the pass plans to compile.
        center: Notification center *compile_pass* publishes to.
        listener_classes: Override the default listener set.

    Returns:
        Wall-clock seconds spent, listener teardown included.

    Raises:
        Whatever *compile_pass* raises, after every listener has stopped.

    """
    t0 = time.perf_counter()

    print("Compiling site…")
    session = CompileSession(
        context, reps=reps, center=center, listener_classes=listener_classes,
    )
    session.run(compile_pass)

    elapsed = time.perf_counter() - t0
    print()
    print(f"Site compiled in {elapsed:.2f}s.")
    return elapsed
