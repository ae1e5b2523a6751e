"""Whisker — compilation core for static-content builds.

Coordinates a single compile pass over a content graph.  The compiler itself
(filters, layouts, rules) lives elsewhere; whisker supplies the pieces that
surround it:

    notifications   Synchronous event bus (compilation lifecycle events)
    dependencies    Records which item or layout was read while compiling which
    listeners       Pluggable observers bracketed around a compile pass
    session         Starts listeners, runs the pass, always tears them down

Quick start::

    import whisker

    context = whisker.load_context("my-site/", verbose=True)
    whisker.compile_site(compiler.compile, context=context, reps=compiler.reps)

Dependency tracking::

    from whisker import DependencyTracker, Item, MemoryDependencyStore

    store = MemoryDependencyStore()
    tracker = DependencyTracker(store)
    with tracker.enter(Item("/about/")):
        tracker.bounce(Item("/team/"))

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "CompileSession",
    "DependencyTracker",
    "Event",
    "Item",
    "ItemRep",
    "Layout",
    "MemoryDependencyStore",
    "NotificationCenter",
    "NullDependencyTracker",
    "RunContext",
    "__version__",
    "compile_site",
    "load_context",
]

_LAZY: dict[str, str] = {
    "CompileSession": "whisker.session",
    "DependencyTracker": "whisker.dependencies",
    "Event": "whisker.notifications",
    "Item": "whisker.model",
    "ItemRep": "whisker.model",
    "Layout": "whisker.model",
    "MemoryDependencyStore": "whisker.dependencies",
    "NotificationCenter": "whisker.notifications",
    "NullDependencyTracker": "whisker.dependencies",
    "RunContext": "whisker.config",
    "compile_site": "whisker.compile",
    "load_context": "whisker.config_loader",
}


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import whisker`` fast; submodules load on first attribute access.
    """
    module_name = _LAZY.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
