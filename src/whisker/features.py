"""Feature flags — opt-in switches read from the environment.

Set ``WHISKER_FEATURES`` to a comma-separated list of feature names, or to
``all``.  Unknown names are ignored.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_VAR = "WHISKER_FEATURES"

PROFILER = "profiler"

KNOWN_FEATURES: frozenset[str] = frozenset({PROFILER})


def enabled_features(environ: Mapping[str, str] | None = None) -> frozenset[str]:
    """Return the set of known features switched on in *environ*."""
    env = os.environ if environ is None else environ
    raw = env.get(ENV_VAR, "")
    names = {part.strip().lower() for part in raw.split(",") if part.strip()}
    if "all" in names:
        return KNOWN_FEATURES
    return frozenset(names & KNOWN_FEATURES)


def enabled(name: str, environ: Mapping[str, str] | None = None) -> bool:
    """Return True if the feature *name* is switched on."""
    return name in enabled_features(environ)
