"""Compile profiling — cProfile over the whole pass.

Enabled by the ``profile`` flag, and only offered at all when the
``profiler`` feature is switched on (see ``whisker.features``).  Stats are
dumped in ``pstats`` format to ``tmp/profile`` under the site root; inspect
them with ``python -m pstats tmp/profile``.

``cProfile`` traces every call rather than sampling, so a profiled pass runs
noticeably slower than a normal one and call-heavy code is overweighted.
"""

from __future__ import annotations

import cProfile
from pathlib import Path
from typing import TYPE_CHECKING, Any

from whisker.listeners.base import Listener

if TYPE_CHECKING:
    from whisker.config import RunContext


class Profiler(Listener):
    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._profile: cProfile.Profile | None = None

    @classmethod
    def is_applicable(cls, context: RunContext) -> bool:
        return context.profile

    @property
    def profile_file(self) -> Path:
        if self.context is None:
            return Path("tmp/profile").resolve()
        return self.context.profile_file

    def start(self) -> None:
        self._profile = cProfile.Profile()
        self._profile.enable()

    def stop(self) -> None:
        super().stop()
        profile, self._profile = self._profile, None
        if profile is None:
            return
        profile.disable()
        path = self.profile_file
        path.parent.mkdir(parents=True, exist_ok=True)
        profile.dump_stats(path)
