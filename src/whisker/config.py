"""Whisker run context.

RunContext carries the flags a compile run was started with.  Listeners read
it to decide whether they apply; nothing else in the core consumes it.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

# Environment variables that mark a continuous-integration run
CI_ENVIRONMENT_KEYS: tuple[str, ...] = ("TRAVIS",)


def _environ_snapshot() -> Mapping[str, str]:
    return MappingProxyType(dict(os.environ))


@dataclass(frozen=True, slots=True)
class RunContext:
    """Flags and paths for one compile run, frozen after creation.

    Attributes:
        root: Site root directory.  Always resolved to an absolute path on
            construction.
        verbose: Print per-filter timing statistics when the pass ends.
        debug: Trace every lifecycle event to stdout.
        profile: Profile the compile pass (requires the ``profiler`` feature).
        enable_output_diff: Write a unified diff of every changed output file.
        output_diff_path: Diff report location, relative to ``root`` unless
            absolute.
        profile_path: Profile dump location, relative to ``root`` unless
            absolute.
        environ: Snapshot of the process environment.

    """

    root: Path = field(default_factory=Path.cwd)
    verbose: bool = False
    debug: bool = False
    profile: bool = False
    enable_output_diff: bool = False
    output_diff_path: Path = field(default_factory=lambda: Path("output.diff"))
    profile_path: Path = field(default_factory=lambda: Path("tmp/profile"))
    environ: Mapping[str, str] = field(default_factory=_environ_snapshot)

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

    @property
    def output_diff_file(self) -> Path:
        """Absolute path to the diff report."""
        if self.output_diff_path.is_absolute():
            return self.output_diff_path
        return self.root / self.output_diff_path

    @property
    def profile_file(self) -> Path:
        """Absolute path to the profile dump."""
        if self.profile_path.is_absolute():
            return self.profile_path
        return self.root / self.profile_path

    @property
    def is_ci(self) -> bool:
        """True when running under a known continuous-integration service."""
        return any(key in self.environ for key in CI_ENVIRONMENT_KEYS)
