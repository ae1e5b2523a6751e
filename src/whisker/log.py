"""Terminal output — file-action lines and warnings.

Reports go to stdout, warnings to stderr.  ANSI color is used only when the
target stream is a TTY and ``NO_COLOR`` / ``TERM=dumb`` do not opt out.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from whisker._types import FileAction, LoggerLevel, LogLevel


# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

_RESET = "\033[0m"

_ACTION_COLORS: dict[str, str] = {
    "create": "\033[32m",
    "update": "\033[33m",
    "delete": "\033[31m",
    "identical": "",
    "skip": "",
}


def supports_color(stream: TextIO) -> bool:
    """Return True if *stream* is a terminal that accepts ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(stream, "isatty") and stream.isatty()


# ---------------------------------------------------------------------------
# File logger
# ---------------------------------------------------------------------------


class FileLogger:
    """Prints one line per output file action.

    Lines look like::

              create  [0.12s]  output/about/index.html
           identical  output/index.html

    Args:
        level: ``"high"`` prints only high-importance lines (created and
            updated files), ``"low"`` prints everything, ``"off"`` prints
            nothing.
        stream: Target stream.  Defaults to ``sys.stdout`` at write time.

    """

    __slots__ = ("_stream", "level")

    def __init__(self, level: LoggerLevel = "high", stream: TextIO | None = None) -> None:
        self.level: LoggerLevel = level
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def file(
        self,
        level: LogLevel,
        action: FileAction,
        path: str,
        duration: float | None = None,
    ) -> None:
        """Log an action taken on an output file."""
        stream = self.stream
        if supports_color(stream):
            color, reset = _ACTION_COLORS.get(action, ""), _RESET
        else:
            color, reset = "", ""
        timing = "" if duration is None else f"[{duration:2.2f}s]  "
        self.log(level, f"{color}{action:>12}{reset}  {timing}{path}")

    def log(self, level: LogLevel, message: str) -> None:
        """Print *message* if the logger's level admits *level*."""
        if self.level == "off":
            return
        if self.level != "low" and self.level != level:
            return
        print(message, file=self.stream)


def warn(message: str) -> None:
    """Print a warning to stderr."""
    print(f"Warning: {message}", file=sys.stderr)
