"""Output diffs — unified diff of every output file a compile pass changes.

Enabled by ``enable_output_diff``.  Before each write the previous file
content is remembered; after the write, if old and new text differ, a
background job runs ``diff -u`` on the pair and appends the result to the
diff report (``output.diff`` by default).  Content is read as UTF-8 with
``surrogateescape``, so bytes that are not UTF-8 still compare unequal and
reach the report unchanged.

Thread Safety:
    Diff jobs run on a thread pool, concurrently with each other and with
    the compile pass.  Appends to the report are serialized by one lock.
    ``stop`` waits for every job, so the report is complete once the
    listener has stopped.

"""

from __future__ import annotations

import re
import subprocess
import tempfile
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, Any

from whisker.listeners.base import Listener
from whisker.log import warn
from whisker.notifications import Event

if TYPE_CHECKING:
    from whisker.config import RunContext
    from whisker.model import Rep

_OLD_HEADER = re.compile(r"^--- .*$", re.MULTILINE)
_NEW_HEADER = re.compile(r"^\+\+\+ .*$", re.MULTILINE)


def _read_text(path: Path) -> str | None:
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8", errors="surrogateescape")


def diff_strings(old: str, new: str) -> str | None:
    """Run ``diff -u`` on two strings.

    Returns the diff text, or None when there is no difference or the
    ``diff`` utility is not installed (a warning is printed in that case).

    """
    with tempfile.TemporaryDirectory(prefix="whisker-diff-") as tmp:
        old_file = Path(tmp) / "old"
        new_file = Path(tmp) / "new"
        old_file.write_text(old, encoding="utf-8", errors="surrogateescape")
        new_file.write_text(new, encoding="utf-8", errors="surrogateescape")
        try:
            result = subprocess.run(
                ["diff", "-u", str(old_file), str(new_file)],
                capture_output=True,
                encoding="utf-8",
                errors="surrogateescape",
                check=False,
            )
        except FileNotFoundError:
            warn(
                "Failed to run `diff`, so no diff with the previously compiled "
                "content will be available."
            )
            return None
    return result.stdout or None


def rewrite_headers(diff: str, path: str) -> str:
    """Point the ``---`` / ``+++`` header lines of *diff* at *path*."""
    diff = _OLD_HEADER.sub(lambda _m: f"--- {path}", diff, count=1)
    return _NEW_HEADER.sub(lambda _m: f"+++ {path}", diff, count=1)


class DiffGenerator(Listener):
    """Writes a diff report of changed, non-binary output files."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._old_contents: dict[Rep, str | None] = {}
        self._diff_lock = threading.Lock()
        self._pool: ThreadPoolExecutor | None = None
        self._jobs: list[Future[None]] = []

    @classmethod
    def is_applicable(cls, context: RunContext) -> bool:
        return context.enable_output_diff

    @property
    def diff_file(self) -> Path:
        """Absolute path of the diff report."""
        if self.context is None:
            return Path("output.diff").resolve()
        return self.context.output_diff_file

    def start(self) -> None:
        self.diff_file.unlink(missing_ok=True)
        self._pool = ThreadPoolExecutor(thread_name_prefix="whisker-diff")
        self.on(Event.WILL_WRITE_REP, self._on_will_write_rep)
        self.on(Event.REP_WRITTEN, self._on_rep_written)

    def stop(self) -> None:
        super().stop()
        pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown(wait=True)
        jobs, self._jobs = self._jobs, []
        self._old_contents.clear()
        # Surface the first failure; every job has already finished.
        for job in jobs:
            job.result()

    @property
    def pending_jobs(self) -> int:
        """Number of diff jobs submitted and not yet finished."""
        return sum(1 for job in self._jobs if not job.done())

    # ----- Event handlers -----

    def _on_will_write_rep(self, rep: Rep, path: str) -> None:
        self._old_contents[rep] = _read_text(Path(path))

    def _on_rep_written(self, rep: Rep, path: str, created: bool, modified: bool) -> None:
        old_content = self._old_contents.pop(rep, None)
        if rep.binary:
            return
        new_content = _read_text(Path(path))
        if old_content is not None and new_content is not None:
            self.generate_diff_for(path, old_content, new_content)

    # ----- Diff jobs -----

    def generate_diff_for(self, path: str, old_content: str, new_content: str) -> None:
        """Queue a diff job for *path*.  Identical content queues nothing."""
        if old_content == new_content:
            return
        if self._pool is None:
            msg = "DiffGenerator must be started before generating diffs"
            raise RuntimeError(msg)
        self._jobs.append(self._pool.submit(self._diff_job, path, old_content, new_content))

    def _diff_job(self, path: str, old_content: str, new_content: str) -> None:
        diff = diff_strings(old_content, new_content)
        if diff is None:
            return
        diff = rewrite_headers(diff, path)

        with self._diff_lock:
            diff_file = self.diff_file
            diff_file.parent.mkdir(parents=True, exist_ok=True)
            with diff_file.open("a", encoding="utf-8", errors="surrogateescape") as fh:
                fh.write(diff)
