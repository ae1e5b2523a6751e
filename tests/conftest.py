"""Shared test fixtures for whisker."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from whisker.config import RunContext
from whisker.model import Item, ItemRep
from whisker.notifications import Event, NotificationCenter


@pytest.fixture
def center() -> NotificationCenter:
    """A fresh notification center, isolated from the process default."""
    return NotificationCenter()


@pytest.fixture
def context(tmp_path: Path) -> RunContext:
    """Run context rooted at a temporary site directory, with a clean environment."""
    return RunContext(root=tmp_path, environ={})


def make_rep(
    identifier: str,
    *,
    raw_path: str | None = None,
    compiled: bool = False,
    binary: bool = False,
    name: str = "default",
    **snapshots: str,
) -> ItemRep:
    """Create an ItemRep whose ``last`` snapshot is written to *raw_path*."""
    raw_paths = dict(snapshots)
    if raw_path is not None:
        raw_paths["last"] = raw_path
    return ItemRep(
        item=Item(identifier), name=name, raw_paths=raw_paths,
        binary=binary, compiled=compiled,
    )


def write_rep(center: NotificationCenter, rep: Any, path: Path, content: str) -> None:
    """Write compiled content the way the output writer does.

    Publishes ``will_write_rep`` before and ``rep_written`` after the write,
    with the created/modified flags derived from the previous file state.
    """
    center.publish(Event.WILL_WRITE_REP, rep, str(path))
    created = not path.exists()
    modified = created or path.read_text(encoding="utf-8") != content
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    center.publish(Event.REP_WRITTEN, rep, str(path), created, modified)
