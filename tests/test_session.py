"""Tests for whisker.listeners.base and whisker.session — listener bracket."""

from __future__ import annotations

from typing import Any

import pytest

from whisker.config import RunContext
from whisker.listeners import (
    DebugPrinter,
    DiffGenerator,
    FileActionPrinter,
    GCController,
    Profiler,
    TimingRecorder,
    default_listener_classes,
)
from whisker.listeners.base import Listener
from whisker.notifications import NotificationCenter
from whisker.session import CompileSession

# ---------------------------------------------------------------------------
# Test listeners
# ---------------------------------------------------------------------------


class RecordingListener(Listener):
    """Records start/stop calls into a shared journal."""

    journal: list[str] = []

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.stopped = False

    def start(self) -> None:
        self.journal.append(f"start {type(self).__name__}")
        self.on("compilation_started", lambda rep: self.journal.append(f"event {type(self).__name__}"))

    def stop(self) -> None:
        super().stop()
        self.stopped = True
        self.journal.append(f"stop {type(self).__name__}")


class First(RecordingListener):
    pass


class Second(RecordingListener):
    pass


class VerboseOnly(RecordingListener):
    @classmethod
    def is_applicable(cls, context: RunContext) -> bool:
        return context.verbose


class FailsToStart(RecordingListener):
    def start(self) -> None:
        self.journal.append("start FailsToStart")
        raise RuntimeError("cannot start")


class FailsAfterSubscribing(RecordingListener):
    def start(self) -> None:
        super().start()
        raise RuntimeError("half started")


class FailsToStop(RecordingListener):
    def stop(self) -> None:
        super().stop()
        raise RuntimeError("cannot stop")


@pytest.fixture(autouse=True)
def journal() -> list[str]:
    RecordingListener.journal = []
    return RecordingListener.journal


# ---------------------------------------------------------------------------
# Listener contract
# ---------------------------------------------------------------------------


class TestListenerContract:
    """start_safely() / stop_safely() guarantees."""

    def test_stop_safely_without_start_does_nothing(self, center: NotificationCenter) -> None:
        listener = First(center=center)

        listener.stop_safely()

        assert listener.stopped is False
        assert RecordingListener.journal == []

    def test_stop_runs_once(self, center: NotificationCenter) -> None:
        listener = First(center=center)
        listener.start_safely()

        listener.stop_safely()
        listener.stop_safely()

        assert RecordingListener.journal == ["start First", "stop First"]
        assert not listener.started

    def test_failed_start_is_not_marked_started(self, center: NotificationCenter) -> None:
        listener = FailsToStart(center=center)

        with pytest.raises(RuntimeError):
            listener.start_safely()

        assert not listener.started
        listener.stop_safely()
        assert listener.stopped is False

    def test_failed_start_drops_partial_subscriptions(self, center: NotificationCenter) -> None:
        listener = FailsAfterSubscribing(center=center)

        with pytest.raises(RuntimeError, match="half started"):
            listener.start_safely()

        assert center.events() == frozenset()

    def test_stop_removes_subscriptions(self, center: NotificationCenter) -> None:
        listener = First(center=center)
        listener.start_safely()
        assert center.subscriber_count("compilation_started") == 1

        listener.stop_safely()

        assert center.subscriber_count("compilation_started") == 0

    def test_default_applicability(self, context: RunContext) -> None:
        assert First.is_applicable(context) is True

    def test_start_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            Listener()  # type: ignore[abstract]


# ---------------------------------------------------------------------------
# CompileSession
# ---------------------------------------------------------------------------


class TestSelect:
    def test_filters_by_applicability_in_declaration_order(
        self, context: RunContext, center: NotificationCenter,
    ) -> None:
        session = CompileSession(
            context, center=center, listener_classes=[Second, VerboseOnly, First],
        )

        selected = session.select()

        assert [type(listener) for listener in selected] == [Second, First]

    def test_listeners_receive_shared_references(
        self, context: RunContext, center: NotificationCenter,
    ) -> None:
        reps = ["rep-a", "rep-b"]
        session = CompileSession(context, reps=reps, center=center, listener_classes=[First])

        (listener,) = session.select()

        assert listener.center is center
        assert listener.reps is reps
        assert listener.context is context


class TestRun:
    """run() — bracket semantics."""

    def test_starts_runs_and_stops_in_order(
        self, context: RunContext, center: NotificationCenter, journal: list[str],
    ) -> None:
        session = CompileSession(context, center=center, listener_classes=[First, Second])

        result = session.run(lambda: center.publish("compilation_started", "rep") or "done")

        assert result == "done"
        assert journal == [
            "start First", "start Second",
            "event First", "event Second",
            "stop First", "stop Second",
        ]
        assert session.listeners == ()

    def test_body_error_propagates_after_teardown(
        self, context: RunContext, center: NotificationCenter, journal: list[str],
    ) -> None:
        session = CompileSession(context, center=center, listener_classes=[First, Second])

        def body() -> None:
            raise ValueError("compile failed")

        with pytest.raises(ValueError, match="compile failed"):
            session.run(body)

        assert journal[-2:] == ["stop First", "stop Second"]
        assert center.events() == frozenset()

    def test_listeners_started_during_body(
        self, context: RunContext, center: NotificationCenter,
    ) -> None:
        session = CompileSession(context, center=center, listener_classes=[First])
        seen: list[tuple] = []

        session.run(lambda: seen.append(tuple(l.started for l in session.listeners)))

        assert seen == [(True,)]

    def test_running_context_manager(
        self, context: RunContext, center: NotificationCenter, journal: list[str],
    ) -> None:
        session = CompileSession(context, center=center, listener_classes=[First])

        with session.running() as running:
            assert running is session
            assert journal == ["start First"]

        assert journal == ["start First", "stop First"]


class TestPartialFailure:
    """Start and stop failures across several listeners."""

    def test_start_failure_stops_already_started(
        self, context: RunContext, center: NotificationCenter, journal: list[str],
    ) -> None:
        session = CompileSession(
            context, center=center, listener_classes=[First, FailsToStart, Second],
        )
        body_ran: list[bool] = []

        with pytest.raises(RuntimeError, match="cannot start"):
            session.run(lambda: body_ran.append(True))

        assert body_ran == []
        assert journal == ["start First", "start FailsToStart", "stop First"]

    def test_start_failure_leaves_center_clean(
        self, context: RunContext, center: NotificationCenter, journal: list[str],
    ) -> None:
        session = CompileSession(
            context, center=center, listener_classes=[First, FailsAfterSubscribing],
        )

        with pytest.raises(RuntimeError, match="half started"):
            session.start()

        assert center.events() == frozenset()
        center.publish("compilation_started", object())
        assert "event FailsAfterSubscribing" not in journal

    def test_stop_failure_does_not_block_others(
        self, context: RunContext, center: NotificationCenter, journal: list[str],
    ) -> None:
        session = CompileSession(
            context, center=center, listener_classes=[FailsToStop, Second],
        )

        with pytest.raises(RuntimeError, match="cannot stop"):
            session.run(lambda: None)

        assert "stop Second" in journal

    def test_body_error_wins_over_stop_error(
        self, context: RunContext, center: NotificationCenter,
    ) -> None:
        session = CompileSession(context, center=center, listener_classes=[FailsToStop])

        def body() -> None:
            raise ValueError("compile failed")

        with pytest.raises(ValueError, match="compile failed") as excinfo:
            session.run(body)

        assert any("cannot stop" in note for note in excinfo.value.__notes__)


class TestDefaultListeners:
    def test_default_order(self) -> None:
        assert default_listener_classes({}) == [
            DiffGenerator, DebugPrinter, TimingRecorder, GCController, FileActionPrinter,
        ]

    def test_profiler_only_with_feature(self) -> None:
        assert Profiler not in default_listener_classes({})
        assert default_listener_classes({"WHISKER_FEATURES": "profiler"})[-1] is Profiler

    def test_session_uses_context_environment(self, tmp_path) -> None:
        context = RunContext(root=tmp_path, environ={"WHISKER_FEATURES": "all"})

        session = CompileSession(context)

        assert Profiler in session.listener_classes

    def test_plain_context_selects_file_actions_and_gc(
        self, context: RunContext, center: NotificationCenter,
    ) -> None:
        session = CompileSession(context, center=center)

        assert [type(l) for l in session.select()] == [GCController, FileActionPrinter]
