from __future__ import annotations

from typing import List, Tuple

from undo_engine.checkpoint import (
    CheckpointConfig,
    CheckpointState,
    CommandIdentity,
    FailureKind,
    RunContinuity,
    UndoEngine,
)
from undo_engine.checkpoint.failures import (
    UNDO_END_POINT_IGNORED,
    UNDO_IN_REGION_IN_USE,
)
from undo_engine.commands import BufferHost
from undo_engine.history import NO_FURTHER_UNDO, Buffer, InverseOutcome, UndoMode

FRESH = RunContinuity(was_undo=False, was_redo=False)
CONTINUING = RunContinuity(was_undo=False, was_redo=True)


class RecordingHost(BufferHost):
    def __init__(self, buffer: Buffer) -> None:
        super().__init__(buffer)
        self.calls: List[Tuple[UndoMode, CommandIdentity]] = []

    def undo(
        self, steps: int, *, mode: UndoMode, previous: CommandIdentity
    ) -> InverseOutcome:
        self.calls.append((mode, previous))
        return super().undo(steps, mode=mode, previous=previous)


def make_engine(
    *inserts: str, allow_undo_in_region: bool = False
) -> Tuple[UndoEngine, RecordingHost]:
    host = RecordingHost(Buffer(name="doc"))
    for text in inserts:
        host.run_command(lambda buf, text=text: buf.insert_text(text))
    config = CheckpointConfig(allow_undo_in_region=allow_undo_in_region)
    return UndoEngine(host, config), host


def test_selection_is_cleared_when_region_undo_disabled() -> None:
    engine, host = make_engine("abc", "XYZ")
    host.buffer.select((0, 0), (0, 3))
    state = CheckpointState()

    result = engine.undo(state, FRESH, CommandIdentity.OTHER, 1)

    assert result.applied and not result.in_region
    assert host.buffer.state.selection is None
    assert host.buffer.text == "abc"
    assert host.calls == [(UndoMode.LINEAR, CommandIdentity.OTHER)]
    assert state.respect is True


def test_selection_scopes_undo_when_region_undo_enabled() -> None:
    engine, host = make_engine("abc", "XYZ", allow_undo_in_region=True)
    host.buffer.select((0, 0), (0, 3))
    state = CheckpointState()

    result = engine.undo(state, FRESH, CommandIdentity.OTHER, 1)

    assert result.applied and result.in_region
    assert host.buffer.text == "XYZ"
    assert host.buffer.state.selection == ((0, 0), (0, 3))
    assert host.messages == [UNDO_IN_REGION_IN_USE]
    assert (state.respect, state.in_region) == (False, True)
    assert host.calls[-1][0] is UndoMode.SELECTION


def test_cancel_before_undo_ignores_end_point_once() -> None:
    engine, host = make_engine("a", "b")
    state = CheckpointState()

    engine.undo(state, FRESH, CommandIdentity.CANCEL, 1)
    engine.undo(state, FRESH, CommandIdentity.CANCEL, 1)

    assert state.respect is False
    assert host.messages == [UNDO_END_POINT_IGNORED]


def test_continuing_run_is_presented_as_plain_undo() -> None:
    engine, host = make_engine("a", "b", "c")
    state = CheckpointState()

    engine.undo(state, FRESH, CommandIdentity.OTHER, 1)
    engine.undo(state, CONTINUING, CommandIdentity.CONSTRAINED_REDO, 1)

    assert host.calls[-1] == (UndoMode.LINEAR, CommandIdentity.PLAIN_UNDO)
    assert host.buffer.text == "a"


def test_host_refusal_becomes_nothing_to_undo() -> None:
    engine, host = make_engine()
    state = CheckpointState(respect=False)

    result = engine.undo(state, FRESH, CommandIdentity.OTHER, 1)

    assert not result.applied
    assert result.failure is FailureKind.NOTHING_TO_UNDO
    assert result.detail == NO_FURTHER_UNDO
    assert state.respect is False


def test_partial_undo_is_applied_and_reports_failure() -> None:
    engine, host = make_engine("a", "b")

    result = engine.undo(CheckpointState(), FRESH, CommandIdentity.OTHER, 4)

    assert result.applied and result.steps == 2
    assert result.failure is FailureKind.NOTHING_TO_UNDO
    assert host.buffer.text == ""
