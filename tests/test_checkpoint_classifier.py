from __future__ import annotations

from undo_engine.checkpoint import (
    CheckpointConfig,
    CheckpointRegistry,
    CheckpointState,
    CommandIdentity,
    HistoryCursor,
    Invocation,
    RunClassifier,
)
from undo_engine.commands import BufferHost
from undo_engine.history import Buffer


def make_classifier(
    *, allow_undo_in_region: bool = False
) -> tuple[RunClassifier, BufferHost]:
    host = BufferHost(Buffer(name="doc"))
    host.run_command(lambda buf: buf.insert_text("a"))
    config = CheckpointConfig(allow_undo_in_region=allow_undo_in_region)
    return RunClassifier(HistoryCursor(host), config), host


def test_continuity_flags_per_identity() -> None:
    classifier, _ = make_classifier()
    expected = {
        CommandIdentity.PLAIN_UNDO: (True, False),
        CommandIdentity.CONSTRAINED_UNDO: (True, False),
        CommandIdentity.CONSTRAINED_REDO: (False, True),
        CommandIdentity.CANCEL: (False, False),
        CommandIdentity.OTHER: (False, False),
    }

    for identity, (was_undo, was_redo) in expected.items():
        continuity = classifier.classify(CheckpointState(), identity, Invocation.REDO)
        assert (continuity.was_undo, continuity.was_redo) == (was_undo, was_redo)
        assert continuity.continues is (was_undo or was_redo)


def test_unrelated_command_restores_enforcement() -> None:
    classifier, _ = make_classifier()
    state = CheckpointState(respect=False, in_region=True)

    classifier.classify(state, CommandIdentity.OTHER, Invocation.REDO)

    assert state.respect is True
    # in_region is only reset when region undo is configured
    assert state.in_region is True


def test_unrelated_command_clears_region_when_configured() -> None:
    classifier, _ = make_classifier(allow_undo_in_region=True)
    state = CheckpointState(respect=False, in_region=True)

    classifier.classify(state, CommandIdentity.CANCEL, Invocation.UNDO)

    assert state.respect is True
    assert state.in_region is False


def test_override_survives_a_continuing_run() -> None:
    classifier, _ = make_classifier(allow_undo_in_region=True)
    state = CheckpointState(respect=False, in_region=True)

    for previous in (CommandIdentity.CONSTRAINED_REDO, CommandIdentity.PLAIN_UNDO):
        classifier.classify(state, previous, Invocation.UNDO)

    assert state.respect is False
    assert state.in_region is True


def test_fresh_undo_captures_checkpoint() -> None:
    classifier, host = make_classifier()
    state = CheckpointState()

    classifier.classify(state, CommandIdentity.OTHER, Invocation.UNDO)
    captured = state.checkpoint
    host.run_command(lambda buf: buf.insert_text("b"))
    classifier.classify(state, CommandIdentity.CONSTRAINED_UNDO, Invocation.UNDO)
    classifier.classify(state, CommandIdentity.OTHER, Invocation.REDO)

    assert captured is not None
    assert state.checkpoint is captured
    assert captured is not host.head()


def test_registry_hands_out_one_state_per_document() -> None:
    registry = CheckpointRegistry()

    first = registry.state_for("one")
    first.disable()

    assert registry.state_for("one") is first
    assert registry.state_for("two").respect is True
    assert sorted(registry) == ["one", "two"]

    assert registry.discard("one") is first
    assert "one" not in registry
    assert registry.state_for("one").respect is True
    assert len(registry) == 2
