from __future__ import annotations

import pytest

from undo_engine.history import (
    Buffer,
    BufferDocument,
    BufferValidationError,
    EditEntry,
    EditLog,
    EquivalenceTable,
    LogPosition,
    REGION,
    Transaction,
)


def make_buffer(*inserts: str) -> Buffer:
    buffer = Buffer(name="doc")
    for text in inserts:
        buffer.insert_text(text)
    return buffer


def test_edit_entry_inverse_and_extent() -> None:
    entry = EditEntry(offset=2, removed="ab", inserted="xyz")

    assert entry.inverted() == EditEntry(offset=2, removed="xyz", inserted="ab")
    assert entry.end == 5
    assert entry.delta == 1


def test_edit_log_separates_groups_with_single_boundary() -> None:
    log = EditLog()
    assert log.head is log.origin
    assert log.head.is_boundary and log.head.is_origin

    log.record(EditEntry(offset=0, inserted="a"))
    first = log.add_boundary()
    again = log.add_boundary()

    assert first is again
    assert len(log) == 2
    assert log.entries() == [EditEntry(offset=0, inserted="a")]


def test_rewind_keeps_abandoned_cells_alive() -> None:
    log = EditLog()
    log.record(EditEntry(offset=0, inserted="a"))
    kept = log.add_boundary()
    log.record(EditEntry(offset=1, inserted="b"))
    abandoned = log.add_boundary()

    log.rewind(kept)

    assert log.head is kept
    assert log.entries() == [EditEntry(offset=0, inserted="a")]
    assert abandoned.parent is not None
    assert abandoned.parent.entry == EditEntry(offset=1, inserted="b")


def test_log_positions_compare_by_identity() -> None:
    first = LogPosition(entry=None)
    second = LogPosition(entry=None)
    table = EquivalenceTable()

    table.record(first, REGION)

    assert first != second
    assert first in table
    assert second not in table
    assert table.get(first) is REGION
    assert len(table) == 1


def test_walk_yields_newest_first_without_origin() -> None:
    cell = LogPosition(entry=None).push(EditEntry(offset=0, inserted="a")).push(None)

    walked = list(cell.walk())

    assert [c.is_boundary for c in walked] == [True, False]
    assert walked[-1].depth == 1


def test_document_splice_bumps_version_and_maps_offsets() -> None:
    document = BufferDocument.from_text("one\ntwo")

    updated = document.splice(4, 3, "three")

    assert document.text == "one\ntwo"
    assert updated.text == "one\nthree"
    assert updated.version == document.version + 1
    assert updated.offset_for((1, 2)) == 6
    assert updated.cursor_for(6) == (1, 2)
    assert updated.cursor_for(99) == (1, 5)
    assert len(updated) == 9


def test_each_edit_closes_its_own_group() -> None:
    buffer = make_buffer("a", "b")

    assert buffer.text == "ab"
    assert buffer.state.cursor == (0, 2)
    assert buffer.log.head.is_boundary
    assert [c.is_boundary for c in buffer.log.head.walk()] == [True, False, True, False]


def test_transaction_groups_several_edits() -> None:
    buffer = make_buffer()

    with Transaction(buffer, "batch") as tx:
        tx.apply(EditEntry(offset=0, inserted="ab"))
        tx.apply(EditEntry(offset=2, inserted="cd"))

    boundaries = [c for c in buffer.log.head.walk() if c.is_boundary]
    assert buffer.text == "abcd"
    assert len(boundaries) == 1
    assert len(tx.entries) == 2


def test_transaction_leaves_group_open_on_error() -> None:
    buffer = make_buffer()

    with pytest.raises(RuntimeError):
        with Transaction(buffer, "broken") as tx:
            tx.apply(EditEntry(offset=0, inserted="a"))
            raise RuntimeError("boom")

    assert not buffer.log.head.is_boundary


def test_replace_range_records_removed_text() -> None:
    buffer = Buffer.from_text("hello world")

    delta = buffer.replace_range((0, 6), (0, 11), "there", label="replace")

    assert delta.text == "hello there"
    assert buffer.log.entries() == [
        EditEntry(offset=6, removed="world", inserted="there")
    ]


def test_buffer_rejects_out_of_range_cursors() -> None:
    buffer = Buffer.from_text("abc")

    with pytest.raises(BufferValidationError) as excinfo:
        buffer.insert_text("x", cursor=(3, 0))
    assert excinfo.value.cursor == (3, 0)

    with pytest.raises(BufferValidationError):
        buffer.move_cursor((0, 4))


def test_selection_and_mirror_snapshot() -> None:
    buffer = Buffer.from_text("abc")

    buffer.select((0, 2), (0, 0))
    mirror = buffer.mirror(attributes={"mode": "edit"})

    assert buffer.state.cursor == (0, 0)
    assert buffer.state.ordered_selection() == ((0, 0), (0, 2))
    assert mirror.selection == ((0, 2), (0, 0))
    assert mirror.attributes == {"mode": "edit"}

    buffer.select((0, 1), (0, 1))
    assert not buffer.state.has_selection
