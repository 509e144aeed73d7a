from __future__ import annotations

from undo_engine.checkpoint import HistoryCursor
from undo_engine.commands import BufferHost
from undo_engine.history import Buffer, EditEntry, LogPosition, UndoMode


def make_host(*inserts: str) -> BufferHost:
    host = BufferHost(Buffer(name="doc"))
    for text in inserts:
        host.run_command(lambda buf, text=text: buf.insert_text(text))
    return host


def test_plain_edit_head_is_not_redo_equivalent() -> None:
    host = make_host("a", "b")
    cursor = HistoryCursor(host)

    assert not cursor.is_at_redo_equivalent(cursor.head)
    assert cursor.equivalent_of(cursor.head) is None


def test_head_after_undo_is_redo_equivalent() -> None:
    host = make_host("a", "b")
    cursor = HistoryCursor(host)
    before = cursor.head

    host.buffer.undo()

    assert cursor.is_at_redo_equivalent(cursor.head)
    assert cursor.equivalent_of(cursor.head) is before.parent.parent


def test_checkpoint_position_is_never_redo_equivalent() -> None:
    host = make_host("a")
    cursor = HistoryCursor(host)
    host.buffer.undo()
    head = cursor.head

    assert cursor.is_at_redo_equivalent(head)
    assert not cursor.is_at_redo_equivalent(head, checkpoint=head)
    assert not cursor.is_at_redo_equivalent(head, checkpoint=cursor.skip_boundaries(head))


def test_next_group_boundary_skips_entries_then_boundaries() -> None:
    a = EditEntry(offset=0, inserted="a")
    b = EditEntry(offset=1, inserted="b")
    first = LogPosition(entry=None).push(a)
    top = first.push(None).push(None).push(b).push(b)

    assert HistoryCursor.next_group_boundary(top) is first
    assert HistoryCursor.next_group_boundary(first.parent) is first.parent


def test_region_marker_has_no_equivalent_position() -> None:
    host = make_host("abc")
    host.buffer.select((0, 0), (0, 3))
    host.buffer.undo(mode=UndoMode.SELECTION)
    cursor = HistoryCursor(host)

    assert cursor.is_at_redo_equivalent(cursor.head)
    assert cursor.equivalent_of(cursor.head) is None


def test_count_redo_available_follows_consecutive_undos() -> None:
    host = make_host("a", "b", "c")
    cursor = HistoryCursor(host)
    checkpoint = cursor.head
    host.buffer.undo()
    host.buffer.undo(continuing=True)

    assert cursor.count_redo_available(cursor.head, 10) == 2
    assert cursor.count_redo_available(cursor.head, 1) == 1
    assert cursor.count_redo_available(cursor.head, 10, checkpoint=checkpoint) == 2


def test_count_redo_available_stops_at_checkpoint() -> None:
    host = make_host("a", "b")
    cursor = HistoryCursor(host)
    host.buffer.undo()
    checkpoint = cursor.head
    host.buffer.undo()

    assert cursor.count_redo_available(cursor.head, 10) == 2
    assert cursor.count_redo_available(cursor.head, 10, checkpoint=checkpoint) == 1
