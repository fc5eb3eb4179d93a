import pytest

from line_engine.buffer import (
    Argument,
    Buffer,
    BufferValidationError,
    KillRing,
    RegisterBank,
    RegisterValue,
    UNNAMED,
)
from line_engine.history import History, MemoryHistory


def make_buffer(text: str = "", cursor: int | None = None) -> Buffer:
    return Buffer(text, cursor=cursor)


def test_cursor_is_clamped_to_text() -> None:
    buffer = make_buffer("abc")

    buffer.cursor = 10
    assert buffer.cursor == 3
    buffer.cursor = -4
    assert buffer.cursor == 0


def test_insert_and_delete_range() -> None:
    buffer = make_buffer("hello", cursor=0)

    buffer.insert_text(">> ")
    removed = buffer.delete_range(3, 5)

    assert removed == "he"
    assert buffer.text == ">> llo"
    assert buffer.cursor == 3


def test_out_of_range_span_raises() -> None:
    buffer = make_buffer("abc")

    with pytest.raises(BufferValidationError) as excinfo:
        buffer.delete_range(1, 7)

    assert excinfo.value.offset == 7


def test_overwrite_stops_at_end_of_text() -> None:
    buffer = make_buffer("abcd")

    buffer.overwrite("XYZ", at=2)

    assert buffer.text == "abXY"


def test_line_bounds_for_multiline_text() -> None:
    buffer = make_buffer("one\ntwo\nthree", cursor=5)

    assert buffer.line_bounds() == (4, 7)
    assert buffer.line_bounds(0) == (0, 3)
    assert buffer.multiline


def test_contiguous_typing_is_one_undo_step() -> None:
    buffer = make_buffer()
    for char in "abc":
        buffer.insert_text(char)
    buffer.delete_range(0, 1)

    assert buffer.undo()
    assert buffer.text == "abc"
    assert buffer.undo()
    assert buffer.text == ""
    assert not buffer.undo()


def test_redo_restores_undone_edit() -> None:
    buffer = make_buffer("abc")
    buffer.delete_range(1, 2)
    buffer.undo()

    assert buffer.redo()
    assert buffer.text == "ac"
    assert buffer.cursor == 1


def test_reset_clears_undo_history() -> None:
    buffer = make_buffer()
    buffer.insert_text("abc")

    buffer.reset("new")

    assert buffer.text == "new"
    assert not buffer.undo()


def test_snapshot_tracks_version() -> None:
    buffer = make_buffer("a")
    before = buffer.snapshot()

    buffer.insert_text("b")

    after = buffer.snapshot()
    assert after.version > before.version
    assert (after.text, after.cursor) == ("ab", 2)


def test_register_write_mirrors_unnamed() -> None:
    registers = RegisterBank()

    registers.yank_to("a", "alpha")

    assert registers.get("a").text == "alpha"
    assert registers.get(UNNAMED).text == "alpha"


def test_uppercase_register_appends() -> None:
    registers = RegisterBank()
    registers.yank_to("a", "one ")

    registers.yank_to("A", "two")

    assert registers.get("a").text == "one two"
    assert registers.get(UNNAMED).text == "one two"


def test_register_rejects_unknown_names() -> None:
    registers = RegisterBank()

    with pytest.raises(ValueError):
        registers.set("1", RegisterValue(text="x"))
    assert not RegisterBank.is_valid_name("ab")


def test_kill_ring_empty_yank_and_pop() -> None:
    ring = KillRing()

    assert ring.yank() is None
    assert ring.yank_pop() is None


def test_kill_ring_yank_pop_rotates_with_wraparound() -> None:
    ring = KillRing()
    for text in ("foo", "bar", "baz"):
        ring.add(text)
        ring.reset_last_kill()

    assert ring.yank() == "baz"
    assert [ring.yank_pop() for _ in range(3)] == ["bar", "foo", "baz"]


def test_kill_ring_merges_consecutive_kills() -> None:
    ring = KillRing()
    ring.add("is ")
    ring.add("a")
    ring.add("This ", backwards=True)

    assert len(ring) == 1
    assert ring.yank() == "This is a"


def test_kill_ring_yank_pop_needs_a_yank_first() -> None:
    ring = KillRing()
    ring.add("foo")
    ring.reset_last_kill()
    ring.add("bar")

    assert ring.yank_pop() is None
    ring.yank()
    ring.reset_last_yank()
    assert ring.yank_pop() is None


def test_kill_ring_drops_oldest_when_full() -> None:
    ring = KillRing(size=2)
    for text in ("a", "b", "c"):
        ring.add(text)
        ring.reset_last_kill()

    assert len(ring) == 2
    assert ring.yank() == "c"
    assert ring.yank_pop() == "b"
    assert ring.yank_pop() == "c"


def test_argument_accumulates_digits() -> None:
    argument = Argument()
    for digit in (1, 2, 0):
        argument.push_digit(digit)

    assert argument.value_or(1) == 120
    assert argument.take() == 120
    assert argument.take() is None
    assert argument.value_or(1) == 1


def test_memory_history_suppresses_duplicates_and_blanks() -> None:
    history = MemoryHistory(["ls", "ls", "  ", "pwd"])

    assert isinstance(history, History)
    assert list(history) == ["ls", "pwd"]


def test_memory_history_keeps_duplicates_when_asked() -> None:
    history = MemoryHistory(["ls", "ls"], ignore_duplicates=False)

    assert history.count() == 2


def test_memory_history_trims_oldest() -> None:
    history = MemoryHistory(["a", "b", "c"], max_size=2)

    assert list(history) == ["b", "c"]
    assert history.item(0) == "b"


def test_memory_history_iteration_is_clamped() -> None:
    history = MemoryHistory(["a", "b", "c"])

    assert [index for index, _ in history.iter_backward(10)] == [2, 1, 0]
    assert [line for _, line in history.iter_forward(1)] == ["b", "c"]
