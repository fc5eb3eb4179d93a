import pytest

from line_engine import (
    PAUSE,
    EndOfInputError,
    LineReader,
    MemoryHistory,
    ScriptedTerminal,
    UserInterruptError,
)


def make_reader(*script: str, history: list[str] | None = None) -> LineReader:
    terminal = ScriptedTerminal(script)
    return LineReader(terminal, history=MemoryHistory(history or []))


def read(*script: str, history: list[str] | None = None) -> str:
    return make_reader(*script, history=history).read_line()


def test_typing_and_accept() -> None:
    assert read(*"hello", "ENTER") == "hello"


def test_cursor_movement_and_insert() -> None:
    assert read(*"bc", "ctrl+a", "a", "ctrl+e", "d", "ENTER") == "abcd"
    assert read(*"ac", "LEFT", "b", "RIGHT", "d", "ENTER") == "abcd"


def test_word_movement() -> None:
    script = (*"one two three", "alt+b", "alt+b", "X", "alt+f", "Y", "ENTER")
    assert read(*script) == "one XtwoY three"


def test_meta_key_through_escape_prefix() -> None:
    assert read(*"one two", "ESC", "b", "X", "ENTER") == "one Xtwo"


def test_digit_argument_repeats_insert() -> None:
    assert read("alt+3", "x", "ENTER") == "xxx"
    assert read("ESC", "1", "ESC", "2", "-", "ENTER") == "-" * 12


def test_kill_and_yank() -> None:
    script = (*"hello world", "alt+b", "ctrl+k", "ctrl+a", "ctrl+y", "ENTER")
    assert read(*script) == "worldhello "


def test_backward_kill_line_and_unix_word_rubout() -> None:
    assert read(*"abc def", "ctrl+w", "ENTER") == "abc "
    assert read(*"abc def", "LEFT", "LEFT", "ctrl+u", "ENTER") == "ef"


def test_consecutive_backward_kills_yank_as_one() -> None:
    script = (*"This is a test", "alt+BACKSPACE", "alt+BACKSPACE", "ctrl+y", "ENTER")
    assert read(*script) == "This is a test"


def test_mixed_direction_kills_merge_in_order() -> None:
    script = (
        *"This is a test",
        "alt+b",
        "alt+b",
        "alt+d",
        "alt+BACKSPACE",
        "alt+d",
        "alt+BACKSPACE",
        "ctrl+y",
        "ENTER",
    )
    assert read(*script) == "This is a test"


def test_yank_pop_rotates_to_older_kill() -> None:
    script = (
        *"This is a test",
        "alt+b",
        "alt+b",
        "alt+BACKSPACE",
        "alt+b",
        "alt+d",
        "ctrl+y",
        "alt+y",
        "ENTER",
    )
    assert read(*script) == "is  a test"


def test_yank_pop_without_yank_rings_bell() -> None:
    reader = make_reader(*"ab", "ctrl+w", *"cd", "alt+y", "ENTER")

    assert reader.read_line() == "cd"
    assert reader.terminal.bells == 1


def test_kill_whole_line_then_yank() -> None:
    reader = make_reader("b", "ctrl+x", "ctrl+y", "ENTER")
    reader.rebind("emacs-insert", ["ctrl+x"], "emacs.kill_whole_line")

    assert reader.read_line() == "b"


def test_delete_and_backspace() -> None:
    assert read(*"abcd", "BACKSPACE", "ctrl+a", "ctrl+d", "ENTER") == "bc"
    assert read(*"abcd", "ctrl+a", "alt+2", "DELETE", "ENTER") == "cd"


def test_transpose_chars() -> None:
    assert read(*"ab", "ctrl+t", "ENTER") == "ba"
    assert read(*"abc", "LEFT", "ctrl+t", "ENTER") == "acb"


def test_transpose_chars_with_count_drags_char_forward() -> None:
    assert read(*"abcd", "ctrl+a", "ctrl+f", "alt+3", "ctrl+t", "ENTER") == "bcda"


def test_case_words() -> None:
    assert read(*"hello world", "ctrl+a", "alt+u", "ENTER") == "HELLO world"
    assert read(*"HELLO WORLD", "ctrl+a", "alt+2", "alt+l", "ENTER") == "hello world"
    assert read(*"hello world", "ctrl+a", "alt+c", "alt+c", "ENTER") == "Hello World"


def test_undo_restores_previous_text() -> None:
    assert read(*"abc", "ctrl+_", "ENTER") == ""
    script = (*"abc", "ctrl+w", *"xy", "ctrl+x", "ctrl+u", "ctrl+_", "ENTER")
    assert read(*script) == "abc"


def test_unbound_sequence_after_prefix_rings_bell() -> None:
    reader = make_reader("ESC", "z", *"ok", "ENTER")

    assert reader.read_line() == "zok"
    assert reader.terminal.bells == 1


def test_interrupt_after_escape_prefix_still_interrupts() -> None:
    reader = make_reader(*"ab", "ESC", "ctrl+c")

    with pytest.raises(UserInterruptError) as excinfo:
        reader.read_line()

    assert excinfo.value.partial_line == "ab"
    assert reader.terminal.bells == 1


def test_lone_prefix_times_out_with_bell() -> None:
    reader = make_reader("ESC", PAUSE, "a", "ENTER")

    assert reader.read_line() == "a"
    assert reader.terminal.bells == 1
    assert reader.terminal.timeouts[1] is not None


def test_timeout_commits_shorter_binding() -> None:
    reader = make_reader(*"abc", "ctrl+x", PAUSE, "d", "ENTER")
    reader.rebind("emacs-insert", ["ctrl+x"], "emacs.kill_whole_line")

    assert reader.read_line() == "d"


def test_breaking_key_commits_shorter_binding_and_is_replayed() -> None:
    reader = make_reader(*"abc", "ctrl+x", "z", "ENTER")
    reader.rebind("emacs-insert", ["ctrl+x"], "emacs.kill_whole_line")

    assert reader.read_line() == "z"


def test_ctrl_d_on_empty_line_is_end_of_input() -> None:
    with pytest.raises(EndOfInputError):
        read("ctrl+d")


def test_ctrl_d_at_end_of_text_rings_bell() -> None:
    reader = make_reader(*"ab", "ctrl+d", "ENTER")

    assert reader.read_line() == "ab"
    assert reader.terminal.bells == 1


def test_history_navigation() -> None:
    history = ["first", "second"]

    assert read("ctrl+p", "ENTER", history=history) == "second"
    assert read("UP", "UP", "ENTER", history=history) == "first"
    assert read(*"draft", "UP", "DOWN", "ENTER", history=history) == "draft"
    assert read("alt+<", "ENTER", history=history) == "first"


def test_history_boundary_rings_bell() -> None:
    reader = make_reader("UP", "UP", "ENTER", history=["only"])

    assert reader.read_line() == "only"
    assert reader.terminal.bells == 1


def test_switch_to_vi_editing() -> None:
    reader = make_reader(*"abc", "alt+ctrl+j", "ESC", "x", "ENTER")

    assert reader.read_line() == "ab"
    assert reader.current_mode == "vi-move"


def test_switch_back_to_emacs_from_vi() -> None:
    reader = make_reader(*"ab", "alt+ctrl+j", "alt+ctrl+e", "ctrl+a", "X", "ENTER")

    assert reader.read_line() == "Xab"
    assert reader.current_mode == "emacs-insert"
