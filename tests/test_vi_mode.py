import pytest

from line_engine import (
    EndOfInputError,
    EngineConfig,
    LineReader,
    MemoryHistory,
    ScriptedTerminal,
)
from line_engine.modes import ViMoveMode


def make_reader(*script: str, history: list[str] | None = None) -> LineReader:
    return LineReader(
        ScriptedTerminal(script),
        history=MemoryHistory(history or []),
        config=EngineConfig(editing_mode="vi"),
    )


NAMED_KEYS = {"ESC", "ENTER", "BACKSPACE", "DELETE", "LEFT", "RIGHT", "UP", "DOWN"}


def make_script(*parts: str) -> list[str]:
    """Named keys and ``modifier+key`` tokens stay whole; anything else is typed."""

    script: list[str] = []
    for part in parts:
        if part in NAMED_KEYS or ("+" in part and len(part) > 1):
            script.append(part)
        else:
            script.extend(part)
    return script


def read(text: str, *keys: str, history: list[str] | None = None) -> str:
    """Type ``text`` in insert mode, leave it with ESC, then replay ``keys``."""

    script = [*text, "ESC", *make_script(*keys), "ENTER"]
    return make_reader(*script, history=history).read_line()


def test_escape_steps_back_onto_last_char() -> None:
    assert read("abc", "x") == "ab"


def test_repeated_escape_leaves_buffer_alone() -> None:
    reader = make_reader(*"abc", "ESC", "ESC", "ESC", "ENTER")

    assert reader.read_line() == "abc"
    assert reader.terminal.bells == 2


def test_insert_commands() -> None:
    assert read("bc", "I", "a", "ESC", "A", "d") == "abcd"
    assert read("ac", "i", "b") == "abc"
    assert read("ab", "a", "c") == "abc"


def test_delete_chars_with_count() -> None:
    assert read("abcdef", "0", "2x") == "cdef"
    assert read("abcdef", "2X") == "abcf"


def test_x_on_empty_line_rings_bell() -> None:
    reader = make_reader("ESC", "x", "ENTER")

    assert reader.read_line() == ""
    assert reader.terminal.bells >= 1


def test_substitute_and_change_to_end() -> None:
    assert read("abcdef", "0", "l", "2s", "X") == "aXdef"
    assert read("abc def", "0", "w", "C", "xyz") == "abc xyz"
    assert read("abc def", "0", "w", "D") == "abc "
    assert read("abc", "S", "new") == "new"


def test_toggle_case_advances() -> None:
    assert read("abc", "0", "~", "~") == "ABc"
    assert read("abc", "0", "5~") == "ABC"


def test_insert_comment_accepts_line() -> None:
    reader = make_reader(*"echo hi", "ESC", "#")

    assert reader.read_line() == "#echo hi"
    assert list(reader.history) == ["#echo hi"]


def test_ctrl_d_only_ends_input_on_empty_line() -> None:
    with pytest.raises(EndOfInputError):
        make_reader("ctrl+d").read_line()
    assert read("abc", "ctrl+d") == "abc"


def test_delete_word() -> None:
    assert read("foo bar", "0", "dw") == "bar"
    assert read("foo bar baz", "0", "w", "dw") == "foo baz"


def test_counts_multiply_across_operator_and_motion() -> None:
    reader = make_reader(*"a b c d e f g h", "ESC", "0", *"2d3w", "ENTER")

    assert reader.read_line() == "g h"
    plan = reader.manager.get_mode("vi-move").last_plan
    assert plan is not None
    assert (plan.operator_id, plan.motion_id, plan.count) == ("vi.op_delete", "vi.word", 6)


def test_count_placement_is_equivalent() -> None:
    text = "a b c d e f g h"

    assert read(text, "0", "2d3w") == read(text, "0", "6dw") == read(text, "0", "d6w") == "g h"


def test_zero_continues_a_count() -> None:
    text = "abcdefghijklmnop"
    assert read(text, "0", "10x") == "klmnop"


def test_change_word_stops_at_word_end() -> None:
    assert read("foo bar", "0", "cw", "X") == "X bar"
    assert read("a b", "0", "cw", "X") == "X b"


def test_change_left() -> None:
    assert read("word", "ch", "X") == "woXd"


def test_delete_to_line_end_and_start() -> None:
    assert read("abc def", "0", "w", "d$") == "abc "
    assert read("abc def", "0", "w", "d0") == "def"
    assert read("  abc", "$", "d^") == "  c"


def test_delete_bigword_and_word_end() -> None:
    assert read("a.b c", "0", "dW") == "c"
    assert read("foo bar", "0", "de") == " bar"
    assert read("foo bar", "b", "db") == "bar"


def test_doubled_operator_acts_on_whole_line() -> None:
    assert read("abc def", "dd") == ""
    assert read("abcdef", "yy", "p") == "abcdefabcdef"
    assert read("abc", "cc", "xyz") == "xyz"


def test_yank_restores_cursor_and_put_after() -> None:
    assert read("word", "3yh", "p") == "wordwor"


def test_put_before() -> None:
    assert read("abc", "0", "yl", "P") == "aabc"


def test_named_register() -> None:
    script = ('"ayw', "w", "dw", '"ap')
    assert read("one two", "0", *script) == "one one "


def test_column_motion() -> None:
    assert read("abcdef", "0", "3|", "x") == "abdef"


def test_failed_motion_cancels_operator() -> None:
    reader = make_reader(*"abc", "ESC", "0", "d", "f", "z", "x", "ENTER")

    assert reader.read_line() == "bc"
    assert reader.terminal.bells == 1


def test_escape_cancels_pending_operator() -> None:
    assert read("abc", "0", "d", "ESC", "x") == "bc"


def test_empty_span_cancels_operator() -> None:
    reader = make_reader(*"abc", "ESC", "0", "d", "h", "ENTER")

    assert reader.read_line() == "abc"
    assert reader.terminal.bells == 1


F_LINE = "aaaafaaaafaaaafaaaaf"
X_LINE = "aaaaXaaaaXaaaaXaaaaX"


def test_delete_to_third_char_occurrence() -> None:
    assert read(F_LINE, "0", "3dff") == "aaaaf"


def test_repeat_find_forward_with_operator() -> None:
    assert read(X_LINE, "0", "fX", "2d;") == "aaaaaaaaX"


def test_repeat_find_backward_with_operator() -> None:
    assert read(X_LINE, "FX", "2d;") == "aaaaXaaaaX"


def test_repeat_till_forward_with_operator() -> None:
    assert read(X_LINE, "0", "tX", "2d;") == "aaaXaaaaXaaaaX"


def test_repeat_till_backward_with_operator() -> None:
    assert read(X_LINE, "TX", "2d;") == "aaaaXaaaaXaaaaX"


def test_reverse_repeat() -> None:
    assert read("a,b,c,d", "0", "f,", ";", ",", "x") == "ab,c,d"


def test_partial_count_stops_on_last_occurrence() -> None:
    assert read("a-b-c", "0", "9f-", "x") == "a-bc"


def test_char_search_survives_accepted_line() -> None:
    reader = make_reader(*"a,b", "ESC", "0", "f", ",", "ENTER")
    assert reader.read_line() == "a,b"

    reader.terminal.feed(*"x,y,z", "ESC", "0", ";", "x", "ENTER")
    assert reader.read_line() == "xy,z"


def test_char_search_miss_rings_bell() -> None:
    reader = make_reader(*"abc", "ESC", "0", "fz", "x", "ENTER")

    assert reader.read_line() == "bc"
    assert reader.terminal.bells == 1


def test_delete_through_matching_bracket() -> None:
    assert read("ab(def)hij", "0", "ll", "d%") == "abhij"
    assert read("ab(def)", "0", "ll", "d%") == "ab"


def test_yank_bracket_group_and_put() -> None:
    assert read("ab(def)hij", "0", "ll", "y%", "$", "p") == "ab(def)hij(def)"


def test_change_bracket_group() -> None:
    assert read("ab(def)hij", "0", "ll", "c%", "X") == "abXhij"


def test_percent_from_closing_bracket_honors_nesting() -> None:
    assert read("ab((cdef[[))", "%", "a", "X") == "ab(X(cdef[[))"


def test_percent_without_match_keeps_cursor() -> None:
    assert read("abcd))", "%", "a", "X") == "abcd))X"
    assert read("(abcd(d", "0", "%", "a", "X") == "(Xabcd(d"


def test_replace_single_char() -> None:
    assert read("abcdefhij", "0", "rX", "i", "Y") == "YXbcdefhij"


def test_replace_with_count() -> None:
    assert read("abcdefhij", "0", "4rX", "i", "Y") == "XXXYXefhij"


def test_replace_count_past_end_stops_at_end() -> None:
    assert read("abcdefhij", "0", "99rZ") == "ZZZZZZZZZ"


def test_escape_cancels_replace() -> None:
    assert read("abc", "0", "r", "ESC", "x") == "bc"


def test_undo_in_move_mode() -> None:
    assert read("abc", "0", "x", "x", "u") == "bc"


def test_history_navigation_puts_cursor_at_start() -> None:
    assert read("", "k", "x", history=["first", "second"]) == "econd"
    assert read("", "k", "k", "j", "x", history=["first", "second"]) == "econd"


def test_cursor_never_rests_past_last_char() -> None:
    reader = make_reader(*"abc", "ESC", "$", "l", "l")
    for _ in range(7):
        reader.step(reader.terminal.read_key())

    mode = reader.manager.active_mode
    assert isinstance(mode, ViMoveMode)
    assert reader.state.buffer.cursor == 2
