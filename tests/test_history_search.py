from line_engine import EngineConfig, LineReader, MemoryHistory, ScriptedTerminal

HISTORY = ["foo", "fiddle", "faddle"]


def make_reader(*script: str, history: MemoryHistory | None = None, vi: bool = False) -> LineReader:
    config = EngineConfig(editing_mode="vi" if vi else "emacs")
    if history is None:
        history = MemoryHistory(HISTORY)
    return LineReader(ScriptedTerminal(script), history=history, config=config)


def test_reverse_search_finds_newest_match() -> None:
    reader = make_reader("ctrl+r", "f", "ENTER")

    assert reader.read_line() == "faddle"
    # accepting a duplicate of the newest entry does not grow history
    assert reader.history.count() == 3


def test_repeated_reverse_search_stops_at_oldest() -> None:
    history = MemoryHistory(HISTORY)
    reader = make_reader("ctrl+r", "f", *["ctrl+r"] * 5, "ENTER", history=history)

    assert reader.read_line() == "foo"
    assert history.count() == 4
    assert reader.terminal.bells == 3

    reader.terminal.feed("ctrl+r", "f", "ctrl+r", "ctrl+r", "ENTER")
    assert reader.read_line() == "fiddle"
    assert history.count() == 5


def test_forward_search_reverses_direction() -> None:
    reader = make_reader("ctrl+r", "f", "ctrl+r", "ctrl+r", "ctrl+s", "ENTER")

    assert reader.read_line() == "fiddle"


def test_pattern_narrows_match() -> None:
    reader = make_reader("ctrl+r", *"fid", "ENTER")

    assert reader.read_line() == "fiddle"


def test_backspace_steps_back_through_matches() -> None:
    reader = make_reader("ctrl+r", *"fid", "BACKSPACE", "BACKSPACE", "ENTER")

    assert reader.read_line() == "faddle"


def test_backspace_undoes_repeated_search_first() -> None:
    reader = make_reader("ctrl+r", "f", "ctrl+r", "BACKSPACE", "ENTER")

    assert reader.read_line() == "faddle"


def test_backspace_clears_failing_search() -> None:
    script = ("ctrl+r", *"fi", "ctrl+r", "BACKSPACE", "ENTER")
    reader = make_reader(*script)

    assert reader.read_line() == "fiddle"
    assert reader.terminal.bells == 1

    reader.terminal.feed(
        "ctrl+r", *"fi", "ctrl+r", "BACKSPACE", "BACKSPACE", "BACKSPACE", "ENTER"
    )
    assert reader.read_line() == ""


def test_backspace_unwinds_pattern_and_repeats_together() -> None:
    script = ("ctrl+r", "f", "ctrl+r", "o", "BACKSPACE", "BACKSPACE", "BACKSPACE", "ENTER")
    reader = make_reader(*script)

    assert reader.read_line() == ""


def test_backspace_on_empty_pattern_rings_bell() -> None:
    reader = make_reader("ctrl+r", "BACKSPACE", "ENTER")

    assert reader.read_line() == ""
    assert reader.terminal.bells == 1


def test_reverse_search_lands_on_last_occurrence() -> None:
    history = MemoryHistory(["abcabc"])
    reader = make_reader("ctrl+r", "b", "ESC", "X", "ENTER", history=history)

    assert reader.read_line() == "abcaXbc"


def test_abort_restores_original_line() -> None:
    reader = make_reader(*"abc", "ctrl+a", "ctrl+r", "f", "ctrl+g", "X", "ENTER")

    assert reader.read_line() == "Xabc"


def test_escape_keeps_match_and_leaves_search() -> None:
    reader = make_reader("ctrl+r", *"fi", "ESC", "ctrl+e", "!", "ENTER")

    assert reader.read_line() == "fiddle!"


def test_other_key_exits_search_and_is_replayed() -> None:
    history = MemoryHistory(["hello world"])
    reader = make_reader("ctrl+r", *"wor", "ctrl+f", "X", "ENTER", history=history)

    assert reader.read_line() == "hello wXorld"


def test_empty_pattern_reuses_previous_search() -> None:
    reader = make_reader("ctrl+r", *"fid", "ENTER")
    assert reader.read_line() == "fiddle"

    reader.terminal.feed("ctrl+r", "ctrl+r", "ENTER")
    assert reader.read_line() == "fiddle"


def test_status_is_published_on_bus() -> None:
    reader = make_reader()
    prompts: list[object] = []
    reader.state.bus.subscribe("search.status", prompts.append)

    reader.step("ctrl+r")
    reader.step("f")
    reader.step("z")

    assert prompts == [
        "bck-i-search: _",
        "bck-i-search: f_",
        "failing bck-i-search: fz_",
    ]
    assert reader.state.buffer.text == "faddle"
    assert reader.current_mode == "search"


def test_search_from_vi_move_returns_to_vi_move() -> None:
    reader = make_reader("ESC", "ctrl+r", *"foo", "ESC", "x", "ENTER", vi=True)

    assert reader.read_line() == "oo"


def test_search_started_from_vi_insert_accepts() -> None:
    reader = make_reader("ctrl+r", "f", "a", "ENTER", vi=True)

    assert reader.read_line() == "faddle"
