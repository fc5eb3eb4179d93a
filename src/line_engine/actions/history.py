"""History navigation and incremental history search actions."""

from __future__ import annotations

from typing import Optional, Tuple

from line_engine.buffer import SearchFrame, SearchState, clamp
from line_engine.keymaps.resolver import ResolutionMatch
from line_engine.modes.base_mode import EditorState, ModeResult


def _goto_history(state: EditorState, target: int, *, cursor_at_start: bool) -> ModeResult:
    history = state.history
    current = history.count() if state.history_index is None else state.history_index
    target = clamp(target, 0, history.count())
    if target == current:
        return state.bell("history_boundary")

    if state.history_index is None:
        state.saved_line = state.buffer.text
    if target == history.count():
        text = state.saved_line
        state.history_index = None
    else:
        text = history.item(target)
        state.history_index = target

    state.buffer.reset(text)
    state.buffer.cursor = 0 if cursor_at_start else len(text)
    return ModeResult(consumed=True, message="history")


def _current_index(state: EditorState) -> int:
    if state.history_index is None:
        return state.history.count()
    return state.history_index


def previous_history(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    target = _current_index(state) - state.take_count()
    return _goto_history(state, target, cursor_at_start=False)


def next_history(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    target = _current_index(state) + state.take_count()
    return _goto_history(state, target, cursor_at_start=False)


def beginning_of_history(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    return _goto_history(state, 0, cursor_at_start=False)


def end_of_history(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    return _goto_history(state, state.history.count(), cursor_at_start=False)


def vi_previous_history(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    target = _current_index(state) - state.take_count()
    return _goto_history(state, target, cursor_at_start=True)


def vi_next_history(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    target = _current_index(state) + state.take_count()
    return _goto_history(state, target, cursor_at_start=True)


def _publish(state: EditorState) -> None:
    search = state.search
    state.bus.emit("search.status", search.prompt if search else None)


def _scan(
    state: EditorState, search: SearchState, origin: int, *, inclusive: bool
) -> Optional[Tuple[int, int]]:
    """Find the nearest entry from ``origin`` containing the pattern.

    A reverse search lands on the last occurrence within the entry.
    """

    history = state.history
    if search.forward:
        candidates = history.iter_forward(origin if inclusive else origin + 1)
    else:
        begin = origin if inclusive else origin - 1
        if begin < 0:
            return None
        candidates = history.iter_backward(begin)
    for index, line in candidates:
        if search.forward:
            position = line.find(search.pattern)
        else:
            position = line.rfind(search.pattern)
        if position != -1:
            return index, position
    return None


def _apply_scan(
    state: EditorState, search: SearchState, origin: int, *, inclusive: bool
) -> ModeResult:
    found = _scan(state, search, origin, inclusive=inclusive)
    if found is None:
        # keep the last good match on screen
        search.failing = True
        _publish(state)
        return state.bell("search_failing")

    index, position = found
    search.match_index = index
    search.failing = False
    state.buffer.set_text(state.history.item(index), cursor=position)
    _publish(state)
    return ModeResult(consumed=True, status="search")


def _push_frame(state: EditorState, search: SearchState) -> None:
    buffer = state.buffer
    search.frames.append(
        SearchFrame(
            pattern=search.pattern,
            match_index=search.match_index,
            failing=search.failing,
            forward=search.forward,
            text=buffer.text,
            cursor=buffer.cursor,
        )
    )


def _start_search(state: EditorState, *, forward: bool) -> ModeResult:
    buffer = state.buffer
    state.argument.clear()
    state.search = SearchState(
        forward=forward,
        restore_text=buffer.text,
        restore_cursor=buffer.cursor,
        previous_mode=state.mode or "emacs-insert",
        start_index=_current_index(state),
    )
    _publish(state)
    return ModeResult(consumed=True, switch_to="search", status="search")


def reverse_search_history(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    return _start_search(state, forward=False)


def forward_search_history(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    return _start_search(state, forward=True)


def search_add_char(state: EditorState, char: str) -> ModeResult:
    """Extend the pattern; the current match is kept while it still matches."""

    search = _require_search(state)
    _push_frame(state, search)
    search.pattern += char
    if search.match_index is None:
        return _apply_scan(state, search, search.start_index, inclusive=False)
    return _apply_scan(state, search, search.match_index, inclusive=True)


def _search_again(state: EditorState, *, forward: bool) -> ModeResult:
    search = _require_search(state)
    search.forward = forward
    if not search.pattern:
        if not state.last_search_pattern:
            _publish(state)
            return state.bell("no_previous_search")
        return search_add_char(state, state.last_search_pattern)
    _push_frame(state, search)
    origin = search.start_index if search.match_index is None else search.match_index
    return _apply_scan(state, search, origin, inclusive=False)


def search_again_reverse(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    return _search_again(state, forward=False)


def search_again_forward(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    return _search_again(state, forward=True)


def search_backspace(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """Step back to the overlay state before the last pattern edit or
    repeated search, so earlier matches come back before characters go."""

    del match
    search = _require_search(state)
    if not search.frames:
        return state.bell("empty_pattern")
    frame = search.frames.pop()
    search.pattern = frame.pattern
    search.match_index = frame.match_index
    search.failing = frame.failing
    search.forward = frame.forward
    state.buffer.set_text(frame.text, cursor=frame.cursor)
    _publish(state)
    return ModeResult(consumed=True, status="search")


def finish_search(state: EditorState, *, restore: bool) -> str:
    """Tear down the overlay and return the mode it was entered from."""

    search = _require_search(state)
    state.search = None
    if search.pattern:
        state.last_search_pattern = search.pattern
    if restore:
        state.buffer.set_text(search.restore_text, cursor=search.restore_cursor)
    state.history_index = None
    _publish(state)
    return search.previous_mode


def search_accept(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    previous = finish_search(state, restore=False)
    return ModeResult(
        consumed=True, switch_to=previous, status="accept", message=state.buffer.text
    )


def search_abort(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    previous = finish_search(state, restore=True)
    return ModeResult(consumed=True, switch_to=previous, status="abort")


def search_exit(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    previous = finish_search(state, restore=False)
    return ModeResult(consumed=True, switch_to=previous, message="search_exit")


def _require_search(state: EditorState) -> SearchState:
    if state.search is None:
        raise RuntimeError("history search is not active")
    return state.search


__all__ = [
    "beginning_of_history",
    "end_of_history",
    "finish_search",
    "forward_search_history",
    "next_history",
    "previous_history",
    "reverse_search_history",
    "search_abort",
    "search_accept",
    "search_add_char",
    "search_again_forward",
    "search_again_reverse",
    "search_backspace",
    "search_exit",
    "vi_next_history",
    "vi_previous_history",
]
