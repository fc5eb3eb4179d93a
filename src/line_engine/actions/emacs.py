"""Emacs-style editing widgets operating directly on the editor state.

Every widget takes ``(state, match)`` and reads its repeat count from
``state.argument``; the owning mode clears the argument afterwards.
"""

from __future__ import annotations

from line_engine.buffer import UNNAMED
from line_engine.keymaps.resolver import ResolutionMatch
from line_engine.modes.base_mode import KILLED, YANKED, EditorState, ModeResult

from .motions import is_word_char


def _ok(message: str | None = None) -> ModeResult:
    return ModeResult(consumed=True, message=message)


def _word_end(text: str, position: int, count: int) -> int:
    for _ in range(count):
        while position < len(text) and not is_word_char(text[position]):
            position += 1
        while position < len(text) and is_word_char(text[position]):
            position += 1
    return position


def _word_start(text: str, position: int, count: int) -> int:
    for _ in range(count):
        while position > 0 and not is_word_char(text[position - 1]):
            position -= 1
        while position > 0 and is_word_char(text[position - 1]):
            position -= 1
    return position


def kill_span(
    state: EditorState, start: int, end: int, *, backwards: bool = False
) -> str:
    """Delete ``[start, end)`` onto the kill ring and the unnamed register.

    ``backwards`` kills (towards the line start) prepend to a kill made by
    the previous command instead of appending.
    """

    if start == end:
        return ""
    removed = state.buffer.delete_range(start, end)
    state.registers.yank_to(UNNAMED, removed)
    state.kill_ring.add(removed, backwards=backwards)
    return removed


def insert_literal(state: EditorState, text: str, count: int = 1) -> ModeResult:
    if count <= 0:
        return _ok()
    state.buffer.insert_text(text * count)
    return _ok("self_insert")


def forward_char(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    state.buffer.cursor += state.take_count()
    return _ok()


def backward_char(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    state.buffer.cursor -= state.take_count()
    return _ok()


def forward_word(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = state.buffer
    buffer.cursor = _word_end(buffer.text, buffer.cursor, state.take_count())
    return _ok()


def backward_word(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = state.buffer
    buffer.cursor = _word_start(buffer.text, buffer.cursor, state.take_count())
    return _ok()


def beginning_of_line(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    state.buffer.cursor = state.buffer.line_bounds()[0]
    return _ok()


def end_of_line(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    state.buffer.cursor = state.buffer.line_bounds()[1]
    return _ok()


def self_insert(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """Insert the last key of the bound sequence as literal text."""

    return insert_literal(state, match.binding.sequence.tokens[-1], state.take_count())


def delete_char(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = state.buffer
    end = min(buffer.cursor + state.take_count(), len(buffer))
    buffer.delete_range(buffer.cursor, end)
    return _ok()


def backward_delete_char(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = state.buffer
    start = max(buffer.cursor - state.take_count(), 0)
    buffer.delete_range(start, buffer.cursor)
    return _ok()


def kill_line(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = state.buffer
    kill_span(state, buffer.cursor, buffer.line_bounds()[1])
    return _ok(KILLED)


def backward_kill_line(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = state.buffer
    kill_span(state, buffer.line_bounds()[0], buffer.cursor, backwards=True)
    return _ok(KILLED)


def kill_whole_line(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    start, end = state.buffer.line_bounds()
    kill_span(state, start, end)
    return _ok(KILLED)


def kill_word(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = state.buffer
    end = _word_end(buffer.text, buffer.cursor, state.take_count())
    kill_span(state, buffer.cursor, end)
    return _ok(KILLED)


def backward_kill_word(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = state.buffer
    start = _word_start(buffer.text, buffer.cursor, state.take_count())
    kill_span(state, start, buffer.cursor, backwards=True)
    return _ok(KILLED)


def unix_word_rubout(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """Kill the whitespace-delimited word behind the cursor."""

    del match
    buffer = state.buffer
    text = buffer.text
    start = buffer.cursor
    for _ in range(state.take_count()):
        while start > 0 and text[start - 1].isspace():
            start -= 1
        while start > 0 and not text[start - 1].isspace():
            start -= 1
    kill_span(state, start, buffer.cursor, backwards=True)
    return _ok(KILLED)


def yank(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    text = state.kill_ring.yank()
    if not text:
        return state.bell("empty_kill_ring")
    text *= max(state.take_count(), 1)
    start = state.buffer.cursor
    state.buffer.insert_text(text)
    state.kill_ring.yank_span = (start, start + len(text))
    return _ok(YANKED)


def yank_pop(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """Replace the text just yanked with the next older kill."""

    del match
    span = state.kill_ring.yank_span
    text = state.kill_ring.yank_pop()
    if text is None or span is None:
        return state.bell("no_previous_yank")
    start, end = span
    state.buffer.replace_range(start, end, text, label="yank_pop", cursor=start + len(text))
    state.kill_ring.yank_span = (start, start + len(text))
    return _ok(YANKED)


def transpose_chars(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """Drag the character before the cursor forward over the next one, once
    per count. At the end of the line the two characters before the cursor
    swap.
    """

    del match
    buffer = state.buffer
    start, end = buffer.line_bounds()
    if buffer.cursor == start or end - start < 2:
        return state.bell("transpose_boundary")

    line = list(buffer.text[start:end])
    cursor = buffer.cursor - start
    for _ in range(state.take_count()):
        if cursor >= len(line):
            cursor = len(line) - 1
        line[cursor - 1], line[cursor] = line[cursor], line[cursor - 1]
        cursor += 1
    buffer.replace_range(
        start, end, "".join(line), label="transpose", cursor=start + cursor
    )
    return _ok()


def _change_word_case(state: EditorState, transform) -> ModeResult:
    buffer = state.buffer
    start = buffer.cursor
    end = _word_end(buffer.text, start, state.take_count())
    if start == end:
        return _ok()
    buffer.replace_range(start, end, transform(buffer.text[start:end]), label="case")
    return _ok()


def upcase_word(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    return _change_word_case(state, str.upper)


def downcase_word(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    return _change_word_case(state, str.lower)


def capitalize_word(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match

    def capitalize(segment: str) -> str:
        # leading separators stay; the first word character is upper-cased
        for index, char in enumerate(segment):
            if is_word_char(char):
                return segment[:index] + char.upper() + segment[index + 1 :].lower()
        return segment

    return _change_word_case(state, capitalize)


def toggle_case_chars(state: EditorState, count: int) -> int:
    """Swap case of ``count`` characters from the cursor; returns how many."""

    buffer = state.buffer
    _, line_end = buffer.line_bounds()
    start = buffer.cursor
    end = min(start + count, line_end)
    if start == end:
        return 0
    buffer.replace_range(
        start, end, buffer.text[start:end].swapcase(), label="case", cursor=end
    )
    return end - start


def toggle_case(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    if not toggle_case_chars(state, state.take_count()):
        return state.bell("toggle_case_boundary")
    return _ok()


def digit_argument(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """Accumulate the trailing digit of ``alt+N`` / ``ESC N`` into the count."""

    token = match.binding.sequence.tokens[-1]
    state.argument.push_digit(int(token[-1]))
    return ModeResult(consumed=True, status="argument")


def undo(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    undone = False
    for _ in range(state.take_count()):
        if not state.buffer.undo():
            break
        undone = True
    if not undone:
        return state.bell("nothing_to_undo")
    return _ok("undo")


__all__ = [
    "backward_char",
    "backward_delete_char",
    "backward_kill_line",
    "backward_kill_word",
    "backward_word",
    "beginning_of_line",
    "capitalize_word",
    "delete_char",
    "digit_argument",
    "downcase_word",
    "end_of_line",
    "forward_char",
    "forward_word",
    "insert_literal",
    "kill_line",
    "kill_span",
    "kill_whole_line",
    "kill_word",
    "self_insert",
    "toggle_case",
    "toggle_case_chars",
    "transpose_chars",
    "undo",
    "unix_word_rubout",
    "upcase_word",
    "yank",
    "yank_pop",
]
