"""Vi motion functions.

Motions compute cursor destinations without modifying text. They are used
both for plain navigation in ``vi-move`` and as span boundaries for the
``d``/``c``/``y`` operators. Every motion takes ``(state, count)`` and
returns a ``MotionResult``; character searches additionally take the
target character.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from line_engine.buffer import CharSearchState
from line_engine.modes.base_mode import EditorState

# Bracket kinds: openers positive, closers negative, same magnitude per pair.
BRACKETS = {"[": 1, "{": 2, "(": 3, "]": -1, "}": -2, ")": -3}


@dataclass(frozen=True, slots=True)
class MotionResult:
    """Result of a motion computation."""

    position: int
    failed: bool = False
    # operator spans include the target character when moving forward
    inclusive: bool = False


MotionFunc = Callable[[EditorState, int], MotionResult]


def char_class(char: str, *, big_word: bool = False) -> int:
    """Character class: 0=whitespace, 1=word, 2=punctuation."""

    if char.isspace():
        return 0
    if big_word or char.isalnum() or char == "_":
        return 1
    return 2


def is_word_char(char: str) -> bool:
    return char.isalnum()


def motion_left(state: EditorState, count: int) -> MotionResult:
    """Move cursor left (h motion)."""
    start, _ = state.buffer.line_bounds()
    return MotionResult(position=max(state.buffer.cursor - count, start))


def motion_right(state: EditorState, count: int) -> MotionResult:
    """Move cursor right (l motion)."""
    _, end = state.buffer.line_bounds()
    return MotionResult(position=min(state.buffer.cursor + count, end))


def motion_line_start(state: EditorState, count: int) -> MotionResult:
    """Move to start of line (0 motion)."""
    start, _ = state.buffer.line_bounds()
    return MotionResult(position=start)


def motion_first_non_blank(state: EditorState, count: int) -> MotionResult:
    """Move to first non-blank character (^ motion)."""
    return MotionResult(position=first_non_blank(state))


def motion_line_end(state: EditorState, count: int) -> MotionResult:
    """Move to the last character of the line ($ motion)."""
    start, end = state.buffer.line_bounds()
    if end == start:
        return MotionResult(position=start)
    return MotionResult(position=end - 1, inclusive=True)


def motion_column(state: EditorState, count: int) -> MotionResult:
    """Move to column ``count`` (| motion), 1-based."""
    start, end = state.buffer.line_bounds()
    return MotionResult(position=min(start + max(count, 1) - 1, max(end - 1, start)))


def first_non_blank(state: EditorState) -> int:
    text = state.buffer.text
    start, end = state.buffer.line_bounds()
    position = start
    while position < end and text[position] in " \t":
        position += 1
    return position


def word_start_forward(text: str, cursor: int, count: int, *, big_word: bool = False) -> int:
    position = cursor
    length = len(text)
    for _ in range(count):
        if position >= length:
            break
        start_class = char_class(text[position], big_word=big_word)
        if start_class:
            while position < length and char_class(text[position], big_word=big_word) == start_class:
                position += 1
        while position < length and text[position].isspace():
            position += 1
    return position


def word_end_forward(text: str, cursor: int, count: int, *, big_word: bool = False) -> int:
    position = cursor
    length = len(text)
    for _ in range(count):
        if position >= length - 1:
            break
        position += 1
        while position < length - 1 and text[position].isspace():
            position += 1
        current = char_class(text[position], big_word=big_word)
        while (
            position + 1 < length
            and char_class(text[position + 1], big_word=big_word) == current
        ):
            position += 1
    return position


def word_start_backward(text: str, cursor: int, count: int, *, big_word: bool = False) -> int:
    position = cursor
    for _ in range(count):
        if position <= 0:
            break
        position -= 1
        while position > 0 and text[position].isspace():
            position -= 1
        current = char_class(text[position], big_word=big_word)
        while position > 0 and char_class(text[position - 1], big_word=big_word) == current:
            position -= 1
    return position


def motion_word_forward(state: EditorState, count: int) -> MotionResult:
    """Move to start of next word (w motion)."""
    buffer = state.buffer
    return MotionResult(position=word_start_forward(buffer.text, buffer.cursor, count))


def motion_bigword_forward(state: EditorState, count: int) -> MotionResult:
    """Move to start of next WORD (W motion)."""
    buffer = state.buffer
    return MotionResult(
        position=word_start_forward(buffer.text, buffer.cursor, count, big_word=True)
    )


def motion_word_end(state: EditorState, count: int) -> MotionResult:
    """Move to end of word (e motion)."""
    buffer = state.buffer
    if not buffer.text:
        return MotionResult(position=0, failed=True)
    return MotionResult(
        position=word_end_forward(buffer.text, buffer.cursor, count), inclusive=True
    )


def motion_bigword_end(state: EditorState, count: int) -> MotionResult:
    """Move to end of WORD (E motion)."""
    buffer = state.buffer
    if not buffer.text:
        return MotionResult(position=0, failed=True)
    return MotionResult(
        position=word_end_forward(buffer.text, buffer.cursor, count, big_word=True),
        inclusive=True,
    )


def motion_word_backward(state: EditorState, count: int) -> MotionResult:
    """Move to start of previous word (b motion)."""
    buffer = state.buffer
    return MotionResult(position=word_start_backward(buffer.text, buffer.cursor, count))


def motion_bigword_backward(state: EditorState, count: int) -> MotionResult:
    """Move to start of previous WORD (B motion)."""
    buffer = state.buffer
    return MotionResult(
        position=word_start_backward(buffer.text, buffer.cursor, count, big_word=True)
    )


def search_char(state: EditorState, search: CharSearchState, count: int) -> MotionResult:
    """Run ``search`` ``count`` times from the cursor within the current line.

    The cursor lands on the last occurrence found, so a count larger than
    the number of occurrences stops at the final one. Nothing found at all
    is a failed motion.
    """

    buffer = state.buffer
    text = buffer.text
    line_start, line_end = buffer.line_bounds()
    position = buffer.cursor
    found = 0
    for _ in range(max(count, 1)):
        if search.forward:
            index = text.find(search.char, position + 1, line_end)
        else:
            index = text.rfind(search.char, line_start, position)
        if index == -1:
            break
        position = index
        found += 1

    if not found:
        return MotionResult(position=buffer.cursor, failed=True)
    if search.stop_before:
        position = position - 1 if search.forward else position + 1
    return MotionResult(position=position, inclusive=search.forward)


def _char_search(forward: bool, stop_before: bool) -> Callable[[EditorState, str, int], MotionResult]:
    def run(state: EditorState, char: str, count: int) -> MotionResult:
        search = CharSearchState(char=char, forward=forward, stop_before=stop_before)
        state.char_search = search
        return search_char(state, search, count)

    return run


find_char_forward = _char_search(forward=True, stop_before=False)
find_char_backward = _char_search(forward=False, stop_before=False)
till_char_forward = _char_search(forward=True, stop_before=True)
till_char_backward = _char_search(forward=False, stop_before=True)


def motion_repeat_char_search(state: EditorState, count: int) -> MotionResult:
    """Repeat the last character search in its original direction (; motion)."""
    if state.char_search is None:
        return MotionResult(position=state.buffer.cursor, failed=True)
    return search_char(state, state.char_search, count)


def motion_reverse_char_search(state: EditorState, count: int) -> MotionResult:
    """Repeat the last character search in the opposite direction (, motion)."""
    if state.char_search is None:
        return MotionResult(position=state.buffer.cursor, failed=True)
    return search_char(state, state.char_search.reversed(), count)


def find_matching_bracket(text: str, cursor: int) -> int | None:
    """Match the first bracket at or after ``cursor``, honoring nesting."""

    position = cursor
    while position < len(text) and text[position] not in BRACKETS:
        position += 1
    if position >= len(text):
        return None

    kind = BRACKETS[text[position]]
    step = 1 if kind > 0 else -1
    depth = 1
    index = position + step
    while 0 <= index < len(text):
        other = BRACKETS.get(text[index], 0)
        if other == kind:
            depth += 1
        elif other == -kind:
            depth -= 1
            if depth == 0:
                return index
        index += step
    return None


def motion_match_bracket(state: EditorState, count: int) -> MotionResult:
    """Jump to the bracket matching the one at or after the cursor (% motion)."""
    buffer = state.buffer
    target = find_matching_bracket(buffer.text, buffer.cursor)
    if target is None:
        return MotionResult(position=buffer.cursor, failed=True)
    return MotionResult(position=target, inclusive=True)


__all__ = [
    "BRACKETS",
    "MotionFunc",
    "MotionResult",
    "char_class",
    "find_char_backward",
    "find_char_forward",
    "find_matching_bracket",
    "first_non_blank",
    "is_word_char",
    "motion_bigword_backward",
    "motion_bigword_end",
    "motion_bigword_forward",
    "motion_column",
    "motion_first_non_blank",
    "motion_left",
    "motion_line_end",
    "motion_line_start",
    "motion_match_bracket",
    "motion_repeat_char_search",
    "motion_reverse_char_search",
    "motion_right",
    "motion_word_backward",
    "motion_word_end",
    "motion_word_forward",
    "search_char",
    "till_char_backward",
    "till_char_forward",
    "word_end_forward",
    "word_start_backward",
    "word_start_forward",
]
