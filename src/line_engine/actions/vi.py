"""Vi operators and single-key commands used by ``vi-insert`` and ``vi-move``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from line_engine.buffer import UNNAMED
from line_engine.keymaps.resolver import ResolutionMatch
from line_engine.modes.base_mode import EditorState, ModeResult

from .emacs import toggle_case_chars
from .motions import first_non_blank


@dataclass(frozen=True, slots=True)
class OperatorSpan:
    """Half-open ``[start, end)`` range an operator applies to."""

    start: int
    end: int
    origin: int
    linewise: bool = False

    @property
    def empty(self) -> bool:
        return self.start == self.end


def motion_span(origin: int, target: int, *, inclusive: bool, limit: int) -> OperatorSpan:
    """Span between the cursor and a motion target.

    Inclusive motions landing at or after the cursor take the target
    character too.
    """

    start, end = min(origin, target), max(origin, target)
    if inclusive and target >= origin:
        end = min(target + 1, limit)
    return OperatorSpan(start=start, end=end, origin=origin)


def line_span(state: EditorState, count: int) -> OperatorSpan:
    """Whole lines from the cursor's line through ``count - 1`` more."""

    buffer = state.buffer
    start, end = buffer.line_bounds()
    for _ in range(max(count, 1) - 1):
        if end >= len(buffer):
            break
        end = buffer.line_bounds(end + 1)[1]
    return OperatorSpan(start=start, end=end, origin=buffer.cursor, linewise=True)


def _register_type(span: OperatorSpan) -> str:
    return "line" if span.linewise else "character"


def delete_operator(
    state: EditorState, span: OperatorSpan, register: Optional[str] = None
) -> ModeResult:
    buffer = state.buffer
    text = buffer.get_text_range(span.start, span.end)
    state.registers.yank_to(register, text, register_type=_register_type(span))
    start, end = span.start, span.end
    if span.linewise:
        # take one newline with the lines so no blank line is left behind
        if end < len(buffer):
            end += 1
        elif start > 0:
            start -= 1
    buffer.delete_range(start, end)
    buffer.cursor = start
    return ModeResult(consumed=True, message="delete")


def change_operator(
    state: EditorState, span: OperatorSpan, register: Optional[str] = None
) -> ModeResult:
    buffer = state.buffer
    text = buffer.get_text_range(span.start, span.end)
    state.registers.yank_to(register, text, register_type=_register_type(span))
    buffer.delete_range(span.start, span.end)
    buffer.cursor = span.start
    return ModeResult(consumed=True, switch_to="vi-insert", message="change")


def yank_operator(
    state: EditorState, span: OperatorSpan, register: Optional[str] = None
) -> ModeResult:
    buffer = state.buffer
    text = buffer.get_text_range(span.start, span.end)
    state.registers.yank_to(register, text, register_type=_register_type(span))
    buffer.cursor = span.origin
    return ModeResult(consumed=True, message="yank")


def _operate_to_line_end(state: EditorState, operator) -> ModeResult:
    buffer = state.buffer
    _, end = buffer.line_bounds()
    span = OperatorSpan(start=buffer.cursor, end=end, origin=buffer.cursor)
    return operator(state, span, state.take_register())


def insert(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del state, match
    return ModeResult(consumed=True, switch_to="vi-insert", message="insert")


def append(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = state.buffer
    if buffer.text:
        buffer.cursor += 1
    return ModeResult(consumed=True, switch_to="vi-insert", message="append")


def insert_at_first_non_blank(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    state.buffer.cursor = first_non_blank(state)
    return ModeResult(consumed=True, switch_to="vi-insert", message="insert")


def append_at_line_end(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    state.buffer.cursor = state.buffer.line_bounds()[1]
    return ModeResult(consumed=True, switch_to="vi-insert", message="append")


def escape_insert(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """Leave ``vi-insert``; the cursor steps back onto the last typed char."""

    del match
    buffer = state.buffer
    if buffer.cursor > buffer.line_bounds()[0]:
        buffer.cursor -= 1
    state.argument.clear()
    return ModeResult(consumed=True, switch_to="vi-move", message="exit_insert")


def escape_move(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    state.argument.clear()
    state.register_name = None
    return state.bell("escape")


def cancel_pending(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """ESC inside a pending composition: drop it, leave the buffer alone."""

    del match
    state.argument.clear()
    state.register_name = None
    return ModeResult(consumed=True, status="cancel")


def delete_char_under(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """``x``: delete ``count`` characters under and after the cursor."""

    del match
    buffer = state.buffer
    _, line_end = buffer.line_bounds()
    end = min(buffer.cursor + state.take_count(), line_end)
    if end == buffer.cursor:
        state.register_name = None
        return state.bell("nothing_to_delete")
    span = OperatorSpan(start=buffer.cursor, end=end, origin=buffer.cursor)
    return delete_operator(state, span, state.take_register())


def delete_char_before(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """``X``: delete ``count`` characters before the cursor."""

    del match
    buffer = state.buffer
    line_start, _ = buffer.line_bounds()
    start = max(buffer.cursor - state.take_count(), line_start)
    if start == buffer.cursor:
        state.register_name = None
        return state.bell("nothing_to_delete")
    span = OperatorSpan(start=start, end=buffer.cursor, origin=buffer.cursor)
    return delete_operator(state, span, state.take_register())


def substitute_char(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """``s``: change ``count`` characters under the cursor."""

    del match
    buffer = state.buffer
    _, line_end = buffer.line_bounds()
    end = min(buffer.cursor + state.take_count(), line_end)
    span = OperatorSpan(start=buffer.cursor, end=end, origin=buffer.cursor)
    return change_operator(state, span, state.take_register())


def substitute_line(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    span = line_span(state, state.take_count())
    return change_operator(state, span, state.take_register())


def delete_to_line_end(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    state.argument.clear()
    return _operate_to_line_end(state, delete_operator)


def change_to_line_end(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    state.argument.clear()
    return _operate_to_line_end(state, change_operator)


def yank_line(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    span = line_span(state, state.take_count())
    return yank_operator(state, span, state.take_register())


def _put(state: EditorState, *, after: bool) -> ModeResult:
    count = state.take_count()
    value = state.registers.get(state.take_register() or UNNAMED)
    if not value.text or count <= 0:
        return state.bell("empty_register")

    buffer = state.buffer
    if value.linewise:
        line_start, line_end = buffer.line_bounds()
        if not buffer.multiline:
            # a one-line buffer has no line to open: put inline at the edge
            position = line_end if after else line_start
            buffer.replace_range(
                position, position, value.text * count, label="put", cursor=position
            )
        elif after:
            block = "".join("\n" + value.text for _ in range(count))
            buffer.replace_range(
                line_end, line_end, block, label="put", cursor=line_end + 1
            )
        else:
            block = "".join(value.text + "\n" for _ in range(count))
            buffer.replace_range(
                line_start, line_start, block, label="put", cursor=line_start
            )
        return ModeResult(consumed=True, message="put")

    position = buffer.cursor
    if after and position < len(buffer):
        position += 1
    payload = value.text * count
    buffer.replace_range(
        position, position, payload, label="put", cursor=position + len(payload) - 1
    )
    return ModeResult(consumed=True, message="put")


def put_after(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    return _put(state, after=True)


def put_before(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    return _put(state, after=False)


def toggle_case_advance(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """``~``: swap case of ``count`` characters and step past them."""

    del match
    if not toggle_case_chars(state, state.take_count()):
        return state.bell("toggle_case_boundary")
    return ModeResult(consumed=True, message="toggle_case")


def replace_chars(state: EditorState, char: str, count: int) -> ModeResult:
    """``r<char>``: overwrite ``count`` characters in place.

    A count reaching past the line end replaces up to the end; the cursor
    rests on the last replaced character.
    """

    buffer = state.buffer
    _, line_end = buffer.line_bounds()
    start = buffer.cursor
    end = min(start + max(count, 1), line_end)
    if start == end:
        return state.bell("nothing_to_replace")
    buffer.replace_range(start, end, char * (end - start), label="replace", cursor=end - 1)
    return ModeResult(consumed=True, message="replace")


def insert_comment(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """``#``: comment out the line and accept it."""

    del match
    state.argument.clear()
    state.buffer.insert_text("#", at=0)
    return ModeResult(consumed=True, status="accept", message=state.buffer.text)


__all__ = [
    "OperatorSpan",
    "append",
    "append_at_line_end",
    "cancel_pending",
    "change_operator",
    "change_to_line_end",
    "delete_char_before",
    "delete_char_under",
    "delete_operator",
    "delete_to_line_end",
    "escape_insert",
    "escape_move",
    "insert",
    "insert_at_first_non_blank",
    "insert_comment",
    "line_span",
    "motion_span",
    "put_after",
    "put_before",
    "replace_chars",
    "substitute_char",
    "substitute_line",
    "toggle_case_advance",
    "yank_line",
    "yank_operator",
]
