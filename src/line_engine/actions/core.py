"""Core action implementations shared across modes."""

from __future__ import annotations

from line_engine.keymaps.resolver import ResolutionMatch
from line_engine.modes.base_mode import EditorState, ModeResult


def accept_line(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    state.argument.clear()
    return ModeResult(consumed=True, status="accept", message=state.buffer.text)


def interrupt(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    return ModeResult(consumed=True, status="interrupt", message=state.buffer.text)


def end_of_input(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """Signal end of input, but only on an empty line."""

    del match
    if state.buffer.text:
        return state.bell("eof_on_non_empty_line")
    return ModeResult(consumed=True, status="eof")


def delete_char_or_eof(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = state.buffer
    if not buffer.text:
        return ModeResult(consumed=True, status="eof")
    if buffer.cursor >= len(buffer):
        return state.bell("delete_at_end")
    end = min(buffer.cursor + state.take_count(), len(buffer))
    buffer.delete_range(buffer.cursor, end)
    return ModeResult(consumed=True)


def abort(state: EditorState, match: ResolutionMatch) -> ModeResult:
    """Drop the pending argument and ring the bell (``ctrl+g``)."""

    del match
    state.argument.clear()
    return state.bell("abort")


def ring_bell(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del match
    return state.bell()


def noop_action(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del state, match
    return ModeResult(consumed=True, status="noop")


def enter_vi_editing(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del state, match
    return ModeResult(consumed=True, switch_to="vi-insert", message="vi_editing")


def enter_emacs_editing(state: EditorState, match: ResolutionMatch) -> ModeResult:
    del state, match
    return ModeResult(consumed=True, switch_to="emacs-insert", message="emacs_editing")


__all__ = [
    "abort",
    "accept_line",
    "delete_char_or_eof",
    "end_of_input",
    "enter_emacs_editing",
    "enter_vi_editing",
    "interrupt",
    "noop_action",
    "ring_bell",
]
