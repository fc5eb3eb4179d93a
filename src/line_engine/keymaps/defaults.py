"""Built-in keymaps that seed each mode with sensible defaults."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence

from line_engine.actions import core as core_actions
from line_engine.actions import emacs as emacs_actions
from line_engine.actions import history as history_actions
from line_engine.actions import motions
from line_engine.actions import vi as vi_actions

from .models import KNOWN_MODES, ActionRef, Binding, KeySequence
from .registry import KeymapRegistry

MOTION_KEYS: tuple[tuple[str, str], ...] = (
    ("h", "vi.left"),
    ("LEFT", "vi.left"),
    ("BACKSPACE", "vi.left"),
    ("ctrl+h", "vi.left"),
    ("l", "vi.right"),
    ("RIGHT", "vi.right"),
    (" ", "vi.right"),
    ("w", "vi.word"),
    ("W", "vi.bigword"),
    ("e", "vi.word_end"),
    ("E", "vi.bigword_end"),
    ("b", "vi.word_back"),
    ("B", "vi.bigword_back"),
    ("0", "vi.line_start"),
    ("HOME", "vi.line_start"),
    ("^", "vi.first_non_blank"),
    ("$", "vi.line_end"),
    ("END", "vi.line_end"),
    ("|", "vi.column"),
    (";", "vi.repeat_find"),
    (",", "vi.reverse_find"),
    ("%", "vi.match_bracket"),
    ("f", "vi.find_forward"),
    ("F", "vi.find_backward"),
    ("t", "vi.till_forward"),
    ("T", "vi.till_backward"),
)

OPERATOR_KEYS: tuple[tuple[str, str], ...] = (
    ("d", "vi.op_delete"),
    ("c", "vi.op_change"),
    ("y", "vi.op_yank"),
)

COUNT_KEYS: tuple[tuple[str, str], ...] = tuple(
    (str(digit), "emacs.digit_argument") for digit in range(1, 10)
)

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    # line control
    ActionRef("core.accept_line", core_actions.accept_line, description="Accept the line"),
    ActionRef("core.interrupt", core_actions.interrupt, description="Interrupt the line"),
    ActionRef(
        "core.end_of_input",
        core_actions.end_of_input,
        description="End of input on an empty line",
    ),
    ActionRef(
        "core.delete_char_or_eof",
        core_actions.delete_char_or_eof,
        description="Delete forward, or end of input on an empty line",
    ),
    ActionRef("core.abort", core_actions.abort, description="Abort argument and ring bell"),
    ActionRef("core.bell", core_actions.ring_bell, description="Ring the bell"),
    ActionRef(
        "core.vi_editing", core_actions.enter_vi_editing, description="Switch to vi editing"
    ),
    ActionRef(
        "core.emacs_editing",
        core_actions.enter_emacs_editing,
        description="Switch to emacs editing",
    ),
    # emacs widgets
    ActionRef("emacs.forward_char", emacs_actions.forward_char, description="Move right"),
    ActionRef("emacs.backward_char", emacs_actions.backward_char, description="Move left"),
    ActionRef("emacs.forward_word", emacs_actions.forward_word, description="Move to word end"),
    ActionRef(
        "emacs.backward_word", emacs_actions.backward_word, description="Move to word start"
    ),
    ActionRef(
        "emacs.beginning_of_line",
        emacs_actions.beginning_of_line,
        description="Move to line start",
    ),
    ActionRef("emacs.end_of_line", emacs_actions.end_of_line, description="Move to line end"),
    ActionRef("emacs.self_insert", emacs_actions.self_insert, description="Insert the key"),
    ActionRef("emacs.delete_char", emacs_actions.delete_char, description="Delete forward"),
    ActionRef(
        "emacs.backward_delete_char",
        emacs_actions.backward_delete_char,
        description="Delete backward",
    ),
    ActionRef("emacs.kill_line", emacs_actions.kill_line, description="Kill to line end"),
    ActionRef(
        "emacs.backward_kill_line",
        emacs_actions.backward_kill_line,
        description="Kill to line start",
    ),
    ActionRef(
        "emacs.kill_whole_line", emacs_actions.kill_whole_line, description="Kill the line"
    ),
    ActionRef("emacs.kill_word", emacs_actions.kill_word, description="Kill next word"),
    ActionRef(
        "emacs.backward_kill_word",
        emacs_actions.backward_kill_word,
        description="Kill previous word",
    ),
    ActionRef(
        "emacs.unix_word_rubout",
        emacs_actions.unix_word_rubout,
        description="Kill previous whitespace-delimited word",
    ),
    ActionRef("emacs.yank", emacs_actions.yank, description="Yank the newest kill"),
    ActionRef("emacs.yank_pop", emacs_actions.yank_pop, description="Rotate to an older kill"),
    ActionRef(
        "emacs.transpose_chars", emacs_actions.transpose_chars, description="Transpose chars"
    ),
    ActionRef("emacs.upcase_word", emacs_actions.upcase_word, description="Upcase word"),
    ActionRef("emacs.downcase_word", emacs_actions.downcase_word, description="Downcase word"),
    ActionRef(
        "emacs.capitalize_word", emacs_actions.capitalize_word, description="Capitalize word"
    ),
    ActionRef("emacs.toggle_case", emacs_actions.toggle_case, description="Toggle char case"),
    ActionRef(
        "emacs.digit_argument", emacs_actions.digit_argument, description="Repeat count digit"
    ),
    ActionRef("emacs.undo", emacs_actions.undo, description="Undo"),
    # history
    ActionRef("history.previous", history_actions.previous_history, description="Older entry"),
    ActionRef("history.next", history_actions.next_history, description="Newer entry"),
    ActionRef(
        "history.beginning", history_actions.beginning_of_history, description="Oldest entry"
    ),
    ActionRef("history.end", history_actions.end_of_history, description="Back to the live line"),
    ActionRef(
        "history.vi_previous",
        history_actions.vi_previous_history,
        description="Older entry, cursor at start",
    ),
    ActionRef(
        "history.vi_next",
        history_actions.vi_next_history,
        description="Newer entry, cursor at start",
    ),
    ActionRef(
        "history.reverse_search",
        history_actions.reverse_search_history,
        description="Incremental search backward",
    ),
    ActionRef(
        "history.forward_search",
        history_actions.forward_search_history,
        description="Incremental search forward",
    ),
    ActionRef(
        "search.again_reverse",
        history_actions.search_again_reverse,
        description="Next older match",
    ),
    ActionRef(
        "search.again_forward",
        history_actions.search_again_forward,
        description="Next newer match",
    ),
    ActionRef(
        "search.backspace", history_actions.search_backspace, description="Shorten pattern"
    ),
    ActionRef("search.accept", history_actions.search_accept, description="Accept the match"),
    ActionRef("search.abort", history_actions.search_abort, description="Abort the search"),
    ActionRef("search.exit", history_actions.search_exit, description="Keep match and edit"),
    # vi commands
    ActionRef("vi.insert", vi_actions.insert, description="Insert before cursor"),
    ActionRef("vi.append", vi_actions.append, description="Append after cursor"),
    ActionRef(
        "vi.insert_bol",
        vi_actions.insert_at_first_non_blank,
        description="Insert at first non-blank",
    ),
    ActionRef("vi.append_eol", vi_actions.append_at_line_end, description="Append at line end"),
    ActionRef("vi.escape_insert", vi_actions.escape_insert, description="Leave insert mode"),
    ActionRef("vi.escape_move", vi_actions.escape_move, description="Ring bell in move mode"),
    ActionRef("vi.cancel", vi_actions.cancel_pending, description="Cancel pending command"),
    ActionRef("vi.delete_char", vi_actions.delete_char_under, description="Delete under cursor"),
    ActionRef(
        "vi.delete_char_before",
        vi_actions.delete_char_before,
        description="Delete before cursor",
    ),
    ActionRef("vi.substitute_char", vi_actions.substitute_char, description="Substitute chars"),
    ActionRef("vi.substitute_line", vi_actions.substitute_line, description="Substitute line"),
    ActionRef("vi.delete_eol", vi_actions.delete_to_line_end, description="Delete to line end"),
    ActionRef("vi.change_eol", vi_actions.change_to_line_end, description="Change to line end"),
    ActionRef("vi.yank_line", vi_actions.yank_line, description="Yank whole line"),
    ActionRef("vi.put_after", vi_actions.put_after, description="Put after cursor"),
    ActionRef("vi.put_before", vi_actions.put_before, description="Put before cursor"),
    ActionRef(
        "vi.toggle_case", vi_actions.toggle_case_advance, description="Toggle case and advance"
    ),
    ActionRef(
        "vi.insert_comment", vi_actions.insert_comment, description="Comment out and accept"
    ),
    ActionRef(
        "vi.replace",
        core_actions.noop_action,
        kind="prefix",
        description="Replace characters under the cursor",
        metadata={"pending": "replace"},
    ),
    ActionRef(
        "vi.register",
        core_actions.noop_action,
        kind="prefix",
        description="Select a register",
        metadata={"pending": "register"},
    ),
    # vi operators
    ActionRef("vi.op_delete", vi_actions.delete_operator, kind="operator", description="Delete"),
    ActionRef("vi.op_change", vi_actions.change_operator, kind="operator", description="Change"),
    ActionRef("vi.op_yank", vi_actions.yank_operator, kind="operator", description="Yank"),
    # vi motions
    ActionRef("vi.left", motions.motion_left, kind="motion", description="Left"),
    ActionRef("vi.right", motions.motion_right, kind="motion", description="Right"),
    ActionRef("vi.word", motions.motion_word_forward, kind="motion", description="Next word"),
    ActionRef(
        "vi.bigword", motions.motion_bigword_forward, kind="motion", description="Next WORD"
    ),
    ActionRef("vi.word_end", motions.motion_word_end, kind="motion", description="Word end"),
    ActionRef(
        "vi.bigword_end", motions.motion_bigword_end, kind="motion", description="WORD end"
    ),
    ActionRef(
        "vi.word_back", motions.motion_word_backward, kind="motion", description="Previous word"
    ),
    ActionRef(
        "vi.bigword_back",
        motions.motion_bigword_backward,
        kind="motion",
        description="Previous WORD",
    ),
    ActionRef(
        "vi.line_start", motions.motion_line_start, kind="motion", description="Line start"
    ),
    ActionRef(
        "vi.first_non_blank",
        motions.motion_first_non_blank,
        kind="motion",
        description="First non-blank",
    ),
    ActionRef("vi.line_end", motions.motion_line_end, kind="motion", description="Line end"),
    ActionRef("vi.column", motions.motion_column, kind="motion", description="Column"),
    ActionRef(
        "vi.repeat_find",
        motions.motion_repeat_char_search,
        kind="motion",
        description="Repeat char search",
    ),
    ActionRef(
        "vi.reverse_find",
        motions.motion_reverse_char_search,
        kind="motion",
        description="Repeat char search reversed",
    ),
    ActionRef(
        "vi.match_bracket",
        motions.motion_match_bracket,
        kind="motion",
        description="Matching bracket",
    ),
    ActionRef(
        "vi.find_forward",
        motions.find_char_forward,
        kind="char_search",
        description="Find char forward",
    ),
    ActionRef(
        "vi.find_backward",
        motions.find_char_backward,
        kind="char_search",
        description="Find char backward",
    ),
    ActionRef(
        "vi.till_forward",
        motions.till_char_forward,
        kind="char_search",
        description="Till char forward",
    ),
    ActionRef(
        "vi.till_backward",
        motions.till_char_backward,
        kind="char_search",
        description="Till char backward",
    ),
)

KeySpec = str | Sequence[str]

EMACS_KEYS: tuple[tuple[KeySpec, str], ...] = (
    ("ctrl+a", "emacs.beginning_of_line"),
    ("HOME", "emacs.beginning_of_line"),
    ("ctrl+e", "emacs.end_of_line"),
    ("END", "emacs.end_of_line"),
    ("ctrl+f", "emacs.forward_char"),
    ("RIGHT", "emacs.forward_char"),
    ("ctrl+b", "emacs.backward_char"),
    ("LEFT", "emacs.backward_char"),
    ("alt+f", "emacs.forward_word"),
    ("alt+b", "emacs.backward_word"),
    ("ctrl+d", "core.delete_char_or_eof"),
    ("DELETE", "emacs.delete_char"),
    ("BACKSPACE", "emacs.backward_delete_char"),
    ("ctrl+h", "emacs.backward_delete_char"),
    ("ctrl+k", "emacs.kill_line"),
    ("ctrl+u", "emacs.backward_kill_line"),
    ("alt+d", "emacs.kill_word"),
    ("alt+BACKSPACE", "emacs.backward_kill_word"),
    ("alt+ctrl+h", "emacs.backward_kill_word"),
    ("ctrl+w", "emacs.unix_word_rubout"),
    ("ctrl+y", "emacs.yank"),
    ("alt+y", "emacs.yank_pop"),
    ("ctrl+t", "emacs.transpose_chars"),
    ("alt+u", "emacs.upcase_word"),
    ("alt+l", "emacs.downcase_word"),
    ("alt+c", "emacs.capitalize_word"),
    *((f"alt+{digit}", "emacs.digit_argument") for digit in range(10)),
    ("ctrl+_", "emacs.undo"),
    (("ctrl+x", "ctrl+u"), "emacs.undo"),
    ("ctrl+p", "history.previous"),
    ("UP", "history.previous"),
    ("ctrl+n", "history.next"),
    ("DOWN", "history.next"),
    ("alt+<", "history.beginning"),
    ("alt+>", "history.end"),
    ("ctrl+r", "history.reverse_search"),
    ("ctrl+s", "history.forward_search"),
    ("ENTER", "core.accept_line"),
    ("ctrl+j", "core.accept_line"),
    ("ctrl+m", "core.accept_line"),
    ("ctrl+c", "core.interrupt"),
    ("ctrl+g", "core.abort"),
    ("alt+ctrl+j", "core.vi_editing"),
)

VI_INSERT_KEYS: tuple[tuple[KeySpec, str], ...] = (
    ("ESC", "vi.escape_insert"),
    ("alt+ctrl+e", "core.emacs_editing"),
    ("ENTER", "core.accept_line"),
    ("ctrl+j", "core.accept_line"),
    ("ctrl+m", "core.accept_line"),
    ("ctrl+c", "core.interrupt"),
    ("ctrl+d", "core.end_of_input"),
    ("BACKSPACE", "emacs.backward_delete_char"),
    ("ctrl+h", "emacs.backward_delete_char"),
    ("DELETE", "emacs.delete_char"),
    ("ctrl+w", "emacs.unix_word_rubout"),
    ("ctrl+u", "emacs.backward_kill_line"),
    ("ctrl+k", "emacs.kill_line"),
    ("ctrl+t", "emacs.transpose_chars"),
    ("ctrl+y", "emacs.yank"),
    ("ctrl+_", "emacs.undo"),
    ("LEFT", "emacs.backward_char"),
    ("RIGHT", "emacs.forward_char"),
    ("HOME", "emacs.beginning_of_line"),
    ("END", "emacs.end_of_line"),
    ("UP", "history.previous"),
    ("DOWN", "history.next"),
    ("ctrl+r", "history.reverse_search"),
    ("ctrl+s", "history.forward_search"),
)

VI_MOVE_KEYS: tuple[tuple[KeySpec, str], ...] = (
    *MOTION_KEYS,
    *OPERATOR_KEYS,
    *COUNT_KEYS,
    ("i", "vi.insert"),
    ("INSERT", "vi.insert"),
    ("a", "vi.append"),
    ("I", "vi.insert_bol"),
    ("A", "vi.append_eol"),
    ("x", "vi.delete_char"),
    ("DELETE", "vi.delete_char"),
    ("X", "vi.delete_char_before"),
    ("s", "vi.substitute_char"),
    ("S", "vi.substitute_line"),
    ("D", "vi.delete_eol"),
    ("C", "vi.change_eol"),
    ("Y", "vi.yank_line"),
    ("p", "vi.put_after"),
    ("P", "vi.put_before"),
    ("~", "vi.toggle_case"),
    ("r", "vi.replace"),
    ('"', "vi.register"),
    ("u", "emacs.undo"),
    ("j", "history.vi_next"),
    ("+", "history.vi_next"),
    ("DOWN", "history.vi_next"),
    ("ctrl+n", "history.vi_next"),
    ("k", "history.vi_previous"),
    ("-", "history.vi_previous"),
    ("UP", "history.vi_previous"),
    ("ctrl+p", "history.vi_previous"),
    ("#", "vi.insert_comment"),
    ("ctrl+r", "history.reverse_search"),
    ("ctrl+s", "history.forward_search"),
    ("ENTER", "core.accept_line"),
    ("ctrl+j", "core.accept_line"),
    ("ctrl+m", "core.accept_line"),
    ("ctrl+d", "core.end_of_input"),
    ("ctrl+c", "core.interrupt"),
    ("ESC", "vi.escape_move"),
    ("alt+ctrl+e", "core.emacs_editing"),
)

VI_OPERATOR_KEYS: tuple[tuple[KeySpec, str], ...] = (
    *MOTION_KEYS,
    *OPERATOR_KEYS,
    *COUNT_KEYS,
    ("ESC", "vi.cancel"),
    ("ctrl+c", "core.interrupt"),
)

VI_CHAR_KEYS: tuple[tuple[KeySpec, str], ...] = (
    ("ESC", "vi.cancel"),
    ("ctrl+c", "core.interrupt"),
)

SEARCH_KEYS: tuple[tuple[KeySpec, str], ...] = (
    ("ctrl+r", "search.again_reverse"),
    ("ctrl+s", "search.again_forward"),
    ("BACKSPACE", "search.backspace"),
    ("ctrl+h", "search.backspace"),
    ("ENTER", "search.accept"),
    ("ctrl+j", "search.accept"),
    ("ctrl+m", "search.accept"),
    ("ctrl+g", "search.abort"),
    ("ESC", "search.exit"),
    ("ctrl+c", "core.interrupt"),
)


def _escape_aliases(
    entries: Iterable[tuple[KeySpec, str]]
) -> Iterable[tuple[KeySpec, str]]:
    """Mirror every ``alt+<key>`` binding onto the two-key ``ESC <key>`` form."""

    for keys, action_id in entries:
        yield keys, action_id
        if isinstance(keys, str) and keys.startswith("alt+"):
            yield ("ESC", keys[len("alt+") :]), action_id


def _bindings(mode: str, entries: Iterable[tuple[KeySpec, str]]) -> tuple[Binding, ...]:
    bindings = []
    for keys, action_id in entries:
        sequence = KeySequence.from_strings(*((keys,) if isinstance(keys, str) else keys))
        bindings.append(
            Binding(
                id=f"{mode}:{' '.join(sequence.tokens)}",
                mode=mode,
                sequence=sequence,
                action_id=action_id,
                source="defaults",
            )
        )
    return tuple(bindings)


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    *_bindings("emacs-insert", _escape_aliases(EMACS_KEYS)),
    *_bindings("vi-insert", VI_INSERT_KEYS),
    *_bindings("vi-move", VI_MOVE_KEYS),
    *_bindings("vi-operator", VI_OPERATOR_KEYS),
    *_bindings("vi-char", VI_CHAR_KEYS),
    *_bindings("search", SEARCH_KEYS),
)

def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    default_sequence_timeout_ms: int | None = None,
    include_modes: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register built-in actions and bindings for every mode."""

    modes = set(include_modes) if include_modes else None
    excluded = set(exclude_bindings or ())

    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if modes is not None and binding.mode not in modes:
            continue
        if binding.id in excluded:
            continue
        registry.register_binding(
            _binding_with_timeout(binding, default_sequence_timeout_ms),
            replace=replace,
        )

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=True)


def _binding_with_timeout(binding: Binding, timeout_ms: int | None) -> Binding:
    if timeout_ms is None:
        return binding
    sequence = KeySequence(binding.sequence.strokes, timeout_ms=timeout_ms)
    return replace(binding, sequence=sequence)


__all__ = [
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "load_default_keymaps",
]
