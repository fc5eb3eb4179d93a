"""Vi command ("move") mode and its count/operator/motion composer."""

from __future__ import annotations

from typing import Optional

from line_engine.actions import motions
from line_engine.actions.vi import line_span, replace_chars
from line_engine.buffer import RegisterBank
from line_engine.keymaps import ActionRef, ResolutionMatch

from .base_mode import EditorState, KeyInput, ModeResult
from .keymap_helpers import KeymapMode
from .operator_pipeline import (
    IDLE,
    ComposerState,
    ExecutionPlan,
    Idle,
    PendingCharSearch,
    PendingOperator,
    PendingRegister,
    PendingReplace,
    apply_operator,
    multiply_counts,
    span_for_motion,
)

# motions that ``c`` turns into "to the end of this word" on a non-blank
_CHANGE_WORD_MOTIONS = {"vi.word": False, "vi.bigword": True}


def change_word_target(state: EditorState, count: int, *, big_word: bool) -> motions.MotionResult:
    """``cw`` on a non-blank changes to the end of the current word, like ``ce``
    but without skipping to the next word when already on its last char."""

    buffer = state.buffer
    position = motions.word_end_forward(
        buffer.text, buffer.cursor - 1, count, big_word=big_word
    )
    return motions.MotionResult(position=position, inclusive=True)


class ViMoveMode(KeymapMode):
    """Vi command mode.

    Keys are looked up in ``vi-move`` while idle, in ``vi-operator`` once an
    operator is waiting for its motion, and in ``vi-char`` when the next key
    is a literal character (``f``/``t`` targets, ``r`` replacements and
    register names).
    """

    name = "vi-move"

    def __init__(self, state: EditorState, **kwargs) -> None:
        super().__init__(state, **kwargs)
        self.composer: ComposerState = IDLE
        self.last_plan: Optional[ExecutionPlan] = None

    @property
    def table(self) -> str:
        if isinstance(self.composer, PendingOperator):
            return "vi-operator"
        if isinstance(self.composer, Idle):
            return self.name
        return "vi-char"

    def on_enter(self, previous: str | None) -> None:
        del previous
        self.composer = IDLE
        self._clamp_cursor()

    def on_exit(self, next_mode: str | None) -> None:
        super().on_exit(next_mode)
        self.composer = IDLE

    def reset(self) -> None:
        super().reset()
        self.composer = IDLE

    def handle_key(self, key: KeyInput) -> ModeResult:
        # "0" continues a count already being typed; otherwise it is a motion
        if (
            key.key == "0"
            and not key.modifiers
            and self.state.argument.is_set
            and isinstance(self.composer, (Idle, PendingOperator))
        ):
            self.state.argument.push_digit(0)
            return ModeResult(consumed=True, status="argument")
        return super().handle_key(key)

    def dispatch(self, match: ResolutionMatch) -> ModeResult:
        action = match.action
        if action.kind == "motion":
            return self._motion(action)
        if action.kind == "operator":
            return self._operator(action)
        if action.kind == "char_search":
            return self._begin_char_search(action)
        if action.kind == "prefix":
            return self._begin_prefix(action)

        outcome = self._execute_match(match)
        if outcome.status == "argument":
            return outcome
        self.composer = IDLE
        self.state.argument.clear()
        return self._settle(outcome)

    def handle_unbound(self, key: KeyInput) -> ModeResult:
        composer = self.composer
        self.composer = IDLE
        if key.printable and key.text is not None:
            if isinstance(composer, PendingCharSearch):
                return self._finish_char_search(composer, key.text)
            if isinstance(composer, PendingReplace):
                return self._settle(replace_chars(self.state, key.text, composer.count))
            if isinstance(composer, PendingRegister):
                if RegisterBank.is_valid_name(key.text):
                    self.state.register_name = key.text
                    return ModeResult(consumed=True, status="register")
                return self._cancel("invalid_register")
        return super().handle_unbound(key)

    def _motion(self, action: ActionRef) -> ModeResult:
        count = self.state.argument.take()
        composer = self.composer
        if isinstance(composer, PendingOperator):
            self.composer = IDLE
            total = multiply_counts(composer.count, count)
            if (
                composer.operator.id == "vi.op_change"
                and action.id in _CHANGE_WORD_MOTIONS
                and self.state.buffer.char_at().strip()
            ):
                result = change_word_target(
                    self.state, total, big_word=_CHANGE_WORD_MOTIONS[action.id]
                )
            else:
                result = action(self.state, total)
            return self._operate_over(composer, result, motion_id=action.id, count=total)

        self.composer = IDLE
        result = action(self.state, count or 1)
        if result.failed:
            return self._cancel("motion_failed")
        self.state.buffer.cursor = result.position
        return self._settle(ModeResult(consumed=True, message="motion"))

    def _operator(self, action: ActionRef) -> ModeResult:
        composer = self.composer
        state = self.state
        if isinstance(composer, Idle):
            self.composer = PendingOperator(
                operator=action,
                count=state.argument.take(),
                register=state.take_register(),
            )
            return ModeResult(consumed=True, status="pending", message="operator")

        self.composer = IDLE
        if isinstance(composer, PendingOperator) and composer.operator.id == action.id:
            # dd, cc, yy: whole lines
            total = multiply_counts(composer.count, state.argument.take())
            span = line_span(state, total)
            outcome, self.last_plan = apply_operator(
                state, composer, span, motion_id=action.id, count=total
            )
            return self._settle(outcome)
        return self._cancel("operator_mismatch")

    def _begin_char_search(self, action: ActionRef) -> ModeResult:
        composer = self.composer
        operator = composer if isinstance(composer, PendingOperator) else None
        self.composer = PendingCharSearch(
            search=action, count=self.state.argument.take(), operator=operator
        )
        return ModeResult(consumed=True, status="pending", message="char_search")

    def _finish_char_search(self, composer: PendingCharSearch, char: str) -> ModeResult:
        if composer.operator is None:
            result = composer.search.handler(self.state, char, composer.count or 1)
            if result.failed:
                return self._cancel("char_not_found")
            self.state.buffer.cursor = result.position
            return self._settle(ModeResult(consumed=True, message="motion"))

        total = multiply_counts(composer.operator.count, composer.count)
        result = composer.search.handler(self.state, char, total)
        return self._operate_over(
            composer.operator, result, motion_id=composer.search.id, count=total
        )

    def _begin_prefix(self, action: ActionRef) -> ModeResult:
        pending = action.metadata.get("pending")
        if not isinstance(self.composer, Idle):
            return self._cancel("unexpected_prefix")
        if pending == "replace":
            self.composer = PendingReplace(count=self.state.take_count())
        elif pending == "register":
            self.state.argument.clear()
            self.composer = PendingRegister()
        else:
            return self._cancel("unknown_prefix")
        return ModeResult(consumed=True, status="pending", message=pending)

    def _operate_over(
        self,
        pending: PendingOperator,
        result: motions.MotionResult,
        *,
        motion_id: str,
        count: int,
    ) -> ModeResult:
        if result.failed:
            return self._cancel("motion_failed")
        span = span_for_motion(self.state, result)
        if span.empty:
            # nothing to act on; the operator is dropped, not applied
            return self._cancel("empty_span")
        outcome, self.last_plan = apply_operator(
            self.state, pending, span, motion_id=motion_id, count=count
        )
        return self._settle(outcome)

    def _cancel(self, reason: str) -> ModeResult:
        self.composer = IDLE
        self.state.argument.clear()
        self.state.register_name = None
        return self.state.bell(reason)

    def _settle(self, outcome: ModeResult) -> ModeResult:
        if outcome.switch_to is None:
            self._clamp_cursor()
        return outcome

    def _clamp_cursor(self) -> None:
        """Command mode never rests past the last character of the line."""

        buffer = self.state.buffer
        start, end = buffer.line_bounds()
        if buffer.cursor >= end and end > start:
            buffer.cursor = end - 1


__all__ = ["ViMoveMode"]
