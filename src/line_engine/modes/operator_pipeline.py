"""Composition states for vi commands built from several keys.

``vi-move`` is always in exactly one of these states; each key either
advances the composition or completes it and returns to :class:`Idle`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from line_engine.actions.motions import MotionResult
from line_engine.actions.vi import OperatorSpan, motion_span
from line_engine.keymaps import ActionRef
from line_engine.runtime import telemetry

from .base_mode import EditorState, ModeResult


@dataclass(frozen=True, slots=True)
class Idle:
    pass


@dataclass(frozen=True, slots=True)
class PendingOperator:
    """``d``, ``c`` or ``y`` typed; waiting for its motion."""

    operator: ActionRef
    count: Optional[int] = None
    register: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PendingCharSearch:
    """``f``/``F``/``t``/``T`` typed; the next key is the target character."""

    search: ActionRef
    count: Optional[int] = None
    operator: Optional[PendingOperator] = None


@dataclass(frozen=True, slots=True)
class PendingReplace:
    count: int = 1


@dataclass(frozen=True, slots=True)
class PendingRegister:
    pass


ComposerState = Union[Idle, PendingOperator, PendingCharSearch, PendingReplace, PendingRegister]

IDLE = Idle()


@dataclass(slots=True)
class ExecutionPlan:
    """Operator application as it was finally composed."""

    operator_id: str
    motion_id: str
    count: int
    register_name: str
    start: int
    end: int
    linewise: bool = False


def multiply_counts(*counts: Optional[int]) -> int:
    """Counts typed before an operator and before its motion multiply."""

    total = 1
    for count in counts:
        if count is not None:
            total *= count
    return total


def apply_operator(
    state: EditorState,
    pending: PendingOperator,
    span: OperatorSpan,
    *,
    motion_id: str,
    count: int,
) -> tuple[ModeResult, ExecutionPlan]:
    plan = ExecutionPlan(
        operator_id=pending.operator.id,
        motion_id=motion_id,
        count=count,
        register_name=pending.register or '"',
        start=span.start,
        end=span.end,
        linewise=span.linewise,
    )
    with telemetry.span(
        "operator::execute",
        component=True,
        metadata={
            "operator": plan.operator_id,
            "motion": plan.motion_id,
            "count": plan.count,
            "register": plan.register_name,
        },
    ) as handle:
        outcome = pending.operator(state, span, pending.register)
        if isinstance(outcome, ModeResult):
            handle.add_metadata("status", outcome.status)
        else:
            outcome = ModeResult(consumed=True)
    return outcome, plan


def span_for_motion(state: EditorState, result: MotionResult) -> OperatorSpan:
    buffer = state.buffer
    return motion_span(
        buffer.cursor, result.position, inclusive=result.inclusive, limit=len(buffer)
    )


__all__ = [
    "ComposerState",
    "ExecutionPlan",
    "IDLE",
    "Idle",
    "PendingCharSearch",
    "PendingOperator",
    "PendingRegister",
    "PendingReplace",
    "apply_operator",
    "multiply_counts",
    "span_for_motion",
]
