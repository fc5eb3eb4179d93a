"""Editing verbs bound to keys: emacs widgets, vi commands, motions and history."""

from . import core, emacs, history, motions, vi
from .core import accept_line, interrupt, noop_action
from .motions import MotionResult
from .vi import OperatorSpan

__all__ = [
    "MotionResult",
    "OperatorSpan",
    "accept_line",
    "core",
    "emacs",
    "history",
    "interrupt",
    "motions",
    "noop_action",
    "vi",
]
