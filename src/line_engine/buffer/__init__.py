"""Buffer, register and undo data structures for one edited line."""

from .buffer import Buffer, BufferDelta, BufferView, Transaction
from .registers import UNNAMED, KillRing, RegisterBank, RegisterValue
from .state import Argument, CharSearchState, SearchFrame, SearchState
from .undo import UndoEntry, UndoTimeline
from .validation import BufferValidationError, clamp, ensure_offset

__all__ = [
    "Argument",
    "Buffer",
    "BufferDelta",
    "BufferValidationError",
    "BufferView",
    "CharSearchState",
    "KillRing",
    "RegisterBank",
    "RegisterValue",
    "SearchFrame",
    "SearchState",
    "Transaction",
    "UNNAMED",
    "UndoEntry",
    "UndoTimeline",
    "clamp",
    "ensure_offset",
]
