"""Editor modes, the vi composer, and the mode manager."""

from .base_mode import (
    TERMINAL_STATUSES,
    EditorState,
    KeyInput,
    Mode,
    ModeBus,
    ModeResult,
)
from .keymap_helpers import KeymapMode, key_to_token
from .insert_mode import TextEntryMode, ViInsertMode
from .emacs_mode import EmacsMode
from .move_mode import ViMoveMode
from .search_mode import SearchMode
from .operator_pipeline import (
    ComposerState,
    ExecutionPlan,
    Idle,
    PendingCharSearch,
    PendingOperator,
    PendingRegister,
    PendingReplace,
)
from .mode_manager import ModeManager

__all__ = [
    "TERMINAL_STATUSES",
    "ComposerState",
    "EditorState",
    "EmacsMode",
    "ExecutionPlan",
    "Idle",
    "KeyInput",
    "KeymapMode",
    "Mode",
    "ModeBus",
    "ModeManager",
    "ModeResult",
    "PendingCharSearch",
    "PendingOperator",
    "PendingRegister",
    "PendingReplace",
    "SearchMode",
    "TextEntryMode",
    "ViInsertMode",
    "ViMoveMode",
    "key_to_token",
]
