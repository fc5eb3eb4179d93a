"""Terminal-agnostic line editing engine with emacs and vi key bindings."""

from .reader import EndOfInputError, LineReader, UserInterruptError
from .history import History, MemoryHistory
from .runtime.config import ConfigError, EngineConfig
from .terminal import PAUSE, ScriptedSignal, ScriptedTerminal, Terminal

__all__ = [
    "ConfigError",
    "EndOfInputError",
    "EngineConfig",
    "History",
    "LineReader",
    "MemoryHistory",
    "PAUSE",
    "ScriptedSignal",
    "ScriptedTerminal",
    "Terminal",
    "UserInterruptError",
    "actions",
    "buffer",
    "keymaps",
    "modes",
    "runtime",
]

__version__ = "0.1.0"
