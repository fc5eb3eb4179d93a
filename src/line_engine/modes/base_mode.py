"""Base classes and shared editing state for editor modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from line_engine.buffer import (
    Argument,
    Buffer,
    CharSearchState,
    KillRing,
    RegisterBank,
    SearchState,
)
from line_engine.history import History, MemoryHistory

# Statuses the line reader reacts to; everything else is internal to a mode.
TERMINAL_STATUSES = ("accept", "interrupt", "eof")

# messages of kill and yank widgets; any other finished command ends the run
KILLED = "kill"
YANKED = "yank_kill"


@dataclass(slots=True)
class KeyInput:
    """Normalized key event passed to modes."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    @classmethod
    def from_token(cls, token: str) -> "KeyInput":
        """Build a key from ``"a"``, ``"ESC"`` or ``"ctrl+r"`` style tokens."""

        if len(token) == 1:
            return cls(key=token, text=token)
        if "+" in token[:-1]:
            head, _, key = token.rpartition("+")
            if not key:
                head, key = head[:-1], "+"
            return cls(key=key, modifiers=tuple(sorted(head.split("+"))))
        return cls(key=token)

    @property
    def printable(self) -> bool:
        return bool(self.text) and not self.modifiers


@dataclass(slots=True)
class ModeResult:
    """Result returned from ``Mode.handle_key``.

    ``status="replay"`` with ``consumed=False`` asks the manager to feed the
    same key to the mode named by ``switch_to``.
    """

    consumed: bool
    switch_to: Optional[str] = None
    status: str = "ok"
    message: Optional[str] = None
    timeout_ms: Optional[int] = None


class ModeBus:
    """Minimal event bus letting modes exchange structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


@dataclass(slots=True)
class EditorState:
    """Everything a single line edit owns, handed to every action."""

    buffer: Buffer = field(default_factory=Buffer)
    registers: RegisterBank = field(default_factory=RegisterBank)
    kill_ring: KillRing = field(default_factory=KillRing)
    bus: ModeBus = field(default_factory=ModeBus)
    history: History = field(default_factory=MemoryHistory)
    argument: Argument = field(default_factory=Argument)
    # kept in sync by the mode manager
    mode: Optional[str] = None
    char_search: Optional[CharSearchState] = None
    search: Optional[SearchState] = None
    last_search_pattern: str = ""
    # None while editing the live line; otherwise the history entry shown
    history_index: Optional[int] = None
    saved_line: str = ""
    register_name: Optional[str] = None
    extras: Dict[str, object] = field(default_factory=dict)

    def take_count(self, default: int = 1) -> int:
        value = self.argument.take()
        return default if value is None else value

    def take_register(self) -> Optional[str]:
        name, self.register_name = self.register_name, None
        return name

    def bell(self, reason: str = "") -> ModeResult:
        self.bus.emit("bell", reason)
        return ModeResult(consumed=True, status="bell", message=reason or None)

    def end_command(self, result: ModeResult) -> None:
        """Track kill and yank runs for merging kills and ``yank-pop``."""

        if result.status in ("pending", "argument"):
            return
        if result.message != KILLED:
            self.kill_ring.reset_last_kill()
        if result.message != YANKED:
            self.kill_ring.reset_last_yank()

    def reset_line(self, text: str = "", *, clear_char_search: bool = False) -> None:
        """Start a fresh logical line; registers always survive."""

        self.buffer.reset(text)
        self.argument.clear()
        self.search = None
        self.history_index = None
        self.saved_line = ""
        self.register_name = None
        self.kill_ring.reset_last_kill()
        self.kill_ring.reset_last_yank()
        if clear_char_search:
            self.char_search = None


class Mode:
    """Base class all concrete editor modes inherit from."""

    name: str = "mode"

    def __init__(self, state: EditorState) -> None:
        self.state = state

    def on_enter(
        self, previous: Optional[str]
    ) -> None:  # pragma: no cover - default no-op
        del previous

    def on_exit(
        self, next_mode: Optional[str]
    ) -> None:  # pragma: no cover - default no-op
        del next_mode

    def reset(self) -> None:
        """Drop any in-flight composition; called on interrupt."""

    def handle_key(
        self, key: KeyInput
    ) -> ModeResult:  # pragma: no cover - abstract override
        raise NotImplementedError

    def handle_timeout(self) -> ModeResult:
        """Invoked by the manager when a pending key sequence expires."""

        return ModeResult(consumed=False, status="timeout")


__all__ = [
    "EditorState",
    "KeyInput",
    "KILLED",
    "Mode",
    "ModeBus",
    "ModeResult",
    "TERMINAL_STATUSES",
    "YANKED",
]
