"""Terminal collaborator: where keys come from and where bells go."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Union, runtime_checkable

from line_engine.modes.base_mode import KeyInput

# Script marker standing for a read that timed out with no key.
PAUSE = "PAUSE"


@runtime_checkable
class Terminal(Protocol):
    width: int

    def read_key(self, timeout: Optional[float] = None) -> Optional[KeyInput]:
        """Block for the next key; ``None`` when ``timeout`` seconds pass first
        or a signal arrived."""
        ...

    def pending_signal(self) -> Optional[str]:
        """Return and clear the signal (e.g. ``"interrupt"``) that cut the last read short."""
        ...

    def bell(self) -> None:
        ...


@dataclass(frozen=True, slots=True)
class ScriptedSignal:
    name: str = "interrupt"


ScriptItem = Union[str, KeyInput, ScriptedSignal]


class ScriptedTerminal:
    """Replays a fixed script of key tokens.

    ``PAUSE`` entries only take effect when the reader is waiting with a
    timeout; they are skipped otherwise. Running out of script raises
    ``EOFError`` like a closed input stream.
    """

    def __init__(self, keys: Iterable[ScriptItem] = (), *, width: int = 80) -> None:
        self.width = width
        self.bells = 0
        self.timeouts: list[Optional[float]] = []
        self._script: deque[ScriptItem] = deque(keys)
        self._signal: Optional[str] = None

    def feed(self, *keys: ScriptItem) -> None:
        self._script.extend(keys)

    @property
    def remaining(self) -> int:
        return len(self._script)

    def read_key(self, timeout: Optional[float] = None) -> Optional[KeyInput]:
        self.timeouts.append(timeout)
        while self._script:
            item = self._script.popleft()
            if isinstance(item, ScriptedSignal):
                self._signal = item.name
                return None
            if isinstance(item, str) and item == PAUSE:
                if timeout is None:
                    continue
                return None
            if isinstance(item, KeyInput):
                return item
            return KeyInput.from_token(item)
        raise EOFError("script exhausted")

    def pending_signal(self) -> Optional[str]:
        signal, self._signal = self._signal, None
        return signal

    def bell(self) -> None:
        self.bells += 1


__all__ = ["PAUSE", "ScriptedSignal", "ScriptedTerminal", "Terminal"]
