"""Register storage for killed and yanked text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

UNNAMED = '"'


@dataclass(frozen=True, slots=True)
class RegisterValue:
    text: str
    type: str = "character"  # character or line

    @property
    def linewise(self) -> bool:
        return self.type == "line"


class RegisterBank:
    """Tracks the unnamed register plus named registers ``a``-``z``.

    Writing to an upper-case name appends to the matching lower-case
    register. Every write is mirrored into the unnamed register.
    """

    def __init__(self) -> None:
        self._registers: Dict[str, RegisterValue] = {UNNAMED: RegisterValue(text="")}

    @staticmethod
    def is_valid_name(name: str) -> bool:
        return name == UNNAMED or (len(name) == 1 and name.isascii() and name.isalpha())

    def get(self, name: str = UNNAMED) -> RegisterValue:
        return self._registers.get(name.lower(), RegisterValue(text=""))

    def set(self, name: str, value: RegisterValue) -> None:
        if not self.is_valid_name(name):
            raise ValueError(f"Unknown register '{name}'")
        if name != UNNAMED and name.isupper():
            self.append(name.lower(), value.text, register_type=value.type)
            return
        self._registers[name] = value
        if name != UNNAMED:
            self._registers[UNNAMED] = value

    def append(
        self, name: str, text: str, *, register_type: str | None = None
    ) -> None:
        existing = self.get(name)
        combined = RegisterValue(
            text=existing.text + text, type=register_type or existing.type
        )
        self._registers[name] = combined
        self._registers[UNNAMED] = combined

    def yank_to(
        self, name: str | None, text: str, *, register_type: str = "character"
    ) -> RegisterValue:
        self.set(name or UNNAMED, RegisterValue(text=text, type=register_type))
        return self.get(name or UNNAMED)


class KillRing:
    """Emacs kill ring feeding ``yank`` and ``yank-pop``.

    Kills issued back to back grow the newest entry instead of adding one;
    backward kills prepend to it. ``yank_pop`` is only valid right after a
    yank and walks from the newest entry towards the oldest, wrapping.
    """

    def __init__(self, size: int = 60) -> None:
        if size < 1:
            raise ValueError("size must be positive")
        self.size = size
        self._slots: List[str] = []
        self._head = -1
        self._last_kill = False
        self._last_yank = False
        # buffer span covered by the text the last yank inserted
        self.yank_span: Optional[Tuple[int, int]] = None

    def __len__(self) -> int:
        return len(self._slots)

    def add(self, text: str, *, backwards: bool = False) -> None:
        self._last_yank = False
        if self._last_kill and self._slots:
            newest = self._slots[-1]
            self._slots[-1] = text + newest if backwards else newest + text
        else:
            self._slots.append(text)
            if len(self._slots) > self.size:
                del self._slots[0]
        self._last_kill = True
        self._head = len(self._slots) - 1

    def yank(self) -> Optional[str]:
        self._last_yank = True
        if not self._slots:
            return None
        return self._slots[self._head]

    def yank_pop(self) -> Optional[str]:
        if not self._last_yank or not self._slots:
            return None
        self._head = (self._head - 1) % len(self._slots)
        return self._slots[self._head]

    def reset_last_kill(self) -> None:
        self._last_kill = False

    def reset_last_yank(self) -> None:
        self._last_yank = False
        self.yank_span = None
