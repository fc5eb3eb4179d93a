"""Transient editing state tied to one logical input line."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(slots=True)
class Argument:
    """Optional non-negative repeat count accumulated from digit keys."""

    value: Optional[int] = None

    @property
    def is_set(self) -> bool:
        return self.value is not None

    def push_digit(self, digit: int) -> None:
        if not 0 <= digit <= 9:
            raise ValueError(f"digit out of range: {digit}")
        self.value = (self.value or 0) * 10 + digit

    def take(self) -> Optional[int]:
        value, self.value = self.value, None
        return value

    def value_or(self, default: int) -> int:
        return default if self.value is None else self.value

    def clear(self) -> None:
        self.value = None


@dataclass(frozen=True, slots=True)
class CharSearchState:
    """Last ``f``/``F``/``t``/``T`` target, replayed by ``;`` and ``,``."""

    char: str
    forward: bool
    stop_before: bool

    def reversed(self) -> "CharSearchState":
        return CharSearchState(self.char, not self.forward, self.stop_before)


@dataclass(frozen=True, slots=True)
class SearchFrame:
    """Overlay state saved before a pattern edit or a repeated search;
    ``BACKSPACE`` steps back through these."""

    pattern: str
    match_index: Optional[int]
    failing: bool
    forward: bool
    text: str
    cursor: int


@dataclass(slots=True)
class SearchState:
    """Live state of the incremental history search overlay."""

    forward: bool
    restore_text: str
    restore_cursor: int
    previous_mode: str
    start_index: int
    pattern: str = ""
    match_index: Optional[int] = None
    failing: bool = False
    frames: List[SearchFrame] = field(default_factory=list)

    @property
    def prompt(self) -> str:
        direction = "fwd" if self.forward else "bck"
        prefix = "failing " if self.failing else ""
        return f"{prefix}{direction}-i-search: {self.pattern}_"
