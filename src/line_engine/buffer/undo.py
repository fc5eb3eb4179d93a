"""Linear undo/redo history for line edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class UndoEntry:
    label: str
    before_text: str
    after_text: str
    cursor_before: int
    cursor_after: int

    def continues(self, other: "UndoEntry") -> bool:
        """Whether ``other`` is typing that directly follows this entry."""

        return (
            self.label == other.label == "insert_text"
            and self.after_text == other.before_text
            and self.cursor_after == other.cursor_before
        )


class UndoTimeline:
    """Linear undo/redo history; contiguous typing collapses into one step."""

    def __init__(self) -> None:
        self._entries: List[UndoEntry] = []
        self._index: int = -1

    def __len__(self) -> int:
        return self._index + 1

    def push(self, entry: UndoEntry, *, merge: bool = True) -> None:
        if self._index < len(self._entries) - 1:
            self._entries = self._entries[: self._index + 1]
        if merge and self._entries and self._entries[-1].continues(entry):
            last = self._entries[-1]
            entry = UndoEntry(
                label=last.label,
                before_text=last.before_text,
                after_text=entry.after_text,
                cursor_before=last.cursor_before,
                cursor_after=entry.cursor_after,
            )
            self._entries[-1] = entry
        else:
            self._entries.append(entry)
        self._index = len(self._entries) - 1

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self) -> Optional[UndoEntry]:
        if not self.can_undo():
            return None
        entry = self._entries[self._index]
        self._index -= 1
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]

    def clear(self) -> None:
        self._entries.clear()
        self._index = -1
