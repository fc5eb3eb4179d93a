"""Single-line (or multi-line) edit buffer with an offset cursor and undo."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Optional

from line_engine.runtime import telemetry

from .undo import UndoEntry, UndoTimeline
from .validation import clamp, ensure_offset, ensure_span


@dataclass(frozen=True, slots=True)
class BufferView:
    version: int
    text: str
    cursor: int


@dataclass(frozen=True, slots=True)
class BufferDelta:
    version: int
    text: str
    cursor: int
    label: str
    removed: str = ""


class Buffer:
    """Text plus a cursor offset satisfying ``0 <= cursor <= len(text)``."""

    def __init__(
        self,
        text: str = "",
        *,
        cursor: Optional[int] = None,
        name: str = "line",
        undo: Optional[UndoTimeline] = None,
    ) -> None:
        self.name = name
        self._text = text
        self._cursor = len(text) if cursor is None else clamp(cursor, 0, len(text))
        self.undo_timeline = undo if undo is not None else UndoTimeline()
        self.version = 0

    @classmethod
    def from_text(cls, text: str, *, cursor: Optional[int] = None) -> "Buffer":
        return cls(text, cursor=cursor)

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    @cursor.setter
    def cursor(self, value: int) -> None:
        self._cursor = clamp(value, 0, len(self._text))

    def __len__(self) -> int:
        return len(self._text)

    def char_at(self, offset: Optional[int] = None) -> str:
        position = self._cursor if offset is None else offset
        if 0 <= position < len(self._text):
            return self._text[position]
        return ""

    def snapshot(self) -> BufferView:
        return BufferView(version=self.version, text=self._text, cursor=self._cursor)

    def line_bounds(self, offset: Optional[int] = None) -> tuple[int, int]:
        """Return ``(start, end)`` of the line holding ``offset``; ``end`` excludes the newline."""

        position = clamp(self._cursor if offset is None else offset, 0, len(self._text))
        start = self._text.rfind("\n", 0, position) + 1
        end = self._text.find("\n", position)
        return start, len(self._text) if end == -1 else end

    @property
    def multiline(self) -> bool:
        return "\n" in self._text

    def set_text(self, text: str, *, cursor: Optional[int] = None) -> None:
        """Replace the whole buffer without recording an undo step."""

        self._text = text
        self._cursor = len(text) if cursor is None else clamp(cursor, 0, len(text))
        self.version += 1

    def reset(self, text: str = "") -> None:
        self.set_text(text)
        self.undo_timeline.clear()

    def get_text_range(self, start: int, end: int) -> str:
        start, end = ensure_span(self._text, start, end)
        return self._text[start:end]

    def replace_range(
        self,
        start: int,
        end: int,
        text: str,
        *,
        label: str = "replace_range",
        cursor: Optional[int] = None,
    ) -> BufferDelta:
        start, end = ensure_span(self._text, start, end)
        with Transaction(self, label) as tx:
            before_text, before_cursor = self._text, self._cursor
            removed = before_text[start:end]
            self._text = before_text[:start] + text + before_text[end:]
            target = start + len(text) if cursor is None else cursor
            self._cursor = clamp(target, 0, len(self._text))
            self.version += 1
            tx.commit(before_text, self._text, before_cursor, self._cursor)

        return BufferDelta(
            version=self.version,
            text=self._text,
            cursor=self._cursor,
            label=label,
            removed=removed,
        )

    def insert_text(self, text: str, *, at: Optional[int] = None) -> BufferDelta:
        position = self._cursor if at is None else ensure_offset(self._text, at)
        return self.replace_range(position, position, text, label="insert_text")

    def delete_range(self, start: int, end: int) -> str:
        """Delete ``[start, end)`` and return the removed text."""

        start, end = ensure_span(self._text, start, end)
        if start == end:
            return ""
        return self.replace_range(start, end, "", label="delete_range").removed

    def overwrite(self, text: str, *, at: Optional[int] = None) -> BufferDelta:
        """Overwrite characters starting at ``at``, stopping at the end of the text."""

        position = self._cursor if at is None else ensure_offset(self._text, at)
        end = min(position + len(text), len(self._text))
        return self.replace_range(
            position, end, text[: end - position], label="overwrite"
        )

    def undo(self) -> bool:
        entry = self.undo_timeline.undo()
        if entry is None:
            return False
        self.set_text(entry.before_text, cursor=entry.cursor_before)
        return True

    def redo(self) -> bool:
        entry = self.undo_timeline.redo()
        if entry is None:
            return False
        self.set_text(entry.after_text, cursor=entry.cursor_after)
        return True


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(
        self,
        before_text: str,
        after_text: str,
        cursor_before: int,
        cursor_after: int,
    ) -> None:
        if before_text == after_text:
            return
        entry = UndoEntry(
            label=self.label,
            before_text=before_text,
            after_text=after_text,
            cursor_before=cursor_before,
            cursor_after=cursor_after,
        )
        self.buffer.undo_timeline.push(entry)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
