"""Validation helpers shared across buffer services."""

from __future__ import annotations


class BufferValidationError(RuntimeError):
    """Raised when callers hand the buffer an offset outside the text."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def ensure_offset(text: str, offset: int) -> int:
    if offset < 0 or offset > len(text):
        raise BufferValidationError(
            f"Offset {offset} outside 0..{len(text)}", offset=offset
        )
    return offset


def ensure_span(text: str, start: int, end: int) -> tuple[int, int]:
    ensure_offset(text, start)
    ensure_offset(text, end)
    if start > end:
        start, end = end, start
    return start, end
