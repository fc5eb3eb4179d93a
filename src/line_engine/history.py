"""History collaborator consumed by navigation and incremental search."""

from __future__ import annotations

from typing import Iterator, List, Protocol, Tuple, runtime_checkable


@runtime_checkable
class History(Protocol):
    """Ordered line history, index 0 being the oldest entry."""

    def count(self) -> int:
        ...

    def item(self, index: int) -> str:
        ...

    def append(self, line: str) -> None:
        ...

    def iter_backward(self, start: int) -> Iterator[Tuple[int, str]]:
        """Yield ``(index, line)`` from ``start`` down to the oldest entry."""
        ...

    def iter_forward(self, start: int) -> Iterator[Tuple[int, str]]:
        """Yield ``(index, line)`` from ``start`` up to the newest entry."""
        ...


class MemoryHistory:
    """Bounded in-memory history.

    ``ignore_duplicates`` drops a line equal to the newest entry. Blank
    lines are never recorded.
    """

    def __init__(
        self,
        lines: List[str] | None = None,
        *,
        max_size: int = 500,
        ignore_duplicates: bool = True,
    ) -> None:
        if max_size < 0:
            raise ValueError("max_size must be non-negative")
        self.max_size = max_size
        self.ignore_duplicates = ignore_duplicates
        self._lines: List[str] = []
        for line in lines or ():
            self.append(line)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._lines))

    def count(self) -> int:
        return len(self._lines)

    def item(self, index: int) -> str:
        if not 0 <= index < len(self._lines):
            raise IndexError(f"history index {index} out of range")
        return self._lines[index]

    def append(self, line: str) -> None:
        if not line.strip():
            return
        if self.ignore_duplicates and self._lines and self._lines[-1] == line:
            return
        self._lines.append(line)
        overflow = len(self._lines) - self.max_size
        if overflow > 0:
            del self._lines[:overflow]

    def iter_backward(self, start: int) -> Iterator[Tuple[int, str]]:
        index = min(start, len(self._lines) - 1)
        while index >= 0:
            yield index, self._lines[index]
            index -= 1

    def iter_forward(self, start: int) -> Iterator[Tuple[int, str]]:
        index = max(start, 0)
        while index < len(self._lines):
            yield index, self._lines[index]
            index += 1

    def clear(self) -> None:
        self._lines.clear()


__all__ = ["History", "MemoryHistory"]
