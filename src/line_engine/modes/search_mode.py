"""Incremental history search overlay (``ctrl+r`` / ``ctrl+s``)."""

from __future__ import annotations

from line_engine.actions.history import finish_search, search_add_char

from .base_mode import KeyInput, ModeResult
from .keymap_helpers import KeymapMode


class SearchMode(KeymapMode):
    """Printable keys extend the pattern; any other unbound key ends the
    search, keeps the matched line and is then handled by the mode the
    search was started from."""

    name = "search"

    def handle_unbound(self, key: KeyInput) -> ModeResult:
        state = self.state
        if state.search is None:
            return super().handle_unbound(key)
        if key.printable and key.text is not None:
            return search_add_char(state, key.text)

        previous = finish_search(state, restore=False)
        return ModeResult(
            consumed=False, switch_to=previous, status="replay", message="search_exit"
        )

    def reset(self) -> None:
        super().reset()
        self.state.search = None


__all__ = ["SearchMode"]
