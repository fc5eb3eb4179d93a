"""Text-entry modes: printable keys that are not bound insert themselves."""

from __future__ import annotations

from line_engine.actions.emacs import insert_literal

from .base_mode import KeyInput, ModeResult
from .keymap_helpers import KeymapMode


class TextEntryMode(KeymapMode):
    """Keymap mode whose unbound printable keys are typed into the buffer."""

    def handle_unbound(self, key: KeyInput) -> ModeResult:
        if not key.printable or key.text is None:
            return super().handle_unbound(key)
        result = insert_literal(self.state, key.text, self.state.take_count())
        self.state.argument.clear()
        return result


class ViInsertMode(TextEntryMode):
    name = "vi-insert"

    def on_enter(self, previous: str | None) -> None:
        del previous
        self.state.argument.clear()


__all__ = ["TextEntryMode", "ViInsertMode"]
