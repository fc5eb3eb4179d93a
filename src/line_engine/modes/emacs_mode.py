"""Emacs editing: direct widgets, meta keys and ``ESC`` prefixed chords."""

from __future__ import annotations

from .insert_mode import TextEntryMode


class EmacsMode(TextEntryMode):
    name = "emacs-insert"


__all__ = ["EmacsMode"]
