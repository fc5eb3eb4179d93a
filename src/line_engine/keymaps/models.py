"""Dataclasses describing key sequences, bindings and action metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

DEFAULT_SEQUENCE_TIMEOUT_MS = 150

# Editing modes plus the auxiliary tables consulted while a vi command is pending.
KNOWN_MODES = (
    "emacs-insert",
    "vi-insert",
    "vi-move",
    "vi-operator",
    "vi-char",
    "search",
)

# Action kinds understood by the modes. Plain "command" actions receive
# ``(state, match)``; motions and operators are interpreted by the vi composer.
ACTION_KINDS = ("command", "motion", "operator", "char_search", "prefix")


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = tuple(m.strip().lower() for m in modifiers if m.strip())
    return tuple(sorted(dict.fromkeys(values)))


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press used by key sequences."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            return "+".join(self.modifiers) + "+" + self.key
        return self.key

    @classmethod
    def parse(cls, token: str) -> "KeyStroke":
        """Parse ``"ctrl+a"`` / ``"alt+ctrl+j"`` / ``"+"`` style tokens."""

        if len(token) > 1 and "+" in token[:-1]:
            head, _, key = token.rpartition("+")
            if not key:
                # "ctrl++" binds ctrl and the literal plus key
                head, key = head[:-1], "+"
            return cls(key=key, modifiers=tuple(head.split("+")))
        return cls(key=token)


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Immutable chord of one or more keystrokes."""

    strokes: tuple[KeyStroke, ...]
    timeout_ms: int = DEFAULT_SEQUENCE_TIMEOUT_MS

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError("KeySequence requires at least one stroke")

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(stroke.token for stroke in self.strokes)

    def is_prefix_of(self, other: "KeySequence") -> bool:
        mine, theirs = self.tokens, other.tokens
        return len(mine) < len(theirs) and theirs[: len(mine)] == mine

    @classmethod
    def from_strings(
        cls, *keys: str, timeout_ms: int = DEFAULT_SEQUENCE_TIMEOUT_MS
    ) -> "KeySequence":
        strokes = tuple(KeyStroke.parse(key) for key in keys if key)
        return cls(strokes=strokes, timeout_ms=timeout_ms)


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Named action and the callable implementing it."""

    id: str
    handler: Callable[..., object]
    kind: str = "command"
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        if self.kind not in ACTION_KINDS:
            raise ValueError(f"Unknown action kind '{self.kind}'")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key sequence in one mode with an action id."""

    id: str
    mode: str
    sequence: KeySequence
    action_id: str
    description: str = ""
    source: str | None = None
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.mode:
            raise ValueError("binding mode cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")

    @property
    def key_signature(self) -> str:
        return " ".join(self.sequence.tokens)


__all__ = [
    "ACTION_KINDS",
    "KNOWN_MODES",
    "DEFAULT_SEQUENCE_TIMEOUT_MS",
    "KeyStroke",
    "KeySequence",
    "ActionRef",
    "Binding",
]
