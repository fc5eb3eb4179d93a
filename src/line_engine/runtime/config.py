"""Engine configuration sourced from keyword arguments or ``LINE_ENGINE_*``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .telemetry import _env, _env_flag

EDITING_MODES = ("emacs", "vi")
INTERRUPT_POLICIES = ("raise", "restart")
BELL_STYLES = ("audible", "visible", "none")

# Upper bound on how long a lone prefix key waits for the rest of a sequence.
DEFAULT_KEY_TIMEOUT_MS = 150


class ConfigError(ValueError):
    """Raised when a configuration value is outside its allowed set."""

    def __init__(self, field_name: str, value: object) -> None:
        super().__init__(f"Invalid value {value!r} for '{field_name}'")
        self.field_name = field_name
        self.value = value


@dataclass(frozen=True, slots=True)
class EngineConfig:
    editing_mode: str = "emacs"
    key_timeout_ms: int = DEFAULT_KEY_TIMEOUT_MS
    interrupt_policy: str = "raise"
    bell_style: str = "audible"
    history_size: int = 500
    history_ignore_duplicates: bool = True
    bindings_file: Optional[str] = None

    def __post_init__(self) -> None:
        _check_choice("editing_mode", self.editing_mode, EDITING_MODES)
        _check_choice("interrupt_policy", self.interrupt_policy, INTERRUPT_POLICIES)
        _check_choice("bell_style", self.bell_style, BELL_STYLES)
        if self.key_timeout_ms <= 0:
            raise ConfigError("key_timeout_ms", self.key_timeout_ms)
        if self.history_size < 0:
            raise ConfigError("history_size", self.history_size)

    @property
    def insert_mode(self) -> str:
        """Mode a fresh line starts in."""

        return "vi-insert" if self.editing_mode == "vi" else "emacs-insert"

    @classmethod
    def from_env(cls, **overrides: object) -> "EngineConfig":
        values: dict[str, object] = {
            "editing_mode": (_env("EDITING_MODE") or "emacs").lower(),
            "key_timeout_ms": _env_int("KEY_TIMEOUT_MS", DEFAULT_KEY_TIMEOUT_MS),
            "interrupt_policy": (_env("INTERRUPT_POLICY") or "raise").lower(),
            "bell_style": (_env("BELL_STYLE") or "audible").lower(),
            "history_size": _env_int("HISTORY_SIZE", 500),
            "history_ignore_duplicates": _env_flag("HISTORY_IGNORE_DUPS", True),
            "bindings_file": _env("BINDINGS_FILE") or None,
        }
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]

    def replace(self, **changes: object) -> "EngineConfig":
        current: Mapping[str, object] = {
            name: getattr(self, name) for name in self.__dataclass_fields__
        }
        return EngineConfig(**{**current, **changes})  # type: ignore[arg-type]


def _env_int(name: str, fallback: int) -> int:
    raw = _env(name)
    if raw is None:
        return fallback
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(name.lower(), raw) from exc


def _check_choice(field_name: str, value: str, allowed: tuple[str, ...]) -> None:
    if value not in allowed:
        raise ConfigError(field_name, value)


__all__ = [
    "BELL_STYLES",
    "ConfigError",
    "DEFAULT_KEY_TIMEOUT_MS",
    "EDITING_MODES",
    "EngineConfig",
    "INTERRUPT_POLICIES",
]
