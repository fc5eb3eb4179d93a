"""User binding files: per-mode key sequence to action mappings in JSON.

A binding file looks like::

    {
      "bindings": [
        {"mode": "emacs-insert", "keys": ["ctrl+x", "ctrl+k"], "action": "emacs.kill_whole_line"},
        {"mode": "vi-move", "keys": "Q", "action": "core.accept_line"}
      ]
    }

``keys`` is a single token or a list of tokens. Every entry goes through
``KeymapRegistry.rebind`` so it replaces whatever the sequence was bound to.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from line_engine.runtime.telemetry import record_event

from .models import KNOWN_MODES, Binding
from .registry import KeymapRegistry

ENTRY_FIELDS = {"mode", "keys", "action", "description"}


class BindingFileError(ValueError):
    """Raised when a binding file cannot be read or names unknown things."""

    def __init__(self, message: str, *, path: Path | None = None, index: int | None = None):
        location = ""
        if path is not None:
            location = f"{path}"
            if index is not None:
                location += f" entry {index}"
            location += ": "
        super().__init__(f"{location}{message}")
        self.path = path
        self.index = index


def load_binding_file(
    registry: KeymapRegistry, path: str | Path, *, modes: Iterable[str] = KNOWN_MODES
) -> list[Binding]:
    """Apply every entry of ``path`` to ``registry`` and return the new bindings."""

    file_path = Path(path).expanduser()
    try:
        payload = json.loads(file_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise BindingFileError(f"Failed to read binding file: {exc}", path=file_path) from exc
    except json.JSONDecodeError as exc:
        raise BindingFileError(f"Invalid JSON: {exc}", path=file_path) from exc

    return apply_bindings(registry, payload, modes=modes, path=file_path)


def apply_bindings(
    registry: KeymapRegistry,
    payload: Any,
    *,
    modes: Iterable[str] = KNOWN_MODES,
    path: Path | None = None,
) -> list[Binding]:
    if not isinstance(payload, dict):
        raise BindingFileError("Binding file must contain a JSON object.", path=path)
    entries = payload.get("bindings", [])
    if not isinstance(entries, list):
        raise BindingFileError('"bindings" must be a list.', path=path)

    known_modes = set(modes)
    parsed = [_parse_entry(item, i, known_modes, registry, path) for i, item in enumerate(entries)]

    applied = []
    source = str(path) if path is not None else "bindings"
    for mode, keys, action_id, description in parsed:
        applied.append(
            registry.rebind(mode, keys, action_id, source=source, description=description)
        )
    record_event(
        "keymaps.bindings_loaded",
        data={"source": source, "count": len(applied)},
        logger_name="line_engine.keymaps",
    )
    return applied


def _parse_entry(
    item: Any,
    index: int,
    known_modes: set[str],
    registry: KeymapRegistry,
    path: Path | None,
) -> tuple[str, list[str], str, str]:
    if not isinstance(item, dict):
        raise BindingFileError("Binding entry must be an object.", path=path, index=index)

    unknown = set(item) - ENTRY_FIELDS
    if unknown:
        raise BindingFileError(
            f"Unknown fields: {', '.join(sorted(unknown))}", path=path, index=index
        )

    mode = item.get("mode")
    keys = item.get("keys")
    action_id = item.get("action")
    description = item.get("description", "")

    if not isinstance(mode, str) or mode not in known_modes:
        raise BindingFileError(f"Unknown mode {mode!r}", path=path, index=index)
    if isinstance(keys, str):
        keys = [keys]
    if not isinstance(keys, list) or not keys or not all(
        isinstance(key, str) and key for key in keys
    ):
        raise BindingFileError('"keys" must be a token or a list of tokens.', path=path, index=index)
    if not isinstance(action_id, str) or not registry.has_action(action_id):
        raise BindingFileError(f"Unknown action {action_id!r}", path=path, index=index)
    if not isinstance(description, str):
        raise BindingFileError('"description" must be a string.', path=path, index=index)

    return mode, keys, action_id, description


__all__ = ["BindingFileError", "apply_bindings", "load_binding_file"]
