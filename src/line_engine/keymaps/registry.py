"""Keymap registry responsible for storing actions and bindings."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, Optional, Sequence

from line_engine.runtime.telemetry import span

from .models import ActionRef, Binding, KeySequence


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    action_count: int
    binding_count: int
    modes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a binding reuses a sequence already bound in its mode."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        message = (
            f"Binding '{binding.id}' conflicts with {[b.id for b in conflicts_tuple]}"
        )
        super().__init__(message)
        self.binding = binding
        self.conflicts = conflicts_tuple


class KeymapRegistry:
    """Owns action references and per-mode binding tables."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        # mode -> key signature -> binding id; one binding per sequence
        self._mode_index: Dict[str, Dict[str, str]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def has_action(self, action_id: str) -> bool:
        return action_id in self._actions

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Action '{action_id}' is not registered") from exc

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def lookup(self, mode: str, sequence: KeySequence) -> Optional[Binding]:
        binding_id = self._mode_index.get(mode, {}).get(" ".join(sequence.tokens))
        return self._bindings.get(binding_id) if binding_id else None

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        with span(
            "keymaps::register_action",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"action_id": action.id},
        ):
            if not replace and action.id in self._actions:
                raise ValueError(f"Action '{action.id}' already registered")
            self._actions[action.id] = action
            self._touch()
            return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "mode": binding.mode},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
                )

            conflicts = self.detect_conflicts(binding, ignore=(binding.id,))
            if conflicts and not replace:
                handle.add_metadata(
                    "conflicts", ",".join(conflict.id for conflict in conflicts)
                )
                raise KeymapConflictError(binding, conflicts)

            existing = self._bindings.get(binding.id)
            if existing and not replace:
                raise ValueError(f"Binding id '{binding.id}' already registered")
            for stale in [*conflicts, *([existing] if existing else [])]:
                self._remove_binding(stale)
                self._bindings.pop(stale.id, None)

            self._bindings[binding.id] = binding
            self._index_binding(binding)
            self._touch()
            return binding

    def rebind(
        self,
        mode: str,
        keys: Sequence[str],
        action_id: str,
        *,
        source: str | None = None,
        description: str = "",
    ) -> Binding:
        """Bind ``keys`` in ``mode`` to ``action_id``, replacing any prior binding."""

        sequence = KeySequence.from_strings(*keys)
        binding = Binding(
            id=f"{mode}:{' '.join(sequence.tokens)}",
            mode=mode,
            sequence=sequence,
            action_id=action_id,
            description=description,
            source=source or "rebind",
        )
        return self.register_binding(binding, replace=True)

    def unbind(self, mode: str, keys: Sequence[str]) -> Optional[Binding]:
        binding = self.lookup(mode, KeySequence.from_strings(*keys))
        if binding is None:
            return None
        return self.unregister_binding(binding.id)

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        with span(
            "keymaps::unregister_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding_id},
        ):
            binding = self._bindings.pop(binding_id, None)
            if not binding:
                return None
            self._remove_binding(binding)
            self._touch()
            return binding

    def update_binding(self, binding_id: str, **changes: object) -> Binding:
        with span(
            "keymaps::update_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding_id},
        ) as handle:
            if binding_id not in self._bindings:
                handle.fail("missing_binding")
                raise KeyError(f"Binding '{binding_id}' not found")

            current = self._bindings[binding_id]
            updated = replace(current, **changes)
            if updated.action_id not in self._actions:
                handle.add_metadata("missing_action", updated.action_id)
                raise KeyError(
                    f"Binding '{binding_id}' references unknown action '{updated.action_id}'"
                )

            conflicts = self.detect_conflicts(updated, ignore=(binding_id,))
            if conflicts:
                handle.add_metadata(
                    "conflicts", ",".join(conflict.id for conflict in conflicts)
                )
                raise KeymapConflictError(updated, conflicts)

            self._remove_binding(current)
            self._bindings[binding_id] = updated
            self._index_binding(updated)
            self._touch()
            return updated

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        if mode is None:
            yield from self._bindings.values()
            return
        for binding_id in self._mode_index.get(mode, {}).values():
            yield self._bindings[binding_id]

    def override_sequence_timeouts(
        self, *, timeout_ms: int, mode: Optional[str] = None
    ) -> None:
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")

        for binding in list(self.iter_bindings(mode)):
            sequence = KeySequence(binding.sequence.strokes, timeout_ms=timeout_ms)
            self._bindings[binding.id] = replace(binding, sequence=sequence)
        self._touch()

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            modes=tuple(sorted(self._mode_index)),
        )

    def detect_conflicts(
        self, binding: Binding, *, ignore: Sequence[str] | None = None
    ) -> list[Binding]:
        ignored = set(ignore or ())
        match_id = self._mode_index.get(binding.mode, {}).get(binding.key_signature)
        if match_id is None or match_id in ignored:
            return []
        return [self._bindings[match_id]]

    def _index_binding(self, binding: Binding) -> None:
        by_signature = self._mode_index.setdefault(binding.mode, {})
        by_signature[binding.key_signature] = binding.id

    def _remove_binding(self, binding: Binding) -> None:
        mode_bucket = self._mode_index.get(binding.mode)
        if not mode_bucket:
            return
        if mode_bucket.get(binding.key_signature) == binding.id:
            mode_bucket.pop(binding.key_signature)
        if not mode_bucket:
            self._mode_index.pop(binding.mode, None)

    def _touch(self) -> None:
        self._revision += 1


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]
