"""Mode manager coordinating the emacs, vi and search modes."""

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Dict, Optional, Type

from line_engine.keymaps import KeymapRegistry, KeymapResolver
from line_engine.runtime import telemetry

from .base_mode import EditorState, KeyInput, Mode, ModeResult

# a key handed on by one mode is never bounced between modes indefinitely
MAX_REPLAYS = 4


@dataclass
class PendingTimeout:
    deadline: float
    timeout_ms: int
    generation: int


class ModeManager:
    """Owns the active mode, handles transitions, and dispatches key events.

    Default bindings are not loaded here; callers populate the registry
    (see :func:`line_engine.keymaps.defaults.load_default_keymaps`).
    """

    def __init__(
        self,
        state: EditorState,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
    ) -> None:
        self.state = state
        self._modes: Dict[str, Mode] = {}
        self._active: Optional[str] = None
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="line_engine.keymaps"
        )
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="line_engine.keymaps"
        )
        self.state.extras.setdefault("keymap_registry", self.keymap_registry)
        self.state.extras.setdefault("keymap_resolver", self.keymap_resolver)
        self.state.extras.setdefault("mode_manager", self)
        self._pending_timeouts: Dict[str, PendingTimeout] = {}
        self._timer_counter = 0

    @property
    def active_mode(self) -> Optional[Mode]:
        if self._active is None:
            return None
        return self._modes.get(self._active)

    @property
    def active_name(self) -> Optional[str]:
        return self._active

    def get_mode(self, name: str) -> Mode:
        try:
            return self._modes[name]
        except KeyError:
            raise KeyError(f"Unknown mode '{name}'") from None

    def register_mode(
        self,
        mode_cls: Type[Mode],
        /,
        *mode_args: object,
        **mode_kwargs: object,
    ) -> Mode:
        mode = mode_cls(self.state, *mode_args, **mode_kwargs)
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[mode.name] = mode
        if self._active is None:
            self._active = mode.name
            self.state.mode = mode.name
            mode.on_enter(None)
        return mode

    def switch_mode(self, name: str) -> None:
        if name not in self._modes:
            raise KeyError(f"Unknown mode '{name}'")
        previous = self.active_mode
        if previous and previous.name == name:
            return
        if previous:
            self.cancel_timeout(previous.name)
            previous.on_exit(name)
        self._active = name
        self.state.mode = name
        self._modes[name].on_enter(previous.name if previous else None)
        self.cancel_timeout(name)
        telemetry.record_event("mode.switch", data={"mode": name})

    def handle_key(self, key: KeyInput) -> ModeResult:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")

        for _ in range(MAX_REPLAYS):
            with telemetry.span(
                name=f"mode::{mode.name}",
                component=True,
                metadata={"key": key.key, "mode": mode.name},
            ):
                result = mode.handle_key(key)
            result = self._after_mode_result(mode, result)
            if result.status != "replay" or result.consumed:
                return result
            mode = self.active_mode
            assert mode is not None
        telemetry.record_event(
            "mode.replay_limit", level="warning", data={"key": key.key}
        )
        return self.state.bell("replay_limit")

    def reset_all(self) -> None:
        """Drop pending sequences and compositions in every mode."""

        self._pending_timeouts.clear()
        for mode in self._modes.values():
            mode.reset()

    def _after_mode_result(self, mode: Mode, result: ModeResult) -> ModeResult:
        self.state.end_command(result)
        if result.timeout_ms:
            self.arm_timeout(mode.name, result.timeout_ms)
        else:
            self.cancel_timeout(mode.name)
        if result.switch_to:
            self.switch_mode(result.switch_to)
        return result

    def arm_timeout(self, mode_name: str, timeout_ms: int) -> None:
        self._timer_counter += 1
        deadline = time.monotonic() + (timeout_ms / 1000.0)
        self._pending_timeouts[mode_name] = PendingTimeout(
            deadline=deadline,
            timeout_ms=timeout_ms,
            generation=self._timer_counter,
        )

    def cancel_timeout(self, mode_name: str) -> None:
        self._pending_timeouts.pop(mode_name, None)

    def pending_timeout_ms(self) -> Optional[float]:
        """Milliseconds left before the active mode's pending sequence expires."""

        if self._active is None:
            return None
        timer = self._pending_timeouts.get(self._active)
        if timer is None:
            return None
        return max((timer.deadline - time.monotonic()) * 1000.0, 0.0)

    def process_timeouts(self) -> Dict[str, ModeResult]:
        now = time.monotonic()
        expired = {
            mode_name: timer
            for mode_name, timer in self._pending_timeouts.items()
            if timer.deadline <= now
        }
        results: Dict[str, ModeResult] = {}
        for mode_name, timer in expired.items():
            results[mode_name] = self._trigger_timeout(mode_name, timer.generation)
        return results

    def force_timeout(self, mode_name: Optional[str] = None) -> Dict[str, ModeResult]:
        if mode_name is not None:
            timer = self._pending_timeouts.get(mode_name)
            if not timer:
                return {}
            return {mode_name: self._trigger_timeout(mode_name, timer.generation)}

        current = list(self._pending_timeouts.items())
        results: Dict[str, ModeResult] = {}
        for name, timer in current:
            results[name] = self._trigger_timeout(name, timer.generation)
        return results

    def _trigger_timeout(self, mode_name: str, generation: int) -> ModeResult:
        timer = self._pending_timeouts.get(mode_name)
        if not timer or timer.generation != generation:
            return ModeResult(consumed=False, status="timeout")
        self._pending_timeouts.pop(mode_name, None)
        mode = self._modes.get(mode_name)
        if mode is None:
            return ModeResult(consumed=False, status="timeout")
        with telemetry.span(
            name=f"mode_timeout::{mode_name}",
            component=True,
            metadata={"mode": mode_name},
        ):
            result = mode.handle_timeout()
        return self._after_mode_result(mode, result)


__all__ = ["ModeManager", "PendingTimeout"]
