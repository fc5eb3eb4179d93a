"""Line reader: pulls keys from a terminal and runs them through the modes."""

from __future__ import annotations

from typing import Optional, Sequence, Union

from line_engine.history import History, MemoryHistory
from line_engine.keymaps import Binding, KeymapRegistry, load_binding_file
from line_engine.keymaps.defaults import load_default_keymaps
from line_engine.modes import (
    EditorState,
    EmacsMode,
    KeyInput,
    ModeManager,
    ModeResult,
    SearchMode,
    ViInsertMode,
    ViMoveMode,
)
from line_engine.runtime import telemetry
from line_engine.runtime.config import EngineConfig
from line_engine.terminal import Terminal

MODE_CLASSES = (EmacsMode, ViInsertMode, ViMoveMode, SearchMode)


class UserInterruptError(Exception):
    """The user interrupted the line; ``partial_line`` is what was typed."""

    def __init__(self, partial_line: str) -> None:
        super().__init__("line input interrupted")
        self.partial_line = partial_line


class EndOfInputError(EOFError):
    """Input ended (closed stream, or ``ctrl+d`` on an empty line)."""


class LineReader:
    """Reads one logical line at a time from ``terminal``.

    Keymaps, registers and the last character search outlive a single
    line; the buffer, count and any pending composition do not.
    """

    def __init__(
        self,
        terminal: Terminal,
        history: Optional[History] = None,
        config: Optional[EngineConfig] = None,
        *,
        registry: Optional[KeymapRegistry] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.terminal = terminal
        if history is None:
            history = MemoryHistory(
                max_size=self.config.history_size,
                ignore_duplicates=self.config.history_ignore_duplicates,
            )
        self.history = history

        self.registry = registry or KeymapRegistry(logger_name="line_engine.keymaps")
        if registry is None:
            load_default_keymaps(
                self.registry, default_sequence_timeout_ms=self.config.key_timeout_ms
            )
        if self.config.bindings_file:
            load_binding_file(self.registry, self.config.bindings_file)

        self.state = EditorState(history=history)
        self.manager = ModeManager(self.state, keymap_registry=self.registry)
        for mode_cls in MODE_CLASSES:
            self.manager.register_mode(
                mode_cls, default_pending_timeout_ms=self.config.key_timeout_ms
            )
        self.manager.switch_mode(self.config.insert_mode)

        if self.config.bell_style != "none":
            self.state.bus.subscribe("bell", self._ring)

    @property
    def current_mode(self) -> Optional[str]:
        return self.manager.active_name

    @property
    def buffer(self):
        return self.state.buffer

    def rebind(self, mode: str, keys: Sequence[str], action_id: str) -> Binding:
        """Rebind at runtime; takes effect from the next key."""

        return self.registry.rebind(mode, keys, action_id, source="user")

    def step(self, key: Union[str, KeyInput]) -> ModeResult:
        if isinstance(key, str):
            key = KeyInput.from_token(key)
        return self.manager.handle_key(key)

    def read_line(self, initial: str = "") -> str:
        self._begin_line(initial)
        with telemetry.span("reader::read_line", component="reader") as handle:
            while True:
                try:
                    key = self.terminal.read_key(self._read_timeout())
                except EOFError:
                    handle.add_metadata("outcome", "eof")
                    self._end_line()
                    raise EndOfInputError("input closed") from None

                if key is not None:
                    results = [self.step(key)]
                else:
                    results = self._without_key()

                for result in results:
                    line = self._conclude(result)
                    if line is not None:
                        handle.add_metadata("outcome", "accept")
                        return line

    def _without_key(self) -> list[ModeResult]:
        signal = self.terminal.pending_signal()
        if signal == "interrupt":
            return [ModeResult(consumed=True, status="interrupt")]
        if signal is not None:
            telemetry.record_event(
                "reader.signal_ignored", level="debug", data={"signal": signal}
            )
            return []
        # the read timed out while a key sequence was pending
        return list(self.manager.force_timeout(self.manager.active_name).values())

    def _read_timeout(self) -> Optional[float]:
        remaining = self.manager.pending_timeout_ms()
        if remaining is None:
            return None
        return remaining / 1000.0

    def _conclude(self, result: ModeResult) -> Optional[str]:
        status = result.status
        if status == "accept":
            line = self.state.buffer.text
            self.history.append(line)
            telemetry.record_event("reader.accept", data={"length": len(line)})
            self._end_line()
            return line

        if status == "interrupt":
            partial = self.state.buffer.text
            telemetry.record_event(
                "reader.interrupt", data={"policy": self.config.interrupt_policy}
            )
            self._begin_line("", clear_char_search=True)
            if self.config.interrupt_policy == "restart":
                return None
            raise UserInterruptError(partial)

        if status == "eof":
            telemetry.record_event("reader.eof")
            self._end_line()
            raise EndOfInputError("end of input")
        return None

    def _begin_line(self, initial: str, *, clear_char_search: bool = False) -> None:
        self.manager.reset_all()
        self.state.reset_line(initial, clear_char_search=clear_char_search)
        self.manager.switch_mode(self.config.insert_mode)

    def _end_line(self) -> None:
        self.manager.reset_all()
        self.state.reset_line()

    def _ring(self, reason: object) -> None:
        telemetry.record_event("reader.bell", level="debug", data={"reason": reason})
        self.terminal.bell()


__all__ = ["EndOfInputError", "LineReader", "UserInterruptError"]
