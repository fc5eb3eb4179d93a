from __future__ import annotations

import pytest

from line_engine.buffer import Buffer
from line_engine.keymaps import KeymapRegistry, KeymapResolver
from line_engine.keymaps.defaults import load_default_keymaps
from line_engine.modes import (
    EditorState,
    EmacsMode,
    KeyInput,
    ModeManager,
    SearchMode,
    ViInsertMode,
    ViMoveMode,
)
from line_engine.modes.operator_pipeline import Idle, PendingOperator


def make_state(text: str = "") -> EditorState:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    state = EditorState(buffer=Buffer.from_text(text))
    state.extras["keymap_registry"] = registry
    state.extras["keymap_resolver"] = KeymapResolver(registry)
    return state


def make_manager(text: str = "", **mode_kwargs: object) -> ModeManager:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    manager = ModeManager(EditorState(buffer=Buffer.from_text(text)), keymap_registry=registry)
    for mode_cls in (EmacsMode, ViInsertMode, ViMoveMode, SearchMode):
        manager.register_mode(mode_cls, **mode_kwargs)
    return manager


def test_emacs_mode_inserts_unbound_printable_keys() -> None:
    state = make_state()
    mode = EmacsMode(state)

    result = mode.handle_key(KeyInput.from_token("q"))

    assert result.consumed is True
    assert state.buffer.text == "q"


def test_vi_insert_escape_switches_to_move() -> None:
    state = make_state("ab")
    mode = ViInsertMode(state)

    result = mode.handle_key(KeyInput(key="ESC"))

    assert result.switch_to == "vi-move"
    assert state.buffer.cursor == 1


def test_prefix_key_reports_pending_sequence() -> None:
    mode = EmacsMode(make_state())

    pending = mode.handle_key(KeyInput.from_token("ctrl+x"))

    assert pending.status == "pending"
    assert pending.consumed is True
    assert pending.timeout_ms is not None
    assert mode.pending_keys == ("ctrl+x",)


def test_mode_falls_back_to_default_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(KeymapResolver, "_pending_timeout", lambda self, node: None)
    mode = EmacsMode(make_state(), default_pending_timeout_ms=250)

    pending = mode.handle_key(KeyInput.from_token("ctrl+x"))

    assert pending.timeout_ms == 250


def test_mode_manager_forwards_mode_kwargs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(KeymapResolver, "_pending_timeout", lambda self, node: None)
    manager = make_manager(default_pending_timeout_ms=300)

    pending = manager.handle_key(KeyInput.from_token("ctrl+x"))

    assert pending.timeout_ms == 300
    assert manager.pending_timeout_ms() is not None


def test_pending_sequence_timeout_via_mode_manager() -> None:
    manager = make_manager()
    bells: list[object] = []
    manager.state.bus.subscribe("bell", bells.append)

    manager.handle_key(KeyInput.from_token("ctrl+x"))
    timeouts = manager.force_timeout("emacs-insert")

    assert timeouts["emacs-insert"].status == "timeout"
    assert timeouts["emacs-insert"].consumed is False
    assert bells == ["pending_timeout"]
    assert manager.pending_timeout_ms() is None


def test_force_timeout_without_pending_sequence_is_empty() -> None:
    manager = make_manager()

    assert manager.force_timeout("emacs-insert") == {}


def test_switch_mode_tracks_state_mode() -> None:
    manager = make_manager()

    assert manager.active_name == "emacs-insert"
    manager.switch_mode("vi-insert")

    assert manager.state.mode == "vi-insert"
    assert manager.active_mode is manager.get_mode("vi-insert")
    with pytest.raises(KeyError):
        manager.switch_mode("visual")


def test_register_mode_twice_is_rejected() -> None:
    manager = make_manager()

    with pytest.raises(ValueError):
        manager.register_mode(EmacsMode)


def test_vi_operator_switches_key_table() -> None:
    manager = make_manager("one two")
    manager.switch_mode("vi-move")
    mode = manager.get_mode("vi-move")
    assert isinstance(mode, ViMoveMode)

    manager.handle_key(KeyInput.from_token("d"))
    assert isinstance(mode.composer, PendingOperator)
    assert mode.table == "vi-operator"

    manager.handle_key(KeyInput.from_token("ESC"))
    assert isinstance(mode.composer, Idle)
    assert manager.state.buffer.text == "one two"


def test_reset_all_drops_pending_composition() -> None:
    manager = make_manager("one two")
    manager.switch_mode("vi-move")
    mode = manager.get_mode("vi-move")
    manager.handle_key(KeyInput.from_token("2"))
    manager.handle_key(KeyInput.from_token("d"))

    manager.reset_all()

    assert isinstance(mode.composer, Idle)
    assert manager.pending_timeout_ms() is None


def test_search_replays_unbound_key_into_previous_mode() -> None:
    manager = make_manager()
    manager.state.history.append("hello world")

    manager.handle_key(KeyInput.from_token("ctrl+r"))
    manager.handle_key(KeyInput.from_token("w"))
    assert manager.active_name == "search"

    result = manager.handle_key(KeyInput.from_token("ctrl+a"))

    assert manager.active_name == "emacs-insert"
    assert result.consumed is True
    assert manager.state.buffer.text == "hello world"
    assert manager.state.buffer.cursor == 0
