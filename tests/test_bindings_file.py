import json
from pathlib import Path

import pytest

from line_engine.keymaps import BindingFileError, KeymapRegistry, apply_bindings, load_binding_file
from line_engine.keymaps.defaults import load_default_keymaps


def make_registry() -> KeymapRegistry:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    return registry


def write_bindings(tmp_path: Path, *entries: dict) -> Path:
    path = tmp_path / "bindings.json"
    path.write_text(json.dumps({"bindings": list(entries)}))
    return path


def test_load_binding_file_replaces_defaults(tmp_path: Path) -> None:
    registry = make_registry()
    path = write_bindings(
        tmp_path,
        {"mode": "emacs-insert", "keys": ["ctrl+x", "ctrl+k"], "action": "emacs.kill_whole_line"},
        {"mode": "emacs-insert", "keys": "ctrl+t", "action": "core.bell"},
    )

    applied = load_binding_file(registry, path)

    assert [binding.id for binding in applied] == [
        "emacs-insert:ctrl+x ctrl+k",
        "emacs-insert:ctrl+t",
    ]
    assert registry.get_binding("emacs-insert:ctrl+t").action_id == "core.bell"
    assert registry.get_binding("emacs-insert:ctrl+t").source == str(path)


@pytest.mark.parametrize(
    "entry",
    [
        {"mode": "visual", "keys": "v", "action": "core.accept_line"},
        {"mode": "vi-move", "keys": "Q", "action": "core.explode"},
        {"mode": "vi-move", "keys": [], "action": "core.accept_line"},
        {"mode": "vi-move", "keys": "Q", "action": "core.accept_line", "when": "always"},
        "vi-move Q",
    ],
)
def test_invalid_entries_are_rejected(tmp_path: Path, entry: object) -> None:
    registry = make_registry()
    before = registry.revision()
    path = tmp_path / "bindings.json"
    path.write_text(json.dumps({"bindings": [entry]}))

    with pytest.raises(BindingFileError) as excinfo:
        load_binding_file(registry, path)

    assert excinfo.value.index == 0
    assert registry.revision() == before


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(BindingFileError):
        load_binding_file(make_registry(), tmp_path / "absent.json")


def test_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "bindings.json"
    path.write_text("{bindings: ")

    with pytest.raises(BindingFileError):
        load_binding_file(make_registry(), path)


def test_apply_bindings_requires_object() -> None:
    with pytest.raises(BindingFileError):
        apply_bindings(make_registry(), [])
