import pytest

from line_engine import ConfigError, EngineConfig


def test_defaults() -> None:
    config = EngineConfig()

    assert config.editing_mode == "emacs"
    assert config.key_timeout_ms == 150
    assert config.interrupt_policy == "raise"
    assert config.insert_mode == "emacs-insert"
    assert config.bindings_file is None


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("editing_mode", "ed"),
        ("interrupt_policy", "ignore"),
        ("bell_style", "loud"),
        ("key_timeout_ms", 0),
        ("history_size", -1),
    ],
)
def test_invalid_values_are_rejected(field: str, value: object) -> None:
    with pytest.raises(ConfigError) as excinfo:
        EngineConfig(**{field: value})

    assert excinfo.value.field_name == field
    assert excinfo.value.value == value


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LINE_ENGINE_EDITING_MODE", "VI")
    monkeypatch.setenv("LINE_ENGINE_KEY_TIMEOUT_MS", "500")
    monkeypatch.setenv("LINE_ENGINE_HISTORY_IGNORE_DUPS", "no")

    config = EngineConfig.from_env(bell_style="none")

    assert config.insert_mode == "vi-insert"
    assert config.key_timeout_ms == 500
    assert config.history_ignore_duplicates is False
    assert config.bell_style == "none"


def test_from_env_rejects_non_numeric_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LINE_ENGINE_KEY_TIMEOUT_MS", "soon")

    with pytest.raises(ConfigError):
        EngineConfig.from_env()


def test_replace_revalidates() -> None:
    config = EngineConfig()

    assert config.replace(interrupt_policy="restart").interrupt_policy == "restart"
    assert config.interrupt_policy == "raise"
    with pytest.raises(ConfigError):
        config.replace(editing_mode="nano")
