"""Telemetry services built directly on telelog.

The line engine shares the terminal with the line being edited, so console
output is opt-in here: by default records only go to ``LINE_ENGINE_LOG_FILE``
when one is configured.

``configure(...)`` -- override the telelog configuration
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit structured events at a chosen level
``span(name, ...)`` -- context manager marrying profiling + component tracking
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "LINE_ENGINE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "line_engine")

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _format_pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


def _with_profiling(config: Any) -> Any:
    config.with_profiling(True)
    return config


def _build_default_config() -> Any:
    config = tl.Config()
    config.with_min_level((_env("LOG_LEVEL") or "INFO").upper())

    console = _env_flag("LOG_CONSOLE", False) and not _env_flag(
        "DISABLE_CONSOLE", False
    )
    config.with_console_output(console)
    if console:
        config.with_colored_output(not _env_flag("NO_COLOR", False))

    if _env_flag("LOG_JSON", False):
        config.with_json_format(True)

    log_file = _env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)

    if _env_flag("LOG_BUFFERED", False):
        config.with_buffering(True)
        config.with_buffer_size(int(_env("LOG_BUFFER_SIZE") or "2048"))

    return _with_profiling(config)


def configure(*, config: Optional[Any] = None) -> None:
    """Adopt ``config`` (a ``tl.Config``), or rebuild the default one from the
    ``LINE_ENGINE_*`` environment, and drop cached loggers."""

    global _ACTIVE_CONFIG
    if config is None:
        config = _build_default_config()

    _ACTIVE_CONFIG = _with_profiling(config)
    _LOGGER_CACHE.clear()


def _ensure_config() -> Any:
    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        _ACTIVE_CONFIG = _build_default_config()
    return _ACTIVE_CONFIG


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached ``telelog.Logger`` for ``name``."""

    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, _ensure_config()
        )
    return _LOGGER_CACHE[logger_name]


def _level_method(
    logger: Any, level: Any, *, expect_data: bool = False
) -> Tuple[Any, bool]:
    name = str(level).lower()
    if expect_data:
        with_attr = getattr(logger, f"{name}_with", None)
        if with_attr is not None:
            return with_attr, True

    attr = getattr(logger, name, None)
    if attr is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return attr, False


def record_event(
    name: str,
    *,
    level: str | Any = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit a structured ``event::<name>`` record."""

    log = get_logger(logger_name)
    payload = {"event": name, **(data or {})}
    method, accepts_data = _level_method(log, level, expect_data=True)
    message = f"event::{name}"
    if accepts_data:
        method(message, _format_pairs(payload))
    else:
        method(f"{message} {payload}")


@dataclass
class SpanHandle:
    """Handle yielded by ``span`` for late metadata updates."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def _emit(
        self, level: str, message: str, extra: Optional[Dict[str, Any]] = None
    ) -> None:
        payload = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        if extra:
            payload.update({key: _stringify(val) for key, val in extra.items()})

        method, accepts = _level_method(self.logger, level, expect_data=True)
        if accepts:
            method(message, _format_pairs(payload))
        else:
            method(f"{message} {payload}")

    def fail(self, reason: str) -> None:
        self._emit("error", "span::fail", {"reason": reason})


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block and optionally track it as a component.

    ``component=True`` reuses ``name`` as the component identifier; a string
    names the component explicitly. ``metadata`` is attached as transient
    logger context for the duration of the block.
    """

    log = get_logger(logger_name)
    component_name = None
    if component is True:
        component_name = name
    elif isinstance(component, str):
        component_name = component

    context_keys = []
    metadata_payload: Dict[str, Any] = {}
    for key, value in (metadata or {}).items():
        serialized = _stringify(value)
        metadata_payload[key] = serialized
        log.add_context(key, serialized)
        context_keys.append(key)

    with ExitStack() as stack:
        if component_name:
            stack.enter_context(log.track_component(component_name))

        stack.enter_context(log.profile(name))
        handle = SpanHandle(
            logger=log,
            span_name=name,
            component_name=component_name,
            metadata=dict(metadata_payload),
        )

        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        finally:
            for key in context_keys:
                log.remove_context(key)


configure()

__all__ = [
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
