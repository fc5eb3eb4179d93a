"""Runtime services: telemetry and configuration."""

from . import telemetry
from .config import ConfigError, EngineConfig

__all__ = ["telemetry", "ConfigError", "EngineConfig"]
