"""Declarative keymap registry and resolver.

Default tables live in ``line_engine.keymaps.defaults``; they pull in the
action modules and are loaded explicitly by the line reader.
"""

from .models import KNOWN_MODES, ActionRef, Binding, KeySequence, KeyStroke
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult
from .bindings_file import BindingFileError, apply_bindings, load_binding_file

__all__ = [
    "ActionRef",
    "Binding",
    "BindingFileError",
    "KNOWN_MODES",
    "KeySequence",
    "KeyStroke",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
    "apply_bindings",
    "load_binding_file",
]
