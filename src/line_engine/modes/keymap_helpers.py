"""Helper utilities and the shared base for keymap-driven modes."""

from __future__ import annotations

from typing import List, Optional

from line_engine.keymaps import KeymapResolver, KeyStroke, ResolutionMatch
from line_engine.keymaps.models import DEFAULT_SEQUENCE_TIMEOUT_MS
from line_engine.runtime import telemetry

from .base_mode import TERMINAL_STATUSES, EditorState, KeyInput, Mode, ModeResult


def key_to_token(key: KeyInput) -> str:
    if key.modifiers:
        return KeyStroke(key=key.key, modifiers=key.modifiers).token
    return key.key


def require_keymap_resolver(state: EditorState) -> KeymapResolver:
    resolver = state.extras.get("keymap_resolver")
    if not isinstance(resolver, KeymapResolver):
        raise RuntimeError("EditorState.extras missing 'keymap_resolver'")
    return resolver


class KeymapMode(Mode):
    """Mode that resolves keys through its key table.

    Keys accumulate while the resolver reports an ambiguous prefix. When the
    next key breaks the prefix, the binding for the prefix itself (if any)
    is committed and the breaking key is handled afresh. A prefix with no
    binding of its own is dropped with a bell, and the breaking key is then
    handled afresh all the same.
    """

    def __init__(
        self,
        state: EditorState,
        *,
        default_pending_timeout_ms: int = DEFAULT_SEQUENCE_TIMEOUT_MS,
    ) -> None:
        super().__init__(state)
        self._resolver = require_keymap_resolver(state)
        self._pending: List[str] = []
        self._candidate: Optional[ResolutionMatch] = None
        self._default_timeout_ms = default_pending_timeout_ms

    @property
    def table(self) -> str:
        """Key table consulted for the next key."""

        return self.name

    @property
    def pending_keys(self) -> tuple[str, ...]:
        return tuple(self._pending)

    def on_exit(self, next_mode: str | None) -> None:
        del next_mode
        self._clear_pending()

    def reset(self) -> None:
        self._clear_pending()

    def handle_key(self, key: KeyInput) -> ModeResult:
        self._pending.append(key_to_token(key))
        result = self._resolver.resolve(self.table, tuple(self._pending))

        if result.status == "match" and result.match:
            self._clear_pending()
            return self.dispatch(result.match)

        if result.status == "pending":
            self._candidate = result.match
            return ModeResult(
                consumed=True,
                status="pending",
                message="awaiting_sequence",
                timeout_ms=result.timeout_ms or self._default_timeout_ms,
            )

        candidate = self._candidate
        broken_prefix = len(self._pending) > 1
        self._clear_pending()
        if not broken_prefix:
            return self.handle_unbound(key)
        if candidate is None:
            # the dead prefix is dropped; the key that broke it still counts
            self.state.bell("unbound_sequence")
            return self.handle_key(key)

        outcome = self.dispatch(candidate)
        if outcome.status in TERMINAL_STATUSES:
            return outcome
        if outcome.switch_to and outcome.switch_to != self.name:
            return ModeResult(
                consumed=False,
                switch_to=outcome.switch_to,
                status="replay",
                message=outcome.message,
            )
        return self.handle_key(key)

    def handle_timeout(self) -> ModeResult:
        if not self._pending:
            return ModeResult(consumed=False, status="timeout")

        candidate = self._candidate
        self._clear_pending()
        if candidate is not None:
            return self.dispatch(candidate)
        self.state.bell("pending_timeout")
        return ModeResult(consumed=False, status="timeout", message="pending_timeout")

    def dispatch(self, match: ResolutionMatch) -> ModeResult:
        outcome = self._execute_match(match)
        if outcome.status != "argument":
            self.state.argument.clear()
        return outcome

    def handle_unbound(self, key: KeyInput) -> ModeResult:
        del key
        self.state.argument.clear()
        self.state.bell("unbound")
        return ModeResult(consumed=False, status="miss", message="unbound")

    def _execute_match(self, match: ResolutionMatch) -> ModeResult:
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.state, match)

        if isinstance(outcome, ModeResult):
            return outcome
        return ModeResult(consumed=True)

    def _clear_pending(self) -> None:
        self._pending.clear()
        self._candidate = None


__all__ = [
    "KeymapMode",
    "key_to_token",
    "require_keymap_resolver",
]
