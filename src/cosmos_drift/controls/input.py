"""Event-to-snapshot translation so controllers never subscribe to events."""
from __future__ import annotations

from cosmos_drift.core.model import COMMAND_ACTIONS, MOVEMENT_ACTIONS, InputState


class InputCollector:
    """Collects discrete input events between frames.

    Movement actions keep their held state across frames; pointer motion and
    commands are consumed by :meth:`snapshot` and start empty again.
    """

    def __init__(self) -> None:
        self._held: dict[str, bool] = {name: False for name in MOVEMENT_ACTIONS}
        self._dx = 0.0
        self._dy = 0.0
        self._commands: list[str] = []

    def press(self, action: str) -> None:
        if action in COMMAND_ACTIONS:
            self._commands.append(action)
            return
        if action not in self._held:
            raise KeyError(f"unknown action {action!r}")
        self._held[action] = True

    def release(self, action: str) -> None:
        if action in COMMAND_ACTIONS:
            return
        if action not in self._held:
            raise KeyError(f"unknown action {action!r}")
        self._held[action] = False

    def add_pointer_motion(self, dx: float, dy: float) -> None:
        self._dx += dx
        self._dy += dy

    def release_all(self) -> None:
        """Forget held keys, e.g. after the window loses focus."""

        for name in self._held:
            self._held[name] = False
        self._dx = 0.0
        self._dy = 0.0

    def snapshot(self) -> InputState:
        state = InputState(
            actions=dict(self._held),
            pointer_delta=(self._dx, self._dy),
            commands=list(self._commands),
        )
        self._dx = 0.0
        self._dy = 0.0
        self._commands.clear()
        return state


__all__ = ["InputCollector"]
