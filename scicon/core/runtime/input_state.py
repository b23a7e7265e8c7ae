"""
input_state.py
--------------
Input snapshot handed to the engine by the host.

The engine never polls devices itself. The host collects pressed key names
and an optional pointer position and passes them through
GameEngine.handle_input(); the latest snapshot wins.
"""

from typing import Iterable, Optional, Tuple

from scicon.core.runtime.game_settings import Player


class InputState:
    """Pressed key names plus an optional pointer (touch / mouse drag)."""

    __slots__ = ("keys", "pointer")

    def __init__(self, keys: Iterable[str] = (), pointer: Optional[Tuple[float, float]] = None):
        self.keys = frozenset(keys)
        self.pointer = pointer

    # ===========================================================
    # Action Queries
    # ===========================================================

    def _any(self, names) -> bool:
        return not self.keys.isdisjoint(names)

    @property
    def has_pointer(self) -> bool:
        return self.pointer is not None

    def move_axis(self) -> Tuple[int, int]:
        """Keyboard movement direction as (-1..1, -1..1)."""
        dx = int(self._any(Player.MOVE_RIGHT)) - int(self._any(Player.MOVE_LEFT))
        dy = int(self._any(Player.MOVE_DOWN)) - int(self._any(Player.MOVE_UP))
        return dx, dy

    def trigger_held(self) -> bool:
        """Fire button held. A pointer on screen always fires."""
        return self.has_pointer or self._any(Player.FIRE)

    def clamped_pointer(self, width: float, height: float) -> Optional[Tuple[float, float]]:
        """Pointer clamped into the world rectangle."""
        if self.pointer is None:
            return None
        px, py = self.pointer
        return max(0.0, min(float(width), px)), max(0.0, min(float(height), py))

    def __repr__(self) -> str:
        return f"<InputState keys={sorted(self.keys)} pointer={self.pointer}>"
