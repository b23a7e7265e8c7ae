"""
effects_manager.py
------------------
Timed powerup effects stacked on the player.

Responsibilities
----------------
- Track PowerupType -> remaining ticks (distinct kinds coexist)
- Re-picking an active kind resets its duration
- Run the per-kind pickup handler (announcement text, ring)
- Apply per-tick effect behaviour (coin magnet)
"""

import math

from scicon.core.debug.debug_logger import DebugLogger
from scicon.core.runtime.game_settings import Powerups
from scicon.core.services.config_manager import load_config
from scicon.entities.entity_types import EntityKind, PowerupType


DEFAULT_POWERUPS = {
    kind.value: {
        "duration": Powerups.DURATION,
        "label": kind.value.replace("_", " ").upper() + "!",
        "color": [255, 255, 255],
        "image": None,
    }
    for kind in PowerupType
}

EFFECT_HANDLERS = {}


def effect_handler(kind: PowerupType):
    """Decorator to auto-register pickup handlers."""
    def decorator(func):
        EFFECT_HANDLERS[kind] = func
        return func
    return decorator


# ===========================================================
# Pickup Handlers
# ===========================================================

def _announce(world, player, definition):
    cx, cy = player.center
    color = tuple(definition["color"])
    world.spawn_text(cx, cy - 20, definition["label"], color)
    world.spawn_ring(cx, cy, color)


@effect_handler(PowerupType.DOUBLE_SHOT)
def handle_double_shot(world, player, definition):
    _announce(world, player, definition)


@effect_handler(PowerupType.TRIPLE_SHOT)
def handle_triple_shot(world, player, definition):
    _announce(world, player, definition)


@effect_handler(PowerupType.MAGNET)
def handle_magnet(world, player, definition):
    _announce(world, player, definition)


@effect_handler(PowerupType.SHIELD)
def handle_shield(world, player, definition):
    """Shield is read by the resolver through has(); the grace timer stays untouched."""
    _announce(world, player, definition)


# ===========================================================
# Effect Stack
# ===========================================================

class EffectsManager:
    """Active timed effects keyed by PowerupType."""

    def __init__(self, definitions=None):
        if definitions is None:
            definitions = load_config("powerups.json", DEFAULT_POWERUPS)
        self.definitions = definitions
        self.active = {}

        DebugLogger.init_entry("EffectsManager")

    def duration_of(self, kind: PowerupType) -> int:
        return int(self.definitions.get(kind.value, {}).get("duration", Powerups.DURATION))

    def definition(self, kind: PowerupType) -> dict:
        return self.definitions.get(kind.value, DEFAULT_POWERUPS[kind.value])

    def apply(self, kind: PowerupType, world=None, player=None):
        """
        Start (or restart) an effect.

        Args:
            kind: Effect to apply
            world: World for pickup visuals (optional)
            player: Player the visuals are centred on (optional)
        """
        self.active[kind] = self.duration_of(kind)
        DebugLogger.action(f"Effect {kind.value} for {self.active[kind]} ticks", category="item")

        if world is None or player is None:
            return
        handler = EFFECT_HANDLERS.get(kind)
        if handler:
            handler(world, player, self.definition(kind))
        else:
            DebugLogger.warn(f"No pickup handler for {kind.value}", category="item")

    def has(self, kind: PowerupType) -> bool:
        return kind in self.active

    def remaining(self, kind: PowerupType) -> int:
        return self.active.get(kind, 0)

    def tick(self):
        """Decrement every effect; drop those that reach zero."""
        expired = []
        for kind in self.active:
            self.active[kind] -= 1
            if self.active[kind] <= 0:
                expired.append(kind)
        for kind in expired:
            del self.active[kind]
            DebugLogger.trace(f"Effect {kind.value} expired", category="item")

    def clear(self):
        self.active.clear()

    # ===========================================================
    # Per-tick Behaviour
    # ===========================================================

    def pull_coins(self, world, player):
        """Magnet: coins within range drift toward the ship centre."""
        if PowerupType.MAGNET not in self.active:
            return
        px, py = player.center
        for coin in world.entities:
            if coin.kind != EntityKind.COIN or coin.marked_for_deletion:
                continue
            cx, cy = coin.center
            dx, dy = px - cx, py - cy
            if math.hypot(dx, dy) < Powerups.MAGNET_RADIUS:
                coin.x += dx * Powerups.MAGNET_PULL_RATE
                coin.y += dy * Powerups.MAGNET_PULL_RATE
