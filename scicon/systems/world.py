"""
world.py
--------
Live entity collection for one run.

Responsibilities
----------------
- Own the flat list of entities and the world rectangle
- Provide helper spawns shared by combat, bosses and progression
  (coins, explosions, floating text, rings, powerups)
- Purge marked entities once per tick (compaction)
"""

import random

from scicon.core.debug.debug_logger import DebugLogger
from scicon.core.runtime.game_settings import Combat, Spawning
from scicon.entities.base_entity import Particle, PowerupPickup, VisualEffect, make_coin
from scicon.entities.entity_types import (
    BOSS_KINDS, EffectStyle, PowerupType, WAVE_PERSISTENT_KINDS,
)


class World:
    """Entity container plus the helper spawns every system shares."""

    def __init__(self, width=0, height=0, play_sound=None):
        self.width = width
        self.height = height
        self.entities = []
        self.frame_count = 0
        self._play_sound = play_sound or (lambda name: None)

    # ===========================================================
    # Collection
    # ===========================================================

    def add(self, entity):
        self.entities.append(entity)
        return entity

    def of_kind(self, kind):
        """Live entities of one kind, in insertion order."""
        return [e for e in self.entities if e.kind == kind and not e.marked_for_deletion]

    def count(self, kind) -> int:
        return sum(1 for e in self.entities if e.kind == kind and not e.marked_for_deletion)

    def clear(self):
        self.entities = []
        self.frame_count = 0

    def compact(self) -> int:
        """Remove every marked entity. Returns the number removed."""
        before = len(self.entities)
        self.entities = [e for e in self.entities if not e.marked_for_deletion]
        removed = before - len(self.entities)
        if removed:
            DebugLogger.trace(f"Compacted {removed} entities", category="entity_cleanup")
        return removed

    def sweep_for_next_wave(self):
        """Drop hostiles and projectiles; particles, effects, pickups and coins stay."""
        before = len(self.entities)
        self.entities = [e for e in self.entities if e.kind in WAVE_PERSISTENT_KINDS]
        DebugLogger.state(
            f"Wave sweep removed {before - len(self.entities)} entities",
            category="entity_cleanup"
        )

    def has_boss_class(self) -> bool:
        return any(e.kind in BOSS_KINDS and not e.marked_for_deletion for e in self.entities)

    # ===========================================================
    # Helper Spawns
    # ===========================================================

    def play_sound(self, name):
        self._play_sound(name)

    def spawn_coin(self, cx, cy):
        return self.add(make_coin(cx, cy, Spawning.COIN_SIZE, Spawning.COIN_FALL_SPEED))

    def spawn_explosion(self, x, y, color):
        self.play_sound("explode")
        for _ in range(Combat.EXPLOSION_PARTICLES):
            self.add(Particle(x, y, color, Combat.EXPLOSION_SPEED))

    def spawn_text(self, x, y, text, color=(255, 255, 255)):
        return self.add(VisualEffect(x, y, EffectStyle.TEXT, text, color))

    def spawn_ring(self, x, y, color=(255, 255, 255)):
        return self.add(VisualEffect(x, y, EffectStyle.RING, color=color))

    def spawn_powerup(self, x, y, powerup=None):
        """Drop a pickup at (x, y). A kind is chosen uniformly when none is given."""
        if powerup is None:
            powerup = random.choice(list(PowerupType))
        pickup = self.add(PowerupPickup(
            x, y, powerup,
            size=Spawning.POWERUP_SIZE,
            fall_speed=Spawning.POWERUP_FALL_SPEED,
        ))
        DebugLogger.trace(f"Powerup dropped: {powerup.value}", category="item")
        return pickup

    def __len__(self):
        return len(self.entities)

    def __iter__(self):
        return iter(self.entities)
