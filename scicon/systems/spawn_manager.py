"""
spawn_manager.py
----------------
Rank-and-file hostile and powerup spawning.

Responsibilities
----------------
- Run the enemy and powerup timers while the spawn gate is open
- Pick an archetype from the progress band table (enemies.json)
- Build hostiles with per-wave hp and speed scaling
- Steer rank-and-file movement that depends on the player (swarm tracking)
"""

import math
import random

from scicon.core.debug.debug_logger import DebugLogger
from scicon.core.runtime.game_settings import Spawning
from scicon.core.services.config_manager import load_config
from scicon.entities.base_entity import Entity
from scicon.entities.entity_types import EntityKind


ARCHETYPE_KINDS = {
    "drone": EntityKind.DRONE,
    "journal": EntityKind.JOURNAL,
    "brick": EntityKind.BRICK,
    "swarm": EntityKind.SWARM,
}

DEFAULT_ENEMIES = {
    "archetypes": {
        "drone": {"vy": 2.5, "hp": 2, "width": 30, "height": 30, "color": [170, 170, 170], "label": "PAYWALL"},
        "journal": {"vy": 5, "hp": 3, "width": 40, "height": 40, "color": [255, 68, 68], "label": "JOURNAL",
                    "sine_amplitude": 4, "sine_frequency": 0.2},
        "brick": {"vy": 1.5, "hp": 8, "width": 40, "height": 40, "color": [255, 187, 51], "label": "FORMS"},
        "swarm": {"vy": 3.5, "hp": 1, "width": 20, "height": 20, "color": [0, 200, 81], "label": "FAKE",
                  "tracking_gain": 0.002, "tracking_damping": 0.95},
    },
    "bands": [
        {"max_progress": 0.3, "rolls": [["swarm", 0.7]], "fallback": "drone"},
        {"max_progress": 0.7, "rolls": [["swarm", 0.8], ["brick", 0.5]], "fallback": "drone"},
        {"max_progress": 1.01, "rolls": [["swarm", 0.85], ["brick", 0.6], ["journal", 0.3]], "fallback": "drone"},
    ],
}


def spawn_interval(wave: int) -> int:
    """Ticks between rank-and-file spawns for a wave."""
    return max(
        Spawning.MIN_SPAWN_INTERVAL,
        Spawning.BASE_SPAWN_INTERVAL - Spawning.SPAWN_INTERVAL_PER_WAVE * (wave - 1),
    )


class SpawnManager:
    """Timed creation of rank-and-file hostiles and powerups."""

    def __init__(self, world, stats, config=None):
        """
        Args:
            world: World receiving new entities
            stats: SessionStats (wave and progress are read every tick)
            config: Optional enemies table; loaded from enemies.json otherwise
        """
        self.world = world
        self.stats = stats
        self.config = config if config is not None else load_config("enemies.json", DEFAULT_ENEMIES)
        self.archetypes = self.config["archetypes"]
        self.bands = sorted(self.config["bands"], key=lambda b: b["max_progress"])

        self.enabled = True
        self.enemy_timer = 0
        self.powerup_timer = 0

        DebugLogger.init_entry("SpawnManager")

    def reset(self):
        self.enemy_timer = 0
        self.powerup_timer = 0

    # ===========================================================
    # Update
    # ===========================================================

    def update(self, gate_open: bool):
        """
        Advance spawn timers by one tick.

        Args:
            gate_open: True while ordinary spawning is allowed (no boss
                encounter pending or active)
        """
        if not self.enabled or not gate_open:
            return

        self.powerup_timer += 1
        if self.powerup_timer >= Spawning.POWERUP_INTERVAL:
            self.powerup_timer = 0
            x = random.random() * (self.world.width - Spawning.SPAWN_MARGIN_X)
            self.world.spawn_powerup(x, -Spawning.POWERUP_SIZE)

        self.enemy_timer += 1
        if self.enemy_timer >= spawn_interval(self.stats.wave):
            self.enemy_timer = 0
            name = self.pick_archetype(self.stats.boss_progress, random.random())
            x = random.random() * (self.world.width - Spawning.SPAWN_MARGIN_X)
            self.create_enemy(name, x, Spawning.SPAWN_Y)

    def pick_archetype(self, progress: float, roll: float) -> str:
        """Archetype name for a progress value and a uniform roll in [0, 1)."""
        band = self.bands[-1]
        for candidate in self.bands:
            if progress < candidate["max_progress"]:
                band = candidate
                break
        for name, threshold in band["rolls"]:
            if roll > threshold:
                return name
        return band["fallback"]

    # ===========================================================
    # Factory
    # ===========================================================

    def create_enemy(self, name: str, x: float, y: float):
        """Create a scaled rank-and-file hostile and add it to the world."""
        archetype = self.archetypes.get(name)
        kind = ARCHETYPE_KINDS.get(name)
        if archetype is None or kind is None:
            DebugLogger.warn(f"Unknown enemy archetype: '{name}'", category="entity_spawn")
            return None

        wave = self.stats.wave
        hp_mult = 1 + Spawning.HP_SCALE_PER_WAVE * wave
        speed_mult = 1 + Spawning.SPEED_SCALE_PER_WAVE * wave

        enemy = Entity(kind, x, y, archetype["width"], archetype["height"], archetype["color"], archetype.get("label", ""))
        enemy.vy = archetype["vy"] * speed_mult
        enemy.set_health(archetype["hp"] * hp_mult)
        if "sine_amplitude" in archetype:
            enemy.vx = math.sin(self.world.frame_count * archetype["sine_frequency"]) * archetype["sine_amplitude"]

        self.world.add(enemy)
        DebugLogger.trace(f"Spawned {name} at x={x:.0f} hp={enemy.hp:.1f}", category="entity_spawn")
        return enemy

    # ===========================================================
    # Movement
    # ===========================================================

    def steer(self, enemy, player):
        """Per-tick behaviour of a rank-and-file hostile after it has moved."""
        if enemy.kind == EntityKind.SWARM:
            archetype = self.archetypes["swarm"]
            enemy.vx += (player.x - enemy.x) * archetype.get("tracking_gain", 0.002)
            enemy.vx *= archetype.get("tracking_damping", 0.95)

        if enemy.y > self.world.height:
            enemy.mark_dead()
