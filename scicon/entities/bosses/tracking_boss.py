"""
tracking_boss.py
----------------
Mini-boss that slides toward the player's x and fires straight down.
"""

import math

from scicon.core.debug.debug_logger import DebugLogger
from scicon.entities.base_entity import BossEntity
from scicon.entities.bosses.base_boss import BossController, scaled
from scicon.entities.entity_types import EntityKind


class TrackingBoss(BossController):
    category = "tracking"
    kind = EntityKind.MINI_BOSS
    defaults = {
        "name": "BOTTLENECK",
        "width": 120, "height": 120, "spawn_y": -100,
        "hp": 50, "hp_per_wave": 30,
        "entry_speed": 2, "hold_y": 100,
        "track_rate": 0.03, "track_rate_per_wave": 0.005,
        "sway_frequency": 0.05, "sway_amplitude": 3,
        "fire_interval": 60, "fire_interval_per_wave": -5, "min_fire_interval": 30,
        "bullet_speed": 5, "bullet_speed_per_wave": 0.5, "bullet_size": 12,
        "color": [255, 68, 68],
        "powerup_drops": 2,
    }

    def _create(self, world, wave):
        cfg = self.cfg
        world.spawn_text(world.width / 2, world.height / 2, self.name, (255, 68, 68))
        boss = BossEntity(
            self.kind,
            world.width / 2 - 50, cfg["spawn_y"],
            cfg["width"], cfg["height"],
            scaled(cfg, "hp", wave),
            cfg["color"], self.name,
        )
        boss.vy = cfg["entry_speed"]
        world.add(boss)
        DebugLogger.system(f"{self.name} spawned (hp={boss.hp})", category="boss")

    def update(self, world, player, wave):
        cfg = self.cfg
        for boss in self.bodies(world):
            boss.attack_timer += 1

            target_x = player.x + player.width / 2 - boss.width / 2
            if boss.y > 0:
                boss.x += (target_x - boss.x) * scaled(cfg, "track_rate", wave)

            if boss.y < cfg["hold_y"]:
                boss.vy = cfg["entry_speed"]
            else:
                boss.vy = 0
                boss.x += math.sin(boss.attack_timer * cfg["sway_frequency"]) * cfg["sway_amplitude"]

            boss.x = max(0.0, min(world.width - boss.width, boss.x))

            interval = max(cfg["min_fire_interval"], int(scaled(cfg, "fire_interval", wave)))
            if boss.attack_timer % interval == 0:
                self._shoot(
                    world, boss.x + boss.width / 2, boss.bottom,
                    0, scaled(cfg, "bullet_speed", wave), cfg["bullet_size"],
                )
