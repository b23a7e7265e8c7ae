"""
formation_boss.py
-----------------
Wall of segments that moves as one rigid body.

The group descends until its top row reaches the entry line, then sweeps
sideways. When any member touches the edge margin the whole group reverses
and steps down. Boss hp is the number of live members.
"""

import random

from scicon.core.debug.debug_logger import DebugLogger
from scicon.core.runtime.game_settings import Bounds
from scicon.entities.base_entity import Entity
from scicon.entities.bosses.base_boss import BossController, scaled
from scicon.entities.entity_types import EntityKind


class FormationBoss(BossController):
    category = "formation"
    kind = EntityKind.INVADER
    defaults = {
        "name": "PAYWALL",
        "rows": 3, "cols": 8,
        "block_width": 40, "block_height": 30, "gap": 2,
        "spawn_y": -200,
        "hp": 5, "hp_per_wave": 4,
        "entry_y": 50, "entry_speed": 3,
        "sweep_speed": 4, "sweep_speed_per_wave": 0.8,
        "step_down": 30,
        "fire_interval": 20, "fire_interval_per_wave": -1, "min_fire_interval": 8,
        "bullet_speed": 7, "bullet_speed_per_wave": 0.5, "bullet_size": 10,
        "color": [255, 136, 0],
    }

    def __init__(self, config=None):
        super().__init__(config)
        self.direction = 1
        self.fire_timer = 0

    @property
    def max_members(self) -> int:
        return self.cfg["rows"] * self.cfg["cols"]

    def health(self, world):
        return world.count(self.kind), self.max_members

    def _create(self, world, wave):
        cfg = self.cfg
        world.spawn_text(world.width / 2, world.height / 2, self.name, (255, 136, 0))

        step_x = cfg["block_width"] + cfg["gap"]
        step_y = cfg["block_height"] + cfg["gap"]
        start_x = (world.width - step_x * cfg["cols"]) / 2
        hp = scaled(cfg, "hp", wave)

        for row in range(cfg["rows"]):
            for col in range(cfg["cols"]):
                segment = Entity(
                    self.kind,
                    start_x + col * step_x, cfg["spawn_y"] + row * step_y,
                    cfg["block_width"], cfg["block_height"],
                    cfg["color"], "WALL",
                )
                segment.set_health(hp)
                world.add(segment)

        self.direction = 1
        self.fire_timer = 0
        DebugLogger.system(f"{self.name} spawned ({self.max_members} segments, hp={hp})", category="boss")

    def update(self, world, player, wave):
        members = self.bodies(world)
        if not members:
            return
        cfg = self.cfg

        top = min(m.y for m in members)
        entering = top < cfg["entry_y"]

        hit_edge = any(
            (m.right > world.width - Bounds.EDGE_MARGIN and self.direction > 0)
            or (m.x < Bounds.EDGE_MARGIN and self.direction < 0)
            for m in members
        )

        move_x = self.direction * scaled(cfg, "sweep_speed", wave)
        move_y = cfg["entry_speed"] if entering else 0
        if hit_edge and not entering:
            self.direction *= -1
            move_x = 0
            move_y += cfg["step_down"]

        for member in members:
            member.x += move_x
            member.y += move_y

        # Segments stepped past the bottom edge leave without a reward
        escaped = [m for m in members if m.y > world.height]
        if escaped:
            for member in escaped:
                member.mark_dead()
            members = [m for m in members if not m.marked_for_deletion]
            DebugLogger.trace(f"{len(escaped)} {self.name} segments left the screen", category="boss")
            if not members:
                return

        self.fire_timer += 1
        interval = max(cfg["min_fire_interval"], int(scaled(cfg, "fire_interval", wave)))
        if self.fire_timer % interval == 0:
            shooter = random.choice(members)
            self._shoot(
                world, shooter.x + shooter.width / 2, shooter.bottom,
                0, scaled(cfg, "bullet_speed", wave), cfg["bullet_size"],
            )
