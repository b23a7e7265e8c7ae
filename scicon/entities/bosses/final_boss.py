"""
final_boss.py
-------------
End-of-wave boss with a fixed attack cycle.

Attack cycle (attack_timer % cycle):
    [0, volley_end)           aimed three-bullet spreads
    [volley_end, charge_end)  charging: shake, warning text
    charge_end                fire one persistent beam
    otherwise                 cooldown

The beam re-attaches to the boss every tick and deletes itself once the
boss is gone.
"""

import math
import random

from scicon.core.debug.debug_logger import DebugLogger
from scicon.entities.base_entity import BossEntity, Projectile, find_first
from scicon.entities.bosses.base_boss import BossController, scaled
from scicon.entities.entity_types import CollisionTags, EntityKind


class FinalBoss(BossController):
    category = "final"
    kind = EntityKind.BOSS
    defaults = {
        "name": "GATEKEEPER",
        "width": 200, "height": 180, "spawn_y": -200,
        "hp": 200, "hp_per_wave": 150,
        "entry_speed": 2, "hold_y": 80,
        "hover_frequency": 0.03, "hover_amplitude": 3,
        "drift_rate": 0.015, "drift_dead_zone": 10,
        "cycle": 400, "volley_end": 250, "charge_end": 320,
        "charge_text_interval": 15, "shake": 5,
        "fire_interval": 60, "fire_interval_per_wave": -8, "min_fire_interval": 25,
        "bullet_speed": 6, "bullet_speed_per_wave": 0.5, "bullet_size": 15,
        "spread": 0.2,
        "beam_width": 80, "beam_life": 70, "beam_inset": 20,
        "color": [153, 0, 0],
        "powerup_drops": 4,
    }

    def _create(self, world, wave):
        cfg = self.cfg
        world.play_sound("boss_roar")
        world.spawn_text(world.width / 2, 200, f"{self.name} DETECTED", (255, 0, 0))
        boss = BossEntity(
            self.kind,
            world.width / 2 - cfg["width"] / 2, cfg["spawn_y"],
            cfg["width"], cfg["height"],
            scaled(cfg, "hp", wave),
            cfg["color"], self.name,
        )
        boss.vy = cfg["entry_speed"]
        world.add(boss)
        DebugLogger.system(f"{self.name} spawned (hp={boss.hp})", category="boss")

    # ===========================================================
    # Update
    # ===========================================================

    def update(self, world, player, wave):
        boss = find_first(world.entities, self.kind)
        if boss is not None:
            self._update_body(world, boss, player, wave)
        self.update_beams(world, boss)

    def _update_body(self, world, boss, player, wave):
        cfg = self.cfg
        boss.attack_timer += 1
        speed_mult = 1 + 0.1 * wave

        if boss.y < cfg["hold_y"]:
            boss.vy = cfg["entry_speed"]
        else:
            boss.vy = 0
            if not boss.is_charging:
                hover = math.sin(boss.attack_timer * cfg["hover_frequency"]) * cfg["hover_amplitude"]
                dx = (player.x + player.width / 2 - boss.width / 2) - boss.x
                if abs(dx) > cfg["drift_dead_zone"]:
                    boss.x += dx * cfg["drift_rate"] * speed_mult
                boss.x += hover

        boss.x = max(0.0, min(world.width - boss.width, boss.x))

        phase = boss.attack_timer % cfg["cycle"]
        if phase < cfg["volley_end"]:
            boss.is_charging = False
            interval = max(cfg["min_fire_interval"], int(scaled(cfg, "fire_interval", wave)))
            if boss.attack_timer % interval == 0:
                self._fire_volley(world, boss, player, wave)
        elif phase < cfg["charge_end"]:
            boss.is_charging = True
            boss.x += (random.random() - 0.5) * cfg["shake"]
            if boss.attack_timer % cfg["charge_text_interval"] == 0:
                world.spawn_text(boss.x + boss.width / 2, boss.y, "CHARGING BEAM!", (255, 0, 0))
        elif phase == cfg["charge_end"]:
            self._fire_beam(world, boss)
        else:
            boss.is_charging = False

    def _fire_volley(self, world, boss, player, wave):
        """Three bullets aimed at the player centre, fanned by +/- spread."""
        cx = boss.x + boss.width / 2
        cy = boss.bottom - self.cfg["beam_inset"]
        px, py = player.center
        angle = math.atan2(py - cy, px - cx)
        speed = scaled(self.cfg, "bullet_speed", wave)
        spread = self.cfg["spread"]
        for a in (angle, angle - spread, angle + spread):
            self._shoot(world, cx, cy, math.cos(a) * speed, math.sin(a) * speed, self.cfg["bullet_size"])

    def _fire_beam(self, world, boss):
        cfg = self.cfg
        world.play_sound("boss_roar")
        beam = Projectile(
            0, 0, 0, 0, size=cfg["beam_width"],
            color=(255, 0, 0), tag=CollisionTags.ENEMY_BULLET,
        )
        beam.is_beam = True
        beam.height = world.height
        beam.life = beam.max_life = cfg["beam_life"]
        self._attach(beam, boss)
        world.add(beam)
        DebugLogger.action(f"{self.name} fired beam", category="boss")

    def _attach(self, beam, boss):
        beam.x = boss.x + boss.width / 2 - beam.width / 2
        beam.y = boss.bottom - self.cfg["beam_inset"]

    def update_beams(self, world, boss):
        """Age every beam and keep it under the boss; orphaned beams delete themselves."""
        for beam in world.entities:
            if not getattr(beam, "is_beam", False) or beam.marked_for_deletion:
                continue
            beam.tick_life()
            if boss is None:
                beam.mark_dead()
            else:
                self._attach(beam, boss)
