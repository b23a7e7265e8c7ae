"""
collision_manager.py
--------------------
Combat resolver: overlap detection plus the response for each pair class.

Responsibilities
----------------
- Player vs. powerup / coin: pickup
- Player vs. hostile or hostile projectile: damage (or contact damage to the
  hostile while the player is invulnerable)
- Player projectile vs. hostile: damage, kill rewards, boss defeat hand-off

One pass over the pre-compaction entity list. Marked entities are skipped,
and entities created during the pass are not visited until the next tick.
"""

import random

from scicon.core.debug.debug_logger import DebugLogger
from scicon.core.runtime.game_settings import Colors, Combat, Player as PlayerCfg
from scicon.core.services.event_manager import PlayerHitEvent, PowerupCollectedEvent
from scicon.entities.base_entity import boxes_overlap
from scicon.entities.entity_types import (
    BOSS_KINDS, EntityKind, PowerupType, base_points, is_elite, is_hostile,
)


BOSS_CATEGORY = {
    EntityKind.MINI_BOSS: "tracking",
    EntityKind.INVADER: "formation",
    EntityKind.BOSS: "final",
}


class CollisionManager:
    """Detects overlaps and applies the combat rules for each pair class."""

    def __init__(self, world, stats, effects, progression, events=None):
        self.world = world
        self.stats = stats
        self.effects = effects
        self.progression = progression
        self.events = events

        DebugLogger.init_entry("CollisionManager")

    # ===========================================================
    # Resolution Pass
    # ===========================================================

    def resolve(self, player) -> bool:
        """
        Run one collision pass.

        Returns:
            bool: False once the player has run out of lives
        """
        for entity in list(self.world.entities):
            if entity.marked_for_deletion:
                continue

            if player.lives > 0 and boxes_overlap(player.hitbox, entity.box):
                self._resolve_player_contact(player, entity)

            if (entity.kind == EntityKind.PROJECTILE
                    and not entity.is_hostile
                    and not entity.marked_for_deletion):
                self._resolve_player_projectile(entity)

        return player.lives > 0

    def _resolve_player_contact(self, player, entity):
        if entity.kind == EntityKind.POWERUP:
            self._collect_powerup(player, entity)
        elif entity.kind == EntityKind.COIN:
            self._collect_coin(player, entity)
        elif is_hostile(entity.kind) or (
                entity.kind == EntityKind.PROJECTILE and entity.is_hostile):
            self._resolve_hostile_contact(player, entity)

    # ===========================================================
    # Pickups
    # ===========================================================

    def _collect_powerup(self, player, pickup):
        pickup.mark_dead()
        self.effects.apply(pickup.powerup, self.world, player)
        self.world.play_sound("powerup")
        self._dispatch(PowerupCollectedEvent(powerup=pickup.powerup.value))

    def _collect_coin(self, player, coin):
        coin.mark_dead()
        self.world.play_sound("coin")
        self.stats.add_coin(2 if self.effects.has(PowerupType.MAGNET) else 1)

        if (self.stats.total_coins % Combat.LIFE_EVERY_N_COINS == 0
                and player.lives < PlayerCfg.MAX_LIVES):
            player.lives += 1
            self.world.spawn_text(player.x + player.width / 2, player.y, "+1 LIFE", Colors.SUCCESS)
            DebugLogger.action(f"Extra life at {self.stats.total_coins} coins", category="item")

    # ===========================================================
    # Hostile Contact
    # ===========================================================

    def _resolve_hostile_contact(self, player, hostile):
        is_beam = getattr(hostile, "is_beam", False)

        if player.is_invulnerable(self.effects):
            hostile.hp -= Combat.CONTACT_DAMAGE
            if hostile.hp <= 0 and not is_beam:
                hostile.mark_dead()
                self.world.spawn_explosion(hostile.x, hostile.y, hostile.color)
                if hostile.kind in BOSS_KINDS:
                    self._report_boss_body_down(hostile)
            return

        player.lives -= 1
        player.start_grace()
        self.world.play_sound("hit")
        self.world.spawn_explosion(player.x, player.y, Colors.WHITE)
        if hostile.kind == EntityKind.PROJECTILE and not is_beam:
            hostile.mark_dead()

        DebugLogger.action(f"Player hit by {hostile.kind.value} ({player.lives} lives left)", category="collision")
        self._dispatch(PlayerHitEvent(lives=player.lives))

    # ===========================================================
    # Player Projectiles
    # ===========================================================

    def _resolve_player_projectile(self, projectile):
        for target in self.world.entities:
            if target.marked_for_deletion or not is_hostile(target.kind):
                continue
            if not projectile.intersects(target):
                continue

            projectile.mark_dead()
            target.hp -= Combat.PROJECTILE_DAMAGE
            if target.hp <= 0:
                self._kill(target)
            break

    def _kill(self, target):
        """Destroy a hostile and pay out its rewards."""
        target.mark_dead()
        self.world.spawn_explosion(target.x, target.y, target.color)
        self.stats.add_kill()

        multiplier = 2 ** (self.stats.wave - 1)
        self.stats.add_score(base_points(target.kind) * multiplier)

        cx, cy = target.center
        self.world.spawn_coin(cx, cy)

        if is_elite(target.kind) and random.random() > 1 - Combat.ELITE_DROP_CHANCE:
            self.world.spawn_powerup(target.x, target.y)

        if target.kind == EntityKind.MINI_BOSS:
            self.stats.add_score(Combat.MINI_BOSS_BONUS * multiplier)
            for i in range(self._powerup_drops(target)):
                self.world.spawn_powerup(target.x + 40 * i, target.y)

        elif target.kind == EntityKind.BOSS:
            self.stats.add_score(Combat.FINAL_BOSS_BONUS * multiplier)
            for _ in range(Combat.FINAL_BOSS_COIN_SHOWER):
                self.world.spawn_coin(
                    target.x + random.random() * target.width,
                    target.y + random.random() * target.height,
                )
            # Two-wide grid under the hull
            for i in range(self._powerup_drops(target)):
                self.world.spawn_powerup(target.x + 50 + 50 * (i % 2), target.y + 50 + 50 * (i // 2))
            self.world.spawn_text(self.world.width / 2, self.world.height / 2, "WAVE COMPLETE!", (0, 255, 0))

        DebugLogger.trace(f"Killed {target.kind.value} (+{base_points(target.kind) * multiplier})",
                          category="collision")

        if target.kind in BOSS_KINDS:
            self._report_boss_body_down(target)

    def _powerup_drops(self, body) -> int:
        controller = self.progression.bosses.get(BOSS_CATEGORY[body.kind])
        if controller is None:
            return 0
        return int(controller.cfg.get("powerup_drops", 0))

    def _report_boss_body_down(self, body):
        """Hand the defeat to progression once the encounter has no live bodies."""
        if body.kind == EntityKind.INVADER and self.world.count(EntityKind.INVADER) > 0:
            return
        self.progression.on_boss_defeated(BOSS_CATEGORY[body.kind])

    def _dispatch(self, event):
        if self.events is not None:
            self.events.dispatch(event)
