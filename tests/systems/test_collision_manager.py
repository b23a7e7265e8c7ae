"""
test_collision_manager.py
-------------------------
Unit tests for the combat resolver.

Responsibilities
----------------
- Verify kills, rewards and the one-target-per-bullet rule
- Verify player damage, grace and shield behaviour (including beams)
- Verify coin and powerup pickups, the extra-life milestone
- Verify boss-class kills hand the defeat to progression
"""

from unittest.mock import patch

import pytest

from scicon.core.services.event_manager import PlayerHitEvent, PowerupCollectedEvent, RunEndedEvent
from scicon.entities.base_entity import BossEntity, PowerupPickup, Projectile, make_coin
from scicon.entities.entity_types import CollisionTags, EntityKind, PowerupType
from scicon.systems.progression import ProgressionState


PLAYER_CENTER = (400, 500)


@pytest.fixture
def resolve(engine):
    """Run one collision pass for the engine's player."""
    return lambda: engine.collisions.resolve(engine.player)


def record(engine, event_type):
    log = []
    engine.events.subscribe(event_type, log.append)
    return log


def activate_boss(engine, category, kind, hp=1, x=100, y=100, size=60):
    engine.progression.state = ProgressionState.BOSS_ACTIVE
    engine.progression.active = category
    boss = BossEntity(kind, x, y, size, size, hp, (255, 0, 0))
    return engine.world.add(boss)


# ===========================================================
# Player Projectiles
# ===========================================================

class TestPlayerProjectiles:

    def test_single_hit_kill_rewards(self, engine, resolve, spawn_hostile, spawn_bullet, live_of_kind, sounds):
        drone = engine.world.add(spawn_hostile(x=100, y=100, hp=1))
        bullet = engine.world.add(spawn_bullet(105, 105))

        resolve()

        assert drone.marked_for_deletion
        assert bullet.marked_for_deletion
        assert engine.stats.score == 10
        assert engine.stats.enemies_defeated == 1
        coins = live_of_kind(engine.world, EntityKind.COIN)
        assert len(coins) == 1
        assert coins[0].center == drone.center
        assert "explode" in sounds

    def test_score_doubles_each_wave(self, engine, resolve, spawn_hostile, spawn_bullet):
        engine.stats.wave = 3
        engine.world.add(spawn_hostile(EntityKind.SWARM, x=100, y=100, hp=1))
        engine.world.add(spawn_bullet(105, 105))

        resolve()

        assert engine.stats.score == 12 * 4

    def test_damage_without_kill(self, engine, resolve, spawn_hostile, spawn_bullet):
        brick = engine.world.add(spawn_hostile(EntityKind.BRICK, x=100, y=100, hp=3))
        engine.world.add(spawn_bullet(105, 105))

        resolve()

        assert brick.hp == 2
        assert not brick.marked_for_deletion
        assert engine.stats.score == 0

    def test_bullet_hits_only_first_target(self, engine, resolve, spawn_hostile, spawn_bullet):
        first = engine.world.add(spawn_hostile(x=100, y=100, hp=1))
        second = engine.world.add(spawn_hostile(x=100, y=100, hp=1))
        engine.world.add(spawn_bullet(105, 105))

        resolve()

        assert first.marked_for_deletion
        assert not second.marked_for_deletion
        assert second.hp == 1
        assert engine.stats.enemies_defeated == 1

    def test_enemy_bullets_do_not_hit_hostiles(self, engine, resolve, spawn_hostile, spawn_bullet):
        drone = engine.world.add(spawn_hostile(x=100, y=100, hp=1))
        engine.world.add(spawn_bullet(105, 105, tag=CollisionTags.ENEMY_BULLET))

        resolve()

        assert not drone.marked_for_deletion

    @pytest.mark.parametrize("roll, drops", [(0.9, 1), (0.5, 0)])
    def test_elite_drop_chance(self, engine, resolve, spawn_hostile, spawn_bullet, live_of_kind, roll, drops):
        engine.world.add(spawn_hostile(EntityKind.JOURNAL, x=100, y=100, hp=1))
        engine.world.add(spawn_bullet(105, 105))

        with patch("scicon.systems.collision_manager.random.random", return_value=roll):
            resolve()

        assert len(live_of_kind(engine.world, EntityKind.POWERUP)) == drops

    def test_rank_and_file_never_drops(self, engine, resolve, spawn_hostile, spawn_bullet, live_of_kind):
        engine.world.add(spawn_hostile(EntityKind.DRONE, x=100, y=100, hp=1))
        engine.world.add(spawn_bullet(105, 105))

        with patch("scicon.systems.collision_manager.random.random", return_value=0.99):
            resolve()

        assert live_of_kind(engine.world, EntityKind.POWERUP) == []


# ===========================================================
# Player Damage
# ===========================================================

class TestPlayerDamage:

    def test_enemy_bullet_costs_a_life(self, engine, resolve, spawn_bullet, sounds):
        hits = record(engine, PlayerHitEvent)
        bullet = engine.world.add(spawn_bullet(390, 490, tag=CollisionTags.ENEMY_BULLET))

        assert resolve() is True

        assert engine.player.lives == 2
        assert engine.player.grace_timer == 60
        assert bullet.marked_for_deletion
        assert "hit" in sounds
        assert hits == [PlayerHitEvent(lives=2)]

    def test_hitbox_is_inset(self, engine, resolve, spawn_bullet):
        # Inside the 100x100 ship box but outside the inset hitbox
        engine.world.add(spawn_bullet(352, 452, tag=CollisionTags.ENEMY_BULLET))
        resolve()
        assert engine.player.lives == 3

    def test_touching_edges_count(self, engine, resolve, spawn_bullet):
        # Bullet's right edge lands exactly on the hitbox's left edge
        engine.world.add(spawn_bullet(358, 480, tag=CollisionTags.ENEMY_BULLET))
        resolve()
        assert engine.player.lives == 2

    @pytest.mark.parametrize("protection", ["grace", "shield"])
    def test_protection_prevents_life_loss(self, engine, resolve, spawn_hostile, protection):
        if protection == "grace":
            engine.player.start_grace()
        else:
            engine.effects.apply(PowerupType.SHIELD)
        drone = engine.world.add(spawn_hostile(x=380, y=480, hp=3))

        resolve()

        assert engine.player.lives == 3
        assert drone.hp == -2
        assert drone.marked_for_deletion

    def test_contact_damage_can_leave_hostile_alive(self, engine, resolve, spawn_hostile):
        engine.effects.apply(PowerupType.SHIELD)
        brick = engine.world.add(spawn_hostile(EntityKind.BRICK, x=380, y=480, hp=12))

        resolve()

        assert brick.hp == 7
        assert not brick.marked_for_deletion

    def test_shield_contact_kill_gives_no_reward(self, engine, resolve, spawn_hostile):
        engine.effects.apply(PowerupType.SHIELD)
        engine.world.add(spawn_hostile(x=380, y=480, hp=1))

        resolve()

        assert engine.stats.score == 0
        assert engine.stats.enemies_defeated == 0

    def test_beam_survives_shield(self, engine, resolve):
        engine.effects.apply(PowerupType.SHIELD)
        beam = engine.world.add(Projectile(360, 0, 0, 0, size=80, tag=CollisionTags.ENEMY_BULLET))
        beam.is_beam = True
        beam.height = 600

        resolve()

        assert engine.player.lives == 3
        assert not beam.marked_for_deletion

    def test_beam_hit_keeps_beam(self, engine, resolve):
        beam = engine.world.add(Projectile(360, 0, 0, 0, size=80, tag=CollisionTags.ENEMY_BULLET))
        beam.is_beam = True
        beam.height = 600

        resolve()

        assert engine.player.lives == 2
        assert not beam.marked_for_deletion

    def test_last_life_ends_run(self, engine, spawn_bullet):
        ended = record(engine, RunEndedEvent)
        engine.player.lives = 1
        engine.stats.lives = 1
        engine.world.add(spawn_bullet(390, 490, tag=CollisionTags.ENEMY_BULLET))

        engine.update()

        assert not engine.active
        assert engine.is_game_over
        assert engine.stats.lives == 0
        assert ended == [RunEndedEvent(score=0, wave=1)]

        frame = engine.world.frame_count
        engine.update()
        assert engine.world.frame_count == frame


# ===========================================================
# Pickups
# ===========================================================

class TestPickups:

    def test_coin_pickup(self, engine, resolve, sounds):
        coin = engine.world.add(make_coin(*PLAYER_CENTER, 24, 2.0))

        resolve()
        resolve()

        assert coin.marked_for_deletion
        assert engine.stats.coins == 1
        assert engine.stats.score == 1
        assert sounds.count("coin") == 1

    def test_two_coins_in_one_tick(self, engine, resolve):
        first = engine.world.add(make_coin(*PLAYER_CENTER, 24, 2.0))
        second = engine.world.add(make_coin(PLAYER_CENTER[0] + 10, PLAYER_CENTER[1], 24, 2.0))

        resolve()

        assert first.marked_for_deletion and second.marked_for_deletion
        assert engine.stats.coins == 2
        assert engine.stats.total_coins == 2
        assert engine.stats.score == 2

    def test_magnet_doubles_coin_score(self, engine, resolve):
        engine.effects.apply(PowerupType.MAGNET)
        engine.world.add(make_coin(*PLAYER_CENTER, 24, 2.0))

        resolve()

        assert engine.stats.coins == 1
        assert engine.stats.score == 2

    def test_fiftieth_coin_grants_life(self, engine, resolve, live_of_kind):
        engine.stats.total_coins = 49
        engine.world.add(make_coin(*PLAYER_CENTER, 24, 2.0))

        resolve()

        assert engine.player.lives == 4
        assert any(e.label == "+1 LIFE" for e in live_of_kind(engine.world, EntityKind.EFFECT))

    def test_no_life_above_max(self, engine, resolve):
        engine.player.lives = 5
        engine.stats.total_coins = 99
        engine.world.add(make_coin(*PLAYER_CENTER, 24, 2.0))

        resolve()

        assert engine.player.lives == 5

    def test_powerup_pickup(self, engine, resolve, sounds):
        collected = record(engine, PowerupCollectedEvent)
        pickup = engine.world.add(PowerupPickup(380, 480, PowerupType.TRIPLE_SHOT))

        resolve()

        assert pickup.marked_for_deletion
        assert engine.effects.has(PowerupType.TRIPLE_SHOT)
        assert "powerup" in sounds
        assert collected == [PowerupCollectedEvent(powerup="triple_shot")]


# ===========================================================
# Boss Kills
# ===========================================================

class TestBossKills:

    def test_mini_boss_kill(self, engine, resolve, spawn_bullet, live_of_kind):
        boss = activate_boss(engine, "tracking", EntityKind.MINI_BOSS)
        engine.world.add(spawn_bullet(105, 105))

        with patch("scicon.systems.collision_manager.random.random", return_value=0.0):
            resolve()

        assert boss.marked_for_deletion
        assert engine.stats.score == 10 + 500
        assert len(live_of_kind(engine.world, EntityKind.POWERUP)) == 2
        assert engine.progression.state == ProgressionState.ACCUMULATING

    def test_boss_drops_follow_config(self, engine, resolve, spawn_bullet, live_of_kind):
        engine.progression.bosses["tracking"].cfg["powerup_drops"] = 3
        activate_boss(engine, "tracking", EntityKind.MINI_BOSS)
        engine.world.add(spawn_bullet(105, 105))

        with patch("scicon.systems.collision_manager.random.random", return_value=0.0):
            resolve()

        drops = live_of_kind(engine.world, EntityKind.POWERUP)
        assert len(drops) == 3
        assert sorted(d.x for d in drops) == [100, 140, 180]

    def test_final_boss_kill(self, engine, resolve, spawn_bullet, live_of_kind):
        engine.stats.wave = 2
        activate_boss(engine, "final", EntityKind.BOSS)
        engine.world.add(spawn_bullet(105, 105))

        resolve()

        assert engine.stats.score == (10 + 5000) * 2
        assert len(live_of_kind(engine.world, EntityKind.COIN)) == 16
        assert len(live_of_kind(engine.world, EntityKind.POWERUP)) == 4
        labels = [e.label for e in live_of_kind(engine.world, EntityKind.EFFECT)]
        assert "WAVE COMPLETE!" in labels
        assert engine.progression.state == ProgressionState.WAVE_CLEARED

    def test_formation_defeat_waits_for_last_segment(self, engine, resolve, spawn_hostile, spawn_bullet):
        engine.progression.state = ProgressionState.BOSS_ACTIVE
        engine.progression.active = "formation"
        engine.world.add(spawn_hostile(EntityKind.INVADER, x=100, y=100, hp=1))
        engine.world.add(spawn_hostile(EntityKind.INVADER, x=300, y=100, hp=1))

        engine.world.add(spawn_bullet(105, 105))
        resolve()
        assert engine.progression.state == ProgressionState.BOSS_ACTIVE

        engine.world.add(spawn_bullet(305, 105))
        resolve()
        assert engine.progression.state == ProgressionState.ACCUMULATING

    def test_shielded_contact_kills_boss(self, engine, resolve):
        engine.effects.apply(PowerupType.SHIELD)
        boss = activate_boss(engine, "tracking", EntityKind.MINI_BOSS, hp=5, x=370, y=470)

        resolve()

        assert boss.marked_for_deletion
        assert engine.player.lives == 3
        assert engine.progression.state == ProgressionState.ACCUMULATING
