"""
test_final_boss.py
------------------
Tests for the end-of-wave boss attack cycle and its beam.

Covers:
1. Spawn announcement
2. Aimed volley during the first phase
3. Charging phase
4. Beam creation, attachment and cleanup
"""

import pytest

from scicon.entities.bosses.final_boss import FinalBoss
from scicon.entities.entity_types import CollisionTags, EntityKind
from scicon.entities.player import Player


@pytest.fixture
def controller():
    return FinalBoss()


@pytest.fixture
def boss(controller, world):
    controller.spawn(world, 1)
    body = world.of_kind(EntityKind.BOSS)[0]
    body.y = 100
    return body


@pytest.fixture
def player():
    return Player(350, 450)


def beams(world):
    return [e for e in world.of_kind(EntityKind.PROJECTILE) if e.is_beam]


def test_spawn_announcement(controller, world, sounds):
    controller.spawn(world, 1)
    body = world.of_kind(EntityKind.BOSS)[0]
    assert body.x == 300
    assert body.hp == 350
    assert "boss_roar" in sounds
    assert any(e.label == "GATEKEEPER DETECTED" for e in world.of_kind(EntityKind.EFFECT))


def test_entry_descends(controller, world, player):
    controller.spawn(world, 1)
    body = world.of_kind(EntityKind.BOSS)[0]
    controller.update(world, player, 1)
    assert body.vy == 2


def test_volley_fires_three_aimed_bullets(controller, world, boss, player):
    boss.attack_timer = 51
    controller.update(world, player, 1)

    bullets = world.of_kind(EntityKind.PROJECTILE)
    assert len(bullets) == 3
    assert all(b.collision_tag == CollisionTags.ENEMY_BULLET for b in bullets)
    # Centre bullet heads toward the player (downward)
    assert bullets[0].vy > 0


def test_charging_phase(controller, world, boss, player):
    boss.attack_timer = 259
    controller.update(world, player, 1)
    assert boss.is_charging
    assert world.count(EntityKind.PROJECTILE) == 0


def test_beam_fires_at_charge_end(controller, world, boss, player, sounds):
    boss.attack_timer = 319
    sounds.clear()
    controller.update(world, player, 1)

    fired = beams(world)
    assert len(fired) == 1
    beam = fired[0]
    assert sounds == ["boss_roar"]
    assert beam.height == world.height
    assert beam.life == 69
    assert beam.x == pytest.approx(boss.x + boss.width / 2 - beam.width / 2)
    assert beam.y == pytest.approx(boss.bottom - 20)


def test_beam_follows_boss(controller, world, boss, player):
    boss.attack_timer = 319
    controller.update(world, player, 1)
    beam = beams(world)[0]

    boss.x += 50
    controller.update(world, player, 1)

    assert beam.x == pytest.approx(boss.x + boss.width / 2 - beam.width / 2)


def test_beam_expires(controller, world, boss, player):
    boss.attack_timer = 319
    controller.update(world, player, 1)
    beam = beams(world)[0]

    for _ in range(69):
        controller.update(world, player, 1)

    assert beam.marked_for_deletion


def test_orphaned_beam_removed(controller, world, boss, player):
    boss.attack_timer = 319
    controller.update(world, player, 1)
    beam = beams(world)[0]

    boss.mark_dead()
    controller.update(world, player, 1)

    assert beam.marked_for_deletion
