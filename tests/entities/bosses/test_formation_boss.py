"""
test_formation_boss.py
----------------------
Tests for the wall formation that moves as one rigid body.
"""

import pytest

from scicon.entities.bosses.formation_boss import FormationBoss
from scicon.entities.entity_types import EntityKind
from scicon.entities.player import Player


@pytest.fixture
def controller(world):
    wall = FormationBoss()
    wall.spawn(world, 1)
    return wall


def positions(world):
    return [(m.x, m.y) for m in world.of_kind(EntityKind.INVADER)]


def test_spawns_centred_grid(controller, world):
    members = world.of_kind(EntityKind.INVADER)
    assert len(members) == 24
    assert min(m.x for m in members) == pytest.approx(232)
    assert min(m.y for m in members) == -200
    assert all(m.hp == 9 for m in members)
    assert controller.health(world) == (24, 24)


def test_entry_moves_group_together(controller, world):
    before = positions(world)
    controller.update(world, Player(), 1)
    after = positions(world)

    for (x0, y0), (x1, y1) in zip(before, after):
        assert x1 - x0 == pytest.approx(4.8)
        assert y1 - y0 == pytest.approx(3)


def test_edge_reverses_and_steps_down(controller, world):
    for member in world.of_kind(EntityKind.INVADER):
        member.x += 500
        member.y += 300
    before = positions(world)

    controller.update(world, Player(), 1)

    assert controller.direction == -1
    for (x0, y0), (x1, y1) in zip(before, positions(world)):
        assert x1 == x0
        assert y1 == y0 + 30


def test_health_counts_live_members(controller, world):
    for member in world.of_kind(EntityKind.INVADER)[:5]:
        member.mark_dead()
    assert controller.health(world) == (19, 24)
    assert controller.is_alive(world)


def test_random_member_fires(controller, world):
    controller.fire_timer = 18
    controller.update(world, Player(), 1)
    bullets = world.of_kind(EntityKind.PROJECTILE)
    assert len(bullets) == 1
    assert bullets[0].vy == pytest.approx(7.5)


def test_idle_without_members(controller, world):
    for member in world.of_kind(EntityKind.INVADER):
        member.mark_dead()
    controller.update(world, Player(), 1)
    assert world.count(EntityKind.PROJECTILE) == 0
    assert not controller.is_alive(world)


def test_segments_below_screen_are_culled(controller, world):
    for member in world.of_kind(EntityKind.INVADER):
        member.y += 790

    controller.update(world, Player(), 1)

    # Only the top row (now at y=590) is still on screen
    assert controller.health(world) == (8, 24)
    assert all(m.y <= world.height for m in world.of_kind(EntityKind.INVADER))


def test_wall_that_walks_off_screen_ends_encounter(controller, world):
    controller.fire_timer = 18
    for member in world.of_kind(EntityKind.INVADER):
        member.y += 1000

    controller.update(world, Player(), 1)

    assert not controller.is_alive(world)
    assert world.count(EntityKind.PROJECTILE) == 0
