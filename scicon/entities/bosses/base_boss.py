"""
base_boss.py
------------
Shared controller contract for boss encounters.

Lifecycle: spawn(world, wave) -> update(world, player, wave) each tick
-> is_alive(world) turns False once every body is gone.

Controllers keep no references to their bodies; each tick they re-query
the world for entities of their kind.
"""

from scicon.core.services.config_manager import load_config
from scicon.entities.base_entity import Projectile
from scicon.entities.entity_types import CollisionTags


_BOSS_TABLE = None


def boss_table(defaults=None):
    """bosses.json, loaded once per process."""
    global _BOSS_TABLE
    if _BOSS_TABLE is None:
        _BOSS_TABLE = load_config("bosses.json", defaults or {})
    return _BOSS_TABLE


def scaled(cfg: dict, key: str, wave: int) -> float:
    """cfg[key] + cfg[key_per_wave] * wave."""
    return cfg[key] + cfg.get(f"{key}_per_wave", 0) * wave


class BossController:
    """
    Base class for boss controllers.

    Subclasses set `category`, `kind` and `defaults`, and override
    _create() and update().
    """

    category = None
    kind = None
    defaults = {}

    def __init__(self, config=None):
        if config is None:
            config = {**self.defaults, **boss_table().get(self.category, {})}
        self.cfg = config
        self.name = self.cfg.get("name", str(self.category).upper())

    # ===========================================================
    # Queries
    # ===========================================================

    def bodies(self, world):
        return world.of_kind(self.kind)

    def is_alive(self, world) -> bool:
        return world.count(self.kind) > 0

    def health(self, world):
        """(hp, max_hp) for the boss bar."""
        body = next(iter(self.bodies(world)), None)
        if body is None:
            return 0, 0
        return body.hp, body.max_hp

    # ===========================================================
    # Lifecycle
    # ===========================================================

    def spawn(self, world, wave: int):
        """Create the encounter's bodies and announce it."""
        self._create(world, wave)

    def update(self, world, player, wave: int):
        pass

    def _create(self, world, wave: int):
        raise NotImplementedError

    # ===========================================================
    # Helpers
    # ===========================================================

    def _shoot(self, world, x, y, vx, vy, size):
        return world.add(Projectile(
            x, y, vx, vy, size=size,
            color=(255, 0, 0),
            tag=CollisionTags.ENEMY_BULLET,
        ))
