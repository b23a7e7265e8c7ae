"""Entity kinds, collision tags and kind-level lookup tables."""

from enum import Enum


class EntityKind(str, Enum):
    """Discriminant carried by every simulated object."""
    PLAYER = "player"

    # Rank-and-file hostiles
    DRONE = "drone"          # Paywall drone
    JOURNAL = "journal"      # Predatory journal
    BRICK = "brick"          # Bureaucracy brick
    SWARM = "swarm"          # Misinformation flies

    # Boss class
    INVADER = "invader"      # Formation (wall) segment
    MINI_BOSS = "mini_boss"
    BOSS = "boss"

    PROJECTILE = "projectile"
    PARTICLE = "particle"
    EFFECT = "effect"
    POWERUP = "powerup"
    COIN = "coin"


class PowerupType(str, Enum):
    """Timed effects granted by pickups."""
    DOUBLE_SHOT = "double_shot"   # Parallel fire
    TRIPLE_SHOT = "triple_shot"   # Angled spread
    MAGNET = "magnet"             # Coin magnet
    SHIELD = "shield"             # Invulnerability


class EffectStyle(str, Enum):
    """Presentation of a VisualEffect entity."""
    TEXT = "text"
    RING = "ring"


class CollisionTags:
    """Owner of a projectile. Prevents typos in tag comparisons."""
    NEUTRAL = "neutral"
    PLAYER_BULLET = "player_bullet"
    ENEMY_BULLET = "enemy_bullet"


# ===========================================================
# Kind Groups
# ===========================================================

HOSTILE_KINDS = frozenset({
    EntityKind.DRONE, EntityKind.JOURNAL, EntityKind.BRICK, EntityKind.SWARM,
    EntityKind.INVADER, EntityKind.MINI_BOSS, EntityKind.BOSS,
})

RANK_AND_FILE_KINDS = frozenset({
    EntityKind.DRONE, EntityKind.JOURNAL, EntityKind.BRICK, EntityKind.SWARM,
})

ELITE_KINDS = frozenset({
    EntityKind.JOURNAL, EntityKind.BRICK, EntityKind.MINI_BOSS, EntityKind.INVADER,
})

BOSS_KINDS = frozenset({EntityKind.INVADER, EntityKind.MINI_BOSS, EntityKind.BOSS})

# Kinds that survive the sweep between waves
WAVE_PERSISTENT_KINDS = frozenset({
    EntityKind.PARTICLE, EntityKind.EFFECT, EntityKind.POWERUP, EntityKind.COIN,
})

# Score per kill before the wave multiplier
BASE_POINTS = {
    EntityKind.DRONE: 10,
    EntityKind.SWARM: 12,
    EntityKind.BRICK: 15,
    EntityKind.INVADER: 15,
    EntityKind.JOURNAL: 20,
}
DEFAULT_POINTS = 10


def is_hostile(kind) -> bool:
    return kind in HOSTILE_KINDS


def is_elite(kind) -> bool:
    return kind in ELITE_KINDS


def base_points(kind) -> int:
    return BASE_POINTS.get(kind, DEFAULT_POINTS)
