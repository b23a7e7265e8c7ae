"""
base_entity.py
--------------
Mutable record for every simulated object (ship, hostile, projectile,
particle, pickup, boss).

Coordinate System
-----------------
- (x, y) is the top-left corner of the entity's box in world pixels
- width/height describe the visual box; the player's collision box is
  smaller (see Player.hitbox)
- velocity (vx, vy) is applied once per tick by the world pass

Relationships between entities are never stored on the entity. A beam
finds its boss, and a formation finds its members, by re-scanning the
world every tick.
"""

import itertools
import math
import random
from typing import Optional, Tuple

from scicon.entities.entity_types import CollisionTags, EffectStyle, EntityKind, PowerupType


_ids = itertools.count(1)

Box = Tuple[float, float, float, float]


def boxes_overlap(a: Box, b: Box) -> bool:
    """Inclusive axis-aligned overlap (touching edges count)."""
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return not (bx > ax + aw or bx + bw < ax or by > ay + ah or by + bh < ay)


class Entity:
    """Base record shared by every entity kind."""

    __slots__ = (
        'id', 'kind', 'x', 'y', 'width', 'height', 'vx', 'vy',
        'hp', 'max_hp', 'marked_for_deletion', 'color', 'label',
        'collision_tag', 'life', 'max_life',
    )

    def __init__(self, kind: EntityKind, x: float, y: float,
                 width: float = 30, height: float = 30,
                 color=(255, 255, 255), label: str = ""):
        self.id = next(_ids)
        self.kind = kind
        self.x = float(x)
        self.y = float(y)
        self.width = width
        self.height = height
        self.vx = 0.0
        self.vy = 0.0
        self.hp = 1
        self.max_hp = 1
        self.marked_for_deletion = False
        self.color = tuple(color)
        self.label = label
        self.collision_tag = CollisionTags.NEUTRAL

        # Timed entities (particles, effects, beams)
        self.life = 0
        self.max_life = 0

    # ===========================================================
    # Geometry
    # ===========================================================

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    @property
    def box(self) -> Box:
        return self.x, self.y, self.width, self.height

    def intersects(self, other: "Entity") -> bool:
        return boxes_overlap(self.box, other.box)

    def move(self):
        """Apply one tick of velocity."""
        self.x += self.vx
        self.y += self.vy

    # ===========================================================
    # Lifecycle
    # ===========================================================

    def mark_dead(self):
        """Flag for removal in the end-of-tick compaction."""
        self.marked_for_deletion = True

    def tick_life(self):
        """Count down a timed entity and flag it once expired."""
        self.life -= 1
        if self.life <= 0:
            self.marked_for_deletion = True

    def set_health(self, hp: float):
        self.hp = hp
        self.max_hp = hp

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} {self.kind.value}#{self.id} "
            f"pos=({self.x:.1f}, {self.y:.1f}) hp={self.hp}>"
        )


# ===========================================================
# Variants
# ===========================================================

class Projectile(Entity):
    """Bullet fired by the player or a hostile, or a boss beam."""

    __slots__ = ('is_beam',)

    def __init__(self, x, y, vx, vy, size=12, color=(108, 99, 255),
                 tag=CollisionTags.PLAYER_BULLET, label=""):
        super().__init__(EntityKind.PROJECTILE, x, y, size, size, color, label)
        self.vx = vx
        self.vy = vy
        self.collision_tag = tag
        self.is_beam = False

    @property
    def is_hostile(self) -> bool:
        return self.collision_tag == CollisionTags.ENEMY_BULLET


class BossEntity(Entity):
    """Mini-boss or final boss body with attack bookkeeping."""

    __slots__ = ('attack_timer', 'is_charging')

    def __init__(self, kind, x, y, width, height, hp, color, label=""):
        super().__init__(kind, x, y, width, height, color, label)
        self.set_health(hp)
        self.attack_timer = 0
        self.is_charging = False


class PowerupPickup(Entity):
    __slots__ = ('powerup',)

    def __init__(self, x, y, powerup: PowerupType, size=36, fall_speed=2.0, color=(255, 255, 255)):
        super().__init__(EntityKind.POWERUP, x, y, size, size, color, powerup.value)
        self.powerup = powerup
        self.vy = fall_speed


class Particle(Entity):
    """Explosion debris flying in a random direction."""

    __slots__ = ()

    def __init__(self, x, y, color, speed):
        super().__init__(EntityKind.PARTICLE, x, y, 4, 4, color)
        angle = random.random() * math.pi * 2
        self.vx = math.cos(angle) * speed
        self.vy = math.sin(angle) * speed
        self.life = 40 + random.random() * 20
        self.max_life = self.life


class VisualEffect(Entity):
    """Floating text or expanding ring. Never collides."""

    __slots__ = ('style',)

    TEXT_LIFE = 120
    RING_LIFE = 60

    def __init__(self, x, y, style: EffectStyle, text: str = "", color=(255, 255, 255)):
        super().__init__(EntityKind.EFFECT, x, y, 0, 0, color, text)
        self.style = style
        if style == EffectStyle.TEXT:
            self.vy = -0.5
            self.life = self.TEXT_LIFE
        else:
            self.life = self.RING_LIFE
        self.max_life = self.life

    @property
    def fade(self) -> float:
        """Remaining life fraction (1.0 fresh, 0.0 expired)."""
        return max(0.0, self.life / self.max_life) if self.max_life else 0.0


def make_coin(x: float, y: float, size: int, fall_speed: float) -> Entity:
    """Coin dropped at (x, y) centre."""
    coin = Entity(EntityKind.COIN, x - size / 2, y - size / 2, size, size, (255, 215, 0), "RSC")
    coin.vy = fall_speed
    return coin


def find_first(entities, kind: EntityKind) -> Optional[Entity]:
    """First live entity of a kind, or None."""
    for entity in entities:
        if entity.kind == kind and not entity.marked_for_deletion:
            return entity
    return None
