"""
player.py
---------
The player ship: movement, firing patterns and the post-hit grace timer.

Responsibilities
----------------
- Translate the input snapshot into movement (keyboard speed or pointer follow)
- Clamp the ship to the world rectangle
- Fire on a cooldown whose interval shrinks with the fire-rate upgrade
- Expose the inset collision box used by the combat resolver
"""

from scicon.core.debug.debug_logger import DebugLogger
from scicon.core.runtime.game_settings import Colors, Combat, Player as PlayerCfg
from scicon.entities.base_entity import Box, Entity, Projectile
from scicon.entities.entity_types import CollisionTags, EntityKind, PowerupType


# (vx, vy, x offset) per bullet
SINGLE_PATTERN = ((0, -PlayerCfg.BULLET_SPEED, 0),)
TRIPLE_PATTERN = (
    (0, -PlayerCfg.BULLET_SPEED, 0),
    (-4, -9, -15),
    (4, -9, 15),
)
DOUBLE_PATTERN = (
    (0, -PlayerCfg.BULLET_SPEED, -20),
    (0, -PlayerCfg.BULLET_SPEED, 20),
)


def fire_interval(upgrades) -> int:
    """Ticks between shots for a fire-rate upgrade level."""
    return max(
        PlayerCfg.MIN_FIRE_INTERVAL,
        PlayerCfg.BASE_FIRE_INTERVAL - PlayerCfg.FIRE_INTERVAL_PER_UPGRADE * upgrades.fire_rate,
    )


def move_speed(upgrades) -> float:
    return PlayerCfg.BASE_SPEED + PlayerCfg.SPEED_PER_UPGRADE * upgrades.speed


def shot_pattern(effects):
    """Bullet layout for the active shot effects. Both effects stack."""
    pattern = ()
    if effects.has(PowerupType.TRIPLE_SHOT):
        pattern += TRIPLE_PATTERN
    if effects.has(PowerupType.DOUBLE_SHOT):
        pattern += DOUBLE_PATTERN
    return pattern or SINGLE_PATTERN


class Player(Entity):
    """Player ship. Never removed from the world; hidden once lives run out."""

    __slots__ = ('lives', 'grace_timer', 'fire_cooldown')

    def __init__(self, x=0, y=0):
        super().__init__(EntityKind.PLAYER, x, y, PlayerCfg.WIDTH, PlayerCfg.HEIGHT, Colors.ACCENT)
        self.lives = PlayerCfg.LIVES
        self.grace_timer = 0
        self.fire_cooldown = 0

    def reset(self, width, height):
        """Place the ship bottom-centre for a fresh run."""
        self.x = width / 2 - self.width / 2
        self.y = height - PlayerCfg.START_OFFSET_Y
        self.vx = self.vy = 0.0
        self.grace_timer = 0
        self.fire_cooldown = 0
        DebugLogger.state(f"Player placed at ({self.x:.0f}, {self.y:.0f})", category="game_state")

    # ===========================================================
    # Movement
    # ===========================================================

    def steer(self, input_state, upgrades, width, height):
        """
        Apply one tick of movement.

        A pointer, when present, overrides the keyboard: the ship centre
        moves a fixed fraction of the way toward a point just above it.
        """
        pointer = input_state.clamped_pointer(width, height)
        if pointer is not None:
            cx, cy = self.center
            tx, ty = pointer[0], pointer[1] - PlayerCfg.POINTER_OFFSET_Y
            self.x += (tx - cx) * PlayerCfg.POINTER_FOLLOW_RATE
            self.y += (ty - cy) * PlayerCfg.POINTER_FOLLOW_RATE
        else:
            dx, dy = input_state.move_axis()
            speed = move_speed(upgrades)
            self.x += dx * speed
            self.y += dy * speed
        self.clamp(width, height)

    def clamp(self, width, height):
        self.x = max(0.0, min(width - self.width, self.x))
        self.y = max(0.0, min(height - self.height, self.y))

    # ===========================================================
    # Firing
    # ===========================================================

    def update_fire(self, input_state, upgrades, effects):
        """
        Advance the fire cooldown and return any projectiles fired this tick.

        The first shot after the trigger is pressed is immediate.
        """
        if self.fire_cooldown > 0:
            self.fire_cooldown -= 1
        if not input_state.trigger_held() or self.fire_cooldown > 0:
            return []

        self.fire_cooldown = fire_interval(upgrades)
        origin_x = self.x + self.width / 2 - 5
        return [
            Projectile(
                origin_x + offset, self.y, vx, vy,
                size=PlayerCfg.BULLET_SIZE,
                color=Colors.ACCENT,
                tag=CollisionTags.PLAYER_BULLET,
            )
            for vx, vy, offset in shot_pattern(effects)
        ]

    # ===========================================================
    # Damage
    # ===========================================================

    @property
    def hitbox(self) -> Box:
        """Collision box inset by a fraction of the size on every side."""
        pad_x = self.width * Combat.PLAYER_HITBOX_PADDING
        pad_y = self.height * Combat.PLAYER_HITBOX_PADDING
        return (self.x + pad_x, self.y + pad_y,
                self.width - 2 * pad_x, self.height - 2 * pad_y)

    def is_invulnerable(self, effects) -> bool:
        return self.grace_timer > 0 or effects.has(PowerupType.SHIELD)

    def start_grace(self):
        self.grace_timer = PlayerCfg.GRACE_FRAMES

    def tick_grace(self):
        if self.grace_timer > 0:
            self.grace_timer -= 1
