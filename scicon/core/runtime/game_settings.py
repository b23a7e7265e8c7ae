"""
game_settings.py
----------------
Centralized constants for all simulation systems.

All timings are expressed in logical ticks (frames at Physics.UPDATE_RATE),
all distances in world pixels.
"""


# ===========================================================
# Display & Host Cadence
# ===========================================================

class Display:
    """Window defaults for the bundled host and snapshot cadence."""
    WIDTH: int = 1280
    HEIGHT: int = 720
    CAPTION: str = "SciCon Shooter"
    FPS: int = 60
    SNAPSHOT_INTERVAL: int = 30     # Ticks between stats snapshots for the HUD
    BACKGROUND_BODIES: int = 6


# ===========================================================
# Physics & Timing
# ===========================================================

class Physics:
    """Fixed-step timing."""
    UPDATE_RATE: int = 60
    FIXED_DT: float = 1 / UPDATE_RATE
    MAX_FRAME_TIME: float = 0.1     # Clamp after stalls (window drag, breakpoints)


# ===========================================================
# Player
# ===========================================================

class Player:
    """Player ship configuration."""
    WIDTH: int = 100
    HEIGHT: int = 100
    START_OFFSET_Y: int = 150
    BASE_SPEED: float = 3.5
    SPEED_PER_UPGRADE: float = 1.5
    POINTER_FOLLOW_RATE: float = 0.15
    POINTER_OFFSET_Y: int = 80      # Ship floats above the finger

    BASE_FIRE_INTERVAL: int = 10
    FIRE_INTERVAL_PER_UPGRADE: int = 2
    MIN_FIRE_INTERVAL: int = 4
    BULLET_SIZE: int = 12
    BULLET_SPEED: float = 10

    LIVES: int = 3
    MAX_LIVES: int = 5
    GRACE_FRAMES: int = 60

    MOVE_LEFT = frozenset({"ArrowLeft", "a", "A", "left"})
    MOVE_RIGHT = frozenset({"ArrowRight", "d", "D", "right"})
    MOVE_UP = frozenset({"ArrowUp", "w", "W", "up"})
    MOVE_DOWN = frozenset({"ArrowDown", "s", "S", "down"})
    FIRE = frozenset({" ", "space", "Enter", "return"})


# ===========================================================
# Progression
# ===========================================================

class Progression:
    """Wave progress bar and boss checkpoint timing."""
    WAVE_DURATION_FRAMES: int = 3600
    WARNING_FRAMES: int = 180
    DEFEAT_PROGRESS_NUDGE: int = 120
    WAVE_CLEAR_DELAY_FRAMES: int = 120

    MINI_BOSS_CHECKPOINT: float = 0.33
    FORMATION_CHECKPOINT: float = 0.66
    FINAL_BOSS_CHECKPOINT: float = 1.0


# ===========================================================
# Spawning
# ===========================================================

class Spawning:
    """Rank-and-file spawn cadence."""
    BASE_SPAWN_INTERVAL: int = 80
    SPAWN_INTERVAL_PER_WAVE: int = 10
    MIN_SPAWN_INTERVAL: int = 25
    POWERUP_INTERVAL: int = 1800
    SPAWN_Y: int = -50
    SPAWN_MARGIN_X: int = 40

    HP_SCALE_PER_WAVE: float = 0.3
    SPEED_SCALE_PER_WAVE: float = 0.1

    COIN_SIZE: int = 24
    COIN_FALL_SPEED: float = 2.0
    POWERUP_SIZE: int = 36
    POWERUP_FALL_SPEED: float = 2.0


# ===========================================================
# Combat
# ===========================================================

class Combat:
    """Damage, scoring and loot rules."""
    PLAYER_HITBOX_PADDING: float = 0.2   # Fraction of size removed per side
    CONTACT_DAMAGE: int = 5
    PROJECTILE_DAMAGE: int = 1

    ELITE_DROP_CHANCE: float = 0.15
    LIFE_EVERY_N_COINS: int = 50

    MINI_BOSS_BONUS: int = 500
    FINAL_BOSS_BONUS: int = 5000
    FINAL_BOSS_COIN_SHOWER: int = 15

    EXPLOSION_PARTICLES: int = 8
    EXPLOSION_SPEED: float = 4


# ===========================================================
# Powerups
# ===========================================================

class Powerups:
    """Effect stack defaults (overridden by powerups.json)."""
    DURATION: int = 720
    MAGNET_RADIUS: float = 400
    MAGNET_PULL_RATE: float = 0.08


# ===========================================================
# Bounds & Margins
# ===========================================================

class Bounds:
    """Margins for entity lifecycle management."""
    PROJECTILE_MARGIN: int = 50
    EDGE_MARGIN: int = 10           # Formation reverses this close to a wall


# ===========================================================
# Upgrades
# ===========================================================

class Upgrades:
    """Shop pricing used by hosts (linear cost per level)."""
    BASE_COSTS = {
        "fire_rate": 10,
        "speed": 8,
        "max_hp": 15,
        "repair": 10,
    }
    COST_PER_LEVEL: int = 5
    MAX_LEVEL: int = 5


# ===========================================================
# Rendering
# ===========================================================

class Colors:
    """Palette shared by renderer and entity tags."""
    BG = (11, 16, 32)
    ACCENT = (108, 99, 255)
    DANGER = (255, 68, 68)
    WARNING = (255, 187, 51)
    SUCCESS = (0, 200, 81)
    GOLD = (255, 215, 0)
    WHITE = (255, 255, 255)
    ENEMY_BULLET = (255, 0, 0)
