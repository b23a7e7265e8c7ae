"""
session_stats.py
----------------
Progression record for the current run, shared between the simulation
and the host.

The engine owns the record while a tick is running. Between ticks the host
may read it freely and write a few fields (upgrade levels, lives, coins
after a purchase). The engine re-reads those fields at the start of every
tick instead of caching them.
"""

from dataclasses import dataclass, replace

from scicon.core.runtime.game_settings import Upgrades as UpgradeSettings


# ===========================================================
# Upgrades
# ===========================================================

@dataclass
class Upgrades:
    """Purchased upgrade levels (0..UpgradeSettings.MAX_LEVEL)."""
    fire_rate: int = 0
    speed: int = 0
    max_hp: int = 0


def upgrade_cost(upgrades: Upgrades, kind: str) -> int:
    """
    Price of the next level of an upgrade.

    Args:
        upgrades: Current upgrade levels
        kind: "fire_rate", "speed", "max_hp" or "repair"

    Returns:
        int: Coin cost (repair has a flat price)
    """
    base = UpgradeSettings.BASE_COSTS[kind]
    if kind == "repair":
        return base
    return base + getattr(upgrades, kind) * UpgradeSettings.COST_PER_LEVEL


# ===========================================================
# Snapshot
# ===========================================================

@dataclass(frozen=True)
class StatsSnapshot:
    """Read-only copy of the record handed to the HUD."""
    score: int
    high_score: int
    wave: int
    coins: int
    total_coins: int
    enemies_defeated: int
    lives: int
    upgrades: Upgrades
    boss_progress: float
    is_boss_active: bool
    boss_hp: float
    boss_max_hp: float


# ===========================================================
# Session Stats
# ===========================================================

class SessionStats:
    """Mutable per-run counters. Reset when a new run starts."""

    def __init__(self, upgrades: Upgrades = None):
        self.score = 0
        self.high_score = 0
        self.wave = 1
        self.coins = 0
        self.total_coins = 0
        self.enemies_defeated = 0
        self.lives = 0
        self.upgrades = upgrades if upgrades is not None else Upgrades()

        # Boss bar
        self.boss_progress = 0.0
        self.is_boss_active = False
        self.boss_hp = 0
        self.boss_max_hp = 100

    # ===========================================================
    # Core Stats
    # ===========================================================

    def add_score(self, amount: int):
        """Add to current score and update high score."""
        self.score += amount
        if self.score > self.high_score:
            self.high_score = self.score

    def add_coin(self, score_value: int = 1):
        """Credit one collected coin."""
        self.coins += 1
        self.total_coins += 1
        self.add_score(score_value)

    def add_kill(self):
        self.enemies_defeated += 1

    def clear_boss_bar(self):
        self.is_boss_active = False
        self.boss_hp = 0
        self.boss_max_hp = 100

    # ===========================================================
    # Lifecycle
    # ===========================================================

    def reset(self):
        """Reset run counters. Preserves high score and upgrades."""
        self.score = 0
        self.wave = 1
        self.coins = 0
        self.total_coins = 0
        self.enemies_defeated = 0
        self.boss_progress = 0.0
        self.clear_boss_bar()

    def snapshot(self) -> StatsSnapshot:
        """Freeze the current values for display."""
        return StatsSnapshot(
            score=self.score,
            high_score=self.high_score,
            wave=self.wave,
            coins=self.coins,
            total_coins=self.total_coins,
            enemies_defeated=self.enemies_defeated,
            lives=self.lives,
            upgrades=replace(self.upgrades),
            boss_progress=self.boss_progress,
            is_boss_active=self.is_boss_active,
            boss_hp=self.boss_hp,
            boss_max_hp=self.boss_max_hp,
        )
