"""
progression.py
--------------
Wave progress bar and boss encounter state machine.

States
------
ACCUMULATING  progress grows one frame per tick; ordinary spawning allowed
WARNING       a checkpoint was reached; boss arrives when the countdown ends
BOSS_ACTIVE   progress frozen; boss bar mirrors the live encounter
WAVE_CLEARED  final boss down; next wave starts after a short delay

Checkpoints (fraction of the wave duration) each fire at most once per wave:
tracking mini-boss, formation wall, final boss.
"""

import math
from enum import Enum, auto

from scicon.core.debug.debug_logger import DebugLogger
from scicon.core.runtime.game_settings import Progression
from scicon.core.services.event_manager import (
    BossDefeatedEvent, BossSpawnedEvent, BossWarningEvent, WaveStartedEvent,
)


class ProgressionState(Enum):
    ACCUMULATING = auto()
    WARNING = auto()
    BOSS_ACTIVE = auto()
    WAVE_CLEARED = auto()


CHECKPOINTS = (
    (Progression.MINI_BOSS_CHECKPOINT, "tracking"),
    (Progression.FORMATION_CHECKPOINT, "formation"),
    (Progression.FINAL_BOSS_CHECKPOINT, "final"),
)


def checkpoint_frame(fraction: float, duration: int) -> int:
    """First progress frame at which a checkpoint fires (ceil of fraction * duration)."""
    return math.ceil(round(fraction * duration, 6))


class ProgressionManager:
    """Drives progress, warnings, boss spawns and wave transitions."""

    def __init__(self, world, stats, spawner, bosses, events=None,
                 wave_duration=Progression.WAVE_DURATION_FRAMES):
        """
        Args:
            world: World the encounters live in
            stats: SessionStats receiving progress and boss bar values
            spawner: SpawnManager (its `enabled` flag gates boss creation)
            bosses: Mapping of category -> BossController
            events: Optional EventManager for host notifications
            wave_duration: Frames for progress to go from 0 to 1
        """
        self.world = world
        self.stats = stats
        self.spawner = spawner
        self.bosses = bosses
        self.events = events
        self.wave_duration = max(1, int(wave_duration))

        self.state = ProgressionState.ACCUMULATING
        self.progress_frames = 0
        self.fired = set()
        self.pending = None
        self.active = None
        self.timer = 0

        DebugLogger.init_entry("ProgressionManager")

    # ===========================================================
    # Queries
    # ===========================================================

    @property
    def progress(self) -> float:
        return min(1.0, self.progress_frames / self.wave_duration)

    @property
    def spawning_allowed(self) -> bool:
        return self.state == ProgressionState.ACCUMULATING

    @property
    def active_boss(self):
        return self.bosses.get(self.active) if self.active else None

    # ===========================================================
    # Lifecycle
    # ===========================================================

    def reset(self):
        """Fresh wave: progress zeroed, checkpoints re-armed."""
        self.state = ProgressionState.ACCUMULATING
        self.progress_frames = 0
        self.fired.clear()
        self.pending = None
        self.active = None
        self.timer = 0
        self.stats.boss_progress = 0.0
        self.stats.clear_boss_bar()

    def update(self):
        """Advance the state machine by one tick."""
        handler = {
            ProgressionState.ACCUMULATING: self._update_accumulating,
            ProgressionState.WARNING: self._update_warning,
            ProgressionState.BOSS_ACTIVE: self._update_boss_active,
            ProgressionState.WAVE_CLEARED: self._update_wave_cleared,
        }[self.state]
        handler()

    # ===========================================================
    # State Handlers
    # ===========================================================

    def _update_accumulating(self):
        self.progress_frames = min(self.wave_duration, self.progress_frames + 1)
        self.stats.boss_progress = self.progress
        self.stats.is_boss_active = False

        for fraction, category in CHECKPOINTS:
            if category in self.fired:
                continue
            if self.progress_frames >= checkpoint_frame(fraction, self.wave_duration):
                self.fired.add(category)
                self._enter_warning(category)
                break

    def _enter_warning(self, category):
        self.state = ProgressionState.WARNING
        self.pending = category
        self.timer = Progression.WARNING_FRAMES
        self.world.play_sound("warning")
        name = self.bosses[category].name
        DebugLogger.state(f"WARNING: {name} incoming (progress {self.progress:.2f})", category="stage")
        self._dispatch(BossWarningEvent(boss=name, frames=self.timer))

    def _update_warning(self):
        if self.timer > 0:
            self.timer -= 1
        if self.timer > 0:
            return
        if not self.spawner.enabled:
            return  # Stays pending until hostile spawning is re-enabled

        controller = self.bosses[self.pending]
        controller.spawn(self.world, self.stats.wave)
        self.active = self.pending
        self.pending = None
        self.state = ProgressionState.BOSS_ACTIVE
        DebugLogger.state(f"Boss active: {controller.name}", category="stage")
        self._dispatch(BossSpawnedEvent(boss=controller.name, wave=self.stats.wave))
        self._refresh_boss_bar()

    def _update_boss_active(self):
        controller = self.active_boss
        if controller is None or not controller.is_alive(self.world):
            # Bodies gone without a reported kill (e.g. shielded contact)
            self.on_boss_defeated(self.active)
            return
        self._refresh_boss_bar()

    def _update_wave_cleared(self):
        self.timer -= 1
        if self.timer <= 0:
            self.start_next_wave()

    def _refresh_boss_bar(self):
        controller = self.active_boss
        if controller is None:
            return
        hp, max_hp = controller.health(self.world)
        self.stats.is_boss_active = True
        self.stats.boss_hp = hp
        self.stats.boss_max_hp = max_hp

    # ===========================================================
    # Transitions
    # ===========================================================

    def on_boss_defeated(self, category):
        """
        Called when an encounter's last body is destroyed.

        Non-final encounters resume accumulation with a small progress nudge
        past the checkpoint; the final boss clears the wave.
        """
        if self.state != ProgressionState.BOSS_ACTIVE or category != self.active:
            return

        name = self.bosses[category].name
        self.active = None
        self.stats.clear_boss_bar()
        self._dispatch(BossDefeatedEvent(boss=name, wave=self.stats.wave))

        if category == "final":
            self.state = ProgressionState.WAVE_CLEARED
            self.timer = Progression.WAVE_CLEAR_DELAY_FRAMES
            DebugLogger.state(f"{name} defeated: wave {self.stats.wave} cleared", category="stage")
        else:
            self.state = ProgressionState.ACCUMULATING
            self.progress_frames = min(self.wave_duration,
                                       self.progress_frames + Progression.DEFEAT_PROGRESS_NUDGE)
            self.stats.boss_progress = self.progress
            DebugLogger.state(f"{name} defeated: progress resumes at {self.progress:.2f}", category="stage")

    def start_next_wave(self):
        self.stats.wave += 1
        self.reset()
        self.world.sweep_for_next_wave()
        self.world.spawn_text(self.world.width / 2, self.world.height / 2, f"WAVE {self.stats.wave}")
        self.world.play_sound("powerup")
        DebugLogger.section(f"WAVE {self.stats.wave}")
        self._dispatch(WaveStartedEvent(wave=self.stats.wave))

    def _dispatch(self, event):
        if self.events is not None:
            self.events.dispatch(event)
