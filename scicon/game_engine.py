"""
game_engine.py
--------------
Simulation driver. Advances the world exactly one tick per update() call
and renders it on draw().

Tick order
----------
1. Reconcile lives with the record, run the progression state machine
2. Ambience
3. Player movement
4. Fire cooldown / firing
5. Effect timers and grace timer
6. Spawner
7. Entity pass (physics, rank-and-file AI, boss controllers, beams)
8. Collision resolution against the pre-compaction list
9. Compaction, publish lives, periodic snapshot
"""

import math

from scicon.core.debug.debug_logger import DebugLogger
from scicon.core.runtime.game_settings import Bounds, Display, Player as PlayerCfg, Progression
from scicon.core.runtime.input_state import InputState
from scicon.core.services.event_manager import EventManager, RunEndedEvent, WaveStartedEvent
from scicon.entities.bosses.final_boss import FinalBoss
from scicon.entities.bosses.formation_boss import FormationBoss
from scicon.entities.bosses.tracking_boss import TrackingBoss
from scicon.entities.entity_types import EntityKind, PowerupType, RANK_AND_FILE_KINDS
from scicon.entities.player import Player
from scicon.graphics.background_manager import BackgroundManager
from scicon.graphics.draw_manager import DrawManager
from scicon.systems.collision_manager import CollisionManager
from scicon.systems.effects_manager import EffectsManager
from scicon.systems.progression import ProgressionManager
from scicon.systems.spawn_manager import SpawnManager
from scicon.systems.world import World


class GameEngine:
    """Owns the world for one run and drives it tick by tick."""

    def __init__(self, stats, wave_duration=None, play_sound=None, image_resolver=None,
                 events=None, width=Display.WIDTH, height=Display.HEIGHT):
        """
        Args:
            stats: SessionStats shared with the host
            wave_duration: Frames per wave (defaults to Progression.WAVE_DURATION_FRAMES)
            play_sound: Optional fire-and-forget hook, called with a sound name
            image_resolver: Optional callable key -> Surface | None
            events: Optional EventManager; a private one is created otherwise
            width, height: Initial world size (init() may override)
        """
        DebugLogger.section("Initializing GameEngine")

        self.stats = stats
        self.events = events if events is not None else EventManager()
        self._sound_hook = play_sound

        self.world = World(width, height, self._play_sound)
        self.player = Player()
        self.background = BackgroundManager(width, height)
        self.effects = EffectsManager()
        self.spawner = SpawnManager(self.world, stats)
        self.bosses = {
            "tracking": TrackingBoss(),
            "formation": FormationBoss(),
            "final": FinalBoss(),
        }
        self.progression = ProgressionManager(
            self.world, stats, self.spawner, self.bosses, self.events,
            wave_duration or Progression.WAVE_DURATION_FRAMES,
        )
        self.collisions = CollisionManager(self.world, stats, self.effects, self.progression, self.events)
        self.renderer = DrawManager(
            image_resolver,
            {kind: self.effects.definition(kind) for kind in PowerupType},
        )

        self.input = InputState()
        self.active = False
        self._snapshot = stats.snapshot()

        DebugLogger.init_entry("GameEngine")

    # ===========================================================
    # Public API
    # ===========================================================

    def init(self, width, height):
        """Reset everything for a fresh run and start it."""
        DebugLogger.section("New Run")
        self.world.width = width
        self.world.height = height
        self.world.clear()

        self.player.reset(width, height)
        self.background.reset(width, height)

        self.stats.reset()
        self.player.lives = PlayerCfg.LIVES + self.stats.upgrades.max_hp
        self.stats.lives = self.player.lives

        self.progression.reset()
        self.spawner.reset()
        self.effects.clear()

        self.world.spawn_text(width / 2, height / 2, "WAVE 1")
        self.active = True
        self._snapshot = self.stats.snapshot()

        DebugLogger.state(f"Run started ({width}x{height}, {self.player.lives} lives)", category="game_state")
        self.events.dispatch(WaveStartedEvent(wave=1))

    def update(self):
        """Advance exactly one tick. No-op while the run is inactive."""
        if not self.active:
            return

        world = self.world
        world.frame_count += 1

        # 1. Record reconciliation and progression
        if self.stats.lives > self.player.lives:
            self.player.lives = self.stats.lives
        self.progression.update()

        # 2. Ambience
        self.background.update()

        # 3. Movement
        upgrades = self.stats.upgrades
        self.player.steer(self.input, upgrades, world.width, world.height)

        # 4. Firing
        shots = self.player.update_fire(self.input, upgrades, self.effects)
        if shots:
            self._play_sound("shoot")
            for shot in shots:
                world.add(shot)

        # 5. Timers
        self.effects.tick()
        self.player.tick_grace()

        # 6. Spawning
        self.spawner.update(self.progression.spawning_allowed)

        # 7. Entity pass
        self._update_entities()

        # 8. Collisions
        alive = self.collisions.resolve(self.player)

        # 9. Compaction and publication
        world.compact()
        self.stats.lives = self.player.lives

        if not alive:
            self._end_run()
        elif world.frame_count % Display.SNAPSHOT_INTERVAL == 0:
            self._snapshot = self.stats.snapshot()

    def draw(self, surface):
        """Render the current state. Safe while inactive."""
        self.renderer.draw(surface, self)

    def resize(self, width, height):
        self.world.width = width
        self.world.height = height
        self.background.resize(width, height)
        self.player.clamp(width, height)

    def handle_input(self, keys, pointer=None):
        """
        Replace the input snapshot.

        Args:
            keys: Iterable of pressed key names, or an InputState
            pointer: Optional (x, y) while a pointer is held down
        """
        if isinstance(keys, InputState):
            self.input = keys
        else:
            self.input = InputState(keys, pointer)

    @property
    def snapshot(self):
        return self._snapshot

    @property
    def is_game_over(self) -> bool:
        return not self.active and self.player.lives <= 0

    # ===========================================================
    # Internals
    # ===========================================================

    def _update_entities(self):
        world = self.world
        height = world.height

        for e in list(world.entities):
            if e.marked_for_deletion or getattr(e, "is_beam", False):
                continue

            e.move()
            kind = e.kind

            if kind in RANK_AND_FILE_KINDS:
                self.spawner.steer(e, self.player)
            elif kind == EntityKind.PROJECTILE:
                if e.y < -Bounds.PROJECTILE_MARGIN or e.y > height + Bounds.PROJECTILE_MARGIN:
                    e.mark_dead()
            elif kind in (EntityKind.PARTICLE, EntityKind.EFFECT):
                e.tick_life()
            elif kind == EntityKind.COIN:
                if e.y > height:
                    e.mark_dead()
            elif kind == EntityKind.POWERUP:
                e.y += math.sin(world.frame_count * 0.05) * 0.5
                if e.y > height:
                    e.mark_dead()

        self.effects.pull_coins(world, self.player)

        for controller in self.bosses.values():
            controller.update(world, self.player, self.stats.wave)

    def _end_run(self):
        self.active = False
        self._snapshot = self.stats.snapshot()
        DebugLogger.state(
            f"Run over: score {self.stats.score}, wave {self.stats.wave}",
            category="game_state"
        )
        self.events.dispatch(RunEndedEvent(score=self.stats.score, wave=self.stats.wave))

    def _play_sound(self, name):
        if self._sound_hook is None:
            return
        try:
            self._sound_hook(name)
        except Exception as e:
            DebugLogger.warn(f"Sound hook failed for '{name}': {e}", category="audio")
