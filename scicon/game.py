"""
game.py
-------
Minimal pygame host for manual play.

Runs the engine on a fixed timestep, feeds it keyboard and mouse input and
draws a small HUD from the stats snapshot. Press R to restart after a game
over, Esc to quit.
"""

import pygame

from scicon.audio.sound_manager import SoundManager
from scicon.core.debug.debug_logger import DebugLogger
from scicon.core.runtime.game_settings import Colors, Display, Physics
from scicon.core.runtime.input_state import InputState
from scicon.core.runtime.session_stats import SessionStats
from scicon.core.services.event_manager import BossWarningEvent, RunEndedEvent
from scicon.game_engine import GameEngine
from scicon.graphics.asset_manager import AssetManager


class Game:
    """Window, clock and fixed-step loop around one GameEngine."""

    def __init__(self):
        DebugLogger.section("Initializing Host")
        pygame.init()
        pygame.font.init()

        self.screen = pygame.display.set_mode((Display.WIDTH, Display.HEIGHT), pygame.RESIZABLE)
        pygame.display.set_caption(Display.CAPTION)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 18, bold=True)
        self.running = True

        self.sounds = SoundManager()
        self.assets = AssetManager()
        self.stats = SessionStats()
        self.engine = GameEngine(
            self.stats,
            play_sound=self.sounds.play,
            image_resolver=self.assets,
            width=Display.WIDTH,
            height=Display.HEIGHT,
        )
        self.engine.events.subscribe(BossWarningEvent, self._on_boss_warning)
        self.engine.events.subscribe(RunEndedEvent, self._on_run_ended)

        self.held_keys = set()
        self.pointer = None
        self.banner = ""
        self.banner_timer = 0

        self.engine.init(*self.screen.get_size())

    # ===========================================================
    # Main Loop
    # ===========================================================

    def run(self):
        fixed_dt = Physics.FIXED_DT
        accumulator = 0.0

        while self.running:
            frame_time = min(self.clock.tick(Display.FPS) / 1000.0, Physics.MAX_FRAME_TIME)
            accumulator += frame_time

            self._handle_events()
            self.engine.handle_input(self._input_snapshot())

            while accumulator >= fixed_dt:
                self.engine.update()
                if self.banner_timer > 0:
                    self.banner_timer -= 1
                accumulator -= fixed_dt

            self._draw()

        pygame.quit()

    def _handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_r and self.engine.is_game_over:
                    self.engine.init(*self.screen.get_size())
                self.held_keys.add(event.key)
            elif event.type == pygame.KEYUP:
                self.held_keys.discard(event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                self.pointer = event.pos
            elif event.type == pygame.MOUSEMOTION and self.pointer is not None:
                self.pointer = event.pos
            elif event.type == pygame.MOUSEBUTTONUP:
                self.pointer = None
            elif event.type == pygame.VIDEORESIZE:
                self.engine.resize(event.w, event.h)

    def _input_snapshot(self):
        """Held key codes mapped to pygame key names, plus the drag pointer."""
        names = {pygame.key.name(code) for code in self.held_keys}
        return InputState(names, self.pointer)

    # ===========================================================
    # Rendering
    # ===========================================================

    def _draw(self):
        self.engine.draw(self.screen)
        self._draw_hud()
        pygame.display.flip()

    def _draw_hud(self):
        snap = self.engine.snapshot
        lines = [
            f"SCORE {snap.score}   HI {snap.high_score}",
            f"WAVE {snap.wave}   LIVES {snap.lives}   RSC {snap.coins}",
        ]
        for i, line in enumerate(lines):
            self.screen.blit(self.font.render(line, True, Colors.WHITE), (12, 10 + i * 22))

        # Progress / boss bar
        width = self.screen.get_width() - 24
        bar = pygame.Rect(12, 58, width, 8)
        pygame.draw.rect(self.screen, (40, 40, 60), bar)
        if snap.is_boss_active and snap.boss_max_hp:
            fill = snap.boss_hp / snap.boss_max_hp
            color = Colors.DANGER
        else:
            fill = snap.boss_progress
            color = Colors.ACCENT
        pygame.draw.rect(self.screen, color, (bar.x, bar.y, int(bar.width * max(0.0, fill)), bar.height))

        if self.banner_timer > 0:
            self._center_text(self.banner, Colors.WARNING, -80)
        if self.engine.is_game_over:
            self._center_text("GAME OVER - press R", Colors.DANGER, 0)

    def _center_text(self, text, color, dy):
        rendered = self.font.render(text, True, color)
        rect = rendered.get_rect(center=(self.screen.get_width() // 2, self.screen.get_height() // 2 + dy))
        self.screen.blit(rendered, rect)

    # ===========================================================
    # Event Callbacks
    # ===========================================================

    def _on_boss_warning(self, event):
        self.banner = f"WARNING: {event.boss} APPROACHING"
        self.banner_timer = event.frames

    def _on_run_ended(self, event):
        DebugLogger.system(f"Final score {event.score} (wave {event.wave})")


def main():
    Game().run()
    return 0


if __name__ == "__main__":
    main()
