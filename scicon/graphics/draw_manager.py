"""
draw_manager.py
---------------
Immediate-mode renderer for the simulation state.

Responsibilities:
- Draw background, every live entity and the player (while alive)
- Resolve images through the image resolver hook; fall back to procedural
  drawing when a key is missing or unloaded
- Player powerup visuals, boss health bars, beam and boss drawings
- Floating text and ring effects with fade

Rendering is read-only: nothing here mutates simulation state.
"""

import math
import random

import pygame

from scicon.core.debug.debug_logger import DebugLogger
from scicon.core.runtime.game_settings import Colors
from scicon.entities.entity_types import EffectStyle, EntityKind, PowerupType


HEALTH_BAR_HEIGHT = 12
HEALTH_BAR_OFFSET = 20


class DrawManager:
    """Draws one frame of the world onto a pygame surface."""

    def __init__(self, image_resolver=None, powerup_styles=None):
        """
        Args:
            image_resolver: Callable key -> Surface | None (optional)
            powerup_styles: PowerupType -> definition dict ("image", "color")
        """
        self.image_resolver = image_resolver
        self.powerup_styles = powerup_styles or {}
        self.fonts = {}
        self._resolver_failed = False

        DebugLogger.init_entry("DrawManager")

    # ===========================================================
    # Resources
    # ===========================================================

    def get_image(self, key, size=None):
        """Image for a key, or None when the resolver has nothing usable."""
        if self.image_resolver is None or key is None:
            return None
        try:
            if size is not None and hasattr(self.image_resolver, "resolve_scaled"):
                return self.image_resolver.resolve_scaled(key, size)
            image = self.image_resolver(key)
        except Exception as e:
            if not self._resolver_failed:
                DebugLogger.warn(f"Image resolver failed for '{key}': {e}", category="render")
                self._resolver_failed = True
            return None
        if image is not None and size is not None:
            image = pygame.transform.smoothscale(image, (int(size[0]), int(size[1])))
        return image

    def font(self, size, bold=False):
        key = (size, bold)
        if key not in self.fonts:
            self.fonts[key] = pygame.font.SysFont("monospace", size, bold=bold)
        return self.fonts[key]

    # ===========================================================
    # Frame
    # ===========================================================

    def draw(self, surface, engine):
        """
        Render the engine's current state.

        Args:
            surface: Target pygame.Surface
            engine: GameEngine (read-only access)
        """
        engine.background.draw(surface)
        frame = engine.world.frame_count

        for entity in engine.world.entities:
            if entity.marked_for_deletion:
                continue
            self.draw_entity(surface, entity, frame)

        if engine.player.lives > 0:
            self.draw_player(surface, engine.player, engine.effects, frame)

    def draw_entity(self, surface, e, frame):
        if getattr(e, "is_beam", False):
            self.draw_beam(surface, e)
            return

        kind = e.kind
        if kind == EntityKind.POWERUP:
            self.draw_powerup(surface, e)
        elif kind == EntityKind.MINI_BOSS:
            self.draw_health_bar(surface, e)
            self.draw_tracking_boss(surface, e, frame)
        elif kind == EntityKind.BOSS:
            self.draw_health_bar(surface, e)
            self.draw_final_boss(surface, e, frame)
        elif kind == EntityKind.INVADER:
            rect = pygame.Rect(int(e.x), int(e.y), int(e.width), int(e.height))
            pygame.draw.rect(surface, e.color, rect)
            pygame.draw.rect(surface, (120, 60, 0), rect, 2)
        elif kind == EntityKind.COIN:
            self.draw_coin(surface, e)
        elif kind == EntityKind.PARTICLE:
            cx, cy = e.center
            alpha = int(255 * max(0.0, e.life / e.max_life)) if e.max_life else 255
            self._blit_alpha_rect(surface, e.color, (cx - 2, cy - 2, 4, 4), alpha)
        elif kind == EntityKind.EFFECT:
            self.draw_effect(surface, e, frame)
        elif kind == EntityKind.PROJECTILE:
            cx, cy = e.center
            pygame.draw.circle(surface, e.color, (int(cx), int(cy)), max(1, int(e.width / 2)))
        else:
            self.draw_hostile(surface, e)

    # ===========================================================
    # Player
    # ===========================================================

    def draw_player(self, surface, player, effects, frame):
        cx, cy = (int(v) for v in player.center)
        half = player.width / 2

        if effects.has(PowerupType.MAGNET):
            pulse = math.sin(frame * 0.1) * 5
            self._alpha_circle(surface, Colors.GOLD, (cx, cy), half + 10 + pulse, 128, 2)
            self._alpha_circle(surface, Colors.GOLD, (cx, cy), half + pulse, 51, 2)

        if effects.has(PowerupType.TRIPLE_SHOT):
            offset = 55
            pygame.draw.rect(surface, Colors.ACCENT, (cx - offset, cy, 10, 20))
            pygame.draw.rect(surface, Colors.ACCENT, (cx + offset - 10, cy, 10, 20))
            for side in (-1, 1):
                pygame.draw.line(surface, Colors.ACCENT, (cx + side * (offset - 5), cy + 10), (cx, cy), 1)

        if effects.has(PowerupType.DOUBLE_SHOT):
            offset = 40
            pygame.draw.rect(surface, Colors.WARNING, (cx - offset, cy, 5, 15))
            pygame.draw.rect(surface, Colors.WARNING, (cx + offset - 5, cy, 5, 15))

        if effects.has(PowerupType.SHIELD) or player.grace_timer > 0:
            self._dashed_ring(surface, Colors.SUCCESS, (cx, cy), half + 15, frame * 0.05)

        image = self.get_image("player", (player.width, player.height))
        if image is not None:
            surface.blit(image, (int(player.x), int(player.y)))
        else:
            pygame.draw.rect(surface, Colors.ACCENT, (cx - 20, cy - 20, 40, 40))

    # ===========================================================
    # Pickups
    # ===========================================================

    def draw_powerup(self, surface, e):
        cx, cy = (int(v) for v in e.center)
        style = self.powerup_styles.get(e.powerup, {})
        image = self.get_image(style.get("image"), (36, 36))
        if image is not None:
            surface.blit(image, (cx - 18, cy - 18))
        else:
            pygame.draw.circle(surface, Colors.WHITE, (cx, cy), 18)
            pygame.draw.circle(surface, tuple(style.get("color", e.color)), (cx, cy), 12)
        pygame.draw.circle(surface, Colors.WHITE, (cx, cy), 18, 2)

    def draw_coin(self, surface, e):
        cx, cy = (int(v) for v in e.center)
        image = self.get_image("coin", (e.width, e.height))
        if image is not None:
            surface.blit(image, (int(e.x), int(e.y)))
            pygame.draw.circle(surface, Colors.GOLD, (cx, cy), int(e.width / 2), 2)
            return
        pygame.draw.circle(surface, Colors.GOLD, (cx, cy), 8)
        self._text(surface, "RSC", (cx, cy), (0, 0, 0), 8)

    # ===========================================================
    # Hostiles
    # ===========================================================

    def draw_hostile(self, surface, e):
        rect = pygame.Rect(int(e.x), int(e.y), int(e.width), int(e.height))
        pygame.draw.rect(surface, e.color, rect, border_radius=4)
        if e.label:
            self._text(surface, e.label[:4], rect.center, (0, 0, 0), 9, bold=True)

    def draw_health_bar(self, surface, e):
        x = int(e.x)
        y = int(e.y) - HEALTH_BAR_OFFSET
        width = int(e.width)
        bg = (x, y, width, HEALTH_BAR_HEIGHT)
        self._blit_alpha_rect(surface, (0, 0, 0), bg, 230)
        pygame.draw.rect(surface, (255, 255, 255), bg, 1)

        pct = max(0.0, e.hp / e.max_hp) if e.max_hp else 0.0
        fill_color = (0, 255, 0) if pct > 0.5 else (255, 0, 0)
        pygame.draw.rect(surface, fill_color, (x + 1, y + 1, int((width - 2) * pct), HEALTH_BAR_HEIGHT - 2))

    def draw_tracking_boss(self, surface, e, frame):
        image = self.get_image("mini_boss", (e.width, e.height))
        if image is not None:
            surface.blit(image, (int(e.x), int(e.y)))
            return

        cx, cy = e.center
        w, h = e.width, e.height

        # Arms
        for i in range(4):
            angle = math.pi / 4 + i * math.pi / 2 + math.sin(frame * 0.1) * 0.2
            elbow = (cx + math.cos(angle) * w * 0.6, cy + math.sin(angle) * h * 0.6)
            claw = (cx + math.cos(angle) * w * 0.8, cy + math.sin(angle) * h * 0.8)
            pygame.draw.lines(surface, (107, 114, 128), False, [(cx, cy), elbow, claw], 4)
            pygame.draw.circle(surface, (156, 163, 175), (int(claw[0]), int(claw[1])), 5)

        # Funnel
        funnel = [
            (cx - w / 2, cy - h / 2), (cx + w / 2, cy - h / 2),
            (cx + w / 4, cy), (cx + w / 3, cy + h / 3),
            (cx, cy + h / 2),
            (cx - w / 3, cy + h / 3), (cx - w / 4, cy),
        ]
        pygame.draw.polygon(surface, (79, 70, 229), funnel)
        pygame.draw.polygon(surface, (165, 180, 252), funnel, 2)

        # Core
        core = pygame.Rect(0, 0, int(w / 3), int(h / 4))
        core.center = (int(cx), int(cy - 10))
        pygame.draw.ellipse(surface, (251, 191, 36), core.inflate(8, 8))
        pygame.draw.ellipse(surface, (254, 243, 199), core)

        self._text(surface, e.label or "BOTTLENECK", (cx, cy + h / 4), Colors.WHITE, 10, bold=True)

    def draw_final_boss(self, surface, e, frame):
        cx, cy = e.center
        w, h = e.width, e.height
        left, top = e.x, e.y
        glow = Colors.WHITE if e.is_charging else (255, 0, 0)
        armor = (74, 13, 13)

        # Pillars
        for px in (left, left + w - w / 4):
            pillar = pygame.Rect(int(px), int(top), int(w / 4), int(h))
            pygame.draw.rect(surface, armor, pillar)
            pygame.draw.rect(surface, glow, pillar, 4)

        # Arch
        arch = [
            (left + w / 4, top + 20), (left + w - w / 4, top + 20),
            (left + w - w / 4, top + 50), (cx, top + 80),
            (left + w / 4, top + 50),
        ]
        pygame.draw.polygon(surface, armor, arch)
        pygame.draw.polygon(surface, glow, arch, 4)

        # Core and counter-rotating rings
        pygame.draw.circle(surface, Colors.WHITE if e.is_charging else (0, 0, 0), (int(cx), int(cy)), 30)
        for direction in (1, -1):
            points = self._ellipse_points(cx, cy, 50, 10, direction * frame * 0.1)
            pygame.draw.lines(surface, (255, 68, 68), True, points, 2)

    def draw_beam(self, surface, e):
        flicker = random.random() * 10
        glow = (e.x - flicker, e.y, e.width + flicker * 2, e.height)
        self._blit_alpha_rect(surface, (255, 0, 0), glow, 128)
        pygame.draw.rect(surface, Colors.WHITE, (int(e.x + 10), int(e.y), int(e.width - 20), int(e.height)))
        for _ in range(5):
            sx = e.x + random.random() * e.width
            sy = e.y + random.random() * e.height
            pygame.draw.rect(surface, (255, 221, 0), (int(sx), int(sy), 4, 20))

    # ===========================================================
    # Effects
    # ===========================================================

    def draw_effect(self, surface, e, frame):
        alpha = int(255 * e.fade)
        if e.style == EffectStyle.TEXT:
            if e.label.startswith("WAVE"):
                color = Colors.WHITE if frame % 10 < 5 else (0, 255, 255)
                jitter = ((random.random() - 0.5) * 4, (random.random() - 0.5) * 4)
                self._text(surface, e.label, (e.x + jitter[0], e.y + jitter[1]), color, 32, True, alpha)
                if random.random() > 0.7:
                    pygame.draw.line(surface, Colors.WHITE, (e.x - 50, e.y),
                                     (e.x + 50, e.y + (random.random() - 0.5) * 20), 2)
            else:
                self._text(surface, e.label, (e.x, e.y), e.color, 32, True, alpha)
        else:
            progress = 1 - e.fade
            width = max(1, int(3 * (1 - progress)))
            self._alpha_circle(surface, e.color, (e.x, e.y), 10 + progress * 80, alpha, width)

    # ===========================================================
    # Primitives
    # ===========================================================

    def _text(self, surface, text, center, color, size, bold=False, alpha=255):
        rendered = self.font(size, bold).render(text, True, color)
        if alpha < 255:
            rendered.set_alpha(alpha)
        rect = rendered.get_rect(center=(int(center[0]), int(center[1])))
        surface.blit(rendered, rect)

    def _blit_alpha_rect(self, surface, color, rect, alpha):
        x, y, w, h = (int(v) for v in rect)
        if w <= 0 or h <= 0:
            return
        overlay = pygame.Surface((w, h), pygame.SRCALPHA)
        overlay.fill((*color[:3], alpha))
        surface.blit(overlay, (x, y))

    def _alpha_circle(self, surface, color, center, radius, alpha, width=0):
        radius = max(1, int(radius))
        overlay = pygame.Surface((radius * 2 + 2, radius * 2 + 2), pygame.SRCALPHA)
        pygame.draw.circle(overlay, (*color[:3], alpha), (radius + 1, radius + 1), radius, width)
        surface.blit(overlay, (int(center[0]) - radius - 1, int(center[1]) - radius - 1))

    def _dashed_ring(self, surface, color, center, radius, rotation, dash=15, gap=10):
        """Dashed circle rotated by `rotation` radians."""
        circumference = 2 * math.pi * radius
        step = (dash + gap) / circumference * 2 * math.pi
        sweep = dash / circumference * 2 * math.pi
        rect = pygame.Rect(0, 0, int(radius * 2), int(radius * 2))
        rect.center = (int(center[0]), int(center[1]))
        start = rotation
        while start < rotation + 2 * math.pi:
            pygame.draw.arc(surface, color, rect, start, start + sweep, 3)
            start += step

    @staticmethod
    def _ellipse_points(cx, cy, rx, ry, angle, segments=24):
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        points = []
        for i in range(segments):
            t = 2 * math.pi * i / segments
            x, y = rx * math.cos(t), ry * math.sin(t)
            points.append((cx + x * cos_a - y * sin_a, cy + x * sin_a + y * cos_a))
        return points
