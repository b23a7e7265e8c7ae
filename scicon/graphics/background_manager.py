"""
background_manager.py
---------------------
Slow parallax ambience drawn behind the world: planets and nebulae.

Bodies drift down at their own speed and wrap back above the top edge once
fully below the screen. They never collide and carry no gameplay state.
"""

import colorsys
import random

import pygame

from scicon.core.debug.debug_logger import DebugLogger
from scicon.core.runtime.game_settings import Colors, Display


PLANET_HUES = (240, 260, 280, 200)
AMBIENT_ALPHA = 51  # ~0.2 opacity


class AmbientBody:
    """Single planet or nebula."""

    __slots__ = ("kind", "x", "y", "size", "speed", "color")

    def __init__(self, width, height):
        self.kind = "planet" if random.random() > 0.3 else "nebula"
        self.x = random.random() * width
        self.y = random.random() * height

        if self.kind == "planet":
            self.size = 50 + random.random() * 100
            self.speed = 0.2 + random.random() * 0.3
            hue = random.choice(PLANET_HUES) / 360.0
            r, g, b = colorsys.hls_to_rgb(hue, 0.2, 0.4)
            self.color = (int(r * 255), int(g * 255), int(b * 255))
        else:
            self.size = 200 + random.random() * 300
            self.speed = 0.1
            self.color = (
                int(random.random() * 50),
                int(random.random() * 20),
                int(random.random() * 80) + 50,
            )

    def update(self, width, height):
        self.y += self.speed
        if self.y > height + self.size:
            self.y = -self.size * 2
            self.x = random.random() * width


class BackgroundManager:
    """Owns the ambient bodies for one run."""

    def __init__(self, width=0, height=0, count=Display.BACKGROUND_BODIES):
        self.width = width
        self.height = height
        self.count = count
        self.bodies = []
        self._cache = {}

    def reset(self, width, height):
        self.width = width
        self.height = height
        self.bodies = [AmbientBody(width, height) for _ in range(self.count)]
        # Sprites are keyed by random sizes; drop the previous run's set
        self._cache.clear()
        DebugLogger.trace(f"Background seeded with {len(self.bodies)} bodies", category="render")

    def resize(self, width, height):
        self.width = width
        self.height = height

    def update(self):
        for body in self.bodies:
            body.update(self.width, self.height)

    # ===========================================================
    # Rendering
    # ===========================================================

    def draw(self, surface):
        surface.fill(Colors.BG)
        for body in self.bodies:
            sprite = self._sprite_for(body)
            radius = int(body.size)
            surface.blit(sprite, (int(body.x) - radius, int(body.y) - radius))

    def _sprite_for(self, body):
        """Translucent pre-rendered disc, cached per size and colour."""
        key = (body.kind, int(body.size), body.color)
        sprite = self._cache.get(key)
        if sprite is not None:
            return sprite

        radius = int(body.size)
        sprite = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
        pygame.draw.circle(sprite, (*body.color, AMBIENT_ALPHA), (radius, radius), radius)
        if body.kind == "planet":
            # Shadow offset toward the upper left
            shade = int(radius * 0.3)
            pygame.draw.circle(sprite, (0, 0, 0, AMBIENT_ALPHA), (radius - shade, radius - shade), radius)
        self._cache[key] = sprite
        return sprite
