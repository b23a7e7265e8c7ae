"""
sound_manager.py
----------------
Fire-and-forget sound effects for the engine's play_sound hook.

Sound names used by the simulation: shoot, explode, coin, powerup, hit,
boss_roar, warning. Paths come from assets.yaml. A missing mixer or file is
logged once and the sound is skipped; play() never raises.
"""

import os

import pygame

from scicon.core.debug.debug_logger import DebugLogger
from scicon.core.services.config_manager import load_config


ASSET_ROOT = os.path.join(os.path.dirname(os.path.dirname(__file__)), "assets")


class SoundManager:
    def __init__(self, paths=None, volume=None):
        """
        Args:
            paths: Optional name -> relative path mapping (defaults to assets.yaml)
            volume: Optional 0.0-1.0 effect volume
        """
        assets = load_config("assets.yaml", {"sounds": {}, "volume": 1.0})
        self.paths = paths if paths is not None else assets.get("sounds", {})
        self.volume = volume if volume is not None else float(assets.get("volume", 1.0))
        self.sounds = {}
        self._warned = set()
        self.enabled = self._init_mixer()

        DebugLogger.init_entry("SoundManager", "OK" if self.enabled else "MUTED")

    def _init_mixer(self) -> bool:
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
        except pygame.error as e:
            DebugLogger.warn(f"Audio disabled: {e}", category="audio")
            return False
        return True

    def load(self, name):
        """Load and cache one sound. Returns None when unavailable."""
        if name in self.sounds:
            return self.sounds[name]

        path = self.paths.get(name)
        if path is None:
            self._warn_once(name, f"Unknown sound '{name}'")
            return None

        full_path = path if os.path.isabs(path) else os.path.join(ASSET_ROOT, path)
        try:
            sound = pygame.mixer.Sound(full_path)
        except (pygame.error, FileNotFoundError) as e:
            self._warn_once(name, f"Failed to load sound '{name}' from {full_path}: {e}")
            self.sounds[name] = None
            return None

        sound.set_volume(self.volume)
        self.sounds[name] = sound
        return sound

    def play(self, name):
        """Play a sound effect by name."""
        if not self.enabled:
            return
        sound = self.load(name)
        if sound is not None:
            sound.play()

    def set_volume(self, volume):
        self.volume = min(max(volume, 0.0), 1.0)
        for sound in self.sounds.values():
            if sound is not None:
                sound.set_volume(self.volume)

    def _warn_once(self, name, message):
        if name not in self._warned:
            self._warned.add(name)
            DebugLogger.warn(message, category="audio")
