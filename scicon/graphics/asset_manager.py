"""
asset_manager.py
----------------
Image resolver used by the renderer.

Keys map to file paths in assets.yaml. resolve(key) returns a loaded
pygame.Surface, or None when the key is unknown or the file cannot be
loaded; callers fall back to procedural drawing in that case.
"""

import os

import pygame

from scicon.core.debug.debug_logger import DebugLogger
from scicon.core.services.config_manager import load_config


ASSET_ROOT = os.path.join(os.path.dirname(os.path.dirname(__file__)), "assets")


class AssetManager:
    """Lazy image cache keyed by logical asset name."""

    def __init__(self, paths=None, root=ASSET_ROOT):
        if paths is None:
            paths = load_config("assets.yaml", {"images": {}}).get("images", {})
        self.paths = paths
        self.root = root
        self.images = {}
        self.scaled = {}

        DebugLogger.init_entry("AssetManager")

    def resolve(self, key):
        """
        Retrieve an image by key.

        Returns:
            pygame.Surface or None
        """
        if key in self.images:
            return self.images[key]

        path = self.paths.get(key)
        image = None
        if path is not None:
            full_path = path if os.path.isabs(path) else os.path.join(self.root, path)
            try:
                image = pygame.image.load(full_path).convert_alpha()
                DebugLogger.action(f"Loaded image '{key}' from {full_path}", category="loading")
            except (pygame.error, FileNotFoundError) as e:
                DebugLogger.warn(f"Failed to load {full_path}: {e}, using fallback", category="loading")

        self.images[key] = image
        return image

    def resolve_scaled(self, key, size):
        """Image scaled to size (cached), or None."""
        cache_key = (key, int(size[0]), int(size[1]))
        if cache_key in self.scaled:
            return self.scaled[cache_key]

        image = self.resolve(key)
        if image is not None:
            image = pygame.transform.smoothscale(image, (int(size[0]), int(size[1])))
        self.scaled[cache_key] = image
        return image

    __call__ = resolve
