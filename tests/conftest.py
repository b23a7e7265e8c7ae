"""
conftest.py
-----------
Shared pytest configuration and fixtures for the simulation tests.

Contains:
- Global pygame mock (the simulation core never needs a display)
- Engine, stats and world fixtures
- Entity helpers used across test modules
"""

import os
import sys
from unittest.mock import MagicMock

import pytest

# Add repository root to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Mock pygame globally before any imports that might use it
mock_pygame = MagicMock()
sys.modules["pygame"] = mock_pygame
sys.modules["pygame.font"] = MagicMock()
sys.modules["pygame.display"] = MagicMock()
sys.modules["pygame.transform"] = MagicMock()
sys.modules["pygame.mixer"] = MagicMock()
sys.modules["pygame.image"] = MagicMock()
sys.modules["pygame.key"] = MagicMock()

# Mock pygame constants
mock_pygame.SRCALPHA = 32
mock_pygame.error = type("error", (RuntimeError,), {})
mock_pygame.K_ESCAPE = 27
mock_pygame.K_r = 114

from scicon.core.runtime.session_stats import SessionStats  # noqa: E402
from scicon.entities.base_entity import Entity, Projectile  # noqa: E402
from scicon.entities.entity_types import CollisionTags, EntityKind  # noqa: E402
from scicon.game_engine import GameEngine  # noqa: E402
from scicon.systems.world import World  # noqa: E402


# ===========================================================
# Fixtures
# ===========================================================

@pytest.fixture
def stats():
    return SessionStats()


@pytest.fixture
def sounds():
    """Recorder for the engine's play_sound hook."""
    return []


@pytest.fixture
def world(sounds):
    return World(800, 600, sounds.append)


@pytest.fixture
def engine(stats, sounds):
    """
    Running engine on an 800x600 world with a short wave.

    The player sits at (350, 450) with a 100x100 box, so its inset
    hitbox is (370, 470, 60, 60).
    """
    game = GameEngine(stats, wave_duration=100, play_sound=sounds.append)
    game.init(800, 600)
    return game


@pytest.fixture
def mock_surface():
    """Create a mock pygame.Surface with common methods."""
    surface = MagicMock()
    surface.get_width.return_value = 800
    surface.get_height.return_value = 600
    return surface


# ===========================================================
# Test Utilities
# ===========================================================

def make_hostile(kind=EntityKind.DRONE, x=0, y=0, size=30, hp=1):
    """Stationary hostile with the given health."""
    enemy = Entity(kind, x, y, size, size, (200, 200, 200))
    enemy.set_health(hp)
    return enemy


def make_bullet(x, y, tag=CollisionTags.PLAYER_BULLET, vy=0):
    return Projectile(x, y, 0, vy, size=12, tag=tag)


def kinds(world, kind):
    return [e for e in world.entities if e.kind == kind and not e.marked_for_deletion]


@pytest.fixture
def spawn_hostile():
    """Factory fixture for stationary hostiles."""
    return make_hostile


@pytest.fixture
def spawn_bullet():
    """Factory fixture for projectiles."""
    return make_bullet


@pytest.fixture
def live_of_kind():
    """Helper listing live entities of one kind."""
    return kinds


# Pytest configuration
def pytest_configure(config):
    """Custom pytest configuration."""
    config.addinivalue_line("markers", "integration: marks tests as multi-system tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


def pytest_collection_modifyitems(config, items):
    """Add the unit marker to every test not marked as integration."""
    for item in items:
        if "integration" not in item.keywords:
            item.add_marker(pytest.mark.unit)
