"""
test_config_manager.py
----------------------
Tests for config loading, merging and the event bus.
"""

import json
from unittest.mock import MagicMock

import pytest

from scicon.core.services import config_manager
from scicon.core.services.config_manager import load_config
from scicon.core.services.event_manager import EventManager, PlayerHitEvent, WaveStartedEvent


# ===========================================================
# Config Loading
# ===========================================================

class TestLoadConfig:

    def test_bundled_tables_are_indexed(self):
        files = config_manager.get_indexed_files()
        assert "enemies.json" in files
        assert "bosses.json" in files
        assert "assets.yaml" in files

    def test_yaml_loads(self):
        assets = load_config("assets.yaml")
        assert "shoot" in assets["sounds"]
        assert "player" in assets["images"]

    def test_notes_are_dropped(self):
        bosses = load_config("bosses.json")
        assert "_notes" not in bosses
        assert bosses["final"]["name"] == "GATEKEEPER"

    def test_defaults_merge_recursively(self, tmp_path):
        path = tmp_path / "tuning.json"
        path.write_text(json.dumps({"_notes": "x", "a": {"b": 2}}))

        result = load_config(str(path), {"a": {"b": 1, "c": 3}, "d": 4})

        assert result == {"a": {"b": 2, "c": 3}, "d": 4}

    def test_missing_file_returns_defaults(self):
        result = load_config("does_not_exist.json", {"x": 1})
        assert result == {"x": 1}

    def test_missing_file_strict_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("does_not_exist.json", strict=True)

    def test_invalid_json_falls_back(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        assert load_config(str(path), {"ok": True}) == {"ok": True}


# ===========================================================
# Event Bus
# ===========================================================

class TestEventManager:

    def test_dispatch_by_type(self):
        events = EventManager()
        waves = []
        events.subscribe(WaveStartedEvent, waves.append)

        events.dispatch(WaveStartedEvent(wave=2))
        events.dispatch(PlayerHitEvent(lives=1))

        assert waves == [WaveStartedEvent(wave=2)]

    def test_duplicate_subscription_ignored(self):
        events = EventManager()
        callback = MagicMock()
        events.subscribe(WaveStartedEvent, callback)
        events.subscribe(WaveStartedEvent, callback)
        assert events.get_subscriber_count(WaveStartedEvent) == 1

    def test_failing_subscriber_does_not_block_others(self):
        events = EventManager()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        events.subscribe(PlayerHitEvent, broken)
        events.subscribe(PlayerHitEvent, received.append)

        events.dispatch(PlayerHitEvent(lives=2))

        assert received == [PlayerHitEvent(lives=2)]

    def test_unsubscribe(self):
        events = EventManager()
        callback = MagicMock()
        events.subscribe(WaveStartedEvent, callback)
        events.unsubscribe(WaveStartedEvent, callback)
        events.dispatch(WaveStartedEvent(wave=1))
        callback.assert_not_called()
