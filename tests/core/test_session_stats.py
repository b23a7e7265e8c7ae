"""
test_session_stats.py
---------------------
Tests for the shared progression record.

Covers:
1. Score and high score tracking
2. Coin accounting
3. Reset keeps high score and upgrades
4. Snapshot is a detached copy
5. Upgrade pricing
"""

import dataclasses

import pytest

from scicon.core.runtime.session_stats import SessionStats, Upgrades, upgrade_cost


class TestScoring:

    def test_high_score_follows_score(self):
        stats = SessionStats()
        stats.add_score(120)
        assert stats.score == 120
        assert stats.high_score == 120

    def test_high_score_is_not_lowered_by_reset(self):
        stats = SessionStats()
        stats.add_score(300)
        stats.reset()
        stats.add_score(50)
        assert stats.score == 50
        assert stats.high_score == 300

    def test_add_coin_counts_both_totals_and_scores(self):
        stats = SessionStats()
        stats.add_coin()
        stats.add_coin(2)
        assert stats.coins == 2
        assert stats.total_coins == 2
        assert stats.score == 3


class TestLifecycle:

    def test_reset_clears_run_counters(self):
        stats = SessionStats(Upgrades(fire_rate=2))
        stats.wave = 4
        stats.coins = 9
        stats.enemies_defeated = 12
        stats.boss_progress = 0.7
        stats.is_boss_active = True
        stats.boss_hp = 30

        stats.reset()

        assert stats.wave == 1
        assert stats.coins == 0
        assert stats.enemies_defeated == 0
        assert stats.boss_progress == 0.0
        assert stats.is_boss_active is False
        assert stats.boss_max_hp == 100
        assert stats.upgrades.fire_rate == 2

    def test_snapshot_is_frozen_and_detached(self):
        stats = SessionStats()
        stats.add_score(10)
        snap = stats.snapshot()

        stats.add_score(10)
        stats.upgrades.speed = 3

        assert snap.score == 10
        assert snap.upgrades.speed == 0
        with pytest.raises(dataclasses.FrozenInstanceError):
            snap.score = 99


class TestUpgradeCost:

    @pytest.mark.parametrize("kind, level, expected", [
        ("fire_rate", 0, 10),
        ("fire_rate", 2, 20),
        ("speed", 1, 13),
        ("max_hp", 0, 15),
    ])
    def test_linear_cost(self, kind, level, expected):
        upgrades = Upgrades(**{kind: level})
        assert upgrade_cost(upgrades, kind) == expected

    def test_repair_has_flat_cost(self):
        assert upgrade_cost(Upgrades(max_hp=4), "repair") == 10
