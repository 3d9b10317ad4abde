"""
Tests for reward tier progression.
"""

import pytest

from jobboard.events import StateStore
from jobboard.models import Notification
from jobboard.rewards import (
    DEFAULT_TIER,
    TIERS,
    RewardState,
    RewardTier,
    RewardTracker,
    earn_points,
    next_tier,
    points_to_next,
    progress,
    tier_for,
    validate_tier_table,
)


class TestTierFor:
    """Test points to tier mapping."""

    def test_zero_is_default_tier(self):
        assert tier_for(0) == DEFAULT_TIER

    def test_thousand_is_highest_tier(self):
        assert tier_for(1000) == TIERS[0]
        assert tier_for(1000).name == "Diamond"

    @pytest.mark.parametrize("points,name", [
        (99, "No Tier"),
        (100, "Silver"),
        (499, "Silver"),
        (500, "Gold"),
        (999, "Gold"),
        (5000, "Diamond"),
    ])
    def test_thresholds(self, points, name):
        assert tier_for(points).name == name

    def test_monotonic(self):
        ids = [tier_for(p).id for p in range(0, 1200, 7)]
        assert ids == sorted(ids)

    def test_negative_points_rejected(self):
        with pytest.raises(ValueError):
            tier_for(-1)


class TestNextTierAndProgress:
    """Test next rung, progress fraction and remaining points."""

    def test_next_tier_is_the_rung_directly_above(self):
        assert next_tier(0).name == "Silver"
        assert next_tier(450).name == "Gold"
        assert next_tier(500).name == "Diamond"

    def test_no_next_tier_when_maxed(self):
        assert next_tier(1000) is None
        assert points_to_next(1000) is None
        assert progress(1000) == 1.0
        assert progress(2500) == 1.0

    def test_progress_values(self):
        assert progress(0) == 0.0
        assert progress(50) == 0.5
        assert progress(100) == 0.0
        assert progress(300) == pytest.approx(0.5)
        assert progress(750) == pytest.approx(0.5)

    def test_progress_bounds(self):
        for points in range(0, 1500, 13):
            assert 0.0 <= progress(points) <= 1.0

    def test_points_to_next(self):
        assert points_to_next(450) == 50
        assert points_to_next(0) == 100
        assert points_to_next(999) == 1


class TestEarnPoints:
    """Test earning and tier crossing detection."""

    def test_crossing_into_first_tier(self, make_rng):
        result = earn_points(RewardState(points=90, previous_tier_id=0), make_rng(ints=[15]))

        assert result.earned == 15
        assert result.state.points == 105
        assert result.state.previous_tier_id == 1
        assert result.crossed_tier

    def test_no_crossing_within_tier(self, make_rng):
        result = earn_points(RewardState(points=100, previous_tier_id=1), make_rng(ints=[10]))

        assert result.state.points == 110
        assert not result.crossed_tier

    def test_crossing_uses_previous_tier_id(self, make_rng):
        state = RewardState.initial(480)
        assert state.previous_tier_id == 1

        first = earn_points(state, make_rng(ints=[30]))
        assert first.crossed_tier
        second = earn_points(first.state, make_rng(ints=[30]))
        assert not second.crossed_tier

    def test_amount_within_default_range(self):
        state = RewardState.initial(0)
        for _ in range(50):
            result = earn_points(state)
            assert 10 <= result.earned <= 50
            assert result.state.points == state.points + result.earned
            state = result.state

    def test_custom_range(self, make_rng):
        result = earn_points(RewardState.initial(0), make_rng(ints=[3]), points_range=(1, 5))
        assert result.earned == 3

    def test_state_rejects_negative_points(self):
        with pytest.raises(ValueError):
            RewardState(points=-5, previous_tier_id=0)


class TestTierTable:
    """Test tier table invariants."""

    def test_default_table_is_valid(self):
        validate_tier_table()

    def test_non_decreasing_thresholds_rejected(self):
        tiers = (
            RewardTier(id=2, name="A", required_points=100),
            RewardTier(id=1, name="B", required_points=100),
        )
        with pytest.raises(ValueError):
            validate_tier_table(tiers)

    def test_ordinals_must_follow_thresholds(self):
        tiers = (
            RewardTier(id=1, name="A", required_points=500),
            RewardTier(id=2, name="B", required_points=100),
        )
        with pytest.raises(ValueError):
            validate_tier_table(tiers)

    def test_default_below_every_tier(self):
        tiers = (RewardTier(id=0, name="A", required_points=100),)
        with pytest.raises(ValueError):
            validate_tier_table(tiers)


class TestRewardTracker:
    """Test the session-level tracker."""

    def test_seeded_state(self, sink):
        tracker = RewardTracker(sink=sink)

        assert tracker.points == 450
        assert tracker.current_tier.name == "Silver"
        assert tracker.next_tier.name == "Gold"
        assert tracker.points_to_next == 50
        assert tracker.progress == pytest.approx(350 / 400)

    def test_achievement_notification_on_crossing(self, sink, make_rng):
        tracker = RewardTracker(sink=sink, rng=make_rng(ints=[50]))

        result = tracker.earn()

        assert result.crossed_tier
        assert tracker.last_earned == 50
        assert tracker.current_tier.name == "Gold"
        assert sink.notifications == [
            Notification("New Tier Achieved! 🎉", "Congratulations! You've reached Gold tier!")
        ]

    def test_no_notification_without_crossing(self, sink, make_rng):
        tracker = RewardTracker(sink=sink, state=RewardState.initial(100), rng=make_rng(ints=[10]))

        tracker.earn()

        assert sink.notifications == []
        assert tracker.points == 110

    def test_publishes_points(self, sink, make_rng):
        store = StateStore()
        tracker = RewardTracker(sink=sink, rng=make_rng(ints=[20]), store=store)
        assert store.get("rewards.points") == 450

        tracker.earn()

        assert store.get("rewards.points") == 470
        assert store.get("rewards.tier") == "Silver"

    def test_tier_crossings_counted(self, sink, make_rng, quiet_logger):
        tracker = RewardTracker(sink=sink, state=RewardState.initial(90), rng=make_rng(ints=[15, 10]))
        tracker.earn()
        tracker.earn()
        assert quiet_logger.metrics["tiers_crossed"] == 1
