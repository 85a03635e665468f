"""
Unit tests for reward tier lookup.

Tests cover:
- Band boundaries (boundary values belong to the lower band)
- Counts past the last bound
- Monotonic percent
- Next tier progress
"""

import pytest

from agencyops.services.referral.tiers import get_reward_tier


class TestRewardTierLookup:
    """Test get_reward_tier."""

    @pytest.mark.parametrize(
        ("active_clients", "percent", "tier_index"),
        [
            (0, 20, 0),
            (5, 20, 0),
            (6, 25, 1),
            (10, 25, 1),
            (11, 30, 2),
            (40, 35, 3),
            (80, 40, 4),
            (81, 50, 5),
            (1000, 50, 5),
        ],
    )
    def test_tier_bands(self, active_clients, percent, tier_index):
        """Test percent and index for band edges."""
        result = get_reward_tier(active_clients)

        assert result.percent == percent
        assert result.tier_index == tier_index

    def test_percent_is_non_decreasing(self):
        """More active clients never lower the percent."""
        percents = [get_reward_tier(n).percent for n in range(0, 200)]

        assert percents == sorted(percents)

    def test_next_tier_progress(self):
        """Test clients needed to reach the next tier."""
        result = get_reward_tier(3)

        assert result.next_tier_percent == 25
        assert result.clients_to_next_tier == 3

    def test_top_tier_has_no_next(self):
        """Top tier reports no next tier."""
        result = get_reward_tier(500)

        assert result.next_tier_percent is None
        assert result.clients_to_next_tier is None

    def test_negative_count_falls_into_first_band(self):
        """Negative counts are matched by the first band."""
        assert get_reward_tier(-1).percent == 20
