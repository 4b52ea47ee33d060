# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Growth policies and the emotional-intelligence score."""

import pytest

from engine.growth import (
    baseline_growth,
    depth_weighted_growth,
    emotional_intelligence,
    growth_score,
)


class TestBaseline:

    def test_ten_per_reflection(self):
        assert baseline_growth(0) == 0
        assert baseline_growth(3) == 30

    def test_capped_at_hundred(self):
        assert baseline_growth(10) == 100
        assert baseline_growth(250) == 100

    def test_negative_count_is_zero(self):
        assert baseline_growth(-4) == 0

    def test_monotone_and_bounded(self):
        scores = [baseline_growth(n) for n in range(30)]
        assert scores == sorted(scores)
        assert all(0 <= s <= 100 for s in scores)


class TestDepthWeighted:

    def test_blend(self):
        # 0.7 * 50 + 0.3 * 0.5 * 100
        assert depth_weighted_growth(5, [0.5] * 5) == pytest.approx(50.0)

    def test_zero_reflections(self):
        assert depth_weighted_growth(0, []) == 0.0

    def test_monotone_for_fixed_depth(self):
        scores = [depth_weighted_growth(n, [0.4]) for n in range(1, 20)]
        assert scores == sorted(scores)
        assert max(scores) <= 100

    def test_out_of_range_depths_clamped(self):
        assert depth_weighted_growth(10, [5.0]) == 100.0


class TestPolicy:

    def test_default_is_baseline(self):
        assert growth_score(4) == 40

    def test_depth_policy(self):
        assert growth_score(10, [1.0], policy="depth") == 100.0

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            growth_score(1, policy="vibes")


class TestEmotionalIntelligence:

    def test_empty(self):
        assert emotional_intelligence(0, 0.0, 0, 0) == 0

    def test_full_system_bonus(self):
        assert emotional_intelligence(20, 1.0, 4, 7) == 100

    def test_bounded(self):
        assert emotional_intelligence(500, 3.0, 50, 50) <= 100
