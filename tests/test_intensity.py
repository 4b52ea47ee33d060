# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Display intensity for nodes."""

import pytest

from engine.intensity import intensity_map, node_intensity
from engine.schemas import AffectiveState, JourneySnapshot, JourneyValidationError


@pytest.fixture
def state():
    return AffectiveState(growth_score=30, activated_nodes=(2, 1, 5))


class TestNodeIntensity:

    def test_earlier_activation_is_brighter(self, state):
        assert node_intensity(2, state) == 1.0
        assert node_intensity(1, state) == pytest.approx(0.9)
        assert node_intensity(5, state) == pytest.approx(0.8)

    def test_dormant_follows_growth(self, state):
        assert node_intensity(0, state) == pytest.approx(0.15)

    def test_dormant_never_outshines_active(self):
        state = AffectiveState(growth_score=100, activated_nodes=(3,))
        assert node_intensity(0, state) == 0.5
        assert node_intensity(3, state) == 1.0

    def test_out_of_range(self, state):
        with pytest.raises(JourneyValidationError):
            node_intensity(7, state)
        with pytest.raises(JourneyValidationError):
            node_intensity(-1, state)

    def test_map_bounded(self, state):
        values = intensity_map(state)
        assert sorted(values) == list(range(7))
        assert all(0.0 <= v <= 1.0 for v in values.values())

    def test_snapshot_delegates(self, state):
        snap = JourneySnapshot(growth_score=30, activated_nodes=(2, 1, 5))
        assert snap.get_intensity(1) == node_intensity(1, state)
