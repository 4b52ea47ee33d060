# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Radar balance, timeline/milestones and recommendations."""

import random
from datetime import date, datetime

import pytest

from engine.datasets import (
    generate_balance_data,
    generate_emotional_history,
    generate_recommendations,
    long_label,
    short_label,
)
from engine.lexicon import ALL_NODES, HEART, THIRD_EYE
from engine.schemas import ReflectionEntry


def _entries(*days, emotion=None):
    """Newest first."""
    return [
        ReflectionEntry(id=str(i), content="x", created_at=datetime(2026, 3, d, 8),
                        dominant_emotion=emotion)
        for i, d in enumerate(sorted(days, reverse=True))
    ]


class TestLabels:

    def test_formats(self):
        assert short_label(date(2026, 3, 5)) == "Mar 5"
        assert long_label(date(2026, 3, 5)) == "Mar 5, 2026"


class TestBalance:

    def test_one_datum_per_node(self):
        data = generate_balance_data((), (), rng=random.Random(1))
        assert [d.node for d in data] == list(ALL_NODES)
        assert all(d.full_mark == 100 for d in data)

    def test_bands(self):
        data = generate_balance_data((2, 3), (), rng=random.Random(3))
        for d in data:
            if d.node in (2, 3):
                assert 70 <= d.value <= 100
            else:
                assert 10 <= d.value <= 50

    def test_strong_association_floors(self):
        for seed in range(20):
            data = generate_balance_data((HEART, THIRD_EYE), ("Love", "Wisdom & Insight"),
                                         rng=random.Random(seed))
            assert data[HEART].value >= 85
            assert data[THIRD_EYE].value >= 80

    def test_floor_needs_active_node(self):
        data = generate_balance_data((), ("Love",), rng=random.Random(0))
        assert data[HEART].value <= 50

    def test_seeded_rng_reproducible(self):
        a = generate_balance_data((1,), (), rng=random.Random(9))
        b = generate_balance_data((1,), (), rng=random.Random(9))
        assert a == b


class TestHistory:

    def test_timeline_chronological_with_growth(self):
        entries = _entries(1, 2, 3)
        history = generate_emotional_history(entries, [0.5, 0.2, 0.9], today=date(2026, 3, 10))
        first, second, third = history.timeline[:3]
        assert [p.label for p in (first, second, third)] == ["Mar 1", "Mar 2", "Mar 3"]
        assert first.growth_score == pytest.approx(57)
        assert second.growth_score == pytest.approx(44)
        assert third.growth_score == pytest.approx(61)
        assert first.dominant_emotion == "Growth"

    def test_padding_to_seven_days(self):
        history = generate_emotional_history(_entries(1, 2, 3), [0.1] * 3, today=date(2026, 3, 10))
        assert len(history.timeline) == 7
        padded = history.timeline[3:]
        assert [p.label for p in padded] == ["Mar 6", "Mar 7", "Mar 8", "Mar 9"]
        assert all(p.growth_score == 0 and p.dominant_emotion == "None" for p in padded)

    def test_empty_history(self):
        history = generate_emotional_history([], [], today=date(2026, 3, 10))
        assert len(history.timeline) == 7
        assert history.milestones == ()

    def test_growth_capped(self):
        history = generate_emotional_history(_entries(*range(1, 13)), [1.0] * 12)
        assert max(p.growth_score for p in history.timeline) == 100

    def test_milestones(self):
        entries = _entries(1, 2, 3)
        history = generate_emotional_history(entries, [0.5, 0.2, 0.9], today=date(2026, 3, 10))
        titles = [m.title for m in history.milestones]
        assert titles == ["Journey Began", "Deepest Reflection"]
        assert history.milestones[0].label == "Mar 1, 2026"
        assert history.milestones[1].date == date(2026, 3, 1)

    def test_consistent_practice(self):
        entries = _entries(1, 2, 3, 4, 5)
        history = generate_emotional_history(entries, [0.3] * 5, today=date(2026, 3, 10))
        last = history.milestones[-1]
        assert last.title == "Consistent Practice"
        assert last.date == date(2026, 3, 10)

    def test_stored_emotion_shown(self):
        history = generate_emotional_history(_entries(4, emotion="Joy"), [0.2])
        assert history.timeline[0].dominant_emotion == "Joy"

    def test_misaligned_depths(self):
        with pytest.raises(ValueError):
            generate_emotional_history(_entries(1, 2), [0.1])


class TestRecommendations:

    def test_dormant_nodes_first(self):
        recs = generate_recommendations((), ())
        assert [r.title for r in recs] == [
            "Root Chakra Activation", "Heart Energy Expansion", "Intuitive Awareness",
        ]

    def test_generic_when_nothing_else(self):
        recs = generate_recommendations(ALL_NODES, ())
        assert [r.title for r in recs] == ["Daily Energy Check-in"]

    def test_emotion_templates(self):
        recs = generate_recommendations(ALL_NODES, ("Love", "Peace & Tranquility"))
        assert [r.title for r in recs] == ["Channel Compassion Energy", "Share Your Calming Presence"]

    def test_capped_at_four_and_unique(self):
        recs = generate_recommendations((), ("Love", "Wisdom", "Peace", "Love & Compassion"))
        titles = [r.title for r in recs]
        assert len(titles) == 4
        assert len(set(titles)) == 4

    @pytest.mark.parametrize("nodes,emotions", [
        ((), ()),
        (ALL_NODES, ()),
        ((2,), ("Joy",)),
        ((5, 2, 6), ("Love", "Wisdom", "Peace")),
    ])
    def test_between_one_and_four(self, nodes, emotions):
        assert 1 <= len(generate_recommendations(nodes, emotions)) <= 4
