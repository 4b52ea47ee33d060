# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""End-to-end analysis: rows in, snapshot out."""

import random
from datetime import date, datetime

from conftest import make_rows
from engine.lexicon import ALL_NODES, HEART, THROAT
from engine.pipeline import (
    analyze_affective_state,
    analyze_journey,
    build_snapshot,
    parse_reflections,
    reflection_depths,
    state_from_precomputed,
)
from engine.schemas import AffectiveState, PrecomputedJourney, ReflectionEntry


class TestParse:

    def test_snake_and_camel_case(self):
        rows = [
            {"id": 1, "content": "a", "created_at": "2026-03-01T08:00:00"},
            {"id": "b", "content": "b", "createdAt": "2026-03-02T08:00:00",
             "emotionalDepth": 0.4},
        ]
        entries = parse_reflections(rows)
        assert [e.id for e in entries] == ["1", "b"]
        assert entries[1].emotional_depth == 0.4

    def test_malformed_rows_skipped(self):
        rows = [
            {"id": 1, "content": "fine", "created_at": "2026-03-01T08:00:00"},
            {"id": 2, "created_at": "2026-03-01T08:00:00"},
            {"id": 3, "content": "bad date", "created_at": "yesterday-ish"},
            {"id": 4, "content": "too deep", "created_at": "2026-03-01", "emotional_depth": 3},
            "not a row",
            None,
        ]
        entries = parse_reflections(rows)
        assert [e.id for e in entries] == ["1"]

    def test_entries_pass_through(self):
        entry = ReflectionEntry(id="x", content="c", created_at=datetime(2026, 1, 1))
        assert parse_reflections([entry]) == [entry]

    def test_none_is_empty(self):
        assert parse_reflections(None) == []


class TestDepths:

    def test_stored_depth_preferred(self):
        entries = parse_reflections(make_rows(["short"], emotional_depth=0.75))
        assert reflection_depths(entries) == (0.75,)

    def test_evaluated_when_missing(self):
        entries = parse_reflections(make_rows(["I feel deeply grateful because of my practice"]))
        assert reflection_depths(entries)[0] > 0


class TestAffectiveState:

    def test_empty_input_is_default_state(self):
        state = analyze_affective_state([])
        assert state == AffectiveState()
        snapshot = build_snapshot(state, now_ms=0)
        assert snapshot.resonance_edges == ()
        assert snapshot.growth_score == 0

    def test_love_theme_activates_heart(self):
        entries = parse_reflections(make_rows(["Today was quiet."]))
        state = analyze_affective_state(entries, theme="love")
        assert state.activated_nodes[0] == HEART
        assert state.dominant_emotions[0] == "Love & Compassion"

    def test_twelve_reflections_activate_everything(self):
        entries = parse_reflections(make_rows(["Walked to work."] * 12))
        state = analyze_affective_state(entries)
        assert set(state.activated_nodes) == set(ALL_NODES)
        assert len(state.activated_nodes) == 7

    def test_peace_scenario(self):
        entries = parse_reflections(make_rows(["peace, peace and more peace"] * 10))
        state = analyze_affective_state(entries)
        assert state.dominant_emotions[0] == "Peace"
        assert THROAT in state.activated_nodes
        assert state.activated_nodes[0] == THROAT
        assert state.growth_score == 100

    def test_idempotent(self):
        entries = parse_reflections(make_rows(["joy and strength", "calm wisdom"]))
        assert analyze_affective_state(entries, "power") == analyze_affective_state(entries, "power")

    def test_previous_returned_when_equal(self):
        entries = parse_reflections(make_rows(["joy and strength"]))
        previous = analyze_affective_state(entries)
        again = analyze_affective_state(entries, previous=previous)
        assert again is previous

    def test_previous_ignored_when_different(self):
        entries = parse_reflections(make_rows(["joy and strength"]))
        previous = AffectiveState(growth_score=50, activated_nodes=(0,))
        state = analyze_affective_state(entries, previous=previous)
        assert state is not previous
        assert state.growth_score == 10

    def test_depth_policy(self):
        entries = parse_reflections(make_rows(["x"] * 4, emotional_depth=1.0))
        state = analyze_affective_state(entries, policy="depth")
        assert state.growth_score == 58

    def test_insights_uncapped(self):
        text = "love peace wisdom joy"
        entries = parse_reflections(make_rows([text]))
        state = analyze_affective_state(entries, theme="healing")
        assert len(state.insights) > 3


class TestPrecomputed:

    def test_shortcut_state(self):
        journey = PrecomputedJourney(
            recent_reflection_count=4,
            activated_chakras=[2, 2, 9, 1],
            dominant_emotions=["Peace", "peace", "Love", "Joy", "Fear"],
            insights=["a", "a", "b"],
        )
        state = state_from_precomputed(journey)
        assert state.activated_nodes == (2, 1)
        assert state.dominant_emotions == ("Peace", "Love", "Joy")
        assert state.insights == ("a", "b")
        assert state.growth_score == 40

    def test_equal_summary_returns_previous(self):
        journey = PrecomputedJourney(
            recent_reflection_count=3,
            activated_chakras=[HEART],
            dominant_emotions=["Love"],
        )
        previous = state_from_precomputed(journey)
        assert state_from_precomputed(journey, previous=previous) is previous
        changed = journey.model_copy(update={"recent_reflection_count": 4})
        assert state_from_precomputed(changed, previous=previous) is not previous


class TestSnapshot:

    def test_full_snapshot(self):
        rows = make_rows(["love and calm", "peace", "joy"])
        snapshot = analyze_journey(rows, theme="love", now_ms=0, today=date(2026, 3, 10),
                                   rng=random.Random(4))
        assert snapshot.activated_nodes[0] == HEART
        assert len(snapshot.chakra_balance_data) == 7
        assert len(snapshot.emotional_history_data.timeline) == 7
        assert 1 <= len(snapshot.emotional_recommendations) <= 4
        for edge in snapshot.resonance_edges:
            assert edge.a in snapshot.activated_nodes and edge.b in snapshot.activated_nodes
            assert 0.3 < edge.intensity <= 1.0

    def test_pinned_inputs_reproducible(self):
        rows = make_rows(["love", "power and wisdom"])
        kwargs = dict(now_ms=1000, today=date(2026, 3, 10))
        a = analyze_journey(rows, rng=random.Random(1), **kwargs)
        b = analyze_journey(rows, rng=random.Random(1), **kwargs)
        assert a.model_copy(update={"computed_at": None}) == b.model_copy(update={"computed_at": None})

    def test_camel_case_output(self):
        snapshot = analyze_journey(make_rows(["joy"]), now_ms=0)
        data = snapshot.to_dict()
        for key in ("growthScore", "activatedNodes", "dominantEmotions", "insights",
                    "chakraBalanceData", "emotionalHistoryData",
                    "emotionalRecommendations", "resonanceEdges"):
            assert key in data
        assert "fullMark" in data["chakraBalanceData"][0]
