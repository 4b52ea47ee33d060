# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Schema tests — validation, immutability, config load/save, JSONL reading."""

import json
from datetime import datetime

import pytest
from pydantic import ValidationError

from engine.schemas import (
    AffectiveState,
    EngineConfig,
    JourneySnapshot,
    PrecomputedJourney,
    ReflectionEntry,
    ResonanceEdge,
    load_jsonl,
    load_validated,
    save_validated,
)

NOW = "2026-01-01T00:00:00"


class TestReflectionEntry:

    def test_integer_id_coerced(self):
        entry = ReflectionEntry.model_validate({"id": 12, "content": "x", "created_at": NOW})
        assert entry.id == "12"

    def test_extra_columns_allowed(self):
        entry = ReflectionEntry.model_validate(
            {"id": "a", "content": "x", "createdAt": NOW, "user_id": "u1", "mood": 3}
        )
        assert entry.created_at == datetime(2026, 1, 1)

    def test_depth_range(self):
        with pytest.raises(ValidationError):
            ReflectionEntry(id="a", content="x", created_at=NOW, emotional_depth=1.5)

    def test_content_required(self):
        with pytest.raises(ValidationError):
            ReflectionEntry.model_validate({"id": "a", "created_at": NOW})


class TestOutputs:

    def test_frozen(self):
        state = AffectiveState(growth_score=10)
        with pytest.raises(ValidationError):
            state.growth_score = 20

    def test_growth_bounds(self):
        with pytest.raises(ValidationError):
            AffectiveState(growth_score=120)

    def test_value_equality(self):
        assert AffectiveState(activated_nodes=(1, 2)) == AffectiveState(activated_nodes=(1, 2))

    def test_camel_case_dump(self):
        data = AffectiveState(growth_score=30, activated_nodes=(2,)).to_dict()
        assert data == {
            "growthScore": 30.0,
            "activatedNodes": [2],
            "dominantEmotions": [],
            "insights": [],
        }

    def test_edge_node_range(self):
        with pytest.raises(ValidationError):
            ResonanceEdge(a=0, b=7, intensity=0.5)

    def test_with_edges_returns_new_snapshot(self):
        snap = JourneySnapshot(activated_nodes=(2, 3))
        edge = ResonanceEdge(a=2, b=3, intensity=0.9)
        updated = snap.with_edges([edge])
        assert updated is not snap
        assert snap.resonance_edges == ()
        assert updated.resonance_edges == (edge,)
        assert updated.activated_nodes == (2, 3)

    def test_snapshot_state_view(self):
        snap = JourneySnapshot(growth_score=40, dominant_emotions=("Joy",))
        assert snap.state == AffectiveState(growth_score=40, dominant_emotions=("Joy",))


class TestEngineConfig:

    def test_defaults(self):
        config = EngineConfig()
        assert config.resonance_interval_ms == 100
        assert config.edge_threshold == 0.3
        assert config.growth_policy == "baseline"
        assert config.reflection_api_url is None

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValidationError):
            EngineConfig(growth_policy="vibes")

    def test_interval_floor(self):
        with pytest.raises(ValidationError):
            EngineConfig(resonance_interval_ms=1)

    def test_missing_file_gives_defaults(self, isolated_paths):
        assert load_validated(isolated_paths.config_file, EngineConfig) == EngineConfig()

    def test_invalid_file_gives_defaults(self, isolated_paths):
        isolated_paths.config_file.write_text("{not json")
        assert load_validated(isolated_paths.config_file, EngineConfig) == EngineConfig()

    def test_invalid_values_give_defaults(self, isolated_paths):
        isolated_paths.config_file.write_text(json.dumps({"fetch_limit": -3}))
        assert load_validated(isolated_paths.config_file, EngineConfig).fetch_limit == 20

    def test_roundtrip(self, isolated_paths):
        config = EngineConfig(resonance_interval_ms=1000, growth_policy="depth")
        save_validated(isolated_paths.config_file, config)
        assert load_validated(isolated_paths.config_file, EngineConfig) == config
        assert not isolated_paths.config_file.with_suffix(".json.tmp").exists()

    def test_explicit_default(self, tmp_path):
        config = load_validated(tmp_path / "absent.json", EngineConfig, default={"fetch_limit": 5})
        assert config.fetch_limit == 5


class TestPrecomputedJourney:

    def test_empty_defaults(self):
        journey = PrecomputedJourney()
        assert journey.recent_reflection_count == 0
        assert journey.activated_chakras == []


class TestLoadJsonl:

    def test_skips_bad_lines(self, tmp_path):
        path = tmp_path / "r.jsonl"
        path.write_text('{"id": 1}\nnot json\n\n{"id": 2}\n')
        assert load_jsonl(path) == [{"id": 1}, {"id": 2}]

    def test_missing_file(self, tmp_path):
        assert load_jsonl(tmp_path / "nope.jsonl") == []
