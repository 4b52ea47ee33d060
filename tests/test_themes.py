# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Theme seeding."""

from engine.lexicon import CROWN, HEART, THIRD_EYE
from engine.themes import EMPTY_SEED, normalize_theme, seed_theme


class TestNormalize:

    def test_case_and_whitespace(self):
        assert normalize_theme("  Love ") == "love"

    def test_aliases(self):
        assert normalize_theme("serenity") == "peace"
        assert normalize_theme("Clarity") == "wisdom"

    def test_unknown_and_absent(self):
        assert normalize_theme("volcanoes") is None
        assert normalize_theme("") is None
        assert normalize_theme(None) is None
        assert normalize_theme(7) is None


class TestSeed:

    def test_love(self):
        seed = seed_theme("love")
        assert seed.nodes == (HEART,)
        assert seed.emotions == ("Love & Compassion",)
        assert len(seed.insights) == 1

    def test_wisdom_seeds_third_eye_then_crown(self):
        assert seed_theme("wisdom").nodes == (THIRD_EYE, CROWN)

    def test_unrecognized_seeds_nothing(self):
        assert seed_theme("nonsense") == EMPTY_SEED
        assert seed_theme(None) == EMPTY_SEED
