# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Growth Scorer — reflection count (and optionally depth) to a 0-100 score.

Two policies:
  - baseline: 10 points per reflection, capped at 100
  - depth:    70% baseline + 30% mean reflection depth

Both are non-decreasing in reflection count for fixed depths.
"""

from typing import Optional, Sequence

GROWTH_POLICIES = ("baseline", "depth")

_COUNT_WEIGHT = 0.7
_DEPTH_WEIGHT = 0.3


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(value, high))


def baseline_growth(reflection_count: int) -> float:
    return _clamp(float(max(reflection_count, 0) * 10))


def depth_weighted_growth(reflection_count: int, depths: Sequence[float]) -> float:
    """Blend count-based growth with mean depth (each depth clamped to 0-1)."""
    if reflection_count <= 0:
        return 0.0
    mean_depth = (
        sum(_clamp(d, 0.0, 1.0) for d in depths) / len(depths) if depths else 0.0
    )
    blended = _COUNT_WEIGHT * baseline_growth(reflection_count) + _DEPTH_WEIGHT * mean_depth * 100
    return round(_clamp(blended), 2)


def growth_score(
    reflection_count: int,
    depths: Optional[Sequence[float]] = None,
    policy: str = "baseline",
) -> float:
    """Growth under the given policy. Unknown policies raise ValueError."""
    if policy == "baseline":
        return baseline_growth(reflection_count)
    if policy == "depth":
        return depth_weighted_growth(reflection_count, depths or ())
    raise ValueError(f"unknown growth policy: {policy}")


def emotional_intelligence(
    reflection_count: int,
    average_depth: float,
    unique_emotions: int,
    nodes_activated: int,
) -> float:
    """
    Overall emotional-intelligence score, 0-100.

    Up to 20 from practice volume, 30 from depth, 20 from emotional range,
    20 from node coverage, plus 10 for a fully activated system.
    """
    score = min(max(reflection_count, 0), 20)
    score += _clamp(average_depth, 0.0, 1.0) * 30
    score += min(max(unique_emotions, 0) * 5, 20)
    score += min(max(nodes_activated, 0) * 3, 20)
    if nodes_activated >= 7:
        score += 10
    return round(_clamp(score), 2)
