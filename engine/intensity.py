# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Intensity Function — per-node visual weight from activation order and growth."""

from typing import Dict

from engine.lexicon import ALL_NODES, NODE_COUNT
from engine.schemas import AffectiveState, JourneyValidationError

ACTIVE_BASELINE = 0.7
POSITION_BONUS = 0.3


def node_intensity(node: int, state: AffectiveState) -> float:
    """
    Display intensity in [0, 1].

    Activated nodes get 0.7 plus up to 0.3 for being activated early.
    Dormant nodes glow with growth: growth/200, so at most 0.5.
    """
    if not 0 <= node < NODE_COUNT:
        raise JourneyValidationError(f"node index out of range: {node}")

    nodes = state.activated_nodes
    if node in nodes:
        n = len(nodes)
        bonus = POSITION_BONUS * (n - nodes.index(node)) / n
        return round(min(ACTIVE_BASELINE + bonus, 1.0), 4)

    return round(min(max(state.growth_score, 0.0) / 200, 1.0), 4)


def intensity_map(state: AffectiveState) -> Dict[int, float]:
    return {node: node_intensity(node, state) for node in ALL_NODES}
