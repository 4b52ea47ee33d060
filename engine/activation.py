# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Activation Merger — combine theme seed, content ranking and the
reflection-count fallback ladder into one activation.

Precedence is fixed: theme seed, then content emotions in rank order, then
the ladder. Later stages only append; nothing already present moves or
repeats, so node order is activation order.
"""

import logging
from typing import Iterable, List, NamedTuple, Sequence, Tuple

from engine.content import combination_insights
from engine.lexicon import (
    CATEGORY_INSIGHT,
    CATEGORY_NODE,
    ENCOURAGEMENT_INSIGHT,
    FALLBACK_LADDER,
    category_label,
)
from engine.themes import EMPTY_SEED, ThemeSeed

logger = logging.getLogger("journey.activation")

MAX_EMOTIONS = 3


class Activation(NamedTuple):
    nodes: Tuple[int, ...]
    emotions: Tuple[str, ...]
    insights: Tuple[str, ...]


def fallback_nodes(reflection_count: int) -> Tuple[int, ...]:
    """Nodes unlocked by reflection count alone, lowest threshold first."""
    nodes: List[int] = []
    for threshold, rung in FALLBACK_LADDER:
        if reflection_count >= threshold:
            nodes.extend(n for n in rung if n not in nodes)
    return tuple(nodes)


def _append_unique(target: List, items: Iterable) -> None:
    for item in items:
        if item not in target:
            target.append(item)


def _append_emotions(target: List[str], labels: Iterable[str]) -> None:
    # case-insensitive: "peace" from one source and "Peace" from another are one emotion
    seen = {e.lower() for e in target}
    for label in labels:
        key = label.strip().lower()
        if key and key not in seen:
            seen.add(key)
            target.append(label.strip())


def merge_activation(
    seed: ThemeSeed = EMPTY_SEED,
    top_emotions: Sequence[str] = (),
    reflection_count: int = 0,
) -> Activation:
    """
    Merge all activation sources.

    Args:
        seed: Theme seed (empty seed if no theme)
        top_emotions: Analyzer categories in rank order
        reflection_count: Number of reflections behind this pass

    Returns:
        Activation with the full insight list. Display capping happens
        at render time.
    """
    nodes: List[int] = []
    emotions: List[str] = []
    insights: List[str] = []

    # 1. theme seed
    _append_unique(nodes, seed.nodes)
    _append_emotions(emotions, seed.emotions)
    _append_unique(insights, seed.insights)

    # 2. content emotions, in rank order
    for category in top_emotions:
        _append_emotions(emotions, (category_label(category),))
        node = CATEGORY_NODE.get(category)
        if node is not None:
            _append_unique(nodes, (node,))
        insight = CATEGORY_INSIGHT.get(category)
        if insight:
            _append_unique(insights, (insight,))
    _append_unique(insights, combination_insights(top_emotions))

    # 3. fallback ladder
    _append_unique(nodes, fallback_nodes(max(reflection_count, 0)))

    if not insights and reflection_count > 0:
        insights.append(ENCOURAGEMENT_INSIGHT)

    activation = Activation(tuple(nodes), tuple(emotions[:MAX_EMOTIONS]), tuple(insights))
    logger.debug(
        "Merged activation: nodes=%s emotions=%s (%d reflections)",
        activation.nodes, activation.emotions, reflection_count,
    )
    return activation
