# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Visualization datasets — radar balance, history timeline + milestones,
and ranked recommendations.

The radar values are intentionally noisy texture: activated nodes land in
70-100, dormant ones in 10-50. Pass a seeded random.Random to pin them.
"""

import logging
import random
from datetime import date, timedelta
from typing import List, Optional, Sequence

from engine.lexicon import (
    ALL_NODES,
    EMOTION_RECOMMENDATIONS,
    GENERIC_RECOMMENDATION,
    HEART,
    NODE_RECOMMENDATIONS,
    THIRD_EYE,
    category_for_label,
    node_name,
)
from engine.schemas import (
    ChakraBalanceDatum,
    EmotionalHistory,
    Milestone,
    Recommendation,
    ReflectionEntry,
    TimelinePoint,
)

logger = logging.getLogger("journey.datasets")

ACTIVE_BAND = (70.0, 100.0)
DORMANT_BAND = (10.0, 50.0)

# category -> (node, floor) applied when that node is active
_STRONG_ASSOCIATIONS = {
    "love": (HEART, 85.0),
    "wisdom": (THIRD_EYE, 80.0),
}

TIMELINE_MIN_POINTS = 7
CONSISTENCY_THRESHOLD = 5
MAX_RECOMMENDATIONS = 4


def short_label(d: date) -> str:
    return f"{d:%b} {d.day}"


def long_label(d: date) -> str:
    return f"{d:%b} {d.day}, {d.year}"


# ============================================================================
# BALANCE RADAR
# ============================================================================

def generate_balance_data(
    activated: Sequence[int],
    emotions: Sequence[str],
    rng: Optional[random.Random] = None,
) -> List[ChakraBalanceDatum]:
    """One radar datum per node, all seven of them."""
    rng = rng or random.Random()
    active = set(activated)
    floors = {}
    for label in emotions:
        assoc = _STRONG_ASSOCIATIONS.get(category_for_label(label))
        if assoc:
            node, floor = assoc
            floors[node] = max(floors.get(node, 0.0), floor)

    data = []
    for node in ALL_NODES:
        if node in active:
            value = rng.uniform(*ACTIVE_BAND)
            value = max(value, floors.get(node, 0.0))
        else:
            value = rng.uniform(*DORMANT_BAND)
        data.append(ChakraBalanceDatum(node=node, name=node_name(node), value=round(value, 2)))
    return data


# ============================================================================
# HISTORY: timeline + milestones
# ============================================================================

def generate_emotional_history(
    reflections: Sequence[ReflectionEntry],
    depths: Sequence[float],
    today: Optional[date] = None,
) -> EmotionalHistory:
    """
    Timeline and milestones from reflection history.

    Args:
        reflections: Newest first, as the reflection store returns them
        depths: Depth score per reflection, same order
        today: Reference day for padding and the consistency milestone

    Timeline runs oldest to newest with synthetic growth
    min(30 + index*8 + depth*30, 100), padded with empty days to seven points.
    """
    today = today or date.today()
    if len(depths) != len(reflections):
        raise ValueError("depths must align with reflections")

    chronological = list(zip(reflections, depths))[::-1]
    timeline = []
    for index, (entry, depth) in enumerate(chronological):
        day = entry.created_at.date()
        timeline.append(TimelinePoint(
            date=day,
            label=short_label(day),
            growth_score=round(min(30 + index * 8 + depth * 30, 100), 2),
            dominant_emotion=entry.dominant_emotion or "Growth",
        ))

    for i in range(len(timeline), TIMELINE_MIN_POINTS):
        day = today - timedelta(days=TIMELINE_MIN_POINTS - i)
        timeline.append(TimelinePoint(
            date=day, label=short_label(day), growth_score=0, dominant_emotion="None",
        ))

    milestones = []
    if chronological:
        first_day = chronological[0][0].created_at.date()
        milestones.append(Milestone(
            date=first_day,
            label=long_label(first_day),
            title="Journey Began",
            description="You started your emotional reflection practice",
        ))

        # first occurrence wins on ties, matching list order newest-first
        deepest = max(range(len(depths)), key=lambda k: depths[k])
        deepest_day = reflections[deepest].created_at.date()
        milestones.append(Milestone(
            date=deepest_day,
            label=long_label(deepest_day),
            title="Deepest Reflection",
            description="You reached a new level of emotional depth in your practice",
        ))

    if len(reflections) >= CONSISTENCY_THRESHOLD:
        milestones.append(Milestone(
            date=today,
            label=long_label(today),
            title="Consistent Practice",
            description="Your regular reflection practice is strengthening your emotional intelligence",
        ))

    return EmotionalHistory(timeline=tuple(timeline), milestones=tuple(milestones))


# ============================================================================
# RECOMMENDATIONS
# ============================================================================

def generate_recommendations(
    activated: Sequence[int],
    emotions: Sequence[str],
) -> List[Recommendation]:
    """
    Suggestions for dormant nodes first, then for dominant emotions, then
    the generic daily practice if fewer than two. Unique titles, at most four.
    """
    active = set(activated)
    picked: List[Recommendation] = []
    titles = set()

    def add(template) -> None:
        if template.title not in titles:
            titles.add(template.title)
            picked.append(Recommendation(title=template.title, description=template.description))

    for node, template in NODE_RECOMMENDATIONS.items():
        if node not in active:
            add(template)

    for label in emotions:
        template = EMOTION_RECOMMENDATIONS.get(category_for_label(label))
        if template:
            add(template)

    if len(picked) < 2:
        add(GENERIC_RECOMMENDATION)

    return picked[:MAX_RECOMMENDATIONS]
