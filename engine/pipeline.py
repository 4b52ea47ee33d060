# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Journey Pipeline — the whole analysis as pure functions.

    raw rows -> parse_reflections -> analyze_affective_state -> build_snapshot

No I/O, no timers, no module state. Time and randomness come in as
arguments so a test can pin every value. engine.service wraps this with
fetching, retries and the live resonance timer.
"""

import logging
import random
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from engine.activation import MAX_EMOTIONS, merge_activation
from engine.content import analyze_content, combine_reflections, evaluate_emotional_depth
from engine.datasets import (
    generate_balance_data,
    generate_emotional_history,
    generate_recommendations,
)
from engine.growth import growth_score
from engine.lexicon import NODE_COUNT
from engine.resonance import EDGE_THRESHOLD, build_resonance_edges
from engine.schemas import (
    AffectiveState,
    JourneySnapshot,
    PrecomputedJourney,
    ReflectionEntry,
)
from engine.themes import seed_theme

logger = logging.getLogger("journey.pipeline")


def parse_reflections(rows: Iterable[Any]) -> List[ReflectionEntry]:
    """
    Validate raw reflection rows. Malformed rows are skipped, not fatal.

    Accepts ReflectionEntry instances or dicts (snake_case or camelCase).
    """
    entries = []
    skipped = 0
    for row in rows or ():
        if isinstance(row, ReflectionEntry):
            entries.append(row)
            continue
        if not isinstance(row, Mapping):
            skipped += 1
            continue
        try:
            entries.append(ReflectionEntry.model_validate(row))
        except ValidationError as e:
            skipped += 1
            logger.warning("Skipping malformed reflection %r: %d errors",
                           row.get("id", "?"), e.error_count())
    if skipped:
        logger.info("Parsed %d reflections, skipped %d malformed", len(entries), skipped)
    return entries


def reflection_depths(reflections: Sequence[ReflectionEntry]) -> Tuple[float, ...]:
    """Stored depth when the store has one, evaluated from content otherwise."""
    return tuple(
        r.emotional_depth if r.emotional_depth is not None
        else evaluate_emotional_depth(r.content)
        for r in reflections
    )


def analyze_affective_state(
    reflections: Sequence[ReflectionEntry],
    theme: Optional[str] = None,
    policy: str = "baseline",
    previous: Optional[AffectiveState] = None,
) -> AffectiveState:
    """
    Theme seed + content analysis + fallback ladder + growth.

    If the result equals `previous`, `previous` itself is returned so
    renderers keyed on identity don't redraw. It never feeds the scoring.
    """
    seed = seed_theme(theme)
    text = combine_reflections(r.content for r in reflections)
    top = analyze_content(text, limit=MAX_EMOTIONS)
    activation = merge_activation(seed, top, len(reflections))

    depths = reflection_depths(reflections) if policy == "depth" else None
    state = AffectiveState(
        growth_score=growth_score(len(reflections), depths, policy=policy),
        activated_nodes=activation.nodes,
        dominant_emotions=activation.emotions,
        insights=activation.insights,
    )
    if previous is not None and previous == state:
        return previous
    return state


def state_from_precomputed(
    journey: PrecomputedJourney,
    policy: str = "baseline",
    previous: Optional[AffectiveState] = None,
) -> AffectiveState:
    """
    Shortcut: trust a store-side summary instead of re-analyzing text.

    Same `previous` identity guard as analyze_affective_state.
    """
    nodes: List[int] = []
    for n in journey.activated_chakras:
        if 0 <= n < NODE_COUNT and n not in nodes:
            nodes.append(n)

    emotions: List[str] = []
    for e in journey.dominant_emotions:
        if e and e.lower() not in {x.lower() for x in emotions}:
            emotions.append(e)

    count = journey.recent_reflection_count
    depths = [journey.average_emotional_depth] if count else []
    state = AffectiveState(
        growth_score=growth_score(count, depths, policy=policy),
        activated_nodes=tuple(nodes),
        dominant_emotions=tuple(emotions[:MAX_EMOTIONS]),
        insights=tuple(dict.fromkeys(i for i in journey.insights if i)),
    )
    if previous is not None and previous == state:
        return previous
    return state


def build_snapshot(
    state: AffectiveState,
    reflections: Sequence[ReflectionEntry] = (),
    now_ms: Optional[float] = None,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
    threshold: float = EDGE_THRESHOLD,
    computed_at: Optional[datetime] = None,
) -> JourneySnapshot:
    """Derive every visualization dataset for a state."""
    depths = reflection_depths(reflections)
    return JourneySnapshot(
        growth_score=state.growth_score,
        activated_nodes=state.activated_nodes,
        dominant_emotions=state.dominant_emotions,
        insights=state.insights,
        chakra_balance_data=tuple(
            generate_balance_data(state.activated_nodes, state.dominant_emotions, rng=rng)
        ),
        emotional_history_data=generate_emotional_history(reflections, depths, today=today),
        emotional_recommendations=tuple(
            generate_recommendations(state.activated_nodes, state.dominant_emotions)
        ),
        resonance_edges=build_resonance_edges(
            state.activated_nodes, now_ms=now_ms, threshold=threshold,
        ),
        computed_at=computed_at or datetime.now(),
    )


def analyze_journey(
    rows: Iterable[Any],
    theme: Optional[str] = None,
    policy: str = "baseline",
    now_ms: Optional[float] = None,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> JourneySnapshot:
    """One-call pipeline: raw rows + theme to a full snapshot."""
    reflections = parse_reflections(rows)
    state = analyze_affective_state(reflections, theme, policy=policy)
    return build_snapshot(state, reflections, now_ms=now_ms, today=today, rng=rng)
