# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Journey analysis, node state, resonance, recommendations and depth tools."""

import asyncio
import json
import logging
import os
from typing import Dict, Optional

from core.paths import get_paths
from engine.content import depth_category, depth_feedback, evaluate_emotional_depth, rank_emotions
from engine.lexicon import category_label, node_name
from engine.resonance import build_resonance_edges
from engine.schemas import EngineConfig, load_validated
from engine.service import JourneyEngine
from engine.sources import HttpReflectionSource, JsonlReflectionSource, ReflectionSource
from journey_mcp._app import tool

logger = logging.getLogger("journey.tools")

MAX_WATCH_MS = 10_000

_engines: Dict[str, JourneyEngine] = {}


def load_config() -> EngineConfig:
    return load_validated(get_paths().config_file, EngineConfig)


def make_source(config: EngineConfig) -> ReflectionSource:
    """HTTP source when an API url is configured, local JSONL store otherwise."""
    if config.reflection_api_url:
        return HttpReflectionSource(
            config.reflection_api_url,
            token=os.environ.get("JOURNEY_API_TOKEN"),
            timeout=config.fetch_timeout,
        )
    return JsonlReflectionSource()


def get_engine(user_id: str) -> JourneyEngine:
    engine = _engines.get(user_id)
    if engine is None:
        config = load_config()
        engine = JourneyEngine(user_id, make_source(config), config=config)
        _engines[user_id] = engine
        logger.info("Engine created for %s", user_id)
    return engine


async def close_engines() -> None:
    """Stop live views and close sources for every cached engine."""
    engines = list(_engines.values())
    _engines.clear()
    for engine in engines:
        await engine.close()


async def _ready(user_id: str) -> JourneyEngine:
    engine = get_engine(user_id)
    if engine.snapshot.computed_at is None:
        await engine.refresh()
    return engine


def _error_line(engine: JourneyEngine) -> str:
    if engine.last_error:
        return f"\n(last refresh failed: {engine.last_error}; showing previous journey)"
    return ""


@tool()
async def journey_analyze(user_id: str, theme: Optional[str] = None) -> str:
    """
    Analyze a user's reflections and return the full journey snapshot as JSON.

    Args:
        user_id: Whose reflections to analyze
        theme: Optional selected theme (love, peace, power, wisdom,
               creativity, spirituality, healing)

    Returns:
        camelCase JSON with growthScore, activatedNodes, dominantEmotions,
        insights, chakraBalanceData, emotionalHistoryData,
        emotionalRecommendations and resonanceEdges
    """
    engine = get_engine(user_id)
    snapshot = await engine.refresh(theme=theme)
    payload = snapshot.to_dict()
    if engine.last_error:
        payload["error"] = engine.last_error
    return json.dumps(payload, indent=2)


@tool()
async def journey_state(user_id: str, refresh: bool = False) -> str:
    """
    Current affective state: growth, activated nodes with intensity,
    dominant emotions and insights.

    Args:
        user_id: Whose journey
        refresh: Re-fetch reflections before reporting
    """
    if refresh:
        engine = get_engine(user_id)
        await engine.refresh()
    else:
        engine = await _ready(user_id)

    snap = engine.snapshot
    lines = [f"Growth: {snap.growth_score:.0f}/100"]

    if snap.activated_nodes:
        lines.append("Activated nodes:")
        for node in snap.activated_nodes:
            lines.append(f"  {node_name(node)} ({node}): intensity {snap.get_intensity(node):.2f}")
    else:
        lines.append("Activated nodes: none yet")

    if snap.dominant_emotions:
        lines.append(f"Dominant emotions: {', '.join(snap.dominant_emotions)}")

    insights = engine.displayed_insights
    if insights:
        lines.append("Insights:")
        lines.extend(f"  - {text}" for text in insights)

    return "\n".join(lines) + _error_line(engine)


@tool()
async def journey_resonance(user_id: str, watch_ms: int = 0) -> str:
    """
    Resonance links between activated nodes.

    Args:
        user_id: Whose journey
        watch_ms: If > 0, run the live resonance timer this long
                  (max 10000) and report the last published edges

    Returns:
        One line per edge: "Heart <-> Throat  0.84"
    """
    engine = await _ready(user_id)

    if watch_ms > 0:
        await engine.mount_live_view()
        try:
            await asyncio.sleep(min(watch_ms, MAX_WATCH_MS) / 1000.0)
        finally:
            await engine.unmount_live_view()
        edges = engine.snapshot.resonance_edges
    else:
        edges = build_resonance_edges(
            engine.snapshot.activated_nodes,
            threshold=engine.config.edge_threshold,
        )

    if not edges:
        return "No resonance yet. At least two nodes must be active."

    lines = [
        f"{node_name(e.a)} <-> {node_name(e.b)}  {e.intensity:.2f}"
        for e in sorted(edges, key=lambda e: -e.intensity)
    ]
    return "\n".join(lines) + _error_line(engine)


@tool()
async def journey_recommendations(user_id: str) -> str:
    """Practice suggestions for dormant nodes and dominant emotions."""
    engine = await _ready(user_id)
    recs = engine.snapshot.emotional_recommendations
    if not recs:
        return "No recommendations."
    return "\n\n".join(f"{r.title}\n  {r.description}" for r in recs) + _error_line(engine)


@tool()
def journey_depth(text: str) -> str:
    """
    Score the emotional depth of a single reflection.

    Args:
        text: The reflection body

    Returns:
        Depth score, category, feedback and detected emotions
    """
    if not text or not text.strip():
        return "Nothing to score. Write a reflection first."

    score = evaluate_emotional_depth(text)
    ranked = rank_emotions(text.lower())
    lines = [
        f"Depth: {score:.2f} ({depth_category(score)})",
        depth_feedback(score),
    ]
    if ranked:
        found = ", ".join(f"{category_label(r['category'])} x{r['count']}" for r in ranked)
        lines.append(f"Emotions: {found}")
    return "\n".join(lines)
