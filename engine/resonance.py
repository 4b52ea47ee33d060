# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Resonance Graph Builder — weighted links between activated nodes.

Each pair of activated nodes gets:
    static affinity (lexicon.AFFINITY)
    x bridge factor (how much of the body between them is also active)
    + organic jitter sin(now/5000 + i*j) * 0.1
clamped to [0, 1]; only pairs above the threshold (0.3) become edges.

The jitter is wall-clock driven, so two calls at different instants can
legitimately disagree. Pass now_ms (or a clock) to pin it.

ResonanceScheduler runs the builder on a timer for a mounted live view:
    scheduler = ResonanceScheduler(lambda: state.activated_nodes, publish)
    await scheduler.start()
    ...
    await scheduler.stop()   # cancels the task, drops the edges
"""

import asyncio
import inspect
import logging
import math
import time
from itertools import combinations
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple

from engine.lexicon import AFFINITY, NODE_COUNT, NODES
from engine.schemas import ResonanceEdge

logger = logging.getLogger("journey.resonance")

EDGE_THRESHOLD = 0.3
JITTER_AMPLITUDE = 0.1
JITTER_PERIOD_MS = 5000.0

# Share of the affinity that depends on intermediate nodes being active
_BRIDGE_WEIGHT = 0.25

Clock = Callable[[], float]


def wall_clock_ms() -> float:
    return time.time() * 1000.0


def resonance_score(i: int, j: int, activated: Iterable[int]) -> float:
    """
    Unperturbed resonance for a node pair given the full activation.

    Adjacent pairs carry their whole affinity. Distant pairs keep 75% of it
    and earn the rest back as the nodes between them light up.
    """
    if i == j:
        return 0.0
    a, b = (i, j) if i < j else (j, i)
    base = AFFINITY[(a, b)]

    lo, hi = sorted((NODES[a].position, NODES[b].position))
    between = [n.index for n in NODES if lo < n.position < hi]
    if between:
        active = set(activated)
        bridge = sum(1 for n in between if n in active) / len(between)
    else:
        bridge = 1.0

    return base * ((1.0 - _BRIDGE_WEIGHT) + _BRIDGE_WEIGHT * bridge)


def organic_jitter(i: int, j: int, now_ms: float) -> float:
    return math.sin(now_ms / JITTER_PERIOD_MS + i * j) * JITTER_AMPLITUDE


def build_resonance_edges(
    activated: Sequence[int],
    now_ms: Optional[float] = None,
    clock: Optional[Clock] = None,
    threshold: float = EDGE_THRESHOLD,
) -> Tuple[ResonanceEdge, ...]:
    """
    Edges between every activated pair whose jittered score beats threshold.

    Args:
        activated: Activated node indices (order irrelevant, duplicates ignored)
        now_ms: Fixed instant in epoch milliseconds
        clock: Time source used when now_ms is None (default: wall clock)
        threshold: Minimum score, exclusive
    """
    nodes = sorted({n for n in activated if 0 <= n < NODE_COUNT})
    if len(nodes) < 2:
        return ()
    if now_ms is None:
        now_ms = (clock or wall_clock_ms)()

    edges = []
    for i, j in combinations(nodes, 2):
        score = resonance_score(i, j, nodes) + organic_jitter(i, j, now_ms)
        score = min(max(score, 0.0), 1.0)
        if score > threshold:
            edges.append(ResonanceEdge(a=i, b=j, intensity=round(score, 4)))
    return tuple(edges)


# ============================================================================
# SCHEDULER: timer -> recompute -> publish
# ============================================================================

class ResonanceScheduler:
    """
    Recomputes resonance edges on a fixed interval while a view is mounted.

    Args:
        nodes_provider: Returns the current activated nodes on each tick
        publish: Called with the new edge tuple (sync or async)
        interval_ms: Tick interval; ~100 for smooth animation, ~1000 coarse
        clock: Time source in epoch ms, injectable for tests
        threshold: Edge threshold
    """

    def __init__(
        self,
        nodes_provider: Callable[[], Sequence[int]],
        publish: Optional[Callable[[Tuple[ResonanceEdge, ...]], Any]] = None,
        interval_ms: int = 100,
        clock: Optional[Clock] = None,
        threshold: float = EDGE_THRESHOLD,
    ):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.interval_ms = interval_ms
        self._nodes_provider = nodes_provider
        self._publish = publish
        self._clock = clock or wall_clock_ms
        self._threshold = threshold
        self._task: Optional[asyncio.Task] = None
        self._edges: Tuple[ResonanceEdge, ...] = ()
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def edges(self) -> Tuple[ResonanceEdge, ...]:
        return self._edges

    async def tick(self) -> Tuple[ResonanceEdge, ...]:
        """Recompute once and publish."""
        edges = build_resonance_edges(
            self._nodes_provider(), clock=self._clock, threshold=self._threshold,
        )
        self._edges = edges
        self.ticks += 1
        if self._publish is not None:
            result = self._publish(edges)
            if inspect.isawaitable(result):
                await result
        return edges

    async def start(self) -> None:
        """Compute immediately, then keep ticking in a background task."""
        if self.running:
            logger.warning("Resonance scheduler already running")
            return
        await self.tick()
        self._task = asyncio.create_task(self._loop())
        logger.debug("Resonance scheduler started (%d ms)", self.interval_ms)

    async def stop(self) -> None:
        """Cancel the timer and discard edges. Safe to call twice."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.debug("Resonance scheduler stopped after %d ticks", self.ticks)
        self._edges = ()

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_ms / 1000.0)
            try:
                await self.tick()
            except Exception as e:
                # a bad tick must not kill the animation
                logger.error("Resonance tick failed: %s", e)

    async def __aenter__(self) -> "ResonanceScheduler":
        await self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.stop()
