# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
JourneyEngine — async orchestrator for one user's journey.

    engine = JourneyEngine("u1", JsonlReflectionSource())
    snapshot = await engine.refresh(theme="love")
    await engine.mount_live_view()     # resonance edges every 100 ms
    ...
    await engine.unmount_live_view()

refresh() never raises. A failed fetch is logged, published as
fetch_failed, and the last good snapshot stays in place. Overlapping
refreshes are resolved by generation: only the newest pass publishes.
"""

import asyncio
import logging
import random
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from engine.events import EventBus, Events
from engine.events import bus as default_bus
from engine.pipeline import (
    analyze_affective_state,
    build_snapshot,
    parse_reflections,
    state_from_precomputed,
)
from engine.resonance import Clock, ResonanceScheduler, build_resonance_edges, wall_clock_ms
from engine.schemas import (
    AffectiveState,
    EngineConfig,
    JourneySnapshot,
    PrecomputedJourney,
    ReflectionEntry,
    ReflectionFetchError,
    ResonanceEdge,
)
from engine.sources import ReflectionSource

logger = logging.getLogger("journey.service")


class JourneyEngine:
    """
    Owns the current snapshot for a user and keeps it fresh.

    Args:
        user_id: Whose reflections to analyze
        source: ReflectionSource to fetch from
        config: EngineConfig (defaults if omitted)
        clock: Epoch-ms time source; pins jitter, dates and computed_at
        rng: random.Random for radar values
        bus: EventBus to publish on (default: the global engine bus)
    """

    def __init__(
        self,
        user_id: str,
        source: ReflectionSource,
        config: Optional[EngineConfig] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        bus: Optional[EventBus] = None,
    ):
        self.user_id = user_id
        self.source = source
        self.config = config or EngineConfig()
        self._clock = clock or wall_clock_ms
        self._rng = rng or random.Random()
        self._bus = bus if bus is not None else default_bus

        self.snapshot = JourneySnapshot()
        self.loading = False
        self.last_error: Optional[str] = None
        self._state: Optional[AffectiveState] = None
        self._reflections: Tuple[ReflectionEntry, ...] = ()
        self._generation = 0
        self._scheduler: Optional[ResonanceScheduler] = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> AffectiveState:
        return self.snapshot.state

    @property
    def reflections(self) -> Tuple[ReflectionEntry, ...]:
        return self._reflections

    @property
    def displayed_insights(self) -> Tuple[str, ...]:
        return self.snapshot.insights[:self.config.insight_display_limit]

    @property
    def live(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def get_intensity(self, node: int) -> float:
        return self.snapshot.get_intensity(node)

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    async def refresh(self, theme: Optional[str] = None) -> JourneySnapshot:
        """
        Recompute the snapshot. Returns the published snapshot, or the
        retained one if this pass failed or was superseded.
        """
        self._generation += 1
        generation = self._generation
        self.loading = True
        try:
            state, reflections = await self._analyze(theme)
        except ReflectionFetchError as e:
            self._fail(generation, str(e))
            return self.snapshot
        except Exception as e:
            logger.exception("Journey analysis crashed for %s", self.user_id)
            self._fail(generation, f"{type(e).__name__}: {e}")
            return self.snapshot
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            logger.debug("Discarding stale pass %d for %s", generation, self.user_id)
            return self.snapshot

        self._publish(state, reflections)
        return self.snapshot

    async def _analyze(
        self, theme: Optional[str],
    ) -> Tuple[AffectiveState, Tuple[ReflectionEntry, ...]]:
        policy = self.config.growth_policy

        # summaries are computed without a theme, so a theme forces re-analysis
        if self.config.use_precomputed and not theme:
            journey = await self._fetch_precomputed()
            if journey is not None:
                reflections = tuple(parse_reflections(journey.recent_reflections))
                self._bus.emit(Events.JOURNEY_SHORTCUT, {
                    "user_id": self.user_id,
                    "count": journey.recent_reflection_count,
                }, source="service")
                state = state_from_precomputed(journey, policy, previous=self._state)
                return state, reflections

        rows = await self._fetch_reflections()
        reflections = tuple(parse_reflections(rows))
        self._bus.emit(Events.REFLECTIONS_FETCHED, {
            "user_id": self.user_id,
            "count": len(reflections),
        }, source="service")
        state = analyze_affective_state(reflections, theme, policy=policy, previous=self._state)
        return state, reflections

    async def _fetch_precomputed(self) -> Optional[PrecomputedJourney]:
        try:
            return await self.source.fetch_precomputed_journey(self.user_id)
        except Exception as e:
            # the shortcut is optional; fall through to raw reflections
            logger.warning("Precomputed journey unavailable for %s: %s", self.user_id, e)
            return None

    async def _fetch_reflections(self) -> List[Dict[str, Any]]:
        """Fetch with bounded retry and exponential backoff."""
        retries = self.config.fetch_retries
        for attempt in range(retries + 1):
            try:
                rows = await self.source.fetch_reflections(self.user_id, self.config.fetch_limit)
                return list(rows or [])
            except Exception as e:
                if attempt >= retries:
                    if isinstance(e, ReflectionFetchError):
                        raise
                    raise ReflectionFetchError(str(e)) from e
                delay = self.config.fetch_backoff * (2 ** attempt)
                logger.warning(
                    "Fetch attempt %d/%d failed for %s: %s (retrying in %.2fs)",
                    attempt + 1, retries + 1, self.user_id, e, delay,
                )
                await asyncio.sleep(delay)
        return []

    def _publish(self, state: AffectiveState, reflections: Tuple[ReflectionEntry, ...]) -> None:
        if state is self._state and reflections == self._reflections:
            logger.debug("Journey unchanged for %s", self.user_id)
        else:
            now_ms = self._clock()
            stamp = datetime.fromtimestamp(now_ms / 1000.0)
            snapshot = build_snapshot(
                state,
                reflections,
                now_ms=now_ms,
                today=stamp.date(),
                rng=self._rng,
                threshold=self.config.edge_threshold,
                computed_at=stamp,
            )
            self.snapshot = snapshot
            self._state = state
            self._reflections = reflections

        self.last_error = None
        logger.info(
            "Journey computed for %s: growth=%.0f nodes=%s emotions=%s",
            self.user_id, self.snapshot.growth_score,
            list(self.snapshot.activated_nodes), list(self.snapshot.dominant_emotions),
        )
        self._bus.emit(Events.STATE_COMPUTED, {
            "user_id": self.user_id,
            "snapshot": self.snapshot,
        }, source="service")

    def _fail(self, generation: int, message: str) -> None:
        if generation != self._generation:
            return
        self.last_error = message
        logger.error("Journey refresh failed for %s: %s", self.user_id, message)
        self._bus.emit(Events.FETCH_FAILED, {
            "user_id": self.user_id,
            "error": message,
        }, source="service")

    # ------------------------------------------------------------------
    # Live view
    # ------------------------------------------------------------------

    async def mount_live_view(self) -> None:
        """Start recomputing resonance edges on the configured interval."""
        if self.live:
            return
        self._scheduler = ResonanceScheduler(
            lambda: self.snapshot.activated_nodes,
            self._on_edges,
            interval_ms=self.config.resonance_interval_ms,
            clock=self._clock,
            threshold=self.config.edge_threshold,
        )
        await self._scheduler.start()
        self._bus.emit(Events.LIVE_VIEW_MOUNTED, {
            "user_id": self.user_id,
            "interval_ms": self.config.resonance_interval_ms,
        }, source="service")

    async def unmount_live_view(self) -> None:
        """Stop the timer. Safe to call when nothing is mounted."""
        scheduler, self._scheduler = self._scheduler, None
        if scheduler is None:
            return
        await scheduler.stop()
        # live edges go with the timer; fall back to a single still frame
        self.snapshot = self.snapshot.with_edges(build_resonance_edges(
            self.snapshot.activated_nodes,
            clock=self._clock,
            threshold=self.config.edge_threshold,
        ))
        self._bus.emit(Events.LIVE_VIEW_UNMOUNTED, {
            "user_id": self.user_id,
            "ticks": scheduler.ticks,
        }, source="service")

    def _on_edges(self, edges: Sequence[ResonanceEdge]) -> None:
        self.snapshot = self.snapshot.with_edges(edges)
        self._bus.emit(Events.RESONANCE_UPDATED, {
            "user_id": self.user_id,
            "edges": self.snapshot.resonance_edges,
        }, source="resonance")

    async def close(self) -> None:
        await self.unmount_live_view()
        await self.source.close()
