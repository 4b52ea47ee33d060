# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Journey Event Bus — publish side of the engine.

The engine never calls renderers. It emits:
    bus.emit(Events.STATE_COMPUTED, {"user_id": "u1", "snapshot": snap})

and whoever draws things subscribes:
    bus.on(Events.RESONANCE_UPDATED, redraw_lines)

Sync handlers run inline. Async handlers are scheduled on the running loop
from emit(), or awaited by emit_async(). A failing handler is logged and
never reaches the emitter.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger("journey.events")


class Events:
    """Event type registry. Use these constants, not raw strings."""

    REFLECTIONS_FETCHED = "reflections_fetched"
    FETCH_FAILED = "fetch_failed"
    JOURNEY_SHORTCUT = "journey_shortcut"
    STATE_COMPUTED = "state_computed"
    RESONANCE_UPDATED = "resonance_updated"
    LIVE_VIEW_MOUNTED = "live_view_mounted"
    LIVE_VIEW_UNMOUNTED = "live_view_unmounted"


@dataclass
class Event:
    type: str
    data: Dict[str, Any]
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    source: Optional[str] = None


@dataclass
class Subscriber:
    callback: Callable[[Event], Any]
    priority: int = 0  # higher = called first
    once: bool = False
    source: Optional[str] = None
    is_async: bool = False


class EventBus:
    """Priority-ordered pub/sub with a short history. Thread-safe."""

    def __init__(self, history_size: int = 100):
        self._subscribers: Dict[str, List[Subscriber]] = {}
        self._history: List[Event] = []
        self._history_size = history_size
        self._lock = threading.Lock()

    def on(
        self,
        event_type: str,
        callback: Callable,
        priority: int = 0,
        source: Optional[str] = None,
        once: bool = False,
    ) -> None:
        """Subscribe a sync or async callback."""
        sub = Subscriber(
            callback=callback,
            priority=priority,
            once=once,
            source=source,
            is_async=asyncio.iscoroutinefunction(callback),
        )
        with self._lock:
            subs = self._subscribers.setdefault(event_type, [])
            subs.append(sub)
            subs.sort(key=lambda s: -s.priority)

    def once(self, event_type: str, callback: Callable, priority: int = 0,
             source: Optional[str] = None) -> None:
        """Subscribe, auto-remove after the first call."""
        self.on(event_type, callback, priority=priority, source=source, once=True)

    def off(self, event_type: str, callback: Callable) -> bool:
        """Unsubscribe. Returns True if something was removed."""
        with self._lock:
            subs = self._subscribers.get(event_type, [])
            kept = [s for s in subs if s.callback is not callback]
            self._subscribers[event_type] = kept
            return len(kept) < len(subs)

    def _record(self, event: Event) -> List[Subscriber]:
        with self._lock:
            self._history.append(event)
            if len(self._history) > self._history_size:
                self._history = self._history[-self._history_size:]
            subs = list(self._subscribers.get(event.type, []))
            spent = [s for s in subs if s.once]
            if spent:
                self._subscribers[event.type] = [
                    s for s in self._subscribers[event.type] if not s.once
                ]
        return subs

    def _log_failure(self, event: Event, sub: Subscriber, exc: Exception) -> None:
        logger.error(
            "Event handler error: %s -> %s: %s",
            event.type, sub.source or getattr(sub.callback, "__name__", "?"), exc,
        )

    def emit(self, event_type: str, data: Optional[Dict[str, Any]] = None,
             source: Optional[str] = None) -> Event:
        """Dispatch now. Async handlers are scheduled if a loop is running."""
        event = Event(type=event_type, data=data or {}, source=source)
        for sub in self._record(event):
            try:
                if sub.is_async:
                    try:
                        loop = asyncio.get_running_loop()
                    except RuntimeError:
                        logger.debug("No event loop for async handler on %s", event_type)
                        continue
                    loop.create_task(sub.callback(event))
                else:
                    sub.callback(event)
            except Exception as e:
                self._log_failure(event, sub, e)
        return event

    async def emit_async(self, event_type: str, data: Optional[Dict[str, Any]] = None,
                         source: Optional[str] = None) -> Event:
        """Dispatch and await async handlers in priority order."""
        event = Event(type=event_type, data=data or {}, source=source)
        for sub in self._record(event):
            try:
                if sub.is_async:
                    await sub.callback(event)
                else:
                    sub.callback(event)
            except Exception as e:
                self._log_failure(event, sub, e)
        return event

    def history(self, event_type: Optional[str] = None, limit: int = 20) -> List[Event]:
        with self._lock:
            events = self._history
            if event_type:
                events = [e for e in events if e.type == event_type]
            return list(events[-limit:])

    def subscriber_count(self, event_type: str) -> int:
        with self._lock:
            return len(self._subscribers.get(event_type, []))

    def reset(self) -> None:
        """Clear subscribers and history. For testing."""
        with self._lock:
            self._subscribers.clear()
            self._history.clear()


# ============================================================================
# SINGLETON: the global engine bus
# ============================================================================

bus = EventBus()
