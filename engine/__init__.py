# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Journey engine - affective state, node activation and resonance from reflections."""

try:
    from importlib.metadata import version
    __version__ = version("journey-core")
except Exception:
    __version__ = "0.1.0"

from .schemas import AffectiveState, EngineConfig, JourneySnapshot, ReflectionEntry
from .pipeline import analyze_affective_state, analyze_journey, build_snapshot
from .service import JourneyEngine
