# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Journey Schema Registry — Pydantic models for every structure the engine
reads or hands to rendering.

Two families:
  - Input records (ReflectionEntry, PrecomputedJourney, EngineConfig) use
    extra="allow" so rows from the reflection store with unknown columns
    don't break validation.
  - Engine outputs (AffectiveState, JourneySnapshot, ...) are frozen. Each
    analysis pass builds new objects; nothing is patched in place.

Outputs serialize to camelCase for the rendering side:
    snapshot.to_dict()   # {"growthScore": 70, "activatedNodes": [...], ...}

Usage:
    from engine.schemas import ReflectionEntry, load_validated, EngineConfig

    config = load_validated(get_paths().config_file, EngineConfig)
"""

import json
import logging
import os
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger("journey.schemas")


# ============================================================================
# Base config
# ============================================================================

class JourneyModel(BaseModel):
    """Base for records coming from outside. Allows extra fields."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class OutputModel(BaseModel):
    """Base for engine outputs. Immutable, camelCase on the wire."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# ============================================================================
# Exceptions
# ============================================================================

class JourneyError(Exception):
    """Base class for engine errors."""

class ReflectionFetchError(JourneyError):
    """Raised by a reflection source when history can't be retrieved."""

class JourneyValidationError(JourneyError):
    """Raised when engine input is out of range (bad node index, etc.)."""


# ============================================================================
# INPUT RECORDS
# ============================================================================

class ReflectionEntry(JourneyModel):
    """Single journal reflection, as owned by the reflection store."""
    id: str
    content: str
    created_at: datetime = Field(alias="createdAt")
    dominant_emotion: Optional[str] = Field(None, alias="dominantEmotion")
    emotional_depth: Optional[float] = Field(None, alias="emotionalDepth", ge=0.0, le=1.0)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        # stores hand out integer primary keys as often as uuids
        if isinstance(v, int):
            return str(v)
        return v


class PrecomputedJourney(JourneyModel):
    """Summary a store may have already computed for a user."""
    recent_reflection_count: int = Field(0, ge=0)
    average_emotional_depth: float = Field(0.0, ge=0.0, le=1.0)
    activated_chakras: List[int] = Field(default_factory=list)
    dominant_emotions: List[str] = Field(default_factory=list)
    insights: List[str] = Field(default_factory=list)
    last_reflection_date: Optional[datetime] = None
    recent_reflections: List[Dict[str, Any]] = Field(default_factory=list)


class EngineConfig(JourneyModel):
    """Engine tuning: ~/.journey/journey-config.json"""
    resonance_interval_ms: int = Field(100, ge=10)
    edge_threshold: float = Field(0.3, ge=0.0, le=1.0)
    fetch_limit: int = Field(20, ge=1)
    fetch_retries: int = Field(2, ge=0, le=10)
    fetch_backoff: float = Field(0.25, ge=0.0)
    growth_policy: str = "baseline"  # baseline | depth
    insight_display_limit: int = Field(3, ge=1)
    use_precomputed: bool = True
    reflection_api_url: Optional[str] = None  # unset -> local JSONL store
    fetch_timeout: float = Field(10.0, gt=0.0)

    @field_validator("growth_policy")
    @classmethod
    def _known_policy(cls, v: str) -> str:
        if v not in ("baseline", "depth"):
            raise ValueError(f"unknown growth policy: {v}")
        return v


# ============================================================================
# ENGINE OUTPUTS
# ============================================================================

class AffectiveState(OutputModel):
    """The primary analysis result. Node order is activation order."""
    growth_score: float = Field(0.0, ge=0.0, le=100.0)
    activated_nodes: Tuple[int, ...] = ()
    dominant_emotions: Tuple[str, ...] = ()
    insights: Tuple[str, ...] = ()


class ResonanceEdge(OutputModel):
    """Weighted link between two simultaneously activated nodes (a < b)."""
    a: int = Field(ge=0, le=6)
    b: int = Field(ge=0, le=6)
    intensity: float = Field(ge=0.0, le=1.0)


class ChakraBalanceDatum(OutputModel):
    node: int
    name: str
    value: float = Field(ge=0.0, le=100.0)
    full_mark: int = 100


class TimelinePoint(OutputModel):
    date: date
    label: str
    growth_score: float
    dominant_emotion: str


class Milestone(OutputModel):
    date: date
    label: str
    title: str
    description: str


class EmotionalHistory(OutputModel):
    timeline: Tuple[TimelinePoint, ...] = ()
    milestones: Tuple[Milestone, ...] = ()


class Recommendation(OutputModel):
    title: str
    description: str


class JourneySnapshot(OutputModel):
    """Everything the rendering side needs for one analysis pass."""
    growth_score: float = 0.0
    activated_nodes: Tuple[int, ...] = ()
    dominant_emotions: Tuple[str, ...] = ()
    insights: Tuple[str, ...] = ()
    chakra_balance_data: Tuple[ChakraBalanceDatum, ...] = ()
    emotional_history_data: EmotionalHistory = Field(default_factory=EmotionalHistory)
    emotional_recommendations: Tuple[Recommendation, ...] = ()
    resonance_edges: Tuple[ResonanceEdge, ...] = ()
    computed_at: Optional[datetime] = None

    @property
    def state(self) -> AffectiveState:
        return AffectiveState(
            growth_score=self.growth_score,
            activated_nodes=self.activated_nodes,
            dominant_emotions=self.dominant_emotions,
            insights=self.insights,
        )

    def get_intensity(self, node: int) -> float:
        """Display intensity for a node, see engine.intensity."""
        from engine.intensity import node_intensity
        return node_intensity(node, self.state)

    def with_edges(self, edges) -> "JourneySnapshot":
        """New snapshot sharing everything but the resonance edges."""
        return self.model_copy(update={"resonance_edges": tuple(edges)})


# ============================================================================
# UTILITY: validated load/save helpers
# ============================================================================

T = TypeVar("T", bound=BaseModel)


def load_validated(path: Path, schema: Type[T], default: Any = None) -> T:
    """
    Load JSON from file and validate against schema.

    Missing or invalid files fall back to `default` (validated) or to
    schema() with all defaults.
    """
    if not path.exists():
        if default is not None:
            return schema.model_validate(default)
        return schema()

    try:
        data = json.loads(path.read_text())
        return schema.model_validate(data)
    except (json.JSONDecodeError, ValidationError, OSError) as e:
        logger.warning("Invalid %s at %s, using defaults: %s", schema.__name__, path, e)
        if default is not None:
            return schema.model_validate(default)
        return schema()


def save_validated(path: Path, model: BaseModel, atomic: bool = True) -> None:
    """Save a model as JSON. Atomic writes go to .tmp then rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    content = model.model_dump_json(indent=2)

    if atomic:
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(content)
        os.replace(str(tmp), str(path))
    else:
        path.write_text(content)


def load_jsonl(path: Path) -> List[Dict[str, Any]]:
    """Read raw rows from a JSONL file. Unparseable lines are skipped."""
    if not path.exists():
        return []
    rows = []
    for lineno, line in enumerate(path.read_text().splitlines(), 1):
        line = line.strip()
        if not line:
            continue
        try:
            rows.append(json.loads(line))
        except json.JSONDecodeError:
            logger.warning("Skipping bad JSONL line %d in %s", lineno, path)
    return rows
