# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Journey Paths — single source of truth for all data file locations.

Resolution order:
  1. JOURNEY_DATA_DIR environment variable
  2. Default: ~/.journey/

Usage:
    from core.paths import get_paths
    p = get_paths()
    p.config_file        # ~/.journey/journey-config.json
    p.reflections_dir    # ~/.journey/journey-reflections/
    p.engine_log         # ~/.journey/journey-engine.log

For tests:
    from core.paths import configure
    configure(tmp_path)  # all paths now rooted under tmp_path
"""

import os
from pathlib import Path
from typing import Optional


class JourneyPaths:
    """Registry of every file and directory the engine touches."""

    def __init__(self, data_dir: Optional[Path] = None):
        if data_dir is not None:
            self._root = Path(data_dir)
        else:
            env = os.environ.get("JOURNEY_DATA_DIR")
            if env:
                self._root = Path(env).expanduser()
            else:
                self._root = Path.home() / ".journey"

    @property
    def data_dir(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    @property
    def config_file(self) -> Path:
        return self._root / "journey-config.json"

    # ------------------------------------------------------------------
    # Local reflection store (one JSONL file per user)
    # ------------------------------------------------------------------
    @property
    def reflections_dir(self) -> Path:
        return self._root / "journey-reflections"

    def reflections_file(self, user_id: str) -> Path:
        return self.reflections_dir / f"{_safe_name(user_id)}.jsonl"

    # ------------------------------------------------------------------
    # Precomputed journey summaries (one JSON file per user)
    # ------------------------------------------------------------------
    @property
    def precomputed_dir(self) -> Path:
        return self._root / "journey-precomputed"

    def precomputed_file(self, user_id: str) -> Path:
        return self.precomputed_dir / f"{_safe_name(user_id)}.json"

    # ------------------------------------------------------------------
    # Logs
    # ------------------------------------------------------------------
    @property
    def engine_log(self) -> Path:
        return self._root / "journey-engine.log"

    def ensure_dirs(self) -> None:
        """Create all required directories."""
        for d in (self.data_dir, self.reflections_dir, self.precomputed_dir):
            d.mkdir(parents=True, exist_ok=True)


def _safe_name(user_id: str) -> str:
    # user ids come from outside; keep them from escaping the store dir
    return "".join(c if c.isalnum() or c in "-_" else "_" for c in str(user_id)) or "_"


# ===========================================================================
# Singleton
# ===========================================================================

_instance: Optional[JourneyPaths] = None


def get_paths() -> JourneyPaths:
    """Return the global JourneyPaths singleton (lazy-init)."""
    global _instance
    if _instance is None:
        _instance = JourneyPaths()
    return _instance


def configure(data_dir: Path) -> JourneyPaths:
    """
    Override the global paths singleton. Used by tests and CLI --data-dir.

    Returns the new instance for convenience.
    """
    global _instance
    _instance = JourneyPaths(data_dir=data_dir)
    return _instance


def reset() -> None:
    """Reset singleton so next get_paths() re-reads env."""
    global _instance
    _instance = None
