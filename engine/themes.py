# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Theme Seeder — turn an optional dream theme into starting nodes, emotions and insights."""

import logging
from typing import NamedTuple, Optional, Tuple

from engine.lexicon import THEME_ALIASES, THEMES

logger = logging.getLogger("journey.themes")


class ThemeSeed(NamedTuple):
    nodes: Tuple[int, ...] = ()
    emotions: Tuple[str, ...] = ()
    insights: Tuple[str, ...] = ()


EMPTY_SEED = ThemeSeed()


def normalize_theme(theme: Optional[str]) -> Optional[str]:
    """Canonical theme key, or None if the theme isn't in the vocabulary."""
    if not isinstance(theme, str):
        return None
    key = theme.strip().lower()
    if not key:
        return None
    key = THEME_ALIASES.get(key, key)
    return key if key in THEMES else None


def seed_theme(theme: Optional[str]) -> ThemeSeed:
    """Look up the seed for a theme. Unknown or absent themes seed nothing."""
    key = normalize_theme(theme)
    if key is None:
        if theme:
            logger.debug("Unrecognized theme %r, no seed", theme)
        return EMPTY_SEED
    entry = THEMES[key]
    return ThemeSeed(entry.nodes, (entry.emotion,), (entry.insight,))
