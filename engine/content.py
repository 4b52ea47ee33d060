# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Journey Content Analyzer — keyword counting over reflection text.

Deliberately simple: whole-word, case-insensitive stem counts per emotion
category. No semantics. Same text in, same ranking out.

Also scores reflection depth (how much a single entry reads like real
reflection rather than a note), used by growth, timeline and milestones.
"""

import logging
import re
from typing import Dict, Iterable, List, Pattern, Tuple

from engine.lexicon import (
    COMBINATION_INSIGHTS,
    EMOTION_KEYWORDS,
)

logger = logging.getLogger("journey.content")


def _word_pattern(words: Iterable[str]) -> Pattern:
    alternation = "|".join(re.escape(w) for w in words)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


# Compiled once per category; order follows the lexicon.
_CATEGORY_PATTERNS: Tuple[Tuple[str, Pattern], ...] = tuple(
    (category, _word_pattern(words)) for category, words in EMOTION_KEYWORDS.items()
)


# ============================================================================
# EMOTION COUNTING
# ============================================================================

def count_emotions(text: str) -> Dict[str, int]:
    """Keyword hits per category, in lexicon declaration order."""
    if not text:
        return {category: 0 for category, _ in _CATEGORY_PATTERNS}
    return {
        category: len(pattern.findall(text))
        for category, pattern in _CATEGORY_PATTERNS
    }


def rank_emotions(text: str) -> List[Dict]:
    """
    Categories with at least one hit, most frequent first.

    Returns list of {category, count}. Ties keep lexicon order — sorted()
    is stable and counts are walked in declaration order.
    """
    counts = count_emotions(text)
    ranked = sorted(
        ({"category": c, "count": n} for c, n in counts.items() if n > 0),
        key=lambda x: -x["count"],
    )
    return ranked


def analyze_content(text: str, limit: int = 3) -> List[str]:
    """Top emotion categories for the text (at most `limit`)."""
    top = [r["category"] for r in rank_emotions(text)[:limit]]
    if top:
        logger.debug("Content ranking: %s", top)
    return top


def combination_insights(categories: Iterable[str]) -> List[str]:
    """Extra insights unlocked when two categories rank together."""
    present = set(categories)
    return [text for pair, text in COMBINATION_INSIGHTS if present.issuperset(pair)]


def combine_reflections(contents: Iterable[str]) -> str:
    """Join entry bodies into one lower-cased analysis text."""
    return " ".join(c for c in contents if c).lower()


# ============================================================================
# EMOTIONAL DEPTH
# ============================================================================

_SELF_REFERENCE = re.compile(r"\b(?:i|my|me|myself)\b", re.IGNORECASE)

_EMOTIONAL_TERMS = _word_pattern((
    "feel", "felt", "emotion", "heart", "deeply", "profound",
    "moved", "touching", "powerful", "experience", "sense",
    "understand", "realized", "discovered", "awareness",
    "energy", "centered", "peaceful", "grateful", "authentic",
))

_COMPLEX_CONNECTIVES = _word_pattern((
    "because", "however", "although", "therefore",
    "consequently", "despite", "nevertheless", "furthermore",
    "additionally", "moreover", "since",
))

_CONTRAST_TERMS = _word_pattern((
    "but", "yet", "while", "whereas", "unlike", "instead",
    "contrast", "difference", "similarity", "compared",
    "on one hand", "on the other hand",
))

_GROWTH_TERMS = _word_pattern((
    "insight", "growth", "evolve", "transform", "journey",
    "practice", "progress", "develop", "change", "shift",
    "conscious", "mindful", "presence", "integrate",
    "balance", "harmony", "alignment",
))

# (pattern, divisor, cap): each signal saturates at its cap
_DEPTH_SIGNALS = (
    (_SELF_REFERENCE, 15, 0.2),
    (_EMOTIONAL_TERMS, 12, 0.25),
    (_COMPLEX_CONNECTIVES, 5, 0.1),
    (_CONTRAST_TERMS, 5, 0.1),
    (_GROWTH_TERMS, 5, 0.1),
)


def evaluate_emotional_depth(text: str) -> float:
    """
    Score how reflective a single entry is, 0-1.

    Length contributes up to 0.3 (saturating at 60 words); self-reference,
    emotional language, connectives, contrast and growth language add the rest.
    """
    if not text or not text.strip():
        return 0.0

    words = text.split()
    depth = min(len(words) / 200, 0.3)
    for pattern, divisor, cap in _DEPTH_SIGNALS:
        depth += min(len(pattern.findall(text)) / divisor, cap)

    return round(min(depth, 1.0), 4)


def depth_category(score: float) -> str:
    if score >= 0.8:
        return "Profound"
    if score >= 0.6:
        return "Deep"
    if score >= 0.4:
        return "Substantial"
    if score >= 0.2:
        return "Developing"
    return "Beginning"


def depth_feedback(score: float) -> str:
    """One line of feedback for a depth score."""
    if score >= 0.8:
        return "Your reflection shows exceptional emotional awareness and deep self-understanding."
    if score >= 0.6:
        return "Your reflection demonstrates strong emotional insight and self-awareness."
    if score >= 0.4:
        return "Your reflection shows good emotional awareness and growing self-insight."
    if score >= 0.2:
        return ("Your reflection is developing emotional depth. "
                "Consider exploring your feelings more fully.")
    return ("This is a great start to your reflection practice. "
            "Try exploring your emotions more deeply.")
