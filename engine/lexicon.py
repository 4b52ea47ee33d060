# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Journey Lexicon — the static tables everything else reads.

Energy nodes, emotion keywords, theme seeds, the fallback ladder and the
pairwise affinity table. Built once at import, never mutated: tuples,
NamedTuples and read-only mapping proxies only, so a shared server process
can't leak one request's data into another.

Node indices are the engine's identity for an energy node. Anatomical
position (root = 0 .. crown = 6) is a separate column and only matters for
resonance geometry.
"""

from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional, Tuple


# ============================================================================
# ENERGY NODES
# ============================================================================

class EnergyNode(NamedTuple):
    index: int
    name: str
    color: str
    position: int  # anatomical, root=0 .. crown=6


NODES: Tuple[EnergyNode, ...] = (
    EnergyNode(0, "Crown",        "#9B59B6", 6),
    EnergyNode(1, "Throat",       "#3498DB", 4),
    EnergyNode(2, "Heart",        "#2ECC71", 3),
    EnergyNode(3, "Solar Plexus", "#F1C40F", 2),
    EnergyNode(4, "Sacral",       "#E67E22", 1),
    EnergyNode(5, "Root",         "#E74C3C", 0),
    EnergyNode(6, "Third Eye",    "#5B2C9F", 5),
)

NODE_COUNT = len(NODES)
ALL_NODES: Tuple[int, ...] = tuple(n.index for n in NODES)

CROWN, THROAT, HEART, SOLAR_PLEXUS, SACRAL, ROOT, THIRD_EYE = ALL_NODES


# ============================================================================
# EMOTION CATEGORIES: declaration order is the ranking tie-break
# ============================================================================

EMOTION_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "love":       ("love", "compassion", "heart", "connect", "relationship"),
    "joy":        ("joy", "happy", "delight", "bliss", "pleasure"),
    "peace":      ("peace", "calm", "tranquil", "harmony", "balance"),
    "power":      ("power", "strength", "confidence", "achieve", "success"),
    "wisdom":     ("wisdom", "insight", "knowledge", "understand", "awareness"),
    "creativity": ("create", "imagine", "express", "inspire", "art"),
    "fear":       ("fear", "worry", "anxiety", "stress", "concern"),
    "anger":      ("anger", "frustration", "irritation", "rage", "upset"),
    "sadness":    ("sad", "grief", "depression", "melancholy", "down"),
})

EMOTION_CATEGORIES: Tuple[str, ...] = tuple(EMOTION_KEYWORDS)

# One node per category; shadow emotions have none.
CATEGORY_NODE: Mapping[str, Optional[int]] = MappingProxyType({
    "love": HEART,
    "joy": SOLAR_PLEXUS,
    "peace": THROAT,
    "power": SOLAR_PLEXUS,
    "wisdom": THIRD_EYE,
    "creativity": SACRAL,
    "fear": None,
    "anger": None,
    "sadness": None,
})

CATEGORY_INSIGHT: Mapping[str, str] = MappingProxyType({
    "love": "Your heart-centered approach strengthens your connections.",
    "joy": "Joy is becoming a more consistent state in your practice.",
    "peace": "Your ability to remain centered is growing stronger.",
    "power": "You're learning to harness your personal power effectively.",
    "wisdom": "Your capacity for deeper insights is expanding.",
    "creativity": "Creative energy is flowing more freely in your practice.",
    "fear": "Working through fear is part of your growth journey now.",
    "anger": "Transforming anger into constructive energy is a current lesson.",
    "sadness": "Processing emotions fully is creating space for new energy.",
})

# Pairs of co-ranked categories that unlock an extra insight.
COMBINATION_INSIGHTS: Tuple[Tuple[Tuple[str, str], str], ...] = (
    (("love", "peace"), "Your heart-centered practice is creating deep inner harmony."),
    (("wisdom", "power"), "You're developing balanced mastery by combining wisdom with strength."),
)

ENCOURAGEMENT_INSIGHT = "Continue your reflection practice to deepen your emotional awareness."


# ============================================================================
# DREAM THEMES
# ============================================================================

class ThemeEntry(NamedTuple):
    nodes: Tuple[int, ...]
    emotion: str
    insight: str
    category: Optional[str]  # emotion category the label stands for, if any


THEMES: Mapping[str, ThemeEntry] = MappingProxyType({
    "love": ThemeEntry(
        (HEART,), "Love & Compassion",
        "Your heart energy radiates strongly in your practice.", "love"),
    "peace": ThemeEntry(
        (THROAT, CROWN), "Peace & Tranquility",
        "You naturally attune to higher states of harmony.", "peace"),
    "power": ThemeEntry(
        (SOLAR_PLEXUS, ROOT), "Confidence & Strength",
        "Your inner power is awakening as you practice.", "power"),
    "wisdom": ThemeEntry(
        (THIRD_EYE, CROWN), "Wisdom & Insight",
        "Your intuitive abilities are expanding rapidly.", "wisdom"),
    "creativity": ThemeEntry(
        (SACRAL, THROAT), "Creativity & Expression",
        "Your creative energy seeks greater channels of expression.", "creativity"),
    "spirituality": ThemeEntry(
        (CROWN, HEART), "Spiritual Connection",
        "Your consciousness is expanding into higher dimensions.", None),
    "healing": ThemeEntry(
        (HEART, ROOT), "Healing & Transformation",
        "You are in an important healing cycle right now.", None),
})

THEME_ALIASES: Mapping[str, str] = MappingProxyType({
    "compassion": "love",
    "calm": "peace",
    "serenity": "peace",
    "strength": "power",
    "confidence": "power",
    "insight": "wisdom",
    "clarity": "wisdom",
    "expression": "creativity",
    "flow": "creativity",
    "spiritual": "spirituality",
    "divine": "spirituality",
    "connection": "spirituality",
})


# ============================================================================
# FALLBACK LADDER: reflection count threshold -> nodes
# ============================================================================

# Twelve reflections light the last rung, which completes the upper pair.
FALLBACK_LADDER: Tuple[Tuple[int, Tuple[int, ...]], ...] = (
    (1, (ROOT,)),
    (3, (SACRAL,)),
    (5, (SOLAR_PLEXUS,)),
    (7, (HEART,)),
    (9, (THROAT,)),
    (12, (CROWN, THIRD_EYE)),
)


# ============================================================================
# PAIRWISE AFFINITY: symmetric, keyed by (low, high) node index
# ============================================================================

def _affinity(a: EnergyNode, b: EnergyNode) -> float:
    names = {a.name, b.name}
    score = 1.0 - abs(a.position - b.position) * 0.15
    if names == {"Root", "Crown"}:
        score += 0.2
    if "Heart" in names:
        score += 0.15
    if names == {"Throat", "Third Eye"}:
        score += 0.2
    return round(min(max(score, 0.0), 1.0), 4)


AFFINITY: Mapping[Tuple[int, int], float] = MappingProxyType({
    (a.index, b.index): _affinity(a, b)
    for a in NODES for b in NODES if a.index < b.index
})


# ============================================================================
# RECOMMENDATION TEMPLATES
# ============================================================================

class Template(NamedTuple):
    title: str
    description: str


NODE_RECOMMENDATIONS: Mapping[int, Template] = MappingProxyType({
    ROOT: Template(
        "Root Chakra Activation",
        "Practice grounding meditations focused on stability and security "
        "to activate your root chakra."),
    HEART: Template(
        "Heart Energy Expansion",
        "Practice loving-kindness meditation to open and balance your heart chakra."),
    THIRD_EYE: Template(
        "Intuitive Awareness",
        "Practice third eye meditation focusing on your inner vision and "
        "intuitive insights."),
})

EMOTION_RECOMMENDATIONS: Mapping[str, Template] = MappingProxyType({
    "love": Template(
        "Channel Compassion Energy",
        "Your strong heart energy can be directed toward healing practices "
        "for yourself and others."),
    "wisdom": Template(
        "Deepen Meditation Practice",
        "Your wisdom energy suggests you would benefit from longer, deeper "
        "meditation sessions."),
    "peace": Template(
        "Share Your Calming Presence",
        "Your peaceful energy makes you well-suited to guide others in "
        "meditation and mindfulness."),
})

GENERIC_RECOMMENDATION = Template(
    "Daily Energy Check-in",
    "Spend 5 minutes each morning scanning your energy body and noting "
    "which chakras feel active.",
)


# ============================================================================
# HELPERS
# ============================================================================

def node_name(index: int) -> str:
    """Human name for a node index, or a placeholder for unknown indices."""
    if 0 <= index < NODE_COUNT:
        return NODES[index].name
    return f"Node {index}"


def node_color(index: int) -> Optional[str]:
    if 0 <= index < NODE_COUNT:
        return NODES[index].color
    return None


def category_label(category: str) -> str:
    """Display label for an emotion category: "peace" -> "Peace"."""
    return category[:1].upper() + category[1:]


def _build_label_index() -> Mapping[str, str]:
    index = {category_label(c).lower(): c for c in EMOTION_CATEGORIES}
    for entry in THEMES.values():
        if entry.category:
            index[entry.emotion.lower()] = entry.category
    return MappingProxyType(index)


_LABEL_INDEX = _build_label_index()


def category_for_label(label: str) -> Optional[str]:
    """
    Map a displayed emotion back to its category.

    Handles both analyzer labels ("Love") and theme labels
    ("Love & Compassion"). Returns None for labels with no category.
    """
    if not label:
        return None
    return _LABEL_INDEX.get(label.strip().lower())
