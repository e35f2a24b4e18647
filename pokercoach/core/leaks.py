"""
Leak Tag Vocabulary and Canonicalization.

Every tag that enters or leaves the scheduler passes through this module.

Design:
- LeakTag: closed vocabulary of lower_snake_case leak identifiers
- canonicalize: free-form label -> lower_snake_case (or None)
- enforce: canonicalize + coerce unknown tags to FUNDAMENTALS
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

_SEPARATOR_RUN = re.compile(r"[\s\-]+")
_UNDERSCORE_RUN = re.compile(r"_+")


class LeakTag(str, Enum):
    """
    Closed set of leak tags the scheduler can practice against.

    FUNDAMENTALS is the reserved fallback for anything unrecognized.
    """

    CHASING_DRAWS = "chasing_draws"
    MISSED_VALUE_BET = "missed_value_bet"
    OVERBET_BLUFF = "overbet_bluff"
    PASSIVE_PLAY = "passive_play"
    BAD_POT_ODDS_CALL = "bad_pot_odds_call"
    RIVER_BETTING_STRATEGY = "river_betting_strategy"
    TURN_RAISE_UNDERVALUE = "turn_raise_undervalue"
    PREFLOP_3BET_DEFENSE = "preflop_3bet_defense"
    CBET_FREQUENCY = "cbet_frequency"
    POSITION_AWARENESS = "position_awareness"
    BLUFF_CATCHING = "bluff_catching"
    SIZING_MISTAKES = "sizing_mistakes"
    FUNDAMENTALS = "fundamentals"

    @classmethod
    def values(cls) -> frozenset[str]:
        """All canonical tag strings."""
        return _TAG_VALUES

    @property
    def label(self) -> str:
        """Short human-readable label for CLI output."""
        return _LABELS[self]


_TAG_VALUES = frozenset(tag.value for tag in LeakTag)

_LABELS = {
    LeakTag.CHASING_DRAWS: "Chasing draws",
    LeakTag.MISSED_VALUE_BET: "Missed value",
    LeakTag.OVERBET_BLUFF: "Overbet bluffs",
    LeakTag.PASSIVE_PLAY: "Passive play",
    LeakTag.BAD_POT_ODDS_CALL: "Bad pot odds",
    LeakTag.RIVER_BETTING_STRATEGY: "River betting",
    LeakTag.TURN_RAISE_UNDERVALUE: "Turn raises",
    LeakTag.PREFLOP_3BET_DEFENSE: "3bet defense",
    LeakTag.CBET_FREQUENCY: "C-bet frequency",
    LeakTag.POSITION_AWARENESS: "Position play",
    LeakTag.BLUFF_CATCHING: "Bluff catching",
    LeakTag.SIZING_MISTAKES: "Sizing mistakes",
    LeakTag.FUNDAMENTALS: "Fundamentals",
}


def canonicalize(raw: Any) -> str | None:
    """
    Normalize a free-form leak label to lower_snake_case.

    Examples:
        "Position Awareness"  -> "position_awareness"
        "Tilt-Control"        -> "tilt_control"
        "  over-betting  "    -> "over_betting"
        "Multi__Word___Tag"   -> "multi_word_tag"
        "" / None / "  -  "   -> None

    Never raises. The result is not checked against the vocabulary; use
    enforce() for that.
    """
    if raw is None:
        return None
    if isinstance(raw, LeakTag):
        return raw.value
    text = str(raw).strip().lower()
    if not text:
        return None
    text = _SEPARATOR_RUN.sub("_", text)
    text = _UNDERSCORE_RUN.sub("_", text).strip("_")
    return text or None


def enforce(raw: Any) -> LeakTag | None:
    """
    Canonicalize and check against the closed vocabulary.

    Returns None only when canonicalization yields nothing; any other
    unknown tag becomes LeakTag.FUNDAMENTALS.
    """
    normalized = canonicalize(raw)
    if normalized is None:
        return None
    if normalized in _TAG_VALUES:
        return LeakTag(normalized)
    return LeakTag.FUNDAMENTALS


def enforce_or_default(raw: Any) -> LeakTag:
    """enforce() for call sites that always need a tag to schedule against."""
    return enforce(raw) or LeakTag.FUNDAMENTALS
