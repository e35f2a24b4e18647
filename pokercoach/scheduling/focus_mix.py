"""
Focus Mix Inference.

Decides the ratio of raise-sizing to action-decision drills for the focus
tag from its rolling mistake statistics.

Rules, in order:
1. Minimum evidence: fewer than 10 attempts (or no history) falls back
   to an even split.
2. Mistake-rate difference: whichever drill type is failing more by at
   least 10 points gets the larger share.
3. Reinforcement: with enough mistakes on record, the share of mistakes
   attributed to sizing overrides rule 2 when it is clearly high or low.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from pokercoach.core.models import MistakeHistory

_RATE_TOLERANCE = 1e-9


class FocusMixMode(str, Enum):
    INSUFFICIENT_DATA = "insufficient_data"
    SIZING_HEAVY = "sizing_heavy"
    ACTION_HEAVY = "action_heavy"
    BALANCED = "balanced"


@dataclass
class FocusMixConfig:
    """Thresholds for focus mix inference."""

    min_attempts: int = 10
    rate_delta_threshold: float = 0.10
    balanced_share: float = 0.5
    sizing_heavy_share: float = 0.7
    action_heavy_share: float = 0.3
    reinforcement_min_mistakes: int = 6
    sizing_reason_high: float = 0.45
    sizing_reason_low: float = 0.15
    reinforced_sizing_floor: float = 0.8
    reinforced_sizing_cap: float = 0.2


@dataclass
class FocusMix:
    """Drill-type split for the focus slots of a batch."""

    mode: FocusMixMode
    sizing_share: float
    sizing_count: int
    decision_count: int
    diagnostics: dict[str, float | int | None] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "mode": self.mode.value,
            "sizing_share": self.sizing_share,
            "sizing_count": self.sizing_count,
            "decision_count": self.decision_count,
            "diagnostics": dict(self.diagnostics),
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def split_slots(slot_count: int, sizing_share: float) -> tuple[int, int]:
    """Split slots into (sizing, decision) counts."""
    if slot_count < 0:
        raise ValueError(f"slot_count must be non-negative, got {slot_count}")
    sizing = min(slot_count, max(0, round_half_up(slot_count * sizing_share)))
    return sizing, slot_count - sizing


def _mistake_rate(mistakes: int, attempts: int) -> float:
    return mistakes / max(attempts, 1)


def infer_focus_mix(
    history: MistakeHistory | None,
    focus_slot_count: int,
    config: FocusMixConfig | None = None,
) -> FocusMix:
    """
    Infer the sizing/decision split for the focus tag.

    Args:
        history: Rolling-window mistake counts, None if the query failed
        focus_slot_count: Number of focus slots to fill
        config: Thresholds

    Returns:
        FocusMix with counts summing to focus_slot_count
    """
    config = config or FocusMixConfig()

    if history is None or history.total_attempts < config.min_attempts:
        sizing, decision = split_slots(focus_slot_count, config.balanced_share)
        attempts = history.total_attempts if history is not None else 0
        logger.debug(f"Focus mix: insufficient data ({attempts} attempts)")
        return FocusMix(
            mode=FocusMixMode.INSUFFICIENT_DATA,
            sizing_share=config.balanced_share,
            sizing_count=sizing,
            decision_count=decision,
            diagnostics={"total_attempts": attempts},
        )

    decision_rate = _mistake_rate(history.decision_mistakes, history.decision_attempts)
    sizing_rate = _mistake_rate(history.sizing_mistakes, history.sizing_attempts)
    delta = sizing_rate - decision_rate

    # exact 10-point gaps meet the threshold
    threshold = config.rate_delta_threshold - _RATE_TOLERANCE
    if delta >= threshold:
        mode, share = FocusMixMode.SIZING_HEAVY, config.sizing_heavy_share
    elif -delta >= threshold:
        mode, share = FocusMixMode.ACTION_HEAVY, config.action_heavy_share
    else:
        mode, share = FocusMixMode.BALANCED, config.balanced_share

    sizing_reason_share: float | None = None
    total_mistakes = history.total_mistakes
    if total_mistakes >= config.reinforcement_min_mistakes:
        sizing_reason_share = history.sizing_reason_mistakes / total_mistakes
        if sizing_reason_share >= config.sizing_reason_high:
            mode = FocusMixMode.SIZING_HEAVY
            share = max(share, config.reinforced_sizing_floor)
        elif sizing_reason_share <= config.sizing_reason_low:
            mode = FocusMixMode.ACTION_HEAVY
            share = min(share, config.reinforced_sizing_cap)

    sizing, decision = split_slots(focus_slot_count, share)

    diagnostics: dict[str, float | int | None] = {
        "total_attempts": history.total_attempts,
        "decision_attempts": history.decision_attempts,
        "sizing_attempts": history.sizing_attempts,
        "decision_mistake_rate": round(decision_rate, 4),
        "sizing_mistake_rate": round(sizing_rate, 4),
        "sizing_reason_share": (
            round(sizing_reason_share, 4) if sizing_reason_share is not None else None
        ),
    }

    logger.debug(
        f"Focus mix: mode={mode.value} share={share} "
        f"(decision_rate={decision_rate:.2f}, sizing_rate={sizing_rate:.2f})"
    )

    return FocusMix(
        mode=mode,
        sizing_share=share,
        sizing_count=sizing,
        decision_count=decision,
        diagnostics=diagnostics,
    )
