"""
Scheduling: the adaptive practice decision engine.

- focus: weekly focus priority scoring
- focus_mix: action decision vs raise sizing split
- difficulty: easy / medium / hard tier
- spaced_repetition: fixed-interval advance / reset
- queue_builder: batch composition
"""

from pokercoach.scheduling.difficulty import classify_difficulty, classify_snapshot
from pokercoach.scheduling.focus import (
    FocusScoringConfig,
    NeedScore,
    WeeklyFocus,
    rank_focus_candidates,
    score_need,
    select_weekly_focus,
)
from pokercoach.scheduling.focus_mix import (
    FocusMix,
    FocusMixConfig,
    FocusMixMode,
    infer_focus_mix,
)
from pokercoach.scheduling.queue_builder import QueueBatch, QueueBuilder, QueueConfig
from pokercoach.scheduling.spaced_repetition import (
    INTERVAL_DAYS,
    ScheduleUpdate,
    SpacedRepetitionScheduler,
    grade_answer,
    interval_days,
    next_schedule,
)

__all__ = [
    # Difficulty
    "classify_difficulty",
    "classify_snapshot",
    # Focus
    "FocusScoringConfig",
    "NeedScore",
    "WeeklyFocus",
    "rank_focus_candidates",
    "score_need",
    "select_weekly_focus",
    # Focus mix
    "FocusMix",
    "FocusMixConfig",
    "FocusMixMode",
    "infer_focus_mix",
    # Queue
    "QueueBatch",
    "QueueBuilder",
    "QueueConfig",
    # Spaced repetition
    "INTERVAL_DAYS",
    "ScheduleUpdate",
    "SpacedRepetitionScheduler",
    "grade_answer",
    "interval_days",
    "next_schedule",
]
