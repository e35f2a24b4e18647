"""
Difficulty Classifier.

Maps a per-tag skill snapshot to a three-level difficulty tier.

Policy: recency of practice dominates instantaneous competence when it
comes to escalating to HARD, but not when de-escalating to EASY.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pokercoach.core.models import Difficulty, SkillSnapshot

STALE_AFTER = timedelta(days=14)
EASY_MAX_RATING = 40
HARD_MIN_RATING = 70
HARD_MIN_STREAK = 3


def classify_difficulty(
    rating: float,
    streak_correct: int,
    last_practice_at: datetime | None,
    now: datetime | None = None,
) -> Difficulty:
    """
    Classify a learner's difficulty tier for one leak tag.

    Args:
        rating: Skill rating (0-100)
        streak_correct: Consecutive correct answers
        last_practice_at: Last practice time, None if never practiced
        now: Reference time (defaults to current UTC time)

    Returns:
        Difficulty tier
    """
    if last_practice_at is None:
        return Difficulty.MEDIUM

    now = now or datetime.now(UTC)
    if last_practice_at < now - STALE_AFTER:
        # Long-idle learners never get HARD content
        return Difficulty.EASY if rating <= EASY_MAX_RATING else Difficulty.MEDIUM

    if rating <= EASY_MAX_RATING:
        return Difficulty.EASY
    if rating >= HARD_MIN_RATING and streak_correct >= HARD_MIN_STREAK:
        return Difficulty.HARD
    return Difficulty.MEDIUM


def classify_snapshot(snapshot: SkillSnapshot | None, now: datetime | None = None) -> Difficulty:
    """Classify from a snapshot; a missing snapshot is a first exposure."""
    if snapshot is None:
        return Difficulty.MEDIUM
    return classify_difficulty(
        snapshot.rating,
        snapshot.streak_correct,
        snapshot.last_practice_at,
        now,
    )
