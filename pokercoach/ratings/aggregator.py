"""
Skill Rating Aggregator.

Updates the per user x leak tag skill_ratings row after each answered
drill. The scheduler never writes ratings itself; it only reads the
snapshots this aggregator maintains.

Update rule:
- rating: +4 on correct, -6 on incorrect, clamped to 0-100 (new rows start at 50)
- streak_correct: +1 on correct, reset to 0 on incorrect
- last_practice_at / last_mistake_at: stamped with the attempt time
- attempts_7d / correct_7d / attempts_30d / correct_30d: recounted from
  training_events over the trailing windows
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from loguru import logger
from sqlalchemy.orm import Session

from pokercoach.core.leaks import LeakTag
from pokercoach.db.models import SkillRating
from pokercoach.db.repositories import SkillRatingRepository, TrainingEventRepository


@dataclass
class RatingConfig:
    initial_rating: int = 50
    correct_delta: int = 4
    incorrect_delta: int = -6
    min_rating: int = 0
    max_rating: int = 100
    short_window_days: int = 7
    long_window_days: int = 30


class SkillRatingAggregator:
    """Maintains skill_ratings from answered drills."""

    def __init__(self, session: Session, config: RatingConfig | None = None):
        self.session = session
        self.config = config or RatingConfig()
        self.ratings = SkillRatingRepository(session)
        self.events = TrainingEventRepository(session)

    def _clamp(self, rating: int) -> int:
        return max(self.config.min_rating, min(self.config.max_rating, rating))

    def record_result(
        self,
        user_id: str,
        leak_tag: LeakTag,
        is_correct: bool,
        practiced_at: datetime | None = None,
    ) -> SkillRating:
        """
        Apply one answered drill to the user's rating row for leak_tag.

        Expects the attempt's training event to be flushed already so the
        window counts include it.
        """
        practiced_at = practiced_at or datetime.now(UTC)
        row = self.ratings.get(user_id, leak_tag)
        if row is None:
            row = SkillRating(
                user_id=user_id,
                leak_tag=leak_tag.value,
                rating=self.config.initial_rating,
                streak_correct=0,
                total_attempts=0,
                total_correct=0,
            )
            self.session.add(row)

        delta = self.config.correct_delta if is_correct else self.config.incorrect_delta
        row.rating = self._clamp(row.rating + delta)
        row.streak_correct = row.streak_correct + 1 if is_correct else 0
        row.last_practice_at = practiced_at
        if not is_correct:
            row.last_mistake_at = practiced_at
        row.total_attempts += 1
        row.total_correct += 1 if is_correct else 0

        row.attempts_7d, row.correct_7d = self.events.window_counts(
            user_id,
            leak_tag.value,
            practiced_at - timedelta(days=self.config.short_window_days),
        )
        row.attempts_30d, row.correct_30d = self.events.window_counts(
            user_id,
            leak_tag.value,
            practiced_at - timedelta(days=self.config.long_window_days),
        )

        self.session.flush()
        logger.debug(
            f"Rating {user_id}/{leak_tag.value}: {row.rating} "
            f"(streak={row.streak_correct}, 7d={row.correct_7d}/{row.attempts_7d})"
        )
        return row
