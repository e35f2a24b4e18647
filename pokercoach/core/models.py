"""
Core Domain Models.

Plain dataclasses and enums shared by the scheduling components and the
persistence layer. Nothing here touches the database.

Design:
- DrillType / QueueStatus / Difficulty: closed string enums
- SkillSnapshot: per user x tag rating row, read-only to the scheduler
- MistakeHistory: rolling-window attempt/mistake counts per drill type
- QueueItem: one schedulable unit of practice
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from pokercoach.core.leaks import LeakTag


class DrillType(str, Enum):
    """Drill sub-types trained independently per leak tag."""

    ACTION_DECISION = "action_decision"
    RAISE_SIZING = "raise_sizing"


class QueueStatus(str, Enum):
    DUE = "due"
    SCHEDULED = "scheduled"

    @classmethod
    def pending(cls) -> tuple[QueueStatus, ...]:
        """Statuses that count as outstanding work."""
        return (cls.DUE, cls.SCHEDULED)


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class SkillSnapshot:
    """
    Skill rating snapshot for one user and leak tag.

    Owned by the rating aggregator; the scheduler only reads it.
    """

    rating: float = 50.0
    attempts_7d: int = 0
    correct_7d: int = 0
    streak_correct: int = 0
    last_practice_at: datetime | None = None

    @property
    def accuracy_7d(self) -> float | None:
        if self.attempts_7d <= 0:
            return None
        return self.correct_7d / self.attempts_7d


@dataclass(frozen=True)
class MistakeHistory:
    """Attempt and mistake counts over the rolling window for one leak tag."""

    decision_attempts: int = 0
    decision_mistakes: int = 0
    sizing_attempts: int = 0
    sizing_mistakes: int = 0
    sizing_reason_mistakes: int = 0  # mistakes recorded with reason "sizing"

    @property
    def total_attempts(self) -> int:
        return self.decision_attempts + self.sizing_attempts

    @property
    def total_mistakes(self) -> int:
        return self.decision_mistakes + self.sizing_mistakes


@dataclass
class QueueItem:
    """
    A schedulable unit of practice.

    Created by the queue builder in state DUE with repetition 0 and
    mutated in place by the spaced-repetition scheduler.
    """

    user_id: str
    leak_tag: LeakTag
    drill_type: DrillType
    due_at: datetime
    status: QueueStatus = QueueStatus.DUE
    repetition: int = 0
    last_score: int | None = None
    difficulty: Difficulty = Difficulty.MEDIUM
    batch_key: str | None = None
    slot_index: int | None = None
    id: UUID | None = None
    last_attempt_id: UUID | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "id": str(self.id) if self.id else None,
            "user_id": self.user_id,
            "leak_tag": self.leak_tag.value,
            "drill_type": self.drill_type.value,
            "status": self.status.value,
            "due_at": self.due_at.isoformat(),
            "repetition": self.repetition,
            "last_score": self.last_score,
            "difficulty": self.difficulty.value,
        }

