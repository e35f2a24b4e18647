"""
Training Models.

SQLAlchemy models for the drill practice loop:
- Drill queue items (spaced repetition state)
- Training events (immutable attempt records)
- Skill ratings (per user x leak tag aggregates)
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from pokercoach.core.leaks import enforce_or_default
from pokercoach.core.models import Difficulty, DrillType, QueueItem, QueueStatus, SkillSnapshot

from .base import Base, utcnow


class TrainingEvent(Base):
    """
    One answered drill.

    Written before the queue item is rescheduled. Never updated.
    """

    __tablename__ = "training_events"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    scenario: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    user_action: Mapped[str] = mapped_column(Text, nullable=False)
    correct_action: Mapped[str] = mapped_column(Text, nullable=False)
    mistake_tag: Mapped[str | None] = mapped_column(Text)  # NULL when correct
    is_correct: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    leak_tag: Mapped[str | None] = mapped_column(Text)
    drill_type: Mapped[str | None] = mapped_column(Text)
    mistake_reason: Mapped[str | None] = mapped_column(
        Text
    )  # 'range', 'sizing', 'position', 'board', 'stack', 'unknown'
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    __table_args__ = (
        Index("training_events_user_created_at_idx", "user_id", "created_at"),
        Index("training_events_user_leak_created_idx", "user_id", "leak_tag", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<TrainingEvent user={self.user_id} tag={self.leak_tag} correct={self.is_correct}>"


class DrillQueueItem(Base):
    """
    A schedulable drill for one user and leak tag.

    (user_id, batch_key, slot_index) is unique so that two concurrent
    batch builds for the same user cannot both insert.
    """

    __tablename__ = "drill_queue"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    leak_tag: Mapped[str] = mapped_column(Text, nullable=False)
    drill_type: Mapped[str] = mapped_column(
        Text, nullable=False, default=DrillType.ACTION_DECISION.value
    )
    status: Mapped[str] = mapped_column(Text, nullable=False, default=QueueStatus.DUE.value)
    due_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    repetition: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_score: Mapped[int | None] = mapped_column(Integer)
    difficulty: Mapped[str] = mapped_column(Text, nullable=False, default=Difficulty.MEDIUM.value)
    batch_key: Mapped[str | None] = mapped_column(Text)
    slot_index: Mapped[int | None] = mapped_column(Integer)
    last_attempt_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("training_events.id", ondelete="SET NULL")
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "batch_key", "slot_index", name="uq_drill_queue_batch_slot"),
        CheckConstraint("status in ('due', 'scheduled')", name="ck_drill_queue_status"),
        CheckConstraint(
            "last_score is null or (last_score >= 0 and last_score <= 100)",
            name="ck_drill_queue_last_score",
        ),
        CheckConstraint("repetition >= 0", name="ck_drill_queue_repetition"),
        Index("drill_queue_user_due_at_idx", "user_id", "due_at"),
        Index("drill_queue_user_leak_tag_idx", "user_id", "leak_tag"),
    )

    def __repr__(self) -> str:
        return (
            f"<DrillQueueItem user={self.user_id} tag={self.leak_tag} "
            f"status={self.status} repetition={self.repetition}>"
        )

    @classmethod
    def from_domain(cls, item: QueueItem) -> DrillQueueItem:
        return cls(
            id=item.id or uuid4(),
            user_id=item.user_id,
            leak_tag=item.leak_tag.value,
            drill_type=item.drill_type.value,
            status=item.status.value,
            due_at=item.due_at,
            repetition=item.repetition,
            last_score=item.last_score,
            difficulty=item.difficulty.value,
            batch_key=item.batch_key,
            slot_index=item.slot_index,
            last_attempt_id=item.last_attempt_id,
        )

    def to_domain(self) -> QueueItem:
        return QueueItem(
            id=self.id,
            user_id=self.user_id,
            leak_tag=enforce_or_default(self.leak_tag),
            drill_type=DrillType(self.drill_type),
            status=QueueStatus(self.status),
            due_at=self.due_at,
            repetition=self.repetition,
            last_score=self.last_score,
            difficulty=Difficulty(self.difficulty),
            batch_key=self.batch_key,
            slot_index=self.slot_index,
            last_attempt_id=self.last_attempt_id,
        )

    def apply_domain(self, item: QueueItem) -> None:
        """Copy the schedule fields of a mutated domain item back onto the row."""
        self.status = item.status.value
        self.due_at = item.due_at
        self.repetition = item.repetition
        self.last_score = item.last_score
        self.last_attempt_id = item.last_attempt_id


class SkillRating(Base):
    """
    Skill rating per user per leak tag.

    Rating starts at 50 and moves +4 / -6 per answered drill, clamped to 0-100.
    """

    __tablename__ = "skill_ratings"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    leak_tag: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    streak_correct: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_practice_at: Mapped[datetime | None] = mapped_column()
    last_mistake_at: Mapped[datetime | None] = mapped_column()
    total_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_correct: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attempts_7d: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    correct_7d: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attempts_30d: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    correct_30d: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "leak_tag", name="uq_skill_ratings_user_leak"),
        CheckConstraint("rating >= 0 and rating <= 100", name="ck_skill_ratings_rating"),
        Index("skill_ratings_user_id_idx", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<SkillRating user={self.user_id} tag={self.leak_tag} rating={self.rating}>"

    def to_snapshot(self) -> SkillSnapshot:
        return SkillSnapshot(
            rating=float(self.rating),
            attempts_7d=self.attempts_7d,
            correct_7d=self.correct_7d,
            streak_correct=self.streak_correct,
            last_practice_at=self.last_practice_at,
        )
