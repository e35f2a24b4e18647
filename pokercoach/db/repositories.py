"""
Repositories for the drill practice tables.

Thin, session-scoped wrappers around the SQLAlchemy queries the training
service needs. Callers own the transaction (see session_scope).
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, case, func, select
from sqlalchemy.orm import Session

from pokercoach.core.leaks import LeakTag
from pokercoach.core.models import DrillType, MistakeHistory, QueueItem, QueueStatus, SkillSnapshot
from pokercoach.db.models import DrillQueueItem, SkillRating, TrainingEvent

_PENDING = [status.value for status in QueueStatus.pending()]


class DrillQueueRepository:
    """Reads and writes drill_queue rows."""

    def __init__(self, session: Session):
        self.session = session

    def count_pending(self, user_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(DrillQueueItem)
            .where(DrillQueueItem.user_id == user_id, DrillQueueItem.status.in_(_PENDING))
        )
        return int(self.session.scalar(stmt) or 0)

    def add_items(self, items: list[QueueItem]) -> list[DrillQueueItem]:
        rows = [DrillQueueItem.from_domain(item) for item in items]
        self.session.add_all(rows)
        self.session.flush()
        for item, row in zip(items, rows, strict=True):
            item.id = row.id
        return rows

    def get_for_update(self, item_id: UUID, user_id: str) -> DrillQueueItem | None:
        """
        Load a queue row owned by user_id, locking it for the transaction.

        Returns None when the row is missing or owned by someone else.
        """
        stmt = (
            select(DrillQueueItem)
            .where(DrillQueueItem.id == item_id, DrillQueueItem.user_id == user_id)
            .with_for_update()
        )
        return self.session.scalars(stmt).first()

    def due_items(self, user_id: str, now: datetime, limit: int = 5) -> list[QueueItem]:
        """Pending items due at or before now, earliest first."""
        stmt = (
            select(DrillQueueItem)
            .where(
                DrillQueueItem.user_id == user_id,
                DrillQueueItem.status.in_(_PENDING),
                DrillQueueItem.due_at <= now,
            )
            .order_by(DrillQueueItem.due_at.asc(), DrillQueueItem.slot_index.asc())
            .limit(limit)
        )
        return [row.to_domain() for row in self.session.scalars(stmt)]

    def list_for_user(self, user_id: str) -> list[QueueItem]:
        stmt = (
            select(DrillQueueItem)
            .where(DrillQueueItem.user_id == user_id)
            .order_by(DrillQueueItem.created_at.asc(), DrillQueueItem.slot_index.asc())
        )
        return [row.to_domain() for row in self.session.scalars(stmt)]


class SkillRatingRepository:
    """Reads skill_ratings rows as scheduler snapshots."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, user_id: str, leak_tag: LeakTag | str) -> SkillRating | None:
        tag = leak_tag.value if isinstance(leak_tag, LeakTag) else leak_tag
        stmt = select(SkillRating).where(SkillRating.user_id == user_id, SkillRating.leak_tag == tag)
        return self.session.scalars(stmt).first()

    def snapshots_for_user(self, user_id: str) -> list[tuple[str, SkillSnapshot]]:
        """(raw tag, snapshot) rows in a stable order."""
        stmt = (
            select(SkillRating)
            .where(SkillRating.user_id == user_id)
            .order_by(SkillRating.created_at.asc(), SkillRating.leak_tag.asc())
        )
        return [(row.leak_tag, row.to_snapshot()) for row in self.session.scalars(stmt)]

    def snapshot_for(self, user_id: str, leak_tag: LeakTag | str) -> SkillSnapshot | None:
        row = self.get(user_id, leak_tag)
        return row.to_snapshot() if row else None


class TrainingEventRepository:
    """Appends attempt records and aggregates them."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, event: TrainingEvent) -> TrainingEvent:
        self.session.add(event)
        self.session.flush()
        return event

    def window_counts(self, user_id: str, leak_tag: str, since: datetime) -> tuple[int, int]:
        """(attempts, correct) for a tag since the given time."""
        stmt = select(
            func.count(),
            func.coalesce(func.sum(case((TrainingEvent.is_correct.is_(True), 1), else_=0)), 0),
        ).where(
            TrainingEvent.user_id == user_id,
            TrainingEvent.leak_tag == leak_tag,
            TrainingEvent.created_at >= since,
        )
        attempts, correct = self.session.execute(stmt).one()
        return int(attempts or 0), int(correct or 0)

    def mistake_history(self, user_id: str, leak_tag: LeakTag | str, since: datetime) -> MistakeHistory:
        """
        Attempt and mistake counts per drill type since the given time.

        Events without a drill type count as action_decision.
        """
        tag = leak_tag.value if isinstance(leak_tag, LeakTag) else leak_tag
        drill_type = func.coalesce(TrainingEvent.drill_type, DrillType.ACTION_DECISION.value)
        incorrect = TrainingEvent.is_correct.is_(False)
        stmt = (
            select(
                drill_type,
                func.count(),
                func.sum(case((incorrect, 1), else_=0)),
                func.sum(case((and_(incorrect, TrainingEvent.mistake_reason == "sizing"), 1), else_=0)),
            )
            .where(
                TrainingEvent.user_id == user_id,
                TrainingEvent.leak_tag == tag,
                TrainingEvent.created_at >= since,
            )
            .group_by(drill_type)
        )

        counts = {
            DrillType.ACTION_DECISION.value: (0, 0, 0),
            DrillType.RAISE_SIZING.value: (0, 0, 0),
        }
        for type_value, attempts, mistakes, sizing_reason in self.session.execute(stmt):
            if type_value in counts:
                counts[type_value] = (int(attempts or 0), int(mistakes or 0), int(sizing_reason or 0))

        decision = counts[DrillType.ACTION_DECISION.value]
        sizing = counts[DrillType.RAISE_SIZING.value]
        return MistakeHistory(
            decision_attempts=decision[0],
            decision_mistakes=decision[1],
            sizing_attempts=sizing[0],
            sizing_mistakes=sizing[1],
            sizing_reason_mistakes=decision[2] + sizing[2],
        )
