"""
Training Service.

The library entry point request handlers call. Owns every read-then-write
sequence against the store:
- Build a drill queue batch for a learner with no pending drills
- Submit an answer and reschedule the drill
- List due drills
- Weekly focus and difficulty lookups

Degraded reads (rating snapshots, mistake history) fall back to the
scheduler's documented defaults. Attempt logging and rating updates are
best-effort side channels and never block the schedule update.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pokercoach.config import Settings, get_settings
from pokercoach.core.errors import InputValidationError, QueueItemNotFoundError
from pokercoach.core.leaks import LeakTag, enforce_or_default
from pokercoach.core.models import Difficulty, MistakeHistory, QueueItem, SkillSnapshot
from pokercoach.db.database import session_scope
from pokercoach.db.models import TrainingEvent
from pokercoach.db.repositories import (
    DrillQueueRepository,
    SkillRatingRepository,
    TrainingEventRepository,
)
from pokercoach.ratings.aggregator import SkillRatingAggregator
from pokercoach.scheduling.difficulty import classify_snapshot
from pokercoach.scheduling.focus import WeeklyFocus, select_weekly_focus
from pokercoach.scheduling.queue_builder import QueueBatch, QueueBuilder, QueueConfig
from pokercoach.scheduling.spaced_repetition import SpacedRepetitionScheduler, grade_answer
from pokercoach.schemas import SubmitAnswerRequest, SubmitResult


class TrainingService:
    """
    High-level service for drill queue operations.

    Coordinates between the repositories, the queue builder and the
    spaced-repetition scheduler.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session] | None = None,
        settings: Settings | None = None,
        builder: QueueBuilder | None = None,
        scheduler: SpacedRepetitionScheduler | None = None,
    ):
        """
        Initialize training service.

        Args:
            session_factory: SQLAlchemy session factory (default engine if None)
            settings: Application settings (cached settings if None)
            builder: Queue builder (configured from settings if None)
            scheduler: Spaced-repetition scheduler
        """
        self.session_factory = session_factory
        self.settings = settings or get_settings()
        self.builder = builder or QueueBuilder(
            QueueConfig(
                batch_size=self.settings.queue_batch_size,
                focus_share=self.settings.queue_focus_share,
            )
        )
        self.scheduler = scheduler or SpacedRepetitionScheduler()

    # ========================================
    # Input validation
    # ========================================

    @staticmethod
    def parse_submission(payload: Mapping[str, Any] | SubmitAnswerRequest) -> SubmitAnswerRequest:
        """
        Validate a raw answer payload.

        Raises:
            InputValidationError: If required fields are missing or malformed
        """
        if isinstance(payload, SubmitAnswerRequest):
            return payload
        try:
            return SubmitAnswerRequest.model_validate(payload)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
            ]
            raise InputValidationError("Invalid answer submission", errors) from e

    # ========================================
    # Queue
    # ========================================

    def build_queue(self, user_id: str, now: datetime | None = None) -> QueueBatch:
        """
        Create a drill batch if the user has no pending drills.

        Args:
            user_id: Authenticated user identifier
            now: Creation time (defaults to current UTC time)

        Returns:
            The created batch; empty if the user already had pending drills
            or a concurrent build won the race
        """
        now = now or datetime.now(UTC)
        try:
            with session_scope(self.session_factory) as session:
                queue = DrillQueueRepository(session)
                has_pending = queue.count_pending(user_id) > 0
                if has_pending:
                    return self.builder.build_batch(user_id, True, [])

                snapshots = self._load_snapshots(session, user_id)
                focus = self.builder.select_focus(snapshots, now)
                history = self._load_history(session, user_id, focus.primary, now)
                batch = self.builder.build_batch(
                    user_id, False, snapshots, history, now, focus=focus
                )
                queue.add_items(batch.items)
        except IntegrityError:
            logger.warning(f"Concurrent queue build detected for {user_id}, keeping existing batch")
            return QueueBatch()

        logger.info(f"Queue created for {user_id}: {batch.summary()}")
        return batch

    def due_drills(
        self,
        user_id: str,
        limit: int | None = None,
        now: datetime | None = None,
    ) -> list[QueueItem]:
        """Pending drills due now, earliest first."""
        now = now or datetime.now(UTC)
        with session_scope(self.session_factory) as session:
            return DrillQueueRepository(session).due_items(
                user_id, now, limit or self.settings.due_drills_limit
            )

    def queue_items(self, user_id: str) -> list[QueueItem]:
        with session_scope(self.session_factory) as session:
            return DrillQueueRepository(session).list_for_user(user_id)

    # ========================================
    # Answers
    # ========================================

    def submit_answer(
        self,
        user_id: str,
        request: Mapping[str, Any] | SubmitAnswerRequest,
        now: datetime | None = None,
    ) -> SubmitResult:
        """
        Grade an answer and reschedule its drill.

        Args:
            user_id: Authenticated user identifier
            request: Answer payload (validated here)
            now: Answer time (defaults to current UTC time)

        Returns:
            SubmitResult with correctness and the next due time

        Raises:
            InputValidationError: Malformed payload or unknown answer
            QueueItemNotFoundError: Drill missing or owned by another user
        """
        request = self.parse_submission(request)
        now = now or datetime.now(UTC)

        with session_scope(self.session_factory) as session:
            row = DrillQueueRepository(session).get_for_update(request.drill_queue_id, user_id)
            if row is None:
                raise QueueItemNotFoundError(request.drill_queue_id)

            item = row.to_domain()
            is_correct, correct_answer = grade_answer(
                item.drill_type, request.scenario, request.user_action
            )

            attempt_id = self._record_attempt(
                session, user_id, item, request, is_correct, correct_answer, now
            )

            update = self.scheduler.apply(item, is_correct, now)
            if attempt_id is not None:
                item.last_attempt_id = attempt_id
            row.apply_domain(item)

            self._update_rating(session, user_id, item.leak_tag, is_correct, now)

        logger.info(
            f"Answer recorded for {user_id}: item={request.drill_queue_id} correct={is_correct} "
            f"repetition={update.repetition} next_due_at={update.due_at.isoformat()}"
        )

        return SubmitResult(
            correct=is_correct,
            next_due_at=update.due_at,
            repetition=update.repetition,
            correct_answer=correct_answer,
            explanation=str(request.scenario.get("explanation") or ""),
            attempt_id=attempt_id,
        )

    # ========================================
    # Lookups
    # ========================================

    def weekly_focus(self, user_id: str, now: datetime | None = None) -> WeeklyFocus:
        now = now or datetime.now(UTC)
        with session_scope(self.session_factory) as session:
            snapshots = self._load_snapshots(session, user_id)
        return select_weekly_focus(snapshots, now, self.builder.focus_config)

    def difficulty_for(self, user_id: str, leak_tag: Any, now: datetime | None = None) -> Difficulty:
        """Difficulty tier for a user's drill on leak_tag (unknown tags map to fundamentals)."""
        tag = enforce_or_default(leak_tag)
        with session_scope(self.session_factory) as session:
            snapshot = self._load_snapshot(session, user_id, tag)
        return classify_snapshot(snapshot, now)

    # ========================================
    # Degraded reads
    # ========================================

    def _load_snapshots(self, session: Session, user_id: str) -> list[tuple[str, SkillSnapshot]]:
        try:
            with session.begin_nested():
                return SkillRatingRepository(session).snapshots_for_user(user_id)
        except SQLAlchemyError as e:
            logger.warning(f"Skill ratings unavailable for {user_id}, using defaults: {e}")
            return []

    def _load_snapshot(self, session: Session, user_id: str, tag: LeakTag) -> SkillSnapshot | None:
        try:
            with session.begin_nested():
                return SkillRatingRepository(session).snapshot_for(user_id, tag)
        except SQLAlchemyError as e:
            logger.warning(f"Skill rating unavailable for {user_id}/{tag.value}: {e}")
            return None

    def _load_history(
        self,
        session: Session,
        user_id: str,
        tag: LeakTag,
        now: datetime,
    ) -> MistakeHistory | None:
        since = now - timedelta(days=self.settings.mistake_window_days)
        try:
            with session.begin_nested():
                return TrainingEventRepository(session).mistake_history(user_id, tag, since)
        except SQLAlchemyError as e:
            logger.warning(f"Mistake history unavailable for {user_id}/{tag.value}: {e}")
            return None

    # ========================================
    # Best-effort side channels
    # ========================================

    def _record_attempt(
        self,
        session: Session,
        user_id: str,
        item: QueueItem,
        request: SubmitAnswerRequest,
        is_correct: bool,
        correct_answer: str,
        now: datetime,
    ) -> UUID | None:
        event = TrainingEvent(
            user_id=user_id,
            scenario=dict(request.scenario),
            user_action=request.user_action,
            correct_action=correct_answer,
            mistake_tag=None if is_correct else item.leak_tag.value,
            is_correct=is_correct,
            leak_tag=item.leak_tag.value,
            drill_type=item.drill_type.value,
            mistake_reason=(
                request.mistake_reason.value
                if request.mistake_reason is not None and not is_correct
                else None
            ),
            created_at=now,
        )
        try:
            with session.begin_nested():
                TrainingEventRepository(session).add(event)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to record attempt for {user_id}/{item.id}: {e}")
            return None
        return event.id

    def _update_rating(
        self,
        session: Session,
        user_id: str,
        tag: LeakTag,
        is_correct: bool,
        now: datetime,
    ) -> None:
        try:
            with session.begin_nested():
                SkillRatingAggregator(session).record_result(user_id, tag, is_correct, now)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to update skill rating for {user_id}/{tag.value}: {e}")
