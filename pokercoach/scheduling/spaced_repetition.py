"""
Fixed-Interval Spaced Repetition Scheduler.

Each queue item cycles between DUE and SCHEDULED on one event: an answer
submission.

- Correct: repetition + 1, due again after INTERVAL_DAYS[repetition - 1]
  days (capped at the last entry), status SCHEDULED, last score 100
- Incorrect: repetition reset to 0, due again in 10 minutes, status DUE,
  last score 0

Answers are graded against the scenario's known correct answer:
- action_decision: fold / call / raise vs scenario["correct_action"]
- raise_sizing: 2.5x / 3x / overbet vs scenario["correct_option"]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from loguru import logger

from pokercoach.core.errors import InputValidationError
from pokercoach.core.models import DrillType, QueueItem, QueueStatus

INTERVAL_DAYS: tuple[int, ...] = (1, 2, 3, 5, 8, 13, 14)
RELEARN_DELAY = timedelta(minutes=10)

CORRECT_SCORE = 100
INCORRECT_SCORE = 0

ACTION_ANSWERS = frozenset({"fold", "call", "raise"})
SIZING_ANSWERS = frozenset({"2.5x", "3x", "overbet"})
ANSWERS_BY_DRILL_TYPE: dict[DrillType, frozenset[str]] = {
    DrillType.ACTION_DECISION: ACTION_ANSWERS,
    DrillType.RAISE_SIZING: SIZING_ANSWERS,
}
ALL_ANSWERS = ACTION_ANSWERS | SIZING_ANSWERS


def interval_days(repetition: int) -> int:
    """Interval in days for a post-increment repetition count (>= 1)."""
    index = min(max(repetition, 1) - 1, len(INTERVAL_DAYS) - 1)
    return INTERVAL_DAYS[index]


@dataclass(frozen=True)
class ScheduleUpdate:
    """New schedule state for a queue item after one answer."""

    repetition: int
    due_at: datetime
    status: QueueStatus
    last_score: int

    @property
    def correct(self) -> bool:
        return self.last_score == CORRECT_SCORE


def next_schedule(repetition: int, correct: bool, now: datetime | None = None) -> ScheduleUpdate:
    """
    Compute the transition for one answered item.

    Args:
        repetition: Current repetition count
        correct: Whether the answer was correct
        now: Reference time (defaults to current UTC time)

    Returns:
        ScheduleUpdate to apply to the item
    """
    now = now or datetime.now(UTC)

    if not correct:
        return ScheduleUpdate(
            repetition=0,
            due_at=now + RELEARN_DELAY,
            status=QueueStatus.DUE,
            last_score=INCORRECT_SCORE,
        )

    new_repetition = max(repetition, 0) + 1
    return ScheduleUpdate(
        repetition=new_repetition,
        due_at=now + timedelta(days=interval_days(new_repetition)),
        status=QueueStatus.SCHEDULED,
        last_score=CORRECT_SCORE,
    )


def normalize_answer(answer: Any) -> str:
    return str(answer).strip().lower() if answer is not None else ""


def correct_answer_for(drill_type: DrillType, scenario: Mapping[str, Any]) -> str:
    """
    Extract the known correct answer from a drill scenario.

    Raises:
        InputValidationError: If the scenario carries no valid answer
    """
    allowed = ANSWERS_BY_DRILL_TYPE[drill_type]
    if drill_type == DrillType.RAISE_SIZING:
        raw = scenario.get("correct_option") or scenario.get("correct_action")
    else:
        raw = scenario.get("correct_action")

    answer = normalize_answer(raw)
    if answer not in allowed:
        field_name = "correct_option" if drill_type == DrillType.RAISE_SIZING else "correct_action"
        raise InputValidationError(
            f"scenario.{field_name} must be one of {', '.join(sorted(allowed))}"
        )
    return answer


def grade_answer(
    drill_type: DrillType,
    scenario: Mapping[str, Any],
    user_action: str,
) -> tuple[bool, str]:
    """
    Grade a submitted answer.

    Returns:
        (is_correct, correct_answer)

    Raises:
        InputValidationError: If the answer is outside the drill type's answer set
    """
    correct = correct_answer_for(drill_type, scenario)
    chosen = normalize_answer(user_action)
    allowed = ANSWERS_BY_DRILL_TYPE[drill_type]
    if chosen not in allowed:
        raise InputValidationError(
            f"user_action must be one of {', '.join(sorted(allowed))} for {drill_type.value} drills"
        )
    return chosen == correct, correct


class SpacedRepetitionScheduler:
    """Applies answer outcomes to queue items."""

    def apply(self, item: QueueItem, correct: bool, now: datetime | None = None) -> ScheduleUpdate:
        """
        Advance or reset a queue item in place.

        Args:
            item: Queue item to mutate
            correct: Whether the answer was correct
            now: Reference time

        Returns:
            The applied ScheduleUpdate
        """
        update = next_schedule(item.repetition, correct, now)
        item.repetition = update.repetition
        item.due_at = update.due_at
        item.status = update.status
        item.last_score = update.last_score

        logger.debug(
            f"Scheduled {item.leak_tag.value}/{item.drill_type.value}: correct={correct}, "
            f"repetition={update.repetition}, due_at={update.due_at.isoformat()}"
        )
        return update
