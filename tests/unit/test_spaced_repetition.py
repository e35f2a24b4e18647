"""
Unit tests for the fixed-interval spaced repetition scheduler.
"""

from datetime import timedelta

import pytest

from pokercoach.core.errors import InputValidationError
from pokercoach.core.leaks import LeakTag
from pokercoach.core.models import DrillType, QueueItem, QueueStatus
from pokercoach.scheduling.spaced_repetition import (
    SpacedRepetitionScheduler,
    grade_answer,
    interval_days,
    next_schedule,
)


@pytest.fixture
def item(now):
    return QueueItem(
        user_id="u1",
        leak_tag=LeakTag.CBET_FREQUENCY,
        drill_type=DrillType.ACTION_DECISION,
        due_at=now,
    )


class TestIntervals:
    def test_table_is_capped(self):
        assert [interval_days(r) for r in range(1, 10)] == [1, 2, 3, 5, 8, 13, 14, 14, 14]


class TestScheduler:
    def test_five_correct_answers(self, item, now):
        scheduler = SpacedRepetitionScheduler()
        repetitions, offsets = [], []
        for _ in range(5):
            update = scheduler.apply(item, True, now)
            repetitions.append(item.repetition)
            offsets.append(update.due_at - now)

        assert repetitions == [1, 2, 3, 4, 5]
        assert offsets == [timedelta(days=d) for d in (1, 2, 3, 5, 8)]
        assert item.status is QueueStatus.SCHEDULED
        assert item.last_score == 100

    def test_incorrect_resets(self, item, now):
        scheduler = SpacedRepetitionScheduler()
        for _ in range(3):
            scheduler.apply(item, True, now)

        update = scheduler.apply(item, False, now)

        assert item.repetition == 0
        assert item.due_at - now == timedelta(minutes=10)
        assert item.status is QueueStatus.DUE
        assert item.last_score == 0
        assert update.correct is False

    def test_correct_after_reset_starts_over(self, item, now):
        scheduler = SpacedRepetitionScheduler()
        scheduler.apply(item, False, now)
        scheduler.apply(item, True, now)

        assert item.repetition == 1
        assert item.due_at - now == timedelta(days=1)

    def test_next_schedule_is_pure(self, now):
        update = next_schedule(6, True, now)

        assert update.repetition == 7
        assert update.due_at == now + timedelta(days=14)
        assert update.correct is True


class TestGrading:
    def test_action_decision(self):
        scenario = {"correct_action": "Raise"}
        assert grade_answer(DrillType.ACTION_DECISION, scenario, "raise") == (True, "raise")
        assert grade_answer(DrillType.ACTION_DECISION, scenario, " CALL ") == (False, "raise")

    def test_raise_sizing(self):
        scenario = {"correct_option": "3x", "correct_action": "raise"}
        assert grade_answer(DrillType.RAISE_SIZING, scenario, "3x") == (True, "3x")
        assert grade_answer(DrillType.RAISE_SIZING, scenario, "overbet") == (False, "3x")

    def test_answer_outside_drill_type_set(self):
        with pytest.raises(InputValidationError):
            grade_answer(DrillType.RAISE_SIZING, {"correct_option": "3x"}, "fold")

    def test_scenario_without_correct_answer(self):
        with pytest.raises(InputValidationError, match="correct_action"):
            grade_answer(DrillType.ACTION_DECISION, {"pot": 10}, "fold")
