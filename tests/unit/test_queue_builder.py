"""
Unit tests for drill queue batch composition.
"""

from datetime import timedelta

import pytest

from pokercoach.core.leaks import LeakTag
from pokercoach.core.models import Difficulty, DrillType, MistakeHistory, QueueStatus, SkillSnapshot
from pokercoach.scheduling.focus_mix import FocusMixMode
from pokercoach.scheduling.queue_builder import QueueBuilder, QueueConfig, batch_key_for

A = DrillType.ACTION_DECISION
S = DrillType.RAISE_SIZING


@pytest.fixture
def builder():
    return QueueBuilder()


class TestQueueConfig:
    def test_default_split(self):
        config = QueueConfig()
        assert (config.focus_slots, config.other_slots) == (7, 3)

    def test_small_batch(self):
        config = QueueConfig(batch_size=3, focus_share=0.5)
        assert (config.focus_slots, config.other_slots) == (2, 1)


class TestBuildBatch:
    def test_pending_items_produce_nothing(self, builder, now):
        batch = builder.build_batch("u1", True, [("cbet_frequency", SkillSnapshot())], now=now)

        assert batch.is_empty
        assert batch.created_count == 0

    def test_new_user_layout(self, builder, now):
        batch = builder.build_batch("u1", False, [], now=now)

        assert batch.focus.primary is LeakTag.FUNDAMENTALS
        assert batch.focus.secondary is LeakTag.FUNDAMENTALS
        assert batch.focus_mix.mode is FocusMixMode.INSUFFICIENT_DATA
        assert batch.focus_mix.sizing_share == 0.5
        assert [i.drill_type for i in batch.items] == [S, S, S, S, A, A, A, A, S, A]
        assert batch.summary() == {
            "focus_tag": "fundamentals",
            "secondary_tag": "fundamentals",
            "created_count": 10,
            "breakdown": {"focus": 7, "other": 3},
            "focus_mix": batch.focus_mix.to_dict(),
        }

    def test_initial_item_state(self, builder, now):
        batch = builder.build_batch("u1", False, [], now=now)

        for index, item in enumerate(batch.items):
            assert item.user_id == "u1"
            assert item.status is QueueStatus.DUE
            assert item.due_at == now
            assert item.repetition == 0
            assert item.last_score is None
            assert item.slot_index == index
            assert item.batch_key == batch_key_for(now)

    def test_focus_and_other_tags(self, builder, now):
        snapshots = [
            ("cbet_frequency", SkillSnapshot(rating=70)),
            ("bluff_catching", SkillSnapshot(rating=20)),
        ]
        batch = builder.build_batch("u1", False, snapshots, now=now)

        assert [i.leak_tag for i in batch.items[:7]] == [LeakTag.BLUFF_CATCHING] * 7
        assert [i.leak_tag for i in batch.items[7:]] == [LeakTag.CBET_FREQUENCY] * 3

    def test_history_drives_focus_mix(self, builder, now):
        history = MistakeHistory(
            decision_attempts=20,
            decision_mistakes=4,
            sizing_attempts=20,
            sizing_mistakes=10,
            sizing_reason_mistakes=5,
        )
        batch = builder.build_batch("u1", False, [], history, now)

        assert batch.focus_mix.mode is FocusMixMode.SIZING_HEAVY
        assert [i.drill_type for i in batch.items[:7]] == [S] * 5 + [A] * 2

    def test_difficulty_per_tag(self, builder, now):
        recent = now - timedelta(hours=2)
        snapshots = [
            ("bluff_catching", SkillSnapshot(rating=35, last_practice_at=recent)),
            ("cbet_frequency", SkillSnapshot(rating=90, streak_correct=5, last_practice_at=recent)),
        ]
        batch = builder.build_batch("u1", False, snapshots, now=now)

        assert {i.difficulty for i in batch.items[:7]} == {Difficulty.EASY}
        assert {i.difficulty for i in batch.items[7:]} == {Difficulty.HARD}

    @pytest.mark.parametrize(
        "snapshots",
        [
            [],
            [("x", SkillSnapshot())],
            [(t.value, SkillSnapshot(rating=i * 7)) for i, t in enumerate(LeakTag)],
        ],
    )
    def test_batch_size_invariant(self, builder, now, snapshots):
        batch = builder.build_batch("u1", False, snapshots, now=now)

        assert batch.focus_count + batch.other_count == 10
        assert batch.focus_count == 7
        assert batch.created_count == 10


class TestBatchKey:
    def test_uses_utc_date(self, now):
        assert batch_key_for(now) == "2025-03-10"
