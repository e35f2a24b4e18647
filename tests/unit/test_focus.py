"""
Unit tests for weekly focus selection.
"""

from datetime import timedelta

import pytest

from pokercoach.core.leaks import LeakTag
from pokercoach.core.models import SkillSnapshot
from pokercoach.scheduling.focus import rank_focus_candidates, score_need, select_weekly_focus


class TestScoreNeed:
    def test_never_practiced_defaults(self, now):
        score = score_need("fundamentals", SkillSnapshot(), now)

        assert score.base == pytest.approx(0.5)
        assert score.accuracy_deficit == pytest.approx(0.15)
        assert score.recency_bonus == pytest.approx(0.25)
        assert score.low_volume_bonus == pytest.approx(0.10)
        assert score.total == pytest.approx(1.0)

    def test_accuracy_deficit_uses_rate_with_enough_attempts(self, now):
        snapshot = SkillSnapshot(
            rating=80, attempts_7d=10, correct_7d=7, last_practice_at=now - timedelta(days=1)
        )
        score = score_need("cbet_frequency", snapshot, now)

        assert score.base == pytest.approx(0.2)
        assert score.accuracy_deficit == pytest.approx(0.3)
        assert score.recency_bonus == 0.0
        assert score.low_volume_bonus == 0.0

    def test_small_sample_uses_flat_deficit(self, now):
        snapshot = SkillSnapshot(attempts_7d=4, correct_7d=0, last_practice_at=now)
        assert score_need("x", snapshot, now).accuracy_deficit == pytest.approx(0.15)

    def test_stale_bonus(self, now):
        snapshot = SkillSnapshot(attempts_7d=5, correct_7d=5, last_practice_at=now - timedelta(days=15))
        assert score_need("x", snapshot, now).recency_bonus == pytest.approx(0.20)

    def test_fourteen_days_is_not_stale(self, now):
        snapshot = SkillSnapshot(last_practice_at=now - timedelta(days=14))
        assert score_need("x", snapshot, now).recency_bonus == 0.0

    def test_low_volume_boundary(self, now):
        assert score_need("x", SkillSnapshot(attempts_7d=2), now).low_volume_bonus == pytest.approx(0.1)
        assert score_need("x", SkillSnapshot(attempts_7d=3), now).low_volume_bonus == 0.0


class TestSelectWeeklyFocus:
    def test_empty_snapshots(self, now):
        focus = select_weekly_focus([], now)

        assert focus.primary is LeakTag.FUNDAMENTALS
        assert focus.secondary is LeakTag.FUNDAMENTALS

    def test_lowest_rating_wins(self, now):
        recent = now - timedelta(days=1)
        snapshots = [
            ("cbet_frequency", SkillSnapshot(rating=75, attempts_7d=10, correct_7d=9, last_practice_at=recent)),
            ("bluff_catching", SkillSnapshot(rating=30, attempts_7d=10, correct_7d=4, last_practice_at=recent)),
            ("passive_play", SkillSnapshot(rating=55, attempts_7d=10, correct_7d=7, last_practice_at=recent)),
        ]
        focus = select_weekly_focus(snapshots, now)

        assert focus.primary is LeakTag.BLUFF_CATCHING
        assert focus.secondary is LeakTag.PASSIVE_PLAY

    def test_ties_keep_first_seen(self, now):
        snapshots = [
            ("river_betting_strategy", SkillSnapshot()),
            ("overbet_bluff", SkillSnapshot()),
            ("chasing_draws", SkillSnapshot()),
        ]
        focus = select_weekly_focus(snapshots, now)

        assert focus.primary is LeakTag.RIVER_BETTING_STRATEGY
        assert focus.secondary is LeakTag.OVERBET_BLUFF

    def test_raw_tags_are_enforced(self, now):
        snapshots = [
            ("Position Awareness", SkillSnapshot(rating=10)),
            ("made up leak", SkillSnapshot(rating=20)),
        ]
        focus = select_weekly_focus(snapshots, now)

        assert focus.primary is LeakTag.POSITION_AWARENESS
        assert focus.secondary is LeakTag.FUNDAMENTALS

    def test_secondary_skips_rows_matching_primary(self, now):
        snapshots = [
            ("tilt", SkillSnapshot(rating=5)),
            ("", SkillSnapshot(rating=10)),
            ("fundamentals", SkillSnapshot(rating=15)),
            ("sizing_mistakes", SkillSnapshot(rating=60)),
        ]
        focus = select_weekly_focus(snapshots, now)

        assert focus.primary is LeakTag.FUNDAMENTALS
        assert focus.secondary is LeakTag.SIZING_MISTAKES

    def test_single_row_falls_back_to_fundamentals(self, now):
        focus = select_weekly_focus([("cbet_frequency", SkillSnapshot())], now)

        assert focus.primary is LeakTag.CBET_FREQUENCY
        assert focus.secondary is LeakTag.FUNDAMENTALS

    def test_deterministic(self, now):
        snapshots = [
            (tag.value, SkillSnapshot(rating=50 + i % 3, attempts_7d=i, correct_7d=i // 2))
            for i, tag in enumerate(LeakTag)
        ]
        results = {select_weekly_focus(list(snapshots), now) for _ in range(5)}
        assert len(results) == 1

    def test_rank_is_descending(self, now):
        snapshots = [("a", SkillSnapshot(rating=90)), ("b", SkillSnapshot(rating=10))]
        ranked = rank_focus_candidates(snapshots, now)
        assert [s.tag for s in ranked] == ["b", "a"]
